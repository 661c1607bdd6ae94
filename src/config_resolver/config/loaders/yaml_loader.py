"""YAML file loader."""
import logging
from typing import Any, Dict, FrozenSet, List

import yaml

from src.config_resolver.config.property_source import (
    Origin,
    OriginTrackedMapPropertySource,
    OriginTrackedValue,
    PropertySource,
)
from src.config_resolver.config.resources import Resource
from src.config_resolver.exceptions.config import ConfigParseError


logger = logging.getLogger(__name__)


class YamlDocumentLoader:
    """Loads YAML files into flattened, origin tracked property sources.

    Each '---' separated document becomes its own property source. Nested
    mappings are flattened to dotted keys and sequences to indexed keys:

        server:
          ports: [80, 443]

    becomes {"server.ports[0]": 80, "server.ports[1]": 443}.
    """

    file_extensions = ("yml", "yaml")

    def load(self, name: str, resource: Resource) -> List[PropertySource]:
        """Load YAML documents from a resource.

        Args:
            name: Base property source name
            resource: Resource to parse

        Returns:
            One property source per non-empty document

        Raises:
            ConfigParseError: If YAML syntax is invalid or a document is not a mapping
        """
        logger.debug(f"Loading YAML file: {resource.location}", extra={"location": resource.location})
        text = resource.read_text(encoding="utf-8")

        loader = yaml.SafeLoader(text)
        sources: List[PropertySource] = []
        try:
            index = 0
            while loader.check_node():
                node = loader.get_node()
                document = self._flatten_document(loader, node, resource.location)
                if document:
                    source_name = name if index == 0 else f"{name} (document #{index})"
                    sources.append(OriginTrackedMapPropertySource(source_name, document, immutable=True))
                else:
                    logger.debug(
                        f"YAML document is empty: {resource.location}",
                        extra={"location": resource.location, "document": index},
                    )
                index += 1

        except yaml.YAMLError as e:
            logger.error(
                f"YAML parse error in {resource.location}: {e}",
                extra={"location": resource.location, "error": str(e)},
            )

            # Extract line and column if available
            mark = getattr(e, "problem_mark", None)
            line_number = mark.line + 1 if mark is not None else None
            column_number = mark.column + 1 if mark is not None else None

            raise ConfigParseError(
                message=f"Failed to parse YAML file: {e}",
                config_file=resource.location,
                line_number=line_number,
                column_number=column_number,
                original_error=e,
            )
        finally:
            loader.dispose()

        logger.debug(
            f"YAML file loaded: {resource.location}",
            extra={"location": resource.location, "documents": len(sources)},
        )
        return sources

    def _flatten_document(self, loader: yaml.SafeLoader, node: Any, location: str) -> Dict[str, Any]:
        if node is None:
            return {}
        if isinstance(node, yaml.ScalarNode) and loader.construct_object(node) is None:
            return {}
        if not isinstance(node, yaml.MappingNode):
            raise ConfigParseError(
                message=f"YAML document must contain a mapping, got {node.id}",
                config_file=location,
                line_number=node.start_mark.line + 1,
                column_number=node.start_mark.column + 1,
            )
        result: Dict[str, Any] = {}
        self._flatten(loader, node, "", result, location)
        return result

    def _flatten(
        self,
        loader: yaml.SafeLoader,
        node: Any,
        path: str,
        result: Dict[str, Any],
        location: str,
        ancestors: FrozenSet[int] = frozenset(),
    ) -> None:
        if isinstance(node, (yaml.MappingNode, yaml.SequenceNode)):
            # An alias pointing at one of its own enclosing nodes never ends
            if id(node) in ancestors:
                raise ConfigParseError(
                    message=f"Recursive YAML alias at '{path}'",
                    config_file=location,
                    line_number=node.start_mark.line + 1,
                    column_number=node.start_mark.column + 1,
                )
            ancestors = ancestors | {id(node)}

        if isinstance(node, yaml.MappingNode):
            loader.flatten_mapping(node)
            if not node.value and path:
                result[path] = OriginTrackedValue({}, self._origin(node, location))
            for key_node, value_node in node.value:
                key = str(loader.construct_object(key_node))
                child = key if not path else f"{path}.{key}"
                self._flatten(loader, value_node, child, result, location, ancestors)
        elif isinstance(node, yaml.SequenceNode):
            if not node.value:
                result[path] = OriginTrackedValue("", self._origin(node, location))
            for index, item in enumerate(node.value):
                self._flatten(loader, item, f"{path}[{index}]", result, location, ancestors)
        else:
            value = loader.construct_object(node)
            result[path] = OriginTrackedValue("" if value is None else value, self._origin(node, location))

    def _origin(self, node: Any, location: str) -> Origin:
        return Origin(location, node.start_mark.line + 1, node.start_mark.column + 1)
