"""Document format loader contract and the explicit loader registry."""
import logging
from typing import Iterable, List, Optional, Protocol, Tuple, runtime_checkable

from src.config_resolver.config.property_source import PropertySource
from src.config_resolver.config.resources import Resource


logger = logging.getLogger(__name__)


@runtime_checkable
class DocumentFormatLoader(Protocol):
    """Parses a resource into zero or more raw property sources.

    Multi-document formats return one property source per document, in
    file order.
    """

    file_extensions: Tuple[str, ...]

    def load(self, name: str, resource: Resource) -> List[PropertySource]:
        """Load property sources from a resource.

        Args:
            name: Base name for the returned property sources
            resource: Resource to parse (exists and has a file extension)

        Returns:
            Property sources, one per non-empty document
        """
        ...


class LoaderRegistry:
    """Ordered, statically registered document format loaders.

    When two loaders claim the same extension, the one registered first
    handles it.

    Example:
        registry = LoaderRegistry([PropertiesDocumentLoader(), YamlDocumentLoader()])
        registry.loader_for("application.yml")  # YamlDocumentLoader
    """

    def __init__(self, loaders: Optional[Iterable[DocumentFormatLoader]] = None):
        self._loaders: List[DocumentFormatLoader] = []
        for loader in loaders or ():
            self.register(loader)

    def register(self, loader: DocumentFormatLoader) -> None:
        if not loader.file_extensions:
            raise ValueError(f"Loader {type(loader).__name__} declares no file extensions")
        self._loaders.append(loader)
        logger.debug(
            f"Document loader registered: {type(loader).__name__}",
            extra={"loader": type(loader).__name__, "extensions": list(loader.file_extensions)},
        )

    @property
    def file_extensions(self) -> List[str]:
        extensions: List[str] = []
        for loader in self._loaders:
            for extension in loader.file_extensions:
                if extension not in extensions:
                    extensions.append(extension)
        return extensions

    def can_load(self, loader: DocumentFormatLoader, location: str) -> bool:
        lowered = location.lower()
        return any(lowered.endswith(extension.lower()) for extension in loader.file_extensions)

    def loader_for(self, location: str) -> Optional[DocumentFormatLoader]:
        """First registered loader able to load the given file location."""
        for loader in self._loaders:
            if self.can_load(loader, location):
                return loader
        return None

    def __iter__(self):
        return iter(self._loaders)

    def __len__(self) -> int:
        return len(self._loaders)
