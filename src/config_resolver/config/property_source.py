"""Named key/value property sources and the ordered source chain."""
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional

from src.config_resolver.exceptions.config import PropertySourceError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Origin:
    """Where a property value came from.

    Attributes:
        resource: Description of the resource (e.g. 'classpath:/application.yml')
        line: 1-based line number
        column: 1-based column number
    """
    resource: str
    line: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:
        if self.line is None:
            return self.resource
        if self.column is None:
            return f"{self.resource}:{self.line}"
        return f"{self.resource}:{self.line}:{self.column}"


@dataclass(frozen=True)
class OriginTrackedValue:
    """A raw value paired with its origin."""
    value: Any
    origin: Optional[Origin] = None

    def __str__(self) -> str:
        return str(self.value)


class PropertySource:
    """Named, ordered key to value mapping.

    Equality and hashing use the name only, so a chain can hold at most
    one source per name.
    """

    def __init__(self, name: str, source: Optional[Mapping[str, Any]] = None):
        if not name:
            raise PropertySourceError("Property source name must not be empty")
        self.name = name
        self.source: Mapping[str, Any] = source if source is not None else {}

    def get_property(self, key: str) -> Any:
        return self.source.get(key)

    def contains_property(self, key: str) -> bool:
        return key in self.source

    @property
    def property_names(self) -> List[str]:
        return list(self.source.keys())

    def get_origin(self, key: str) -> Optional[Origin]:
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PropertySource):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class OriginTrackedMapPropertySource(PropertySource):
    """Property source whose values may carry an Origin.

    Values stored as OriginTrackedValue are unwrapped on read. An immutable
    source is exposed through a read-only view; writing to it raises TypeError.
    """

    def __init__(
        self,
        name: str,
        source: Mapping[str, Any],
        immutable: bool = False,
    ):
        if immutable:
            source = MappingProxyType(dict(source))
        super().__init__(name, source)
        self.immutable = immutable

    def get_property(self, key: str) -> Any:
        value = super().get_property(key)
        if isinstance(value, OriginTrackedValue):
            return value.value
        return value

    def get_origin(self, key: str) -> Optional[Origin]:
        value = super().get_property(key)
        if isinstance(value, OriginTrackedValue):
            return value.origin
        return None

    def as_dict(self) -> Dict[str, Any]:
        """Plain (unwrapped) copy of the source."""
        return {key: self.get_property(key) for key in self.source}


class FilteredPropertySource(PropertySource):
    """View of another property source with some keys hidden."""

    def __init__(self, original: PropertySource, filtered_properties: Iterable[str]):
        super().__init__(original.name, original.source)
        self.original = original
        self.filtered_properties = frozenset(filtered_properties)

    def get_property(self, key: str) -> Any:
        if key in self.filtered_properties:
            return None
        return self.original.get_property(key)

    def contains_property(self, key: str) -> bool:
        if key in self.filtered_properties:
            return False
        return self.original.contains_property(key)

    @property
    def property_names(self) -> List[str]:
        return [n for n in self.original.property_names if n not in self.filtered_properties]

    def get_origin(self, key: str) -> Optional[Origin]:
        if key in self.filtered_properties:
            return None
        return self.original.get_origin(key)

    @classmethod
    def apply(
        cls,
        environment: Any,
        property_source_name: str,
        filtered_properties: Iterable[str],
        operation: Callable[[Optional[PropertySource]], Any],
    ) -> Any:
        """Run operation with the named source temporarily filtered.

        The operation receives the original (unfiltered) source, or None when
        the environment has no source with that name. The original source is
        put back afterwards, whether or not the operation raised.
        """
        sources = environment.property_sources
        original = sources.get(property_source_name)
        if original is None:
            return operation(None)
        sources.replace(property_source_name, cls(original, filtered_properties))
        try:
            return operation(original)
        finally:
            sources.replace(property_source_name, original)


class MutablePropertySources:
    """Ordered chain of property sources, unique by name.

    The first source has the highest precedence.
    """

    def __init__(self, sources: Optional[Iterable[PropertySource]] = None):
        self._sources: List[PropertySource] = []
        for source in sources or ():
            self.add_last(source)

    def get(self, name: str) -> Optional[PropertySource]:
        for source in self._sources:
            if source.name == name:
                return source
        return None

    def contains(self, name: str) -> bool:
        return self.get(name) is not None

    def names(self) -> List[str]:
        return [source.name for source in self._sources]

    def add_first(self, source: PropertySource) -> None:
        self._remove_if_present(source)
        self._sources.insert(0, source)

    def add_last(self, source: PropertySource) -> None:
        self._remove_if_present(source)
        self._sources.append(source)

    def add_before(self, relative_name: str, source: PropertySource) -> None:
        self._assert_legal_relative_addition(relative_name, source)
        self._remove_if_present(source)
        self._sources.insert(self._index_of(relative_name), source)

    def add_after(self, relative_name: str, source: PropertySource) -> None:
        self._assert_legal_relative_addition(relative_name, source)
        self._remove_if_present(source)
        self._sources.insert(self._index_of(relative_name) + 1, source)

    def remove(self, name: str) -> Optional[PropertySource]:
        source = self.get(name)
        if source is not None:
            self._sources.remove(source)
        return source

    def replace(self, name: str, source: PropertySource) -> None:
        self._sources[self._index_of(name)] = source

    def precedence_of(self, name: str) -> int:
        """Position of the named source (0 is highest precedence)."""
        return self._index_of(name)

    def _index_of(self, name: str) -> int:
        for index, source in enumerate(self._sources):
            if source.name == name:
                return index
        raise PropertySourceError(
            f"Property source named '{name}' does not exist",
            source_name=name,
        )

    def _assert_legal_relative_addition(self, relative_name: str, source: PropertySource) -> None:
        if source.name == relative_name:
            raise PropertySourceError(
                f"Property source named '{relative_name}' cannot be added relative to itself",
                source_name=relative_name,
            )

    def _remove_if_present(self, source: PropertySource) -> None:
        existing = self.get(source.name)
        if existing is not None:
            self._sources.remove(existing)

    def __iter__(self) -> Iterator[PropertySource]:
        return iter(list(self._sources))

    def __len__(self) -> int:
        return len(self._sources)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains(name)

    def __repr__(self) -> str:
        return f"MutablePropertySources({self.names()!r})"
