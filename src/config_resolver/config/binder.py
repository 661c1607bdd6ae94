"""Typed binding of dotted keys out of property sources."""
import logging
from typing import Any, Callable, Generic, Iterable, Optional, Protocol, TypeVar

from src.config_resolver.config.property_source import PropertySource
from src.config_resolver.config.substitutor import PlaceholderResolver


logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_TRUE_VALUES = {"true", "yes", "on", "1"}
_FALSE_VALUES = {"false", "no", "off", "0"}


class BindResult(Generic[T]):
    """Outcome of a bind: a value, or nothing."""

    def __init__(self, value: Optional[T] = None, bound: bool = False):
        self._value = value
        self._bound = bound

    @classmethod
    def of(cls, value: Optional[T]) -> "BindResult[T]":
        if value is None:
            return cls()
        return cls(value, True)

    @property
    def is_bound(self) -> bool:
        return self._bound

    def get(self) -> T:
        if not self._bound:
            raise LookupError("No value bound")
        return self._value

    def map(self, mapper: Callable[[T], R]) -> "BindResult[R]":
        if not self._bound:
            return BindResult()
        return BindResult.of(mapper(self._value))

    def or_else(self, other: Any) -> Any:
        return self._value if self._bound else other

    def __repr__(self) -> str:
        return f"BindResult({self._value!r})" if self._bound else "BindResult(<unbound>)"


class Binder(Protocol):
    """Binds a dotted key to a typed value."""

    def bind(self, name: str, target: type) -> BindResult:
        ...


class PropertyBinder:
    """Binder over an ordered list of property sources.

    Supported targets:
    - str: first value found, placeholders resolved
    - list: comma separated string, a native list, or indexed keys name[0], name[1], ...
    - bool: true/false, yes/no, on/off, 1/0
    - int

    Args:
        sources: Property sources in precedence order (first wins)
        placeholder_resolver: Resolver applied to string values (optional)
    """

    def __init__(
        self,
        sources: Iterable[PropertySource],
        placeholder_resolver: Optional[PlaceholderResolver] = None,
    ):
        self.sources = list(sources)
        self.placeholder_resolver = placeholder_resolver

    @classmethod
    def get(cls, environment: Any) -> "PropertyBinder":
        """Binder over an environment's property sources."""
        return cls(
            environment.property_sources,
            PlaceholderResolver(environment.get_raw_property, ignore_unresolvable=True),
        )

    def bind(self, name: str, target: type) -> BindResult:
        if target is list:
            return BindResult.of(self._bind_list(name))

        value = self._find(name)
        if value is None:
            return BindResult()
        if target is str:
            return BindResult.of(self._resolve(value))
        if target is bool:
            return BindResult.of(self._to_bool(name, self._resolve(value)))
        if target is int:
            return BindResult.of(int(self._resolve(value)))
        raise TypeError(f"Unsupported bind target: {target!r}")

    def _find(self, name: str) -> Any:
        for source in self.sources:
            value = source.get_property(name)
            if value is not None:
                return value
        return None

    def _bind_list(self, name: str) -> Optional[list]:
        for source in self.sources:
            value = source.get_property(name)
            if value is not None:
                if isinstance(value, (list, tuple)):
                    return [self._resolve(item) for item in value]
                return self._split(self._resolve(value))

            indexed = self._indexed_values(source, name)
            if indexed:
                return [self._resolve(item) for item in indexed]
        return None

    def _indexed_values(self, source: PropertySource, name: str) -> list:
        values = []
        index = 0
        while True:
            value = source.get_property(f"{name}[{index}]")
            if value is None:
                return values
            values.append(value)
            index += 1

    def _split(self, value: Any) -> list:
        if not isinstance(value, str):
            return [value]
        return [item.strip() for item in value.split(",") if item.strip()]

    def _resolve(self, value: Any) -> Any:
        if isinstance(value, str) and self.placeholder_resolver is not None:
            return self.placeholder_resolver.resolve_placeholders(value)
        return value

    def _to_bool(self, name: str, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        raise ValueError(f"Cannot bind '{name}' value {value!r} to bool")
