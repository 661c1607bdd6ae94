"""Custom exceptions for the configuration resolver."""

from src.config_resolver.exceptions.base import ConfigResolverError

from src.config_resolver.exceptions.config import (
    ConfigError,
    ConfigLocationError,
    UnknownFileExtensionError,
    ConfigLoadError,
    ConfigParseError,
    InvalidProfileError,
    PlaceholderResolutionError,
    PropertySourceError,
)

__all__ = [
    # Base exceptions
    "ConfigResolverError",
    # Configuration exceptions
    "ConfigError",
    "ConfigLocationError",
    "UnknownFileExtensionError",
    "ConfigLoadError",
    "ConfigParseError",
    "InvalidProfileError",
    "PlaceholderResolutionError",
    "PropertySourceError",
]
