"""Configuration-related exceptions."""
from typing import Optional

from src.config_resolver.exceptions.base import ConfigResolverError


class ConfigError(ConfigResolverError):
    """Base exception for configuration errors.

    Configuration errors are fatal: they abort the resolution pass and
    are never retried.

    Args:
        message: Human-readable error message
        config_file: Location of the offending config resource
        details: Additional error context
        error_code: Machine-readable error code
        original_error: Wrapped exception, if any
    """

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        details: Optional[dict] = None,
        error_code: str = "CONFIG_ERROR",
        original_error: Optional[Exception] = None,
    ):
        self.config_file = config_file
        self.original_error = original_error
        super().__init__(message, error_code, details, original_error)

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.config_file:
            parts.append(f"Config: {self.config_file}")
        return " | ".join(parts)


class ConfigLocationError(ConfigError):
    """Search location or search name is malformed or not allowed."""

    def __init__(
        self,
        message: str = "Invalid config search location",
        location: Optional[str] = None,
        property_name: Optional[str] = None,
    ):
        details = {}
        if location is not None:
            details["location"] = location
        if property_name is not None:
            details["property_name"] = property_name
        super().__init__(message, location, details, error_code="CONFIG_LOCATION_INVALID")
        self.location = location


class UnknownFileExtensionError(ConfigError):
    """Explicit config file has an extension no loader understands."""

    def __init__(
        self,
        location: str,
        known_extensions: Optional[list] = None,
    ):
        message = (
            f"File extension of config file location '{location}' is not known to any "
            "document loader. If the location is meant to reference a directory, "
            "it must end in '/'"
        )
        details = {"location": location}
        if known_extensions is not None:
            details["known_extensions"] = known_extensions
        super().__init__(message, location, details, error_code="CONFIG_UNKNOWN_EXTENSION")
        self.location = location


class ConfigLoadError(ConfigError):
    """Failed to load an existing config resource."""

    def __init__(
        self,
        location: str,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            f"Failed to load property source from location '{location}'",
            location,
            {"location": location},
            error_code="CONFIG_LOAD_FAILED",
            original_error=original_error,
        )
        self.location = location


class ConfigParseError(ConfigError):
    """Failed to parse configuration file."""

    def __init__(
        self,
        message: str = "Failed to parse config file",
        config_file: Optional[str] = None,
        line_number: Optional[int] = None,
        column_number: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        details = {}
        if line_number is not None:
            details["line"] = line_number
        if column_number is not None:
            details["column"] = column_number
        super().__init__(
            message,
            config_file,
            details,
            error_code="CONFIG_PARSE_FAILED",
            original_error=original_error,
        )
        self.line_number = line_number
        self.column_number = column_number


class InvalidProfileError(ConfigError):
    """Profile name or profile expression is invalid."""

    def __init__(
        self,
        message: str = "Invalid profile",
        profile: Optional[str] = None,
    ):
        details = {}
        if profile is not None:
            details["profile"] = profile
        super().__init__(message, None, details, error_code="CONFIG_INVALID_PROFILE")
        self.profile = profile


class PlaceholderResolutionError(ConfigError):
    """Failed to resolve a ${...} placeholder."""

    def __init__(
        self,
        message: str = "Placeholder resolution failed",
        placeholder: Optional[str] = None,
        value: Optional[str] = None,
    ):
        details = {}
        if placeholder is not None:
            details["placeholder"] = placeholder
        if value is not None:
            details["value"] = value
        super().__init__(message, None, details, error_code="CONFIG_PLACEHOLDER_UNRESOLVED")
        self.placeholder = placeholder


class PropertySourceError(ConfigError):
    """Invalid operation on a property source chain."""

    def __init__(
        self,
        message: str = "Invalid property source operation",
        source_name: Optional[str] = None,
    ):
        details = {}
        if source_name is not None:
            details["source_name"] = source_name
        super().__init__(message, None, details, error_code="CONFIG_PROPERTY_SOURCE_INVALID")
        self.source_name = source_name
