"""Resolver settings loaded from environment variables."""
import logging
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ResolverSettings(BaseSettings):
    """Settings for a configuration resolution run.

    Settings are loaded from CONFIG_RESOLVER_* environment variables
    (and a local .env file) with sensible defaults. List values are given
    as JSON arrays, e.g. CONFIG_RESOLVER_CLASSPATH_ROOTS='["resources"]'.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONFIG_RESOLVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Search configuration
    search_locations: Optional[str] = Field(
        default=None,
        description="Comma separated search locations, low to high precedence (None for defaults)"
    )
    search_names: Optional[str] = Field(
        default=None,
        description="Comma separated config file names without extension (None for 'application')"
    )
    default_profiles: Optional[str] = Field(
        default=None,
        description="Comma separated profiles used when none are active (None for 'default')"
    )

    # Resource lookup
    classpath_roots: List[str] = Field(
        default_factory=list,
        description="Directories searched for 'classpath:' locations"
    )
    classpath_packages: List[str] = Field(
        default_factory=list,
        description="Packages whose data files are searched for 'classpath:' locations"
    )
    base_dir: Optional[str] = Field(
        default=None,
        description="Directory relative 'file:' locations resolve against (None for cwd)"
    )

    # Behaviour
    add_random_source: bool = Field(
        default=True,
        description="Add the 'random' property source before loading"
    )
    log_level: str = Field(
        default="INFO",
        description="Log level passed to configure_logging by add_property_sources"
    )

    @field_validator("search_locations", "search_names", "default_profiles")
    @classmethod
    def validate_not_blank(cls, v: Optional[str]) -> Optional[str]:
        """Validate comma lists are not blank when set."""
        if v is not None and not v.strip():
            raise ValueError("search locations, names and default profiles must not be blank")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return level
