"""Configuration environment: the destination property source chain plus profile state."""
import logging
import os
from typing import Any, List, Mapping, Optional

from src.config_resolver.config import profiles as profile_expressions
from src.config_resolver.config.property_source import MutablePropertySources, PropertySource
from src.config_resolver.config.substitutor import PlaceholderResolver


logger = logging.getLogger(__name__)

ACTIVE_PROFILES_PROPERTY = "profiles.active"
DEFAULT_PROFILES_PROPERTY = "profiles.default"
RESERVED_DEFAULT_PROFILE_NAME = "default"

SYSTEM_PROPERTIES_PROPERTY_SOURCE_NAME = "systemProperties"
SYSTEM_ENVIRONMENT_PROPERTY_SOURCE_NAME = "systemEnvironment"


def comma_delimited_list(value: Any) -> List[str]:
    """Split a comma separated value into trimmed, non-empty items."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        items = [str(item) for item in value]
    else:
        items = str(value).split(",")
    return [item.strip() for item in items if item.strip()]


class SystemEnvironmentPropertySource(PropertySource):
    """Property source over environment variables with relaxed key lookup.

    'profiles.active' is also found as 'profiles_active', 'PROFILES_ACTIVE'
    and 'PROFILES-ACTIVE' style variants.
    """

    def __init__(
        self,
        name: str = SYSTEM_ENVIRONMENT_PROPERTY_SOURCE_NAME,
        source: Optional[Mapping[str, str]] = None,
    ):
        super().__init__(name, dict(os.environ) if source is None else source)

    def _resolve_name(self, key: str) -> Optional[str]:
        for candidate in (key, key.upper()):
            for variant in (candidate, candidate.replace(".", "_"), candidate.replace("-", "_"),
                            candidate.replace(".", "_").replace("-", "_")):
                if variant in self.source:
                    return variant
        return None

    def get_property(self, key: str) -> Any:
        actual = self._resolve_name(key)
        return self.source[actual] if actual is not None else None

    def contains_property(self, key: str) -> bool:
        return self._resolve_name(key) is not None


class ConfigurableEnvironment:
    """Ordered property sources plus active/default profile state.

    Active profiles are read lazily from 'profiles.active' until they are
    set explicitly. Default profiles apply only while no profile is active.
    """

    def __init__(self, property_sources: Optional[MutablePropertySources] = None):
        self.property_sources = property_sources if property_sources is not None else MutablePropertySources()
        self._active_profiles: List[str] = []
        self._default_profiles: List[str] = [RESERVED_DEFAULT_PROFILE_NAME]
        self._placeholders = PlaceholderResolver(self.get_raw_property, ignore_unresolvable=True)
        self._strict_placeholders = PlaceholderResolver(self.get_raw_property, ignore_unresolvable=False)

    # ==================== Properties ====================

    def get_raw_property(self, key: str) -> Any:
        for source in self.property_sources:
            value = source.get_property(key)
            if value is not None:
                return value
        return None

    def get_property(self, key: str, default: Any = None) -> Any:
        value = self.get_raw_property(key)
        if value is None:
            return default
        if isinstance(value, str):
            return self._placeholders.resolve_placeholders(value)
        return value

    def contains_property(self, key: str) -> bool:
        return any(source.contains_property(key) for source in self.property_sources)

    def resolve_placeholders(self, text: str) -> str:
        """Resolve ${...} placeholders, leaving unresolvable ones untouched."""
        return self._placeholders.resolve_placeholders(text)

    def resolve_required_placeholders(self, text: str) -> str:
        """Resolve ${...} placeholders, raising on unresolvable ones."""
        return self._strict_placeholders.resolve_placeholders(text)

    # ==================== Profiles ====================

    @property
    def active_profiles(self) -> List[str]:
        return list(self._do_get_active_profiles())

    @property
    def default_profiles(self) -> List[str]:
        return list(self._do_get_default_profiles())

    def _do_get_active_profiles(self) -> List[str]:
        if not self._active_profiles:
            configured = self.get_property(ACTIVE_PROFILES_PROPERTY)
            if configured:
                self.set_active_profiles(comma_delimited_list(configured))
        return self._active_profiles

    def _do_get_default_profiles(self) -> List[str]:
        if self._default_profiles == [RESERVED_DEFAULT_PROFILE_NAME]:
            configured = self.get_property(DEFAULT_PROFILES_PROPERTY)
            if configured:
                self.set_default_profiles(comma_delimited_list(configured))
        return self._default_profiles

    def set_active_profiles(self, profiles: List[str]) -> None:
        logger.debug(f"Activating profiles {profiles}", extra={"profiles": list(profiles)})
        for profile in profiles:
            profile_expressions.validate_profile_name(profile)
        self._active_profiles = list(dict.fromkeys(profiles))

    def add_active_profile(self, profile: str) -> None:
        logger.debug(f"Activating profile '{profile}'", extra={"profile": profile})
        profile_expressions.validate_profile_name(profile)
        self._do_get_active_profiles()
        if profile not in self._active_profiles:
            self._active_profiles.append(profile)

    def set_default_profiles(self, profiles: List[str]) -> None:
        for profile in profiles:
            profile_expressions.validate_profile_name(profile)
        self._default_profiles = list(dict.fromkeys(profiles))

    def is_profile_active(self, profile: str) -> bool:
        profile_expressions.validate_profile_name(profile)
        active = self._do_get_active_profiles()
        return profile in active or (not active and profile in self._do_get_default_profiles())

    def accepts_profiles(self, *expressions: str) -> bool:
        """True if any of the profile expressions matches the current profile state."""
        return any(
            profile_expressions.matches(expression, self.is_profile_active)
            for expression in expressions
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(active_profiles={self._active_profiles!r}, "
            f"default_profiles={self._default_profiles!r}, "
            f"property_sources={self.property_sources.names()!r})"
        )


class StandardEnvironment(ConfigurableEnvironment):
    """Environment seeded with system properties and environment variables."""

    def __init__(
        self,
        system_properties: Optional[Mapping[str, Any]] = None,
        system_environment: Optional[Mapping[str, str]] = None,
    ):
        super().__init__()
        self.property_sources.add_last(
            PropertySource(SYSTEM_PROPERTIES_PROPERTY_SOURCE_NAME, dict(system_properties or {}))
        )
        self.property_sources.add_last(SystemEnvironmentPropertySource(source=system_environment))
