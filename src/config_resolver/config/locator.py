"""Search path resolution: which (location, name) pairs to search for config files."""
import logging
from typing import Iterator, List, Optional, Tuple

from src.config_resolver.config.resources import (
    CLASSPATH_ALL_URL_PREFIX,
    FILE_URL_PREFIX,
    clean_path,
    is_url,
)
from src.config_resolver.exceptions.config import ConfigLocationError


logger = logging.getLogger(__name__)

# Note the order is from least to most specific (last one wins)
DEFAULT_SEARCH_LOCATIONS = "classpath:/,classpath:/config/,file:./,file:./config/"
DEFAULT_NAMES = "application"

CONFIG_NAME_PROPERTY = "config.name"
CONFIG_LOCATION_PROPERTY = "config.location"
CONFIG_ADDITIONAL_LOCATION_PROPERTY = "config.additional-location"


class SearchPathResolver:
    """Resolves config search locations and names.

    Locations are configured low to high precedence and returned reversed,
    highest precedence first:
    1. config.additional-location entries (if set)
    2. config.location entries, replacing the defaults (if set)
    3. otherwise the configured/default search locations

    Locations ending in '/' are directories combined with every search name;
    other locations are complete file references.

    Example:
        resolver = SearchPathResolver(environment)
        for location, name in resolver.candidates():
            ...  # ("file:./config/", "application"), ..., ("classpath:/", "application")
    """

    def __init__(
        self,
        environment,
        search_locations: Optional[str] = None,
        search_names: Optional[str] = None,
    ):
        self.environment = environment
        self.search_locations = None
        self.search_names = None
        if search_locations is not None:
            self.set_search_locations(search_locations)
        if search_names is not None:
            self.set_search_names(search_names)

    def set_search_locations(self, locations: str) -> None:
        """Replace the default search locations (comma separated, low to high precedence)."""
        if not locations or not locations.strip():
            raise ConfigLocationError("Locations must not be empty", location=locations)
        self.search_locations = locations

    def set_search_names(self, names: str) -> None:
        """Replace the default search names (comma separated, without extension)."""
        if not names or not names.strip():
            raise ConfigLocationError("Names must not be empty", location=names)
        self.search_names = names

    def get_search_locations(self) -> List[str]:
        """Ordered locations to search, highest precedence first.

        Raises:
            ConfigLocationError: If an override uses a classpath wildcard pattern
        """
        locations = self._locations_from_property(CONFIG_ADDITIONAL_LOCATION_PROPERTY)
        if self.environment.contains_property(CONFIG_LOCATION_PROPERTY):
            replacements = self._locations_from_property(CONFIG_LOCATION_PROPERTY)
        else:
            replacements = self._as_resolved_set(self.search_locations, DEFAULT_SEARCH_LOCATIONS)
        for location in replacements:
            if location not in locations:
                locations.append(location)

        logger.debug(
            "Config search locations resolved",
            extra={"locations": locations},
        )
        return locations

    def get_search_names(self) -> List[str]:
        """Search names (file stems), highest precedence first."""
        if self.environment.contains_property(CONFIG_NAME_PROPERTY):
            return self._as_resolved_set(self.environment.get_property(CONFIG_NAME_PROPERTY), None)
        return self._as_resolved_set(self.search_names, DEFAULT_NAMES)

    def candidates(self) -> Iterator[Tuple[str, Optional[str]]]:
        """Yield (location, name) pairs; name is None for file locations."""
        for location in self.get_search_locations():
            if location.endswith("/"):
                for name in self.get_search_names():
                    yield location, name
            else:
                yield location, None

    def _locations_from_property(self, property_name: str) -> List[str]:
        locations: List[str] = []
        if not self.environment.contains_property(property_name):
            return locations
        for path in self._as_resolved_set(self.environment.get_property(property_name), None):
            if "$" not in path:
                path = clean_path(path)
                if path.startswith(CLASSPATH_ALL_URL_PREFIX):
                    logger.error(
                        f"Classpath wildcard pattern used as search location: {path}",
                        extra={"location": path, "property_name": property_name},
                    )
                    raise ConfigLocationError(
                        message="Classpath wildcard patterns cannot be used as a search location",
                        location=path,
                        property_name=property_name,
                    )
                if not is_url(path):
                    path = FILE_URL_PREFIX + path
            if path not in locations:
                locations.append(path)
        return locations

    def _as_resolved_set(self, value, fallback: Optional[str]) -> List[str]:
        if value is not None:
            if isinstance(value, (list, tuple)):
                value = ",".join(str(item) for item in value)
            text = self.environment.resolve_placeholders(str(value))
        else:
            text = fallback or ""
        items = [item.strip() for item in text.split(",")]
        items = [item for item in items if item]
        items.reverse()
        return list(dict.fromkeys(items))
