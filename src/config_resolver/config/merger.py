"""Accumulates matched documents per profile and splices them into the environment."""
import logging
from typing import Callable, Dict, List, Optional

from src.config_resolver.config.documents import Document
from src.config_resolver.config.profiles import Profile
from src.config_resolver.config.property_source import MutablePropertySources, PropertySource


logger = logging.getLogger(__name__)

DEFAULT_PROPERTIES = "defaultProperties"

DocumentConsumer = Callable[[Profile, Document], None]


class PropertySourceMerger:
    """Builds the precedence-ordered chain of loaded property sources.

    Merge rules:
    - Sources are grouped per profile in first-processed order
    - Later processed profiles end up with higher precedence
    - A source name is only ever added once to the destination
    - Loaded sources go just before 'defaultProperties' if present, else last

    Example:
        merger = PropertySourceMerger()
        consume = merger.consumer(MutablePropertySources.add_last)
        consume(profile, document)
        merger.add_loaded_property_sources(environment.property_sources)
    """

    def __init__(self):
        self.loaded: Dict[Profile, MutablePropertySources] = {}

    def consumer(
        self,
        add_method: Callable[[MutablePropertySources, PropertySource], None],
        check_for_existing: bool = False,
    ) -> DocumentConsumer:
        """Document consumer adding sources to the profile's group.

        Args:
            add_method: MutablePropertySources.add_last or add_first
            check_for_existing: Skip sources already loaded under any profile
        """
        def accept(profile: Profile, document: Document) -> None:
            name = document.source.name
            if check_for_existing:
                for merged in self.loaded.values():
                    if merged.contains(name):
                        return
            merged = self.loaded.setdefault(profile, MutablePropertySources())
            add_method(merged, document.source)

        return accept

    def add_loaded_property_sources(self, destination: MutablePropertySources) -> List[str]:
        """Splice all loaded sources into the destination chain.

        Returns:
            Names of the sources added, highest precedence first
        """
        loaded = list(self.loaded.values())
        loaded.reverse()
        last_added: Optional[str] = None
        added: List[str] = []
        seen = set()
        for sources in loaded:
            for source in sources:
                if source.name in seen:
                    continue
                seen.add(source.name)
                self._add_loaded_property_source(destination, last_added, source)
                last_added = source.name
                added.append(source.name)

        logger.debug(
            "Loaded property sources added",
            extra={"sources": added, "destination": destination.names()},
        )
        return added

    def _add_loaded_property_source(
        self,
        destination: MutablePropertySources,
        last_added: Optional[str],
        source: PropertySource,
    ) -> None:
        if last_added is None:
            if destination.contains(DEFAULT_PROPERTIES):
                destination.add_before(DEFAULT_PROPERTIES, source)
            else:
                destination.add_last(source)
        else:
            destination.add_after(last_added, source)

    @property
    def loaded_source_names(self) -> List[str]:
        names: List[str] = []
        for sources in self.loaded.values():
            for name in sources.names():
                if name not in names:
                    names.append(name)
        return names


def reorder_sources(environment) -> None:
    """Move 'defaultProperties' to the end of the environment's chain.

    Run once the environment is otherwise complete, so explicit defaults
    never outrank anything loaded after they were first added.
    """
    sources = environment.property_sources
    default_properties = sources.remove(DEFAULT_PROPERTIES)
    if default_properties is not None:
        sources.add_last(default_properties)
        logger.debug("defaultProperties moved to lowest precedence")
