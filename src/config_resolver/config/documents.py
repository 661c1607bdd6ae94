"""Parsed configuration documents and the per-run document cache."""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from src.config_resolver.config.binder import Binder
from src.config_resolver.config.loaders.base import DocumentFormatLoader
from src.config_resolver.config.profiles import NamedProfile, as_profile_set
from src.config_resolver.config.property_source import PropertySource
from src.config_resolver.config.resources import Resource


logger = logging.getLogger(__name__)

PROFILES_PROPERTY = "profiles"
ACTIVE_PROFILES_PROPERTY = "profiles.active"
INCLUDE_PROFILES_PROPERTY = "profiles.include"


@dataclass(frozen=True)
class Document:
    """One parsed unit of configuration and its profile metadata.

    Attributes:
        source: Property source holding the document's keys
        declared_profiles: Profile expressions the document is restricted to ('profiles' key)
        active_profiles: Profiles the document activates ('profiles.active')
        include_profiles: Profiles the document includes ('profiles.include')
    """
    source: PropertySource
    declared_profiles: Tuple[str, ...] = ()
    active_profiles: Tuple[NamedProfile, ...] = ()
    include_profiles: Tuple[NamedProfile, ...] = ()

    def __str__(self) -> str:
        return self.source.name


class DocumentsCacheKey:
    """Cache key: the same loader instance and an equal resource."""

    __slots__ = ("loader", "resource")

    def __init__(self, loader: DocumentFormatLoader, resource: Resource):
        self.loader = loader
        self.resource = resource

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DocumentsCacheKey):
            return NotImplemented
        return self.loader is other.loader and self.resource == other.resource

    def __hash__(self) -> int:
        return id(self.loader) * 31 + hash(self.resource)


def bind_profiles(binder: Binder, name: str) -> Tuple[NamedProfile, ...]:
    """Bind a profile list property to an ordered tuple of profiles."""
    names = binder.bind(name, list).or_else([])
    return tuple(as_profile_set(str(item) for item in names))


class DocumentCache:
    """Memoizes parsed documents per (loader, resource) for one resolution run.

    Entries never change once stored, so a hit returns the same documents
    whatever profile is being processed.

    Args:
        binder_factory: Creates a binder reading a single document's source
    """

    def __init__(self, binder_factory: Callable[[PropertySource], Binder]):
        self.binder_factory = binder_factory
        self._cache: Dict[DocumentsCacheKey, Tuple[Document, ...]] = {}
        self.hits = 0
        self.misses = 0

    def get(self, loader: DocumentFormatLoader, name: str, resource: Resource) -> Tuple[Document, ...]:
        """Documents for a resource, parsing it on first request.

        Args:
            loader: Loader that understands the resource's format
            name: Property source name used when parsing
            resource: Existing resource

        Returns:
            Documents in file order (possibly empty)
        """
        key = DocumentsCacheKey(loader, resource)
        documents = self._cache.get(key)
        if documents is not None:
            self.hits += 1
            logger.debug(
                f"Document cache hit: {resource.location}",
                extra={"location": resource.location, "documents": len(documents)},
            )
            return documents

        self.misses += 1
        loaded = loader.load(name, resource)
        documents = tuple(self._as_document(source) for source in loaded or ())
        self._cache[key] = documents
        return documents

    def _as_document(self, source: PropertySource) -> Document:
        binder = self.binder_factory(source)
        declared: Optional[list] = binder.bind(PROFILES_PROPERTY, list).or_else(None)
        return Document(
            source=source,
            declared_profiles=tuple(str(item) for item in declared or ()),
            active_profiles=bind_profiles(binder, ACTIVE_PROFILES_PROPERTY),
            include_profiles=bind_profiles(binder, INCLUDE_PROFILES_PROPERTY),
        )

    def __len__(self) -> int:
        return len(self._cache)
