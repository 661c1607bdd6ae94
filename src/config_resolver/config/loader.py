"""Config loader orchestrator - discovers, filters, and merges config documents."""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from src.config_resolver.config.activation import ProfileActivationEngine
from src.config_resolver.config.binder import Binder, PropertyBinder
from src.config_resolver.config.diagnostics import DiagnosticEvent, DiagnosticsSink
from src.config_resolver.config.documents import (
    ACTIVE_PROFILES_PROPERTY,
    INCLUDE_PROFILES_PROPERTY,
    DocumentCache,
)
from src.config_resolver.config.environment import comma_delimited_list
from src.config_resolver.config.filters import DocumentFilter, DocumentFilterFactory, ProfileFilter
from src.config_resolver.config.loaders import LoaderRegistry, default_registry
from src.config_resolver.config.loaders.base import DocumentFormatLoader
from src.config_resolver.config.locator import SearchPathResolver
from src.config_resolver.config.merger import DEFAULT_PROPERTIES, DocumentConsumer, PropertySourceMerger
from src.config_resolver.config.profiles import NO_PROFILE, NamedProfile, Profile
from src.config_resolver.config.property_source import (
    FilteredPropertySource,
    MutablePropertySources,
    PropertySource,
)
from src.config_resolver.config.random_source import RandomValuePropertySource
from src.config_resolver.config.resources import Resource, ResourceLoader, get_filename_extension
from src.config_resolver.config.settings import ResolverSettings
from src.config_resolver.config.substitutor import PlaceholderResolver
from src.config_resolver.exceptions.config import (
    ConfigLoadError,
    UnknownFileExtensionError,
)
from src.config_resolver.utils.logging.factory import configure_logging


logger = logging.getLogger(__name__)

LOAD_FILTERED_PROPERTIES = frozenset({ACTIVE_PROFILES_PROPERTY, INCLUDE_PROFILES_PROPERTY})


@dataclass
class LoadResult:
    """Outcome of one resolution pass.

    Attributes:
        processed_profiles: Profiles in processing order (the no-profile marker first)
        active_profiles: Final active profiles written to the environment
        loaded_source_names: Property sources added to the environment, highest precedence first
        diagnostics: Events recorded during the pass
    """
    processed_profiles: List[Profile] = field(default_factory=list)
    active_profiles: List[str] = field(default_factory=list)
    loaded_source_names: List[str] = field(default_factory=list)
    diagnostics: List[DiagnosticEvent] = field(default_factory=list)

    @property
    def processed_profile_names(self) -> List[str]:
        return [p.name for p in self.processed_profiles if isinstance(p, NamedProfile)]


class ConfigurationLoader:
    """Orchestrates config discovery, profile activation, and merging.

    Pipeline:
    1. Hide profile keys in 'defaultProperties' for the duration of the run
    2. Initialize the profile queue
    3. For each queued profile: try every (location, name, extension),
       filter documents for the profile, collect matches
    4. Final no-profile pass for profile-restricted sections of unscoped files
    5. Splice collected sources into the environment
    6. Write the final active profiles back

    One instance runs one pass; each pass gets its own document cache and
    profile queue.

    Example:
        environment = StandardEnvironment()
        resources = ResourceLoader(classpath_roots=["resources"])
        result = ConfigurationLoader(environment, resources).load()
        environment.get_property("server.port")
    """

    def __init__(
        self,
        environment,
        resource_loader: Optional[ResourceLoader] = None,
        registry: Optional[LoaderRegistry] = None,
        settings: Optional[ResolverSettings] = None,
        diagnostics: Optional[DiagnosticsSink] = None,
    ):
        self.environment = environment
        self.settings = settings or ResolverSettings()
        self.resource_loader = resource_loader or ResourceLoader(
            classpath_roots=self.settings.classpath_roots,
            classpath_packages=self.settings.classpath_packages,
            base_dir=self.settings.base_dir,
        )
        self.registry = registry or default_registry()
        self.diagnostics = diagnostics or DiagnosticsSink()
        self.search_path = SearchPathResolver(
            environment,
            search_locations=self.settings.search_locations,
            search_names=self.settings.search_names,
        )
        self.profile_filter = ProfileFilter(environment)
        if self.settings.default_profiles:
            environment.set_default_profiles(comma_delimited_list(self.settings.default_profiles))

        self.activation: Optional[ProfileActivationEngine] = None
        self.merger: Optional[PropertySourceMerger] = None
        self.cache: Optional[DocumentCache] = None

        logger.debug(
            "ConfigurationLoader initialized",
            extra={
                "loaders": [type(loader).__name__ for loader in self.registry],
                "search_locations": self.settings.search_locations or "default",
                "search_names": self.settings.search_names or "default",
            },
        )

    def set_search_locations(self, locations: str) -> None:
        self.search_path.set_search_locations(locations)

    def set_search_names(self, names: str) -> None:
        self.search_path.set_search_names(names)

    # ==================== Entry point ====================

    def load(self) -> LoadResult:
        """Run the full resolution pass.

        Returns:
            LoadResult describing what was processed and loaded

        Raises:
            ConfigError: Any configuration, location, or load failure (fatal)
        """
        events_before = len(self.diagnostics.events)
        result = FilteredPropertySource.apply(
            self.environment,
            DEFAULT_PROPERTIES,
            LOAD_FILTERED_PROPERTIES,
            self._run,
        )
        result.diagnostics = self.diagnostics.events[events_before:]

        logger.info(
            "Configuration loaded",
            extra={
                "processed_profiles": [str(p) for p in result.processed_profiles],
                "active_profiles": result.active_profiles,
                "sources": len(result.loaded_source_names),
            },
        )
        return result

    def _run(self, default_properties: Optional[PropertySource]) -> LoadResult:
        self.activation = ProfileActivationEngine(self.environment, self.diagnostics)
        self.merger = PropertySourceMerger()
        self.cache = DocumentCache(self._binder_for)

        # Fail fast on bad overrides before anything is loaded
        self.search_path.get_search_locations()

        self.activation.initialize()
        while True:
            profile = self.activation.next_profile()
            if profile is None:
                break
            self.activation.begin(profile)
            self._load(
                profile,
                self.profile_filter.positive,
                self.merger.consumer(MutablePropertySources.add_last, False),
            )
            self.activation.mark_processed(profile)

        self._load(
            NO_PROFILE,
            self.profile_filter.negative,
            self.merger.consumer(MutablePropertySources.add_first, True),
        )
        loaded = self.merger.add_loaded_property_sources(self.environment.property_sources)
        active = self.activation.apply_active_profiles(default_properties)

        return LoadResult(
            processed_profiles=list(self.activation.processed),
            active_profiles=active,
            loaded_source_names=loaded,
        )

    def _binder_for(self, source: PropertySource) -> Binder:
        return PropertyBinder([source], PlaceholderResolver(self.environment.get_raw_property))

    # ==================== Resource lookup ====================

    def _load(self, profile: Profile, filter_factory: DocumentFilterFactory, consumer: DocumentConsumer) -> None:
        for location, name in self.search_path.candidates():
            self._load_location(location, name, profile, filter_factory, consumer)

    def _load_location(
        self,
        location: str,
        name: Optional[str],
        profile: Profile,
        filter_factory: DocumentFilterFactory,
        consumer: DocumentConsumer,
    ) -> None:
        if not name:
            loader = self.registry.loader_for(location)
            if loader is None:
                raise UnknownFileExtensionError(location, self.registry.file_extensions)
            self._load_resource(loader, location, profile, filter_factory(profile), consumer)
            return

        processed = set()
        for loader in self.registry:
            for extension in loader.file_extensions:
                # An extension is only ever handled by its first registrant
                if extension not in processed:
                    processed.add(extension)
                    self._load_for_file_extension(
                        loader, location + name, "." + extension, profile, filter_factory, consumer
                    )

    def _load_for_file_extension(
        self,
        loader: DocumentFormatLoader,
        prefix: str,
        extension: str,
        profile: Profile,
        filter_factory: DocumentFilterFactory,
        consumer: DocumentConsumer,
    ) -> None:
        default_filter = filter_factory(NO_PROFILE)
        profile_filter = filter_factory(profile)
        if isinstance(profile, NamedProfile):
            # Profile-specific file, and profile sections inside it
            profile_specific = f"{prefix}-{profile.name}{extension}"
            self._load_resource(loader, profile_specific, profile, default_filter, consumer)
            self._load_resource(loader, profile_specific, profile, profile_filter, consumer)
            # Sections for this profile in files of profiles already processed
            for processed in self.activation.processed_named_profiles:
                previously_loaded = f"{prefix}-{processed.name}{extension}"
                self._load_resource(loader, previously_loaded, profile, profile_filter, consumer)
        # Also the profile-specific sections (if any) of the normal file
        self._load_resource(loader, prefix + extension, profile, profile_filter, consumer)

    def _load_resource(
        self,
        loader: DocumentFormatLoader,
        location: str,
        profile: Profile,
        document_filter: DocumentFilter,
        consumer: DocumentConsumer,
    ) -> None:
        try:
            resource = self.resource_loader.get_resource(location)
            if not resource.exists():
                self.diagnostics.trace(
                    self._describe("Skipped missing config ", location, resource, profile),
                    location=location,
                    profile=profile.name,
                )
                return
            if not get_filename_extension(resource.filename):
                self.diagnostics.trace(
                    self._describe("Skipped empty config extension ", location, resource, profile),
                    location=location,
                    profile=profile.name,
                )
                return

            name = f"applicationConfig: [{location}]"
            documents = self.cache.get(loader, name, resource)
            if not documents:
                self.diagnostics.trace(
                    self._describe("Skipped unloaded config ", location, resource, profile),
                    location=location,
                    profile=profile.name,
                )
                return

            loaded = []
            for document in documents:
                if document_filter(document):
                    self.activation.activate(document.active_profiles)
                    self.activation.include(document.include_profiles)
                    loaded.append(document)
            # Last document in a file wins within that file
            loaded.reverse()
            if loaded:
                for document in loaded:
                    consumer(profile, document)
                self.diagnostics.debug(
                    self._describe("Loaded config file ", location, resource, profile),
                    location=location,
                    profile=profile.name,
                    documents=len(loaded),
                )

        except ConfigLoadError:
            raise
        except Exception as e:
            logger.error(
                f"Failed to load property source from location '{location}'",
                extra={"location": location, "error": str(e)},
            )
            raise ConfigLoadError(location, original_error=e) from e

    def _describe(self, prefix: str, location: str, resource: Optional[Resource], profile: Profile) -> str:
        description = prefix
        if resource is not None:
            description += f"'{resource.uri}' ({location})"
        else:
            description += location
        if isinstance(profile, NamedProfile):
            description += f" for profile {profile.name}"
        return description


def add_property_sources(
    environment,
    resource_loader: Optional[ResourceLoader] = None,
    settings: Optional[ResolverSettings] = None,
    diagnostics: Optional[DiagnosticsSink] = None,
    service_name: Optional[str] = None,
) -> LoadResult:
    """Add the random source (if enabled) and run a config load.

    Args:
        environment: Destination environment
        resource_loader: Resource loader (default: built from settings)
        settings: Resolver settings (default: from environment variables)
        diagnostics: Diagnostics sink (default: new sink forwarding to logging)
        service_name: When given, configure JSON logging for this service at
            settings.log_level before loading

    Returns:
        LoadResult of the pass
    """
    settings = settings or ResolverSettings()
    if service_name:
        configure_logging(service_name, level=settings.log_level)
    if settings.add_random_source:
        RandomValuePropertySource.add_to_environment(environment)
    loader = ConfigurationLoader(
        environment,
        resource_loader=resource_loader,
        settings=settings,
        diagnostics=diagnostics,
    )
    return loader.load()
