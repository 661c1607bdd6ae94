"""Layered configuration resolution utilities."""

from src.config_resolver.config.activation import ProfileActivationEngine  # noqa: F401
from src.config_resolver.config.binder import BindResult, Binder, PropertyBinder  # noqa: F401
from src.config_resolver.config.diagnostics import TRACE, DiagnosticEvent, DiagnosticsSink  # noqa: F401
from src.config_resolver.config.documents import Document, DocumentCache, DocumentsCacheKey  # noqa: F401
from src.config_resolver.config.environment import ConfigurableEnvironment, StandardEnvironment  # noqa: F401
from src.config_resolver.config.filters import ProfileFilter  # noqa: F401
from src.config_resolver.config.loader import ConfigurationLoader, LoadResult, add_property_sources  # noqa: F401
from src.config_resolver.config.loaders import (  # noqa: F401
    DocumentFormatLoader,
    LoaderRegistry,
    PropertiesDocumentLoader,
    YamlDocumentLoader,
    default_registry,
)
from src.config_resolver.config.locator import SearchPathResolver  # noqa: F401
from src.config_resolver.config.merger import DEFAULT_PROPERTIES, PropertySourceMerger, reorder_sources  # noqa: F401
from src.config_resolver.config.profiles import NO_PROFILE, DefaultProfile, NamedProfile, Profile  # noqa: F401
from src.config_resolver.config.property_source import (  # noqa: F401
    FilteredPropertySource,
    MutablePropertySources,
    Origin,
    OriginTrackedMapPropertySource,
    OriginTrackedValue,
    PropertySource,
)
from src.config_resolver.config.random_source import RandomValuePropertySource  # noqa: F401
from src.config_resolver.config.resources import ClasspathResource, FileSystemResource, Resource, ResourceLoader  # noqa: F401
from src.config_resolver.config.settings import ResolverSettings  # noqa: F401
from src.config_resolver.config.substitutor import PlaceholderResolver  # noqa: F401

__all__ = [
    # Orchestration
    "ConfigurationLoader",
    "LoadResult",
    "add_property_sources",
    "reorder_sources",
    "ResolverSettings",
    # Engine parts
    "SearchPathResolver",
    "DocumentCache",
    "DocumentsCacheKey",
    "Document",
    "ProfileFilter",
    "ProfileActivationEngine",
    "PropertySourceMerger",
    "DEFAULT_PROPERTIES",
    # Profiles
    "Profile",
    "NamedProfile",
    "DefaultProfile",
    "NO_PROFILE",
    # Environment and property sources
    "ConfigurableEnvironment",
    "StandardEnvironment",
    "PropertySource",
    "OriginTrackedMapPropertySource",
    "OriginTrackedValue",
    "Origin",
    "FilteredPropertySource",
    "MutablePropertySources",
    "RandomValuePropertySource",
    # Collaborators
    "Binder",
    "BindResult",
    "PropertyBinder",
    "PlaceholderResolver",
    "Resource",
    "ResourceLoader",
    "FileSystemResource",
    "ClasspathResource",
    "DocumentFormatLoader",
    "LoaderRegistry",
    "PropertiesDocumentLoader",
    "YamlDocumentLoader",
    "default_registry",
    # Diagnostics
    "DiagnosticsSink",
    "DiagnosticEvent",
    "TRACE",
]
