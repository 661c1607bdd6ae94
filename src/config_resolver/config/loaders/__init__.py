"""Document format loaders."""

from src.config_resolver.config.loaders.base import DocumentFormatLoader, LoaderRegistry  # noqa: F401
from src.config_resolver.config.loaders.properties_loader import PropertiesDocumentLoader  # noqa: F401
from src.config_resolver.config.loaders.yaml_loader import YamlDocumentLoader  # noqa: F401


def default_registry() -> LoaderRegistry:
    """Registry with the built-in loaders: properties first, then YAML."""
    return LoaderRegistry([PropertiesDocumentLoader(), YamlDocumentLoader()])


__all__ = [
    "DocumentFormatLoader",
    "LoaderRegistry",
    "PropertiesDocumentLoader",
    "YamlDocumentLoader",
    "default_registry",
]
