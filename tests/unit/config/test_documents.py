"""Unit tests for documents and the per-run document cache."""
from src.config_resolver.config.binder import PropertyBinder
from src.config_resolver.config.documents import Document, DocumentCache, DocumentsCacheKey
from src.config_resolver.config.loaders import PropertiesDocumentLoader, YamlDocumentLoader
from src.config_resolver.config.profiles import NamedProfile
from src.config_resolver.config.resources import FileSystemResource
from tests.fixtures.config_files import write_file


def _cache():
    return DocumentCache(lambda source: PropertyBinder([source]))


def test_documents_carry_profile_metadata(tmp_path):
    resource = FileSystemResource(write_file(tmp_path, "application.yml", """\
        x: 1
        profiles:
          active: dev
          include: [metrics, tracing]
        ---
        profiles: dev, eu
        x: 2
        """))

    first, second = _cache().get(YamlDocumentLoader(), "base", resource)

    assert first.declared_profiles == ()
    assert first.active_profiles == (NamedProfile("dev"),)
    assert first.include_profiles == (NamedProfile("metrics"), NamedProfile("tracing"))
    assert second.declared_profiles == ("dev", "eu")
    assert second.active_profiles == ()


def test_cache_hit_for_same_loader_and_resource(tmp_path):
    path = write_file(tmp_path, "application.properties", "x=1\n")
    loader = PropertiesDocumentLoader()
    cache = _cache()

    first = cache.get(loader, "base", FileSystemResource(path))
    second = cache.get(loader, "other", FileSystemResource(path))

    assert first is second
    assert (cache.hits, cache.misses, len(cache)) == (1, 1, 1)


def test_cache_miss_for_other_loader_instance(tmp_path):
    path = write_file(tmp_path, "application.properties", "x=1\n")
    cache = _cache()

    cache.get(PropertiesDocumentLoader(), "base", FileSystemResource(path))
    cache.get(PropertiesDocumentLoader(), "base", FileSystemResource(path))

    assert cache.misses == 2


def test_empty_resource_yields_no_documents(tmp_path):
    path = write_file(tmp_path, "application.yml", "# nothing here\n")

    assert _cache().get(YamlDocumentLoader(), "base", FileSystemResource(path)) == ()


def test_cache_key_identity(tmp_path):
    loader = YamlDocumentLoader()
    path = tmp_path / "application.yml"

    assert DocumentsCacheKey(loader, FileSystemResource(path)) == DocumentsCacheKey(
        loader, FileSystemResource(path)
    )
    assert DocumentsCacheKey(loader, FileSystemResource(path)) != DocumentsCacheKey(
        YamlDocumentLoader(), FileSystemResource(path)
    )
