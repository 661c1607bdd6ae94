"""Unit tests for merging loaded documents into the environment."""
from src.config_resolver.config.documents import Document
from src.config_resolver.config.environment import StandardEnvironment
from src.config_resolver.config.merger import PropertySourceMerger, reorder_sources
from src.config_resolver.config.profiles import NO_PROFILE, NamedProfile
from src.config_resolver.config.property_source import MutablePropertySources, PropertySource


def _document(name):
    return Document(PropertySource(name, {"name": name}))


def test_later_profiles_take_precedence():
    merger = PropertySourceMerger()
    add = merger.consumer(MutablePropertySources.add_last)
    add(NO_PROFILE, _document("base"))
    add(NO_PROFILE, _document("base-config"))
    add(NamedProfile("dev"), _document("dev"))
    destination = MutablePropertySources([PropertySource("system", {})])

    added = merger.add_loaded_property_sources(destination)

    assert added == ["dev", "base", "base-config"]
    assert destination.names() == ["system", "dev", "base", "base-config"]


def test_sources_inserted_before_default_properties():
    merger = PropertySourceMerger()
    merger.consumer(MutablePropertySources.add_last)(NO_PROFILE, _document("base"))
    destination = MutablePropertySources([
        PropertySource("system", {}),
        PropertySource("defaultProperties", {}),
    ])

    merger.add_loaded_property_sources(destination)

    assert destination.names() == ["system", "base", "defaultProperties"]


def test_check_for_existing_skips_loaded_sources():
    merger = PropertySourceMerger()
    merger.consumer(MutablePropertySources.add_last)(NamedProfile("dev"), _document("section"))
    add_first = merger.consumer(MutablePropertySources.add_first, check_for_existing=True)

    add_first(NO_PROFILE, _document("section"))
    add_first(NO_PROFILE, _document("other"))

    assert merger.loaded_source_names == ["section", "other"]
    assert merger.loaded[NO_PROFILE].names() == ["other"]


def test_source_added_once_across_profiles():
    merger = PropertySourceMerger()
    add = merger.consumer(MutablePropertySources.add_last)
    add(NO_PROFILE, _document("base"))
    add(NamedProfile("dev"), _document("shared"))
    add(NamedProfile("prod"), _document("shared"))
    destination = MutablePropertySources()

    assert merger.add_loaded_property_sources(destination) == ["shared", "base"]
    assert destination.names() == ["shared", "base"]


def test_reorder_sources():
    environment = StandardEnvironment(system_properties={}, system_environment={})
    environment.property_sources.add_first(PropertySource("defaultProperties", {}))

    reorder_sources(environment)

    assert environment.property_sources.names() == [
        "systemProperties",
        "systemEnvironment",
        "defaultProperties",
    ]


def test_reorder_without_default_properties():
    environment = StandardEnvironment(system_properties={}, system_environment={})

    reorder_sources(environment)

    assert environment.property_sources.names() == ["systemProperties", "systemEnvironment"]
