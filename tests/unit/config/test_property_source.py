"""Unit tests for property sources and the source chain."""
import pytest

from src.config_resolver.config.environment import ConfigurableEnvironment
from src.config_resolver.config.property_source import (
    FilteredPropertySource,
    MutablePropertySources,
    Origin,
    OriginTrackedMapPropertySource,
    OriginTrackedValue,
    PropertySource,
)
from src.config_resolver.exceptions import PropertySourceError


def _source(name, **values):
    return PropertySource(name, values)


def test_property_source_equality_uses_name_only():
    """Sources with the same name are equal regardless of content."""
    assert _source("a", x=1) == _source("a", x=2)
    assert hash(_source("a")) == hash(_source("a", y=1))
    assert _source("a") != _source("b")


def test_property_source_requires_name():
    with pytest.raises(PropertySourceError):
        PropertySource("", {})


def test_origin_tracked_source_unwraps_values():
    """Should return raw values and expose their origin."""
    origin = Origin("classpath:/application.yml", 3, 5)
    source = OriginTrackedMapPropertySource(
        "app", {"x": OriginTrackedValue("1", origin), "y": "plain"}
    )

    assert source.get_property("x") == "1"
    assert source.get_origin("x") == origin
    assert source.get_property("y") == "plain"
    assert source.get_origin("y") is None
    assert source.as_dict() == {"x": "1", "y": "plain"}
    assert str(origin) == "classpath:/application.yml:3:5"


def test_chain_add_first_and_last():
    sources = MutablePropertySources()
    sources.add_last(_source("b"))
    sources.add_first(_source("a"))
    sources.add_last(_source("c"))

    assert sources.names() == ["a", "b", "c"]
    assert len(sources) == 3
    assert "b" in sources


def test_chain_relative_insertion():
    sources = MutablePropertySources([_source("a"), _source("c")])
    sources.add_before("c", _source("b"))
    sources.add_after("c", _source("d"))

    assert sources.names() == ["a", "b", "c", "d"]
    assert sources.precedence_of("c") == 2


def test_chain_re_adding_moves_source():
    """Names stay unique: re-adding moves the existing entry."""
    sources = MutablePropertySources([_source("a"), _source("b"), _source("c")])
    sources.add_last(_source("a", x=1))

    assert sources.names() == ["b", "c", "a"]
    assert sources.get("a").get_property("x") == 1


def test_chain_relative_to_missing_source_fails():
    sources = MutablePropertySources([_source("a")])

    with pytest.raises(PropertySourceError, match="does not exist"):
        sources.add_before("missing", _source("b"))


def test_chain_relative_to_itself_fails():
    sources = MutablePropertySources([_source("a")])

    with pytest.raises(PropertySourceError, match="relative to itself"):
        sources.add_after("a", _source("a"))


def test_chain_remove_and_replace():
    sources = MutablePropertySources([_source("a"), _source("b")])

    removed = sources.remove("a")
    sources.replace("b", _source("b", x=2))

    assert removed.name == "a"
    assert sources.remove("missing") is None
    assert sources.names() == ["b"]
    assert sources.get("b").get_property("x") == 2


def test_filtered_source_hides_keys():
    original = _source("defaults", keep="yes", hide="no")
    filtered = FilteredPropertySource(original, {"hide"})

    assert filtered.get_property("keep") == "yes"
    assert filtered.get_property("hide") is None
    assert not filtered.contains_property("hide")
    assert filtered.property_names == ["keep"]


def test_filtered_source_apply_restores_original():
    """Should expose the filtered view during the operation and restore it after."""
    environment = ConfigurableEnvironment()
    original = _source("defaultProperties", secret="x", other="y")
    environment.property_sources.add_last(original)
    seen = {}

    def operation(source):
        seen["passed"] = source
        seen["visible"] = environment.get_property("secret")
        return "done"

    result = FilteredPropertySource.apply(environment, "defaultProperties", {"secret"}, operation)

    assert result == "done"
    assert seen["passed"] is original
    assert seen["visible"] is None
    assert environment.property_sources.get("defaultProperties") is original


def test_filtered_source_apply_restores_on_error():
    environment = ConfigurableEnvironment()
    original = _source("defaultProperties", secret="x")
    environment.property_sources.add_last(original)

    def operation(source):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        FilteredPropertySource.apply(environment, "defaultProperties", {"secret"}, operation)

    assert environment.property_sources.get("defaultProperties") is original


def test_filtered_source_apply_without_source():
    environment = ConfigurableEnvironment()

    assert FilteredPropertySource.apply(environment, "defaultProperties", {"k"}, lambda s: s) is None


def test_immutable_origin_tracked_source_rejects_writes():
    """Should expose an immutable source as a read-only view."""
    values = {"k": OriginTrackedValue("v", Origin("a.properties", 1, 1))}
    source = OriginTrackedMapPropertySource("a", values, immutable=True)

    with pytest.raises(TypeError):
        source.source["k"] = "changed"

    values["k"] = "changed"
    assert source.get_property("k") == "v"


def test_mutable_origin_tracked_source_accepts_writes():
    source = OriginTrackedMapPropertySource("a", {"k": "v"})

    source.source["k"] = "changed"

    assert source.get_property("k") == "changed"
