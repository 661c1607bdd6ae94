"""Unit tests for the configuration environment and profile expressions."""
import pytest

from src.config_resolver.config.environment import (
    ConfigurableEnvironment,
    StandardEnvironment,
    SystemEnvironmentPropertySource,
    comma_delimited_list,
)
from src.config_resolver.config.property_source import PropertySource
from src.config_resolver.exceptions import InvalidProfileError


def _environment(**properties):
    environment = ConfigurableEnvironment()
    environment.property_sources.add_last(PropertySource("test", properties))
    return environment


def test_first_source_wins():
    environment = ConfigurableEnvironment()
    environment.property_sources.add_last(PropertySource("high", {"x": "1"}))
    environment.property_sources.add_last(PropertySource("low", {"x": "2", "y": "3"}))

    assert environment.get_property("x") == "1"
    assert environment.get_property("y") == "3"
    assert environment.get_property("z", "default") == "default"
    assert environment.contains_property("y")


def test_get_property_resolves_placeholders():
    environment = _environment(host="localhost", url="http://${host}:${port:8080}")

    assert environment.get_property("url") == "http://localhost:8080"


def test_active_profiles_read_lazily_from_property():
    environment = _environment(**{"profiles.active": "dev, eu"})

    assert environment.active_profiles == ["dev", "eu"]


def test_default_profiles_apply_only_without_active():
    environment = ConfigurableEnvironment()

    assert environment.default_profiles == ["default"]
    assert environment.accepts_profiles("default")

    environment.add_active_profile("dev")

    assert not environment.accepts_profiles("default")
    assert environment.accepts_profiles("dev")


def test_profile_expressions():
    """Should support !, &, | and parentheses."""
    environment = ConfigurableEnvironment()
    environment.set_active_profiles(["prod", "eu"])

    assert environment.accepts_profiles("prod & eu")
    assert environment.accepts_profiles("prod & (eu | us)")
    assert environment.accepts_profiles("!dev")
    assert not environment.accepts_profiles("prod & !eu")
    assert environment.accepts_profiles("dev | prod")
    assert environment.accepts_profiles("dev", "eu")
    assert environment.accepts_profiles("dev, eu")
    assert not environment.accepts_profiles("dev")


def test_malformed_profile_expression():
    environment = ConfigurableEnvironment()

    with pytest.raises(InvalidProfileError):
        environment.accepts_profiles("a & b | c")
    with pytest.raises(InvalidProfileError):
        environment.accepts_profiles("(a & b")
    with pytest.raises(InvalidProfileError):
        environment.accepts_profiles("")


def test_invalid_profile_names_rejected():
    environment = ConfigurableEnvironment()

    with pytest.raises(InvalidProfileError):
        environment.add_active_profile("!dev")
    with pytest.raises(InvalidProfileError):
        environment.set_active_profiles([" "])


def test_add_active_profile_keeps_property_profiles():
    environment = _environment(**{"profiles.active": "dev"})
    environment.add_active_profile("metrics")
    environment.add_active_profile("dev")

    assert environment.active_profiles == ["dev", "metrics"]


def test_system_environment_relaxed_names():
    source = SystemEnvironmentPropertySource(source={"PROFILES_ACTIVE": "qa", "config_name": "app"})

    assert source.get_property("profiles.active") == "qa"
    assert source.get_property("config.name") == "app"
    assert source.contains_property("PROFILES_ACTIVE")
    assert not source.contains_property("missing")


def test_standard_environment_sources():
    environment = StandardEnvironment(system_properties={"a": "1"}, system_environment={"B": "2"})

    assert environment.property_sources.names() == ["systemProperties", "systemEnvironment"]
    assert environment.get_property("a") == "1"
    assert environment.get_property("b") == "2"


def test_comma_delimited_list():
    assert comma_delimited_list(" a, b ,,c ") == ["a", "b", "c"]
    assert comma_delimited_list(["x", "y"]) == ["x", "y"]
    assert comma_delimited_list(None) == []
