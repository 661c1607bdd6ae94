"""Unit tests for the random value property source."""
import random
import re
import uuid

import pytest

from src.config_resolver.config.environment import StandardEnvironment
from src.config_resolver.config.random_source import RandomValuePropertySource


@pytest.fixture
def source():
    return RandomValuePropertySource(rng=random.Random(42))


def test_random_source_ignores_other_keys(source):
    assert source.get_property("server.port") is None
    assert not source.contains_property("server.port")
    assert source.contains_property("random.int")


def test_random_int_in_range(source):
    for _ in range(50):
        assert 0 <= source.get_property("random.int(10)") < 10
        assert 5 <= source.get_property("random.int[5,10]") < 10


def test_random_long_bounded(source):
    assert 0 <= source.get_property("random.long(100)") < 100
    assert isinstance(source.get_property("random.long"), int)


def test_random_uuid(source):
    value = source.get_property("random.uuid")
    assert uuid.UUID(value).version == 4


def test_random_value_is_hex(source):
    assert re.fullmatch(r"[0-9a-f]{64}", source.get_property("random.value"))


def test_random_invalid_range(source):
    with pytest.raises(ValueError):
        source.get_property("random.int[10,5]")


def test_add_to_environment_after_system_environment():
    """Should sit right after systemEnvironment and be added once."""
    environment = StandardEnvironment(system_properties={}, system_environment={})

    first = RandomValuePropertySource.add_to_environment(environment)
    second = RandomValuePropertySource.add_to_environment(environment)

    assert first is second
    assert environment.property_sources.names() == ["systemProperties", "systemEnvironment", "random"]


def test_random_placeholder_resolves_through_environment():
    environment = StandardEnvironment(
        system_properties={"app.port": "${random.int[1000,2000]}"},
        system_environment={},
    )
    RandomValuePropertySource.add_to_environment(environment)

    assert 1000 <= int(environment.get_property("app.port")) < 2000
