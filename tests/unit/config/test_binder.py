"""Unit tests for the property binder."""
import pytest

from src.config_resolver.config.binder import BindResult, PropertyBinder
from src.config_resolver.config.property_source import PropertySource
from src.config_resolver.config.substitutor import PlaceholderResolver


def _binder(*sources, resolver=None):
    return PropertyBinder(
        [PropertySource(f"s{i}", values) for i, values in enumerate(sources)],
        resolver,
    )


def test_bind_comma_list():
    binder = _binder({"profiles.active": "dev, metrics"})

    assert binder.bind("profiles.active", list).get() == ["dev", "metrics"]


def test_bind_indexed_list():
    binder = _binder({"profiles.include[0]": "a", "profiles.include[1]": "b"})

    assert binder.bind("profiles.include", list).get() == ["a", "b"]


def test_bind_native_list():
    binder = _binder({"names": ["a", "b"]})

    assert binder.bind("names", list).get() == ["a", "b"]


def test_bind_first_source_wins():
    binder = _binder({"x": "1"}, {"x": "2"})

    assert binder.bind("x", str).get() == "1"


def test_bind_missing_is_unbound():
    result = _binder({}).bind("missing", list)

    assert not result.is_bound
    assert result.or_else([]) == []
    with pytest.raises(LookupError):
        result.get()


def test_bind_scalars():
    binder = _binder({"flag": "yes", "count": "3"})

    assert binder.bind("flag", bool).get() is True
    assert binder.bind("count", int).get() == 3


def test_bind_invalid_bool():
    with pytest.raises(ValueError):
        _binder({"flag": "maybe"}).bind("flag", bool)


def test_bind_resolves_placeholders():
    resolver = PlaceholderResolver({"env": "qa"}.get)
    binder = _binder({"profiles.active": "${env},base"}, resolver=resolver)

    assert binder.bind("profiles.active", list).get() == ["qa", "base"]


def test_bind_result_map():
    assert BindResult.of(["a"]).map(len).get() == 1
    assert not BindResult().map(len).is_bound
