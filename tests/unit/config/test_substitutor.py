"""Unit tests for placeholder substitution."""
import pytest

from src.config_resolver.config.substitutor import PlaceholderResolver
from src.config_resolver.exceptions import PlaceholderResolutionError


def _resolver(values, ignore_unresolvable=True):
    return PlaceholderResolver(values.get, ignore_unresolvable=ignore_unresolvable)


def test_simple_substitution():
    resolver = _resolver({"name": "app"})

    assert resolver.resolve_placeholders("config/${name}.yml") == "config/app.yml"


def test_default_value():
    resolver = _resolver({})

    assert resolver.resolve_placeholders("${missing:fallback}") == "fallback"
    assert resolver.resolve_placeholders("${missing:}") == ""


def test_nested_default_and_recursive_values():
    resolver = _resolver({"inner": "x", "outer": "${inner}-y"})

    assert resolver.resolve_placeholders("${missing:${inner}}") == "x"
    assert resolver.resolve_placeholders("${outer}") == "x-y"


def test_placeholder_in_key():
    resolver = _resolver({"env": "dev", "url.dev": "http://dev"})

    assert resolver.resolve_placeholders("${url.${env}}") == "http://dev"


def test_unresolvable_kept_when_lenient():
    resolver = _resolver({})

    assert resolver.resolve_placeholders("a ${missing} b") == "a ${missing} b"


def test_unresolvable_raises_when_strict():
    resolver = _resolver({}, ignore_unresolvable=False)

    with pytest.raises(PlaceholderResolutionError, match="missing"):
        resolver.resolve_placeholders("${missing}")


def test_circular_reference_raises():
    resolver = _resolver({"a": "${b}", "b": "${a}"})

    with pytest.raises(PlaceholderResolutionError, match="Circular"):
        resolver.resolve_placeholders("${a}")


def test_escaped_placeholder_is_literal():
    resolver = _resolver({"name": "app"})

    assert resolver.resolve_placeholders("\\${name} ${name}") == "${name} app"


def test_substitute_walks_structures():
    resolver = _resolver({"v": "1"})

    assert resolver.substitute({"a": ["${v}", 2], "b": {"c": "${v}"}}) == {"a": ["1", 2], "b": {"c": "1"}}


def test_unterminated_placeholder_left_alone():
    resolver = _resolver({"a": "1"})

    assert resolver.resolve_placeholders("${a") == "${a"
