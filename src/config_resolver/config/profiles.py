"""Profile values and profile expressions."""
import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Union

from src.config_resolver.exceptions.config import InvalidProfileError


@dataclass(frozen=True)
class DefaultProfile:
    """Marker for "no profile": unconditional documents, lowest precedence."""

    @property
    def name(self) -> None:
        return None

    @property
    def is_default(self) -> bool:
        return False

    def __str__(self) -> str:
        return "(no profile)"


@dataclass(frozen=True)
class NamedProfile:
    """A named configuration variant.

    Equality and hashing use the name only: a profile queued as a default
    and the same profile activated explicitly are the same profile.
    """
    name: str
    is_default: bool = field(default=False, compare=False)

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise InvalidProfileError("Profile name must not be empty", profile=self.name)

    def __str__(self) -> str:
        return self.name


Profile = Union[DefaultProfile, NamedProfile]

NO_PROFILE = DefaultProfile()


def as_profile_set(names: Iterable[str]) -> List[NamedProfile]:
    """Ordered, de-duplicated list of named profiles."""
    profiles: List[NamedProfile] = []
    for name in names:
        profile = NamedProfile(name)
        if profile not in profiles:
            profiles.append(profile)
    return profiles


# ==================== Profile expressions ====================

_TOKEN_PATTERN = re.compile(r"\s*([()&|!]|[^()&|!\s]+)")


def validate_profile_name(name: str) -> None:
    """Reject names that cannot be activated."""
    if not name or not name.strip():
        raise InvalidProfileError("Invalid profile []: must contain text", profile=name)
    if name.startswith("!"):
        raise InvalidProfileError(
            f"Invalid profile [{name}]: must not begin with ! operator",
            profile=name,
        )


def matches(expression: str, is_active: Callable[[str], bool]) -> bool:
    """Evaluate a profile expression such as 'prod & (eu | us)' or '!dev'.

    A comma separated list is treated as OR of its elements.
    """
    return any(_ExpressionParser(part, is_active).parse() for part in _split_commas(expression))


def _split_commas(expression: str) -> List[str]:
    parts = [p.strip() for p in expression.split(",")]
    if not expression.strip() or any(not p for p in parts):
        raise InvalidProfileError(
            f"Malformed profile expression [{expression}]",
            profile=expression,
        )
    return parts


class _ExpressionParser:
    """Recursive descent parser over '!', '&', '|' and parentheses.

    Mixing '&' and '|' at the same level without parentheses is rejected.
    """

    def __init__(self, expression: str, is_active: Callable[[str], bool]):
        self.expression = expression
        self.is_active = is_active
        self.tokens = _TOKEN_PATTERN.findall(expression)
        self.position = 0

    def parse(self) -> bool:
        result = self._parse_group()
        if self.position != len(self.tokens):
            self._malformed()
        return result

    def _parse_group(self) -> bool:
        values = [self._parse_unary()]
        operator = None
        while self._peek() in ("&", "|"):
            token = self._next()
            if operator is not None and token != operator:
                self._malformed()
            operator = token
            values.append(self._parse_unary())
        if operator == "|":
            return any(values)
        return all(values)

    def _parse_unary(self) -> bool:
        token = self._next()
        if token == "!":
            return not self._parse_unary()
        if token == "(":
            value = self._parse_group()
            if self._next() != ")":
                self._malformed()
            return value
        if token is None or token in (")", "&", "|"):
            self._malformed()
        return self.is_active(token)

    def _peek(self):
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def _next(self):
        token = self._peek()
        self.position += 1
        return token

    def _malformed(self):
        raise InvalidProfileError(
            f"Malformed profile expression [{self.expression}]",
            profile=self.expression,
        )
