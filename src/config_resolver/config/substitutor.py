"""Placeholder substitution in configuration values."""
import logging
from typing import Any, Callable, Optional, Set

from src.config_resolver.exceptions.config import PlaceholderResolutionError


logger = logging.getLogger(__name__)

PLACEHOLDER_PREFIX = "${"
PLACEHOLDER_SUFFIX = "}"
VALUE_SEPARATOR = ":"
ESCAPE_CHAR = "\\"


class PlaceholderResolver:
    """Substitutes ${...} placeholders using a property lookup.

    Supports:
    - Simple substitution: ${key} -> value of key
    - Default value: ${key:default} -> default if key is missing
    - Nesting: ${outer:${inner}} and values that themselves contain placeholders
    - Escaping: \\${key} -> literal ${key}

    Args:
        lookup: Callable returning the raw value for a key, or None when missing
        ignore_unresolvable: Keep unknown placeholders verbatim instead of raising
    """

    def __init__(
        self,
        lookup: Callable[[str], Any],
        ignore_unresolvable: bool = True,
    ):
        self.lookup = lookup
        self.ignore_unresolvable = ignore_unresolvable

    def substitute(self, value: Any) -> Any:
        """Recursively substitute placeholders in a value.

        Args:
            value: Value (dict, list, or scalar)

        Returns:
            Value with all resolvable placeholders replaced
        """
        if isinstance(value, str):
            return self.resolve_placeholders(value)
        elif isinstance(value, dict):
            return {k: self.substitute(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [self.substitute(item) for item in value]
        else:
            return value  # Numbers, booleans, None unchanged

    def resolve_placeholders(self, text: str) -> str:
        """Resolve all placeholders in a string."""
        if PLACEHOLDER_PREFIX not in text:
            return text
        return self._parse(text, set())

    def _parse(self, text: str, visiting: Set[str]) -> str:
        result = []
        index = 0
        while index < len(text):
            start = text.find(PLACEHOLDER_PREFIX, index)
            if start == -1:
                result.append(text[index:])
                break

            # Escaped placeholder: drop the escape and keep the text literal
            if start > 0 and text[start - 1] == ESCAPE_CHAR:
                result.append(text[index:start - 1])
                end = self._find_placeholder_end(text, start)
                literal_end = len(text) if end == -1 else end + len(PLACEHOLDER_SUFFIX)
                result.append(text[start:literal_end])
                index = literal_end
                continue

            result.append(text[index:start])
            end = self._find_placeholder_end(text, start)
            if end == -1:
                # Unterminated placeholder, keep as-is
                result.append(text[start:])
                break

            expression = text[start + len(PLACEHOLDER_PREFIX):end]
            result.append(self._resolve_expression(expression, text[start:end + 1], visiting))
            index = end + len(PLACEHOLDER_SUFFIX)

        return "".join(result)

    def _find_placeholder_end(self, text: str, start: int) -> int:
        depth = 0
        index = start + len(PLACEHOLDER_PREFIX)
        while index < len(text):
            if text.startswith(PLACEHOLDER_PREFIX, index):
                depth += 1
                index += len(PLACEHOLDER_PREFIX)
            elif text.startswith(PLACEHOLDER_SUFFIX, index):
                if depth == 0:
                    return index
                depth -= 1
                index += len(PLACEHOLDER_SUFFIX)
            else:
                index += 1
        return -1

    def _resolve_expression(self, expression: str, original: str, visiting: Set[str]) -> str:
        # The key itself may contain placeholders
        default: Optional[str] = None
        separator = self._find_default_separator(expression)
        if separator == -1:
            key = self._parse(expression, visiting)
        else:
            key = self._parse(expression[:separator], visiting)
            default = expression[separator + len(VALUE_SEPARATOR):]

        if key in visiting:
            raise PlaceholderResolutionError(
                message=f"Circular placeholder reference '{key}' in property definitions",
                placeholder=key,
                value=original,
            )

        raw = self.lookup(key)
        if raw is not None:
            visiting.add(key)
            try:
                resolved = self._parse(str(raw), visiting)
            finally:
                visiting.discard(key)
            logger.debug(f"Placeholder resolved: {key}", extra={"placeholder": key})
            return resolved

        if default is not None:
            return self._parse(default, visiting)

        if self.ignore_unresolvable:
            return original

        logger.error(f"Could not resolve placeholder '{key}'", extra={"placeholder": key})
        raise PlaceholderResolutionError(
            message=f"Could not resolve placeholder '{key}' in value \"{original}\"",
            placeholder=key,
            value=original,
        )

    def _find_default_separator(self, expression: str) -> int:
        """Index of the top-level ':' separating key from default, or -1."""
        depth = 0
        index = 0
        while index < len(expression):
            if expression.startswith(PLACEHOLDER_PREFIX, index):
                depth += 1
                index += len(PLACEHOLDER_PREFIX)
                continue
            char = expression[index]
            if char == PLACEHOLDER_SUFFIX and depth > 0:
                depth -= 1
            elif char == VALUE_SEPARATOR and depth == 0:
                return index
            index += 1
        return -1
