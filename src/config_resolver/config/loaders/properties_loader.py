"""Loader for '.properties' files."""
import logging
from typing import Dict, Iterator, List, Tuple

from src.config_resolver.config.property_source import (
    Origin,
    OriginTrackedMapPropertySource,
    OriginTrackedValue,
    PropertySource,
)
from src.config_resolver.config.resources import Resource


logger = logging.getLogger(__name__)

DOCUMENT_SEPARATOR = "#---"

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


class PropertiesDocumentLoader:
    """Loads key/value pairs from '.properties' files.

    Syntax:
    - key=value, key: value or key value
    - lines starting with '#' or '!' are comments
    - a trailing backslash continues the value on the next line
    - a line consisting of '#---' starts a new document
    """

    file_extensions = ("properties",)

    def load(self, name: str, resource: Resource) -> List[PropertySource]:
        text = resource.read_text(encoding="utf-8")
        documents = self._parse(text, resource.location)
        sources: List[PropertySource] = []
        for index, document in enumerate(documents):
            if not document:
                continue
            source_name = name if index == 0 else f"{name} (document #{index})"
            sources.append(OriginTrackedMapPropertySource(source_name, document, immutable=True))
        logger.debug(
            f"Properties loaded: {resource.location}",
            extra={"location": resource.location, "documents": len(sources)},
        )
        return sources

    def _parse(self, text: str, location: str) -> List[Dict[str, OriginTrackedValue]]:
        documents: List[Dict[str, OriginTrackedValue]] = [{}]
        for line_number, column, raw_line in self._logical_lines(text):
            if raw_line.strip() == DOCUMENT_SEPARATOR:
                documents.append({})
                continue
            stripped = raw_line.lstrip()
            if not stripped or stripped[0] in "#!":
                continue
            key, value = self._split_key_value(stripped)
            if key:
                documents[-1][key] = OriginTrackedValue(value, Origin(location, line_number, column))
        return documents

    def _logical_lines(self, text: str) -> Iterator[Tuple[int, int, str]]:
        """Yield (line, column, text) with continuation lines joined."""
        lines = text.splitlines()
        index = 0
        while index < len(lines):
            start = index
            line = lines[index]
            stripped = line.lstrip()
            column = len(line) - len(stripped) + 1
            is_comment = stripped[:1] in ("#", "!")
            while not is_comment and self._ends_with_continuation(line) and index + 1 < len(lines):
                index += 1
                line = line[:-1] + lines[index].lstrip()
            if not is_comment and self._ends_with_continuation(line):
                line = line[:-1]
            yield start + 1, column, line
            index += 1

    def _ends_with_continuation(self, line: str) -> bool:
        backslashes = len(line) - len(line.rstrip("\\"))
        return backslashes % 2 == 1

    def _split_key_value(self, line: str) -> Tuple[str, str]:
        key_chars = []
        index = 0
        while index < len(line):
            char = line[index]
            if char == "\\" and index + 1 < len(line):
                unescaped, index = self._read_escape(line, index)
                key_chars.append(unescaped)
                continue
            if char in "=: \t":
                break
            key_chars.append(char)
            index += 1

        rest = line[index:].lstrip(" \t")
        if rest[:1] in ("=", ":"):
            rest = rest[1:].lstrip(" \t")
        return "".join(key_chars), self._unescape_value(rest)

    def _unescape_value(self, value: str) -> str:
        result = []
        index = 0
        while index < len(value):
            char = value[index]
            if char == "\\" and index + 1 < len(value):
                unescaped, index = self._read_escape(value, index)
                result.append(unescaped)
                continue
            result.append(char)
            index += 1
        return "".join(result).rstrip()

    def _read_escape(self, text: str, index: int) -> Tuple[str, int]:
        """Decode the escape starting at the backslash at index.

        Returns:
            The decoded character and the index just past the escape

        Raises:
            ValueError: If a \\u escape is not followed by four hex digits
        """
        char = text[index + 1]
        if char != "u":
            return _ESCAPES.get(char, char), index + 2
        digits = text[index + 2:index + 6]
        if len(digits) != 4 or any(d not in _HEX_DIGITS for d in digits):
            raise ValueError(f"Malformed \\uxxxx encoding: {text[index:index + 6]!r}")
        return chr(int(digits, 16)), index + 6
