# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Streaming field extraction from JSON object bodies.

Only the top level of a single JSON object is walked. Values of properties we
are not interested in are skipped structurally (validated, never decoded), and
array elements are captured as byte spans over the original buffer so a
caller can hand each one to a real deserializer later.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

from .errors import JsonReadError, PropertyNotFoundError

_WHITESPACE = b" \t\n\r"
_STRING_RE = re.compile(rb'"(?:[^"\\\x00-\x1f]|\\(?:["\\/bfnrt]|u[0-9a-fA-F]{4}))*"')
_NUMBER_RE = re.compile(rb"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_LITERALS = (b"true", b"false", b"null")


@dataclass(frozen=True)
class RawJsonSpan:
    """A view of one JSON value inside a parent document; strings keep their quotes."""

    buffer: bytes
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def __len__(self) -> int:
        return self.length

    def __bytes__(self) -> bytes:
        return self.buffer[self.start : self.end]

    def to_memoryview(self) -> memoryview:
        return memoryview(self.buffer)[self.start : self.end]

    def to_bytes(self) -> bytes:
        return bytes(self)

    def to_object(self) -> Any:
        return json.loads(self.to_bytes())


class _Scanner:
    def __init__(self, body: bytes | bytearray | memoryview):
        self.buf = bytes(body)
        self.pos = 0

    def error(self, message: str = "unexpected JSON token") -> JsonReadError:
        return JsonReadError(message, self.pos)

    def skip_ws(self) -> None:
        buf, pos = self.buf, self.pos
        while pos < len(buf) and buf[pos] in _WHITESPACE:
            pos += 1
        self.pos = pos

    def peek(self) -> int | None:
        self.skip_ws()
        return self.buf[self.pos] if self.pos < len(self.buf) else None

    def expect(self, char: bytes) -> None:
        if self.peek() != char[0]:
            raise self.error()
        self.pos += 1

    def read_string(self) -> tuple[int, int]:
        """Consume a string token and return its span including the quotes."""
        if self.peek() != ord('"'):
            raise self.error()
        match = _STRING_RE.match(self.buf, self.pos)
        if match is None:
            raise self.error("invalid JSON string")
        start, self.pos = match.span()
        return start, self.pos

    def skip_value(self) -> tuple[int, int]:
        """Consume any JSON value and return its span.

        Containers are walked with an explicit stack of expected closers, so
        nesting depth is bounded by memory rather than the interpreter stack.
        """
        self.skip_ws()
        start = self.pos
        closers: list[int] = []
        while True:
            char = self.peek()
            if char == ord("{") or char == ord("["):
                closer = ord("}") if char == ord("{") else ord("]")
                self.pos += 1
                if self.peek() == closer:
                    self.pos += 1
                else:
                    closers.append(closer)
                    if closer == ord("}"):
                        self.read_string()
                        self.expect(b":")
                    continue
            else:
                self._skip_scalar()

            # unwind every container the value just closed
            while closers:
                char = self.peek()
                if char == ord(","):
                    self.pos += 1
                    if closers[-1] == ord("}"):
                        self.read_string()
                        self.expect(b":")
                    break
                if char != closers[-1]:
                    raise self.error()
                self.pos += 1
                closers.pop()
            if not closers:
                return start, self.pos

    def _skip_scalar(self) -> None:
        char = self.peek()
        if char is None:
            raise self.error("invalid JSON")
        if char == ord('"'):
            self.read_string()
            return
        pos = self.pos
        for literal in _LITERALS:
            if self.buf.startswith(literal, pos):
                self.pos = pos + len(literal)
                return
        match = _NUMBER_RE.match(self.buf, pos)
        if match is None:
            raise self.error()
        self.pos = match.end()

    def property_names(self):
        """Yield each top-level property name span, leaving the cursor on its value."""
        self.expect(b"{")
        if self.peek() == ord("}"):
            self.pos += 1
            return
        while True:
            name = self.read_string()
            self.expect(b":")
            # the consumer advances past the value before resuming
            yield name
            char = self.peek()
            if char == ord(","):
                self.pos += 1
                continue
            if char == ord("}"):
                self.pos += 1
                return
            raise self.error()

    def ensure_end(self) -> None:
        if self.peek() is not None:
            raise self.error("trailing data after JSON object")


def _decode_string(buf: bytes, span: tuple[int, int]) -> str:
    try:
        return json.loads(buf[span[0] : span[1]])
    except ValueError as exc:
        raise JsonReadError("invalid JSON string", span[0]) from exc


def _name_matches(buf: bytes, span: tuple[int, int], name: str, encoded: bytes) -> bool:
    raw = buf[span[0] + 1 : span[1] - 1]
    if b"\\" not in raw:
        return raw == encoded
    # escaped names may decode to lone surrogates, so compare as text
    return _decode_string(buf, span) == name


def read_status(body: bytes | bytearray | memoryview, property_name: str = "status") -> str:
    """
    Return the string value of a top-level property (``status`` by default).

    Raises :class:`PropertyNotFoundError` when the object has no such property
    and :class:`JsonReadError` for malformed JSON or a non-string value.
    """
    scanner = _Scanner(body)
    wanted = property_name.encode("utf-8", "surrogatepass")
    for name in scanner.property_names():
        if _name_matches(scanner.buf, name, property_name, wanted):
            return _decode_string(scanner.buf, scanner.read_string())
        scanner.skip_value()
    raise PropertyNotFoundError(property_name)


def _read_array_items(scanner: _Scanner) -> list[RawJsonSpan]:
    scanner.expect(b"[")
    items: list[RawJsonSpan] = []
    if scanner.peek() == ord("]"):
        scanner.pos += 1
        return items
    while True:
        start, end = scanner.skip_value()
        items.append(RawJsonSpan(scanner.buf, start, end - start))
        char = scanner.peek()
        if char == ord(","):
            scanner.pos += 1
            continue
        if char == ord("]"):
            scanner.pos += 1
            return items
        raise scanner.error("invalid JSON")


def read_items_and_next_link(
    body: bytes | bytearray | memoryview,
    item_property: str = "value",
    next_link_property: str = "nextLink",
) -> tuple[list[RawJsonSpan] | None, str | None]:
    """
    Extract the item array and the next link of one page body.

    ``items`` is ``None`` when the item property is absent, ``next_link`` is
    ``None`` when the link is absent or JSON ``null``. As in :func:`read_status`
    the first occurrence of a duplicated property wins; later ones are skipped.
    """
    scanner = _Scanner(body)
    wanted_items = item_property.encode("utf-8", "surrogatepass")
    wanted_link = next_link_property.encode("utf-8", "surrogatepass")
    items: list[RawJsonSpan] | None = None
    next_link: str | None = None
    seen_items = seen_link = False

    for name in scanner.property_names():
        if not seen_link and _name_matches(scanner.buf, name, next_link_property, wanted_link):
            seen_link = True
            start, end = scanner.skip_value()
            value = scanner.buf[start:end]
            if value == b"null":
                next_link = None
            elif value[:1] == b'"':
                next_link = _decode_string(scanner.buf, (start, end))
            else:
                raise JsonReadError("next link must be a string or null", start)
        elif not seen_items and _name_matches(scanner.buf, name, item_property, wanted_items):
            seen_items = True
            items = _read_array_items(scanner)
        else:
            scanner.skip_value()

    scanner.ensure_end()
    return items, next_link


__all__ = ["RawJsonSpan", "read_items_and_next_link", "read_status"]
