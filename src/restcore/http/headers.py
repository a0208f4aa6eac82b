# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Case-insensitive header access for requests and responses.

Field names are case-insensitive (RFC 9110) but services disagree on casing:
``Operation-Location`` and ``operation-location`` both show up in the wild.
``HttpResponse.headers`` are lowercased on the way in from httpx, while
request headers keep the caller's casing until they hit the transport.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

import httpx

HeaderSource = Mapping[str, str | None] | httpx.Headers | Iterable[tuple[str, str | None]] | None


def _header_pairs(headers: HeaderSource) -> Iterator[tuple[str, str | None]]:
    if not headers:
        return
    if isinstance(headers, (Mapping, httpx.Headers)):
        yield from headers.items()
    else:
        yield from headers


def normalize_headers(headers: HeaderSource) -> dict[str, str]:
    """Lowercase field names; ``None`` values become empty strings, blank names are dropped."""
    out: dict[str, str] = {}
    for name, value in _header_pairs(headers):
        key = name.strip().lower()
        if key:
            out[key] = "" if value is None else str(value)
    return out


def header_value(headers: HeaderSource, name: str, default: str | None = None) -> str | None:
    """Return the stripped value of ``name``, or ``default`` when absent or ``None``."""
    if isinstance(headers, Mapping) and name in headers:
        value = headers[name]
        return default if value is None else str(value).strip()

    wanted = name.lower()
    for key, value in _header_pairs(headers):
        if key.lower() == wanted:
            return default if value is None else str(value).strip()
    return default


def has_header(headers: HeaderSource, name: str) -> bool:
    return header_value(headers, name) is not None


__all__ = ["HeaderSource", "has_header", "header_value", "normalize_headers"]
