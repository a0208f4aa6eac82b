# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URI helpers: path templates, request URIs and reference resolution."""

from __future__ import annotations

import string
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, urljoin, urlsplit, urlunsplit

RAW_FORMAT_SPEC = "r"


class _PathFormatter(string.Formatter):
    """Escapes every substituted value unless the field uses the ``r`` format spec."""

    def format_field(self, value: Any, format_spec: str) -> str:
        if value is None:
            return ""
        if format_spec == RAW_FORMAT_SPEC:
            return str(value)
        return quote(super().format_field(value, format_spec), safe="")


_PATH_FORMATTER = _PathFormatter()


def format_path(template: str, *args: Any, **kwargs: Any) -> str:
    """
    Fill a path template, percent-escaping substituted values.

    Example:
      format_path("/farmers/{}", "a b") -> "/farmers/a%20b"
      format_path("/{path:r}", path="x/y") -> "/x/y"
    """
    return _PATH_FORMATTER.format(template, *args, **kwargs)


def build_request_uri(
    endpoint: str,
    path: str = "",
    *,
    api_version: str | None = None,
    query: Mapping[str, tuple[str, bool]] | None = None,
) -> str:
    """Append ``path`` to ``endpoint`` and add ``api-version`` plus extra query parameters."""
    parts = urlsplit(endpoint)
    base_path = parts.path
    if path:
        base_path = base_path.rstrip("/") + "/" + path.lstrip("/")

    params: list[str] = [parts.query] if parts.query else []
    if api_version:
        params.append(f"api-version={quote(api_version, safe='')}")
    for name, (value, escape) in (query or {}).items():
        params.append(f"{name}={quote(value, safe='') if escape else value}")

    return urlunsplit((parts.scheme, parts.netloc, base_path, "&".join(params), ""))


def resolve_reference(base_url: str | None, reference: str) -> str:
    """Resolve a possibly-relative header reference against the response URL."""
    if not base_url:
        return reference
    return urljoin(base_url, reference)


__all__ = ["build_request_uri", "format_path", "resolve_reference"]
