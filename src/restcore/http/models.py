# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used across restcore."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any

from .headers import header_value

Headers = dict[str, str]


@dataclass
class HttpRequest:
    """Normalized request representation consumed by HttpClient implementations."""

    url: str
    method: str = "GET"
    headers: Headers | None = None
    body: bytes | str | None = None
    timeout: float | None = None
    allow_redirects: bool = True


@dataclass
class HttpResponse:
    """Normalized HTTP response: status, headers and the raw body bytes."""

    status_code: int
    headers: Headers = field(default_factory=dict)
    content: bytes = b""
    url: str | None = None
    reason_phrase: str = ""
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return a header value using case-insensitive name matching."""
        return header_value(self.headers, name, default)

    def json(self) -> Any:
        return json.loads(self.content)


def _is_2xx(response: HttpResponse) -> bool:
    return response.status_code // 100 == 2


@dataclass
class RequestOptions:
    """
    Per-call options applied while a request is built and after it is sent.

    ``query`` maps a parameter name to ``(value, escape)``; unescaped values are
    appended verbatim. ``on_request`` runs with the fully built request right
    before it goes to the transport.
    """

    headers: Headers = field(default_factory=dict)
    query: dict[str, tuple[str, bool]] = field(default_factory=dict)
    accept: str | None = None
    content_type: str | None = None
    ignore_failure_status_codes: bool = False
    is_successful_response: Callable[[HttpResponse], bool] | None = None
    on_request: Callable[[HttpRequest], None] | None = None
    timeout: float | None = None

    def add_header(self, name: str, value: str) -> RequestOptions:
        self.headers[name] = value
        return self

    def add_query_parameter(self, name: str, value: str, escape: bool = True) -> RequestOptions:
        self.query[name] = (value, escape)
        return self

    def copy(self) -> RequestOptions:
        return replace(self, headers=dict(self.headers), query=dict(self.query))

    def is_success(self, response: HttpResponse) -> bool:
        predicate = self.is_successful_response or _is_2xx
        return predicate(response)


__all__ = ["Headers", "HttpRequest", "HttpResponse", "RequestOptions"]
