# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx auth flows for key and bearer-token credentials."""

from __future__ import annotations

from collections.abc import Callable, Generator

import httpx


class KeyCredentialAuth(httpx.Auth):
    """Send an API key in a named header on every request."""

    def __init__(self, key: str, header_name: str = "api-key"):
        if not key:
            raise ValueError("key must be a non-empty string")
        self.key = key
        self.header_name = header_name

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers[self.header_name] = self.key
        yield request


class BearerTokenAuth(httpx.Auth):
    """
    Send ``Authorization: Bearer <token>``.

    ``token`` may be a string or a zero-argument callable returning one; the
    callable is invoked per request so it can hand out refreshed tokens.
    """

    def __init__(self, token: str | Callable[[], str]):
        self._token = token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        token = self._token() if callable(self._token) else self._token
        request.headers["Authorization"] = f"Bearer {token}"
        yield request


__all__ = ["BearerTokenAuth", "KeyCredentialAuth"]
