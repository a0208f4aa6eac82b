# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client abstractions and factories."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from ..config import HttpSettings, load_http_settings
from .models import HttpRequest, HttpResponse, RequestOptions

if TYPE_CHECKING:
    import httpx


class HttpClient(Protocol):
    """Minimal protocol for issuing blocking HTTP requests."""

    def request(self, request: HttpRequest) -> HttpResponse: ...

    def close(self) -> None:  # pragma: no cover - optional for adapters
        ...


class AsyncHttpClient(Protocol):
    """Minimal protocol for issuing HTTP requests from a coroutine."""

    async def request(self, request: HttpRequest) -> HttpResponse: ...

    async def aclose(self) -> None:  # pragma: no cover - optional for adapters
        ...


def create_default_http_client(settings: HttpSettings | None = None, auth: httpx.Auth | None = None) -> HttpClient:
    """Factory for the default httpx-backed client."""
    from .httpx_client import HttpxClient

    return HttpxClient(settings or load_http_settings(), auth=auth)


def create_default_async_http_client(
    settings: HttpSettings | None = None, auth: httpx.Auth | None = None
) -> AsyncHttpClient:
    """Factory for the default httpx-backed async client."""
    from .httpx_client import AsyncHttpxClient

    return AsyncHttpxClient(settings or load_http_settings(), auth=auth)


class GetSender(Protocol):
    """The GET primitive shared by operation polling and next-page fetches.

    ``uri`` is absolute and sent as-is. Implementations raise
    :class:`~restcore.errors.RequestFailedError` for failure status codes.
    """

    def send_get(self, uri: str, options: RequestOptions | None = None) -> HttpResponse: ...

    async def send_get_async(self, uri: str, options: RequestOptions | None = None) -> HttpResponse: ...
