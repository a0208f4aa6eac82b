# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementations.

Network errors raised by httpx propagate to the caller unchanged; any status
code, including 4xx/5xx, comes back as an :class:`HttpResponse`.
"""

from __future__ import annotations

import httpx

from ..config import HttpSettings, load_http_settings
from .client import AsyncHttpClient, HttpClient
from .headers import normalize_headers
from .models import HttpRequest, HttpResponse


def _prepare_headers(request: HttpRequest, settings: HttpSettings) -> dict[str, str]:
    headers = dict(request.headers or {})
    headers.setdefault("User-Agent", settings.user_agent)
    return headers


def _to_response(resp: httpx.Response) -> HttpResponse:
    return HttpResponse(
        status_code=resp.status_code,
        headers=normalize_headers(resp.headers),
        content=resp.content,
        url=str(resp.url),
        reason_phrase=resp.reason_phrase,
        meta={"http_version": resp.http_version},
    )


class HttpxClient(HttpClient):
    """Synchronous httpx client wrapper."""

    def __init__(
        self,
        settings: HttpSettings | None = None,
        client: httpx.Client | None = None,
        *,
        auth: httpx.Auth | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.settings = settings or load_http_settings()
        self._client = client or httpx.Client(
            auth=auth,
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            transport=transport
            or httpx.HTTPTransport(verify=self.settings.verify_ssl, retries=self.settings.max_retries),
        )

    def request(self, request: HttpRequest) -> HttpResponse:
        timeout = request.timeout if request.timeout is not None else self.settings.timeout
        resp = self._client.request(
            request.method,
            request.url,
            headers=_prepare_headers(request, self.settings),
            content=request.body,
            timeout=timeout,
            follow_redirects=request.allow_redirects,
        )
        return _to_response(resp)

    def close(self) -> None:
        self._client.close()


class AsyncHttpxClient(AsyncHttpClient):
    """Asynchronous httpx client wrapper."""

    def __init__(
        self,
        settings: HttpSettings | None = None,
        client: httpx.AsyncClient | None = None,
        *,
        auth: httpx.Auth | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or load_http_settings()
        self._client = client or httpx.AsyncClient(
            auth=auth,
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            transport=transport
            or httpx.AsyncHTTPTransport(verify=self.settings.verify_ssl, retries=self.settings.max_retries),
        )

    async def request(self, request: HttpRequest) -> HttpResponse:
        timeout = request.timeout if request.timeout is not None else self.settings.timeout
        resp = await self._client.request(
            request.method,
            request.url,
            headers=_prepare_headers(request, self.settings),
            content=request.body,
            timeout=timeout,
            follow_redirects=request.allow_redirects,
        )
        return _to_response(resp)

    async def aclose(self) -> None:
        await self._client.aclose()
