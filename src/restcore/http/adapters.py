# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Programmable in-memory clients implementing the HttpClient protocols."""

from __future__ import annotations

from collections import deque

from .client import AsyncHttpClient, HttpClient
from .models import HttpRequest, HttpResponse


class StubHttpClient(HttpClient):
    """
    Deterministic, programmable HttpClient for tests.

    Responses registered for a URL are served in order; the last one repeats
    once the queue is drained. Unregistered URLs answer 404.
    """

    def __init__(self, responses: dict[str, HttpResponse | list[HttpResponse]] | None = None):
        self._responses: dict[str, deque[HttpResponse]] = {}
        self.requests: list[HttpRequest] = []
        self.closed = False
        for url, response in (responses or {}).items():
            if isinstance(response, list):
                self.add(url, *response)
            else:
                self.add(url, response)

    def add(self, url: str, *responses: HttpResponse) -> None:
        self._responses.setdefault(url, deque()).extend(responses)

    def requested_urls(self) -> list[str]:
        return [r.url for r in self.requests]

    def _next(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        queue = self._responses.get(request.url)
        if not queue:
            return HttpResponse(status_code=404, url=request.url, reason_phrase="Not Found")
        response = queue.popleft() if len(queue) > 1 else queue[0]
        if response.url is None:
            response.url = request.url
        return response

    def request(self, request: HttpRequest) -> HttpResponse:
        return self._next(request)

    def close(self) -> None:
        self.closed = True


class AsyncStubHttpClient(StubHttpClient, AsyncHttpClient):
    """Async flavour of :class:`StubHttpClient` sharing the same response queues."""

    async def request(self, request: HttpRequest) -> HttpResponse:  # type: ignore[override]
        return self._next(request)

    async def aclose(self) -> None:
        self.closed = True
