# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Lazy item sequences over next-link paginated resources.

A page body is a JSON object holding an item array and a next link::

    {"value": [...], "nextLink": "https://..."}

Nothing is requested until iteration starts, one page is held at a time,
and every fresh iteration starts over with the initial fetch.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .http.client import GetSender
from .http.models import HttpResponse, RequestOptions
from .json_reader import RawJsonSpan, read_items_and_next_link

logger = logging.getLogger(__name__)

T = TypeVar("T")

Projector = Callable[[RawJsonSpan], T]


@dataclass
class PageableOptions:
    """Options to control pagination behavior."""

    item_property: str = "value"
    next_link_property: str = "nextLink"
    request_options: RequestOptions | None = None


@dataclass(frozen=True)
class Page(Generic[T]):
    values: list[T]
    continuation_token: str | None
    raw_response: HttpResponse = field(repr=False)

    @property
    def is_last(self) -> bool:
        return self.continuation_token is None


@dataclass(frozen=True)
class _RawPage:
    items: list[RawJsonSpan]
    next_link: str | None
    response: HttpResponse


def _read_page(response: HttpResponse, options: PageableOptions) -> _RawPage:
    items, next_link = read_items_and_next_link(
        response.content,
        options.item_property,
        options.next_link_property,
    )
    # a missing item property is an empty page, not the end of the sequence
    return _RawPage(items or [], next_link, response)


class Pageable(Generic[T]):
    """Iterable of items; use :meth:`by_page` to walk whole pages."""

    def __init__(
        self,
        sender: GetSender,
        initial_fetch: Callable[[], HttpResponse],
        projector: Projector[T],
        options: PageableOptions | None = None,
    ):
        self._sender = sender
        self._initial_fetch = initial_fetch
        self._projector = projector
        self._options = options or PageableOptions()

    def _raw_pages(self, continuation_token: str | None = None) -> Iterator[_RawPage]:
        if continuation_token is None:
            response = self._initial_fetch()
        else:
            response = self._sender.send_get(continuation_token, self._options.request_options)
        while True:
            page = _read_page(response, self._options)
            yield page
            if page.next_link is None:
                return
            logger.debug("Fetching next page %s", page.next_link)
            response = self._sender.send_get(page.next_link, self._options.request_options)

    def by_page(self, continuation_token: str | None = None) -> Iterator[Page[T]]:
        for raw in self._raw_pages(continuation_token):
            yield Page([self._projector(item) for item in raw.items], raw.next_link, raw.response)

    def __iter__(self) -> Iterator[T]:
        for raw in self._raw_pages():
            for item in raw.items:
                yield self._projector(item)


class AsyncPageable(Generic[T]):
    """Async-iterable counterpart of :class:`Pageable`."""

    def __init__(
        self,
        sender: GetSender,
        initial_fetch: Callable[[], Awaitable[HttpResponse]],
        projector: Projector[T],
        options: PageableOptions | None = None,
    ):
        self._sender = sender
        self._initial_fetch = initial_fetch
        self._projector = projector
        self._options = options or PageableOptions()

    async def _raw_pages(self, continuation_token: str | None = None) -> AsyncIterator[_RawPage]:
        if continuation_token is None:
            response = await self._initial_fetch()
        else:
            response = await self._sender.send_get_async(continuation_token, self._options.request_options)
        while True:
            page = _read_page(response, self._options)
            yield page
            if page.next_link is None:
                return
            logger.debug("Fetching next page %s", page.next_link)
            response = await self._sender.send_get_async(page.next_link, self._options.request_options)

    async def by_page(self, continuation_token: str | None = None) -> AsyncIterator[Page[T]]:
        async for raw in self._raw_pages(continuation_token):
            yield Page([self._projector(item) for item in raw.items], raw.next_link, raw.response)

    async def __aiter__(self) -> AsyncIterator[T]:
        async for raw in self._raw_pages():
            for item in raw.items:
                yield self._projector(item)


def create_pageable(
    sender: GetSender,
    initial_fetch: Callable[[], HttpResponse],
    projector: Projector[T],
    options: PageableOptions | None = None,
) -> Pageable[T]:
    return Pageable(sender, initial_fetch, projector, options)


def create_async_pageable(
    sender: GetSender,
    initial_fetch: Callable[[], Awaitable[HttpResponse]],
    projector: Projector[T],
    options: PageableOptions | None = None,
) -> AsyncPageable[T]:
    return AsyncPageable(sender, initial_fetch, projector, options)


__all__ = [
    "AsyncPageable",
    "Page",
    "Pageable",
    "PageableOptions",
    "Projector",
    "create_async_pageable",
    "create_pageable",
]
