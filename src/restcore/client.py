# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""RestClient: verb wrappers, typed value helpers and LRO/paging factories."""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import suppress
from dataclasses import replace
from typing import Any

import httpx

from .config import HttpSettings, load_http_settings
from .errors import RequestFailedError
from .http.client import AsyncHttpClient, HttpClient, create_default_async_http_client, create_default_http_client
from .http.headers import has_header
from .http.models import HttpRequest, HttpResponse, RequestOptions
from .http.url import build_request_uri
from .json_reader import RawJsonSpan
from .operation import Operation, OperationOptions, create_operation
from .pageable import AsyncPageable, Pageable, PageableOptions, create_async_pageable, create_pageable
from .serialization import DEFAULT_SERIALIZER, Model, ValueSerializer

logger = logging.getLogger(__name__)

Body = bytes | str | None


def _exists_predicate(response: HttpResponse) -> bool:
    return response.status_code // 100 == 2 or response.status_code == 404


class RestClient:
    """
    Thin client over an HTTP transport for a single service endpoint.

    Every request gets ``api-version`` (when configured) plus the per-call
    query parameters, a default ``Accept`` header and, for requests with a
    body, a default ``Content-Type``. Responses that the request options do
    not consider successful raise :class:`RequestFailedError`.
    """

    def __init__(
        self,
        endpoint: str,
        api_version: str | None = None,
        *,
        auth: httpx.Auth | None = None,
        http_client: HttpClient | None = None,
        async_http_client: AsyncHttpClient | None = None,
        settings: HttpSettings | None = None,
        default_media_type: str | None = None,
        serializer: ValueSerializer | None = None,
    ):
        self.endpoint = endpoint
        self.api_version = api_version
        self.settings = settings or load_http_settings()
        self.default_media_type = default_media_type or self.settings.default_media_type
        self.serializer = serializer or DEFAULT_SERIALIZER
        self._auth = auth
        self.http_client = http_client or create_default_http_client(self.settings, auth)
        self._async_http_client = async_http_client

    @property
    def async_http_client(self) -> AsyncHttpClient:
        if self._async_http_client is None:
            self._async_http_client = create_default_async_http_client(self.settings, self._auth)
        return self._async_http_client

    def build_uri(self, path: str, options: RequestOptions | None = None) -> str:
        return build_request_uri(
            self.endpoint,
            path,
            api_version=self.api_version,
            query=options.query if options else None,
        )

    def _build_request(self, method: str, uri: str, body: Body, options: RequestOptions) -> HttpRequest:
        headers = dict(options.headers)
        if not has_header(headers, "Accept"):
            headers["Accept"] = options.accept or self.default_media_type
        if body is not None and not has_header(headers, "Content-Type"):
            headers["Content-Type"] = options.content_type or self.default_media_type

        request = HttpRequest(url=uri, method=method, headers=headers, body=body, timeout=options.timeout)
        if options.on_request is not None:
            options.on_request(request)
        logger.debug("%s %s", request.method, request.url)
        return request

    def _classify(self, response: HttpResponse, options: RequestOptions) -> HttpResponse:
        if not options.is_success(response) and not options.ignore_failure_status_codes:
            raise RequestFailedError(response)
        return response

    def send(self, method: str, uri: str, body: Body = None, options: RequestOptions | None = None) -> HttpResponse:
        """Send a request to an absolute URI."""
        options = options or RequestOptions()
        request = self._build_request(method, uri, body, options)
        return self._classify(self.http_client.request(request), options)

    async def send_async(
        self, method: str, uri: str, body: Body = None, options: RequestOptions | None = None
    ) -> HttpResponse:
        options = options or RequestOptions()
        request = self._build_request(method, uri, body, options)
        return self._classify(await self.async_http_client.request(request), options)

    def send_request(
        self, method: str, path: str, body: Body = None, options: RequestOptions | None = None
    ) -> HttpResponse:
        """Send a request to ``path`` relative to the endpoint."""
        return self.send(method, self.build_uri(path, options), body, options)

    async def send_request_async(
        self, method: str, path: str, body: Body = None, options: RequestOptions | None = None
    ) -> HttpResponse:
        return await self.send_async(method, self.build_uri(path, options), body, options)

    # GET primitive used by operations and pageables
    def send_get(self, uri: str, options: RequestOptions | None = None) -> HttpResponse:
        return self.send("GET", uri, None, options)

    async def send_get_async(self, uri: str, options: RequestOptions | None = None) -> HttpResponse:
        return await self.send_async("GET", uri, None, options)

    def get(self, path: str, options: RequestOptions | None = None) -> HttpResponse:
        return self.send_request("GET", path, None, options)

    async def get_async(self, path: str, options: RequestOptions | None = None) -> HttpResponse:
        return await self.send_request_async("GET", path, None, options)

    def head(self, path: str, options: RequestOptions | None = None) -> HttpResponse:
        return self.send_request("HEAD", path, None, options)

    async def head_async(self, path: str, options: RequestOptions | None = None) -> HttpResponse:
        return await self.send_request_async("HEAD", path, None, options)

    def delete(self, path: str, body: Body = None, options: RequestOptions | None = None) -> HttpResponse:
        return self.send_request("DELETE", path, body, options)

    async def delete_async(self, path: str, body: Body = None, options: RequestOptions | None = None) -> HttpResponse:
        return await self.send_request_async("DELETE", path, body, options)

    def post(self, path: str, body: Body, options: RequestOptions | None = None) -> HttpResponse:
        return self.send_request("POST", path, body, options)

    async def post_async(self, path: str, body: Body, options: RequestOptions | None = None) -> HttpResponse:
        return await self.send_request_async("POST", path, body, options)

    def put(self, path: str, body: Body, options: RequestOptions | None = None) -> HttpResponse:
        return self.send_request("PUT", path, body, options)

    async def put_async(self, path: str, body: Body, options: RequestOptions | None = None) -> HttpResponse:
        return await self.send_request_async("PUT", path, body, options)

    def patch(self, path: str, body: Body, options: RequestOptions | None = None) -> HttpResponse:
        return self.send_request("PATCH", path, body, options)

    async def patch_async(self, path: str, body: Body, options: RequestOptions | None = None) -> HttpResponse:
        return await self.send_request_async("PATCH", path, body, options)

    @staticmethod
    def _exists_options(options: RequestOptions | None) -> RequestOptions:
        options = options.copy() if options else RequestOptions()
        options.is_successful_response = _exists_predicate
        return options

    def exists(self, path: str, options: RequestOptions | None = None) -> bool:
        """HEAD ``path``; a 404 means False, other failures still raise."""
        return self.head(path, self._exists_options(options)).status_code != 404

    async def exists_async(self, path: str, options: RequestOptions | None = None) -> bool:
        response = await self.head_async(path, self._exists_options(options))
        return response.status_code != 404

    def get_value(self, path: str, model: Model | None = None, options: RequestOptions | None = None) -> Any:
        return self.serializer.deserialize(self.get(path, options).content, model)

    async def get_value_async(self, path: str, model: Model | None = None, options: RequestOptions | None = None) -> Any:
        response = await self.get_async(path, options)
        return self.serializer.deserialize(response.content, model)

    def _item_projector(self, model: Model | None) -> Callable[[RawJsonSpan], Any]:
        def project(item: RawJsonSpan) -> Any:
            return self.serializer.deserialize(item, model)

        return project

    def get_values(self, path: str, model: Model | None = None, options: PageableOptions | None = None) -> Pageable[Any]:
        """Iterate the items of a paginated collection, decoding each one on demand."""
        options = options or PageableOptions()
        return create_pageable(
            self,
            lambda: self.get(path, options.request_options),
            self._item_projector(model),
            options,
        )

    def get_values_async(
        self, path: str, model: Model | None = None, options: PageableOptions | None = None
    ) -> AsyncPageable[Any]:
        options = options or PageableOptions()
        return create_async_pageable(
            self,
            lambda: self.get_async(path, options.request_options),
            self._item_projector(model),
            options,
        )

    def post_value(self, path: str, value: Any, options: RequestOptions | None = None) -> HttpResponse:
        return self.post(path, self.serializer.serialize(value), options)

    async def post_value_async(self, path: str, value: Any, options: RequestOptions | None = None) -> HttpResponse:
        return await self.post_async(path, self.serializer.serialize(value), options)

    def put_value(self, path: str, value: Any, options: RequestOptions | None = None) -> HttpResponse:
        return self.put(path, self.serializer.serialize(value), options)

    async def put_value_async(self, path: str, value: Any, options: RequestOptions | None = None) -> HttpResponse:
        return await self.put_async(path, self.serializer.serialize(value), options)

    def patch_value(self, path: str, value: Any, options: RequestOptions | None = None) -> HttpResponse:
        return self.patch(path, self.serializer.serialize(value), options)

    async def patch_value_async(self, path: str, value: Any, options: RequestOptions | None = None) -> HttpResponse:
        return await self.patch_async(path, self.serializer.serialize(value), options)

    def operation_from_response(
        self,
        response: HttpResponse,
        model: Model | None = None,
        options: OperationOptions | None = None,
    ) -> Operation[Any]:
        """Track the long running operation behind an accepted response."""
        options = options or OperationOptions()
        if options.polling_interval is None:
            options = replace(options, polling_interval=self.settings.poll_interval)

        def select(final: HttpResponse) -> Any:
            return self.serializer.deserialize(final.content, model)

        return create_operation(self, response, select, options)

    def pageable_from_response(
        self, response: HttpResponse, options: PageableOptions | None = None
    ) -> Pageable[RawJsonSpan]:
        """Page through a collection starting from an already received first page."""
        return create_pageable(self, lambda: response, lambda item: item, options)

    def async_pageable_from_response(
        self, response: HttpResponse, options: PageableOptions | None = None
    ) -> AsyncPageable[RawJsonSpan]:
        async def first_page() -> HttpResponse:
            return response

        return create_async_pageable(self, first_page, lambda item: item, options)

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    async def aclose(self) -> None:
        self.close()
        if self._async_http_client is not None and hasattr(self._async_http_client, "aclose"):
            await self._async_http_client.aclose()

    def __enter__(self) -> RestClient:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()

    async def __aenter__(self) -> RestClient:
        return self

    async def __aexit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        await self.aclose()


__all__ = ["RestClient"]
