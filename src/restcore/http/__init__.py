# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .adapters import AsyncStubHttpClient, StubHttpClient
from .auth import BearerTokenAuth, KeyCredentialAuth
from .client import (
    AsyncHttpClient,
    GetSender,
    HttpClient,
    create_default_async_http_client,
    create_default_http_client,
)
from .headers import has_header, header_value, normalize_headers
from .httpx_client import AsyncHttpxClient, HttpxClient
from .models import Headers, HttpRequest, HttpResponse, RequestOptions
from .url import build_request_uri, format_path, resolve_reference

__all__ = [
    "AsyncHttpClient",
    "AsyncHttpxClient",
    "AsyncStubHttpClient",
    "BearerTokenAuth",
    "GetSender",
    "Headers",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "KeyCredentialAuth",
    "RequestOptions",
    "StubHttpClient",
    "build_request_uri",
    "create_default_async_http_client",
    "create_default_http_client",
    "format_path",
    "has_header",
    "header_value",
    "normalize_headers",
    "resolve_reference",
]
