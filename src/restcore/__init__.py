# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
restcore package entrypoint.

A typed REST client layer: long running operation polling, next-link
pagination, and streaming extraction of the JSON fields that drive both.
HTTP behavior is abstracted behind injectable client protocols with httpx
implementations.
"""

from .client import RestClient
from .config import HttpSettings, load_http_settings
from .errors import (
    ConfigurationError,
    JsonReadError,
    MissingLocationHeaderError,
    MissingOperationLocationError,
    NullFinalStateUriError,
    OperationCancelledError,
    OperationFailedError,
    OperationIncompleteError,
    PropertyNotFoundError,
    RequestFailedError,
    RestCoreError,
)
from .http import (
    AsyncHttpxClient,
    BearerTokenAuth,
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    KeyCredentialAuth,
    RequestOptions,
    format_path,
)
from .json_reader import RawJsonSpan, read_items_and_next_link, read_status
from .log import setup_logging
from .operation import (
    FinalStateLocation,
    Operation,
    OperationOptions,
    OperationState,
    OperationStatus,
    TerminalStatusMap,
    create_operation,
)
from .pageable import AsyncPageable, Page, Pageable, PageableOptions, create_async_pageable, create_pageable
from .serialization import JsonSerializer
from .version import __version__

__all__ = [
    "AsyncHttpxClient",
    "AsyncPageable",
    "BearerTokenAuth",
    "ConfigurationError",
    "FinalStateLocation",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpSettings",
    "HttpxClient",
    "JsonReadError",
    "JsonSerializer",
    "KeyCredentialAuth",
    "MissingLocationHeaderError",
    "MissingOperationLocationError",
    "NullFinalStateUriError",
    "Operation",
    "OperationCancelledError",
    "OperationFailedError",
    "OperationIncompleteError",
    "OperationOptions",
    "OperationState",
    "OperationStatus",
    "Page",
    "Pageable",
    "PageableOptions",
    "PropertyNotFoundError",
    "RawJsonSpan",
    "RequestFailedError",
    "RequestOptions",
    "RestClient",
    "RestCoreError",
    "TerminalStatusMap",
    "__version__",
    "create_async_pageable",
    "create_operation",
    "create_pageable",
    "format_path",
    "load_http_settings",
    "read_items_and_next_link",
    "read_status",
    "setup_logging",
]
