# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy for restcore.

Configuration errors are raised while building an operation, read errors while
extracting fields from a response body. Transport failures raised by httpx are
never wrapped; only non-success status codes become :class:`RequestFailedError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .http.models import HttpResponse


class RestCoreError(Exception):
    """Base class for every error raised by restcore itself."""


class ConfigurationError(RestCoreError):
    """An operation or pageable could not be built from the given inputs."""


class MissingOperationLocationError(ConfigurationError):
    def __init__(self, message: str = "Could not determine operation location from response"):
        super().__init__(message)


class MissingLocationHeaderError(ConfigurationError):
    def __init__(self, message: str = "Location header is not present in response"):
        super().__init__(message)


class NullFinalStateUriError(ConfigurationError):
    def __init__(self, message: str = "final_state_uri is required when final state location is USE_CUSTOM_URI"):
        super().__init__(message)


class JsonReadError(RestCoreError, ValueError):
    """Malformed JSON or an unexpected token while scanning a body."""

    def __init__(self, message: str = "unexpected JSON token", position: int | None = None):
        if position is not None:
            message = f"{message} (at byte {position})"
        super().__init__(message)
        self.position = position


class PropertyNotFoundError(RestCoreError, LookupError):
    """A required top-level property is absent from a JSON object."""

    def __init__(self, property_name: str):
        super().__init__(f"Could not find property '{property_name}' in object")
        self.property_name = property_name


class RequestFailedError(RestCoreError):
    """The service answered with a status code the request options treat as a failure."""

    def __init__(self, response: HttpResponse, message: str | None = None):
        self.response = response
        self.status_code = response.status_code
        self.reason = response.reason_phrase
        if message is None:
            message = f"Service request failed with status {self.status_code}"
            if self.reason:
                message = f"{message} ({self.reason})"
            if response.url:
                message = f"{message} for {response.url}"
        super().__init__(message)


class OperationFailedError(RestCoreError):
    """A long running operation reached a failure terminal status."""

    def __init__(self, operation_id: str, status: str | None, response: HttpResponse):
        super().__init__(f"Operation {operation_id} finished with status {status!r}")
        self.operation_id = operation_id
        self.status = status
        self.response = response


class OperationIncompleteError(RestCoreError):
    """The value of an operation was read before it completed."""


class OperationCancelledError(RestCoreError):
    """Waiting on an operation was cancelled by the caller."""


__all__ = [
    "ConfigurationError",
    "JsonReadError",
    "MissingLocationHeaderError",
    "MissingOperationLocationError",
    "NullFinalStateUriError",
    "OperationCancelledError",
    "OperationFailedError",
    "OperationIncompleteError",
    "PropertyNotFoundError",
    "RequestFailedError",
    "RestCoreError",
]
