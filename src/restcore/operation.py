# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Long running operation tracking.

An accepted response carrying an ``Operation-Location`` header becomes an
:class:`Operation`. Each poll GETs that URI, reads the ``status`` property of
the body and classifies it through a :class:`TerminalStatusMap`; unknown
statuses mean the operation is still running. On success the value is taken
from the poll response itself or from a separate final-state resource.

Polling is written once as a step generator that yields the URIs it needs
fetched; :meth:`Operation.poll` feeds it blocking responses and
:meth:`Operation.poll_async` awaited ones.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Callable, Generator, Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from .config import load_http_settings
from .errors import (
    MissingLocationHeaderError,
    MissingOperationLocationError,
    NullFinalStateUriError,
    OperationCancelledError,
    OperationFailedError,
    OperationIncompleteError,
)
from .http.client import GetSender
from .http.models import HttpResponse, RequestOptions
from .http.url import resolve_reference
from .json_reader import read_status

logger = logging.getLogger(__name__)

T = TypeVar("T")

OPERATION_LOCATION_HEADER = "Operation-Location"
LOCATION_HEADER = "Location"
RETRY_AFTER_HEADER = "Retry-After"


class TerminalState(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


DEFAULT_TERMINAL_STATUSES: dict[str, TerminalState] = {
    "Succeeded": TerminalState.SUCCESS,
    "Failed": TerminalState.FAILURE,
    "Cancelled": TerminalState.FAILURE,
}


class TerminalStatusMap:
    """
    Case-insensitive status -> terminal classification lookup.

    Built from the defaults, then overlaid with caller statuses in registration
    order; a later registration replaces an earlier one. Statuses that are not
    registered are non-terminal.
    """

    def __init__(self, successful: Iterable[str] = (), failed: Iterable[str] = ()):
        self._states: dict[str, TerminalState] = {
            status.lower(): state for status, state in DEFAULT_TERMINAL_STATUSES.items()
        }
        self.register(successful, TerminalState.SUCCESS)
        self.register(failed, TerminalState.FAILURE)

    def register(self, statuses: Iterable[str], state: TerminalState) -> None:
        if isinstance(statuses, str):
            statuses = (statuses,)
        for status in statuses:
            key = status.lower()
            previous = self._states.get(key)
            if previous is not None and previous is not state:
                logger.warning("Terminal status %r reclassified from %s to %s", status, previous.value, state.value)
            self._states[key] = state

    def classify(self, status: str) -> TerminalState | None:
        return self._states.get(status.lower())

    def __contains__(self, status: object) -> bool:
        return isinstance(status, str) and status.lower() in self._states

    def __len__(self) -> int:
        return len(self._states)


class FinalStateLocation(str, Enum):
    """Where the value of a succeeded operation is read from."""

    DEFAULT = "default"
    USE_LOCATION_HEADER = "use-location-header"
    USE_CUSTOM_URI = "use-custom-uri"


@dataclass
class OperationOptions:
    """Options to control monitoring of a long running operation."""

    additional_successful_status_values: Sequence[str] = ()
    additional_failure_status_values: Sequence[str] = ()
    request_options: RequestOptions | None = None
    final_state_location: FinalStateLocation = FinalStateLocation.DEFAULT
    final_state_uri: str | None = None
    polling_interval: float | None = None
    status_property: str = "status"


class OperationStatus(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class OperationState(Generic[T]):
    """Outcome of a single poll."""

    status: OperationStatus
    raw_response: HttpResponse
    value: T | None = None
    status_value: str | None = None

    @classmethod
    def pending(cls, response: HttpResponse, status_value: str | None = None) -> OperationState[T]:
        return cls(OperationStatus.PENDING, response, status_value=status_value)

    @classmethod
    def success(cls, response: HttpResponse, value: T, status_value: str | None = None) -> OperationState[T]:
        return cls(OperationStatus.SUCCEEDED, response, value, status_value)

    @classmethod
    def failure(cls, response: HttpResponse, status_value: str | None = None) -> OperationState[T]:
        return cls(OperationStatus.FAILED, response, status_value=status_value)

    @property
    def has_completed(self) -> bool:
        return self.status is not OperationStatus.PENDING


PollSteps = Generator[str, HttpResponse, OperationState[T]]


@dataclass
class Operation(Generic[T]):
    """
    Handle on a server-side operation.

    Once a poll observes a terminal status the state is frozen: further polls
    return the cached state without issuing requests, and the value computed
    on that first terminal transition is the only one ever exposed.
    """

    sender: GetSender
    operation_uri: str
    initial_response: HttpResponse
    result_selector: Callable[[HttpResponse], T]
    final_state_uri: str | None = None
    terminal_states: TerminalStatusMap = field(default_factory=TerminalStatusMap)
    request_options: RequestOptions | None = None
    polling_interval: float = 1.0
    status_property: str = "status"

    def __post_init__(self) -> None:
        self._lock = threading.Lock()
        self._state: OperationState[T] = OperationState.pending(self.initial_response)

    @property
    def id(self) -> str:
        return self.operation_uri

    @property
    def state(self) -> OperationState[T]:
        return self._state

    @property
    def raw_response(self) -> HttpResponse:
        return self._state.raw_response

    @property
    def status(self) -> str | None:
        """The last status string reported by the service."""
        return self._state.status_value

    @property
    def has_completed(self) -> bool:
        return self._state.has_completed

    @property
    def has_value(self) -> bool:
        return self._state.status is OperationStatus.SUCCEEDED

    @property
    def value(self) -> T:
        state = self._state
        if state.status is OperationStatus.SUCCEEDED:
            return state.value  # type: ignore[return-value]
        if state.status is OperationStatus.FAILED:
            raise OperationFailedError(self.id, state.status_value, state.raw_response)
        raise OperationIncompleteError(f"Operation {self.id} has not completed")

    def _poll_steps(self) -> PollSteps[T]:
        response = yield self.operation_uri
        status = read_status(response.content, self.status_property)
        terminal = self.terminal_states.classify(status)
        if terminal is None:
            return OperationState.pending(response, status)
        if terminal is TerminalState.FAILURE:
            return OperationState.failure(response, status)

        value_source = response
        if self.final_state_uri is not None:
            value_source = yield self.final_state_uri
        return OperationState.success(value_source, self.result_selector(value_source), status)

    def _record(self, state: OperationState[T]) -> OperationState[T]:
        with self._lock:
            if self._state.has_completed:
                return self._state
            self._state = state
        logger.debug("Operation %s status %r -> %s", self.id, state.status_value, state.status.value)
        return state

    def _terminal_state(self) -> OperationState[T] | None:
        state = self._state
        return state if state.has_completed else None

    def poll(self) -> OperationState[T]:
        """Issue one status request (plus a final-state request on success)."""
        terminal = self._terminal_state()
        if terminal is not None:
            return terminal
        steps = self._poll_steps()
        try:
            uri = next(steps)
            while True:
                response = self.sender.send_get(uri, self.request_options)
                uri = steps.send(response)
        except StopIteration as stop:
            return self._record(stop.value)
        finally:
            steps.close()

    async def poll_async(self) -> OperationState[T]:
        """Coroutine form of :meth:`poll`; task cancellation leaves the state untouched."""
        terminal = self._terminal_state()
        if terminal is not None:
            return terminal
        steps = self._poll_steps()
        try:
            uri = next(steps)
            while True:
                response = await self.sender.send_get_async(uri, self.request_options)
                uri = steps.send(response)
        except StopIteration as stop:
            return self._record(stop.value)
        finally:
            steps.close()

    def update_status(self) -> HttpResponse:
        return self.poll().raw_response

    async def update_status_async(self) -> HttpResponse:
        return (await self.poll_async()).raw_response

    def _next_delay(self, polling_interval: float | None) -> float:
        if polling_interval is not None:
            return polling_interval
        retry_after = self.raw_response.header(RETRY_AFTER_HEADER)
        if retry_after:
            try:
                return max(0.0, float(retry_after))
            except ValueError:
                pass
        return self.polling_interval

    def _completed_value(self, state: OperationState[T]) -> T:
        if state.status is OperationStatus.FAILED:
            raise OperationFailedError(self.id, state.status_value, state.raw_response)
        return state.value  # type: ignore[return-value]

    def wait(
        self,
        polling_interval: float | None = None,
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> T:
        """Poll until the operation is terminal and return its value."""
        deadline = time.monotonic() + timeout if timeout is not None else None
        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise OperationCancelledError(f"Waiting on operation {self.id} was cancelled")
            state = self.poll()
            if state.has_completed:
                return self._completed_value(state)

            delay = self._next_delay(polling_interval)
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise TimeoutError(f"Operation {self.id} did not complete within {timeout} seconds")
                delay = min(delay, remaining)
            logger.debug("Operation %s still running, waiting %.2fs", self.id, delay)
            if cancel_event is not None:
                cancel_event.wait(delay)
            else:
                time.sleep(delay)

    async def wait_async(self, polling_interval: float | None = None, *, timeout: float | None = None) -> T:
        """Coroutine form of :meth:`wait`; cancel the awaiting task to stop waiting."""
        deadline = time.monotonic() + timeout if timeout is not None else None
        while True:
            state = await self.poll_async()
            if state.has_completed:
                return self._completed_value(state)

            delay = self._next_delay(polling_interval)
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise TimeoutError(f"Operation {self.id} did not complete within {timeout} seconds")
                delay = min(delay, remaining)
            logger.debug("Operation %s still running, waiting %.2fs", self.id, delay)
            await asyncio.sleep(delay)


def json_result_selector(response: HttpResponse) -> Any:
    return response.json()


def _resolve_final_state_uri(response: HttpResponse, options: OperationOptions) -> str | None:
    if options.final_state_location is FinalStateLocation.USE_LOCATION_HEADER:
        location = response.header(LOCATION_HEADER)
        if not location:
            raise MissingLocationHeaderError()
        return resolve_reference(response.url, location)
    if options.final_state_location is FinalStateLocation.USE_CUSTOM_URI:
        if not options.final_state_uri:
            raise NullFinalStateUriError()
        return options.final_state_uri
    return None


def create_operation(
    sender: GetSender,
    response: HttpResponse,
    result_selector: Callable[[HttpResponse], T] | None = None,
    options: OperationOptions | None = None,
) -> Operation[T]:
    """
    Build an :class:`Operation` from an accepted response.

    No request is sent here; missing headers or a missing custom final-state
    URI fail immediately. Without a ``result_selector`` the value is the
    parsed JSON body.
    """
    options = options or OperationOptions()
    location = response.header(OPERATION_LOCATION_HEADER)
    if not location:
        raise MissingOperationLocationError()

    polling_interval = options.polling_interval
    if polling_interval is None:
        polling_interval = load_http_settings().poll_interval

    return Operation(
        sender=sender,
        operation_uri=resolve_reference(response.url, location),
        initial_response=response,
        result_selector=result_selector or json_result_selector,
        final_state_uri=_resolve_final_state_uri(response, options),
        terminal_states=TerminalStatusMap(
            options.additional_successful_status_values,
            options.additional_failure_status_values,
        ),
        request_options=options.request_options,
        polling_interval=polling_interval,
        status_property=options.status_property,
    )


__all__ = [
    "DEFAULT_TERMINAL_STATUSES",
    "FinalStateLocation",
    "Operation",
    "OperationOptions",
    "OperationState",
    "OperationStatus",
    "TerminalState",
    "TerminalStatusMap",
    "create_operation",
    "json_result_selector",
]
