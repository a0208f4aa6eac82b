# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Value serializer used by the typed RestClient helpers."""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Callable
from typing import Any, Protocol, TypeVar

from .json_reader import RawJsonSpan

T = TypeVar("T")

Model = Callable[[Any], T]


class ValueSerializer(Protocol):
    def serialize(self, value: Any) -> bytes: ...

    def deserialize(self, data: bytes | memoryview | RawJsonSpan, model: Model | None = None) -> Any: ...


class JsonSerializer:
    """
    JSON serializer backed by the standard library.

    Dataclass instances are written via ``dataclasses.asdict``. On the way back
    a dataclass ``model`` is built from the decoded object's keys; any other
    callable is invoked with the decoded value.
    """

    def __init__(self, *, encoder: type[json.JSONEncoder] | None = None, ensure_ascii: bool = False):
        self.encoder = encoder
        self.ensure_ascii = ensure_ascii

    def serialize(self, value: Any) -> bytes:
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            value = dataclasses.asdict(value)
        return json.dumps(value, cls=self.encoder, ensure_ascii=self.ensure_ascii).encode("utf-8")

    def deserialize(self, data: bytes | memoryview | RawJsonSpan, model: Model | None = None) -> Any:
        if isinstance(data, RawJsonSpan):
            data = data.to_bytes()
        decoded = json.loads(bytes(data))
        if model is None:
            return decoded
        if dataclasses.is_dataclass(model) and isinstance(decoded, dict):
            names = {f.name for f in dataclasses.fields(model)}
            return model(**{k: v for k, v in decoded.items() if k in names})
        return model(decoded)


DEFAULT_SERIALIZER = JsonSerializer()

__all__ = ["DEFAULT_SERIALIZER", "JsonSerializer", "Model", "ValueSerializer"]
