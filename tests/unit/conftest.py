# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json

import pytest

from restcore.client import RestClient
from restcore.config import HttpSettings
from restcore.http.adapters import AsyncStubHttpClient, StubHttpClient
from restcore.http.models import HttpResponse

ENDPOINT = "https://svc.example"


def json_response(body, status_code=200, headers=None, url=None) -> HttpResponse:
    content = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
    return HttpResponse(status_code=status_code, headers=dict(headers or {}), content=content, url=url)


@pytest.fixture
def stub():
    return StubHttpClient()


@pytest.fixture
def async_stub():
    return AsyncStubHttpClient()


@pytest.fixture
def client(stub, async_stub):
    return RestClient(
        ENDPOINT,
        http_client=stub,
        async_http_client=async_stub,
        settings=HttpSettings(poll_interval=0.0),
    )
