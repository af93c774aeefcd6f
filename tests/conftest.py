"""Shared pytest fixtures for Quantive Export tests."""

import json
import logging
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from quantive_export.config.manager import ConfigManager
from quantive_export.config.store import InMemoryPropertyStore
from quantive_export.integrations.quantive import QuantiveApiClient
from quantive_export.utils.logging import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_logger_level():
    """Undo LOG_LEVEL changes applied by commands under test."""
    yield
    logging.getLogger(LOGGER_NAME).setLevel(logging.NOTSET)


@pytest.fixture
def mock_sessions() -> list[dict[str, str]]:
    """Sessions as returned by GET /sessions."""
    return [
        {"id": "12345678-abcd-1234-efgh-123456789012", "name": "Q4 2024 OKRs"},
        {"id": "87654321-dcba-4321-hgfe-210987654321", "name": "Development Goals"},
        {"id": "11111111-2222-3333-4444-555555555555", "name": "Test Session"},
        {"id": "99999999-8888-7777-6666-555555555555", "name": "Special Characters & Symbols!"},
    ]


@pytest.fixture
def store() -> InMemoryPropertyStore:
    """Empty in-memory property store."""
    return InMemoryPropertyStore()


@pytest.fixture
def mock_api_client(mock_sessions):
    """MagicMock standing in for QuantiveApiClient."""
    client = MagicMock(spec=QuantiveApiClient)
    client.get_sessions.return_value = mock_sessions
    return client


@pytest.fixture
def client_factory(mock_api_client):
    """Factory returning mock_api_client, recording constructor arguments."""
    return MagicMock(return_value=mock_api_client)


@pytest.fixture
def manager(store, client_factory) -> ConfigManager:
    """ConfigManager over the in-memory store with a mocked API client."""
    return ConfigManager(store, client_factory=client_factory)


class FakeQuantiveApi:
    """httpx.MockTransport handler that records requests.

    Attributes:
        requests: Every request received, in order
        responses: Queue of (status, body) pairs; the last one repeats.
                   A bytes body is sent verbatim, anything else as JSON.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responses: list[tuple[int, Any]] = [(200, [])]

    def respond(self, status: int = 200, body: Any = None) -> None:
        self.responses = [(status, body)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.responses[0] if len(self.responses) == 1 else self.responses.pop(0)
        content = body if isinstance(body, bytes) else json.dumps(body).encode()
        return httpx.Response(status, content=content)

    def http_client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_api() -> FakeQuantiveApi:
    """Fake Quantive API backed by httpx.MockTransport."""
    return FakeQuantiveApi()


@pytest.fixture
def api_client(fake_api):
    """QuantiveApiClient wired to the fake API."""
    client = QuantiveApiClient(
        "test-token-123",
        "test-account-456",
        http_client=fake_api.http_client(),
    )
    yield client
    client.close()
