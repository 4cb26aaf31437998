"""
Shared test configuration and fixtures for the EZGIF API tests.
"""

import asyncio
from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from app import app, create_app
from ezgif_api.config import Settings


UPSTREAM_HTML = "<html><head><title>ezgif</title></head><body>Animated GIF editor</body></html>"


# ===== CLIENT FIXTURES =====

@pytest.fixture
def client():
    """FastAPI test client for the default application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def app_factory():
    """Build a separate application from explicit settings."""
    def build(**overrides) -> TestClient:
        settings = Settings(**overrides)
        return TestClient(create_app(settings), raise_server_exceptions=False)
    return build


# ===== UPSTREAM FIXTURES =====

def _mock_client(handler: Callable) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)


@pytest.fixture
def make_mock_client():
    """AsyncClient factory whose requests are answered by a handler instead of the network.

    Every client it creates is closed when the test ends.
    """
    created: List[httpx.AsyncClient] = []

    def build(handler: Callable) -> httpx.AsyncClient:
        mock_client = _mock_client(handler)
        created.append(mock_client)
        return mock_client

    yield build
    for mock_client in created:
        asyncio.run(mock_client.aclose())


@pytest.fixture
def mock_upstream(client: TestClient, make_mock_client):
    """Replace the application's upstream client for the duration of a test."""
    original = client.app.state.client

    def install(handler: Callable) -> None:
        client.app.state.client = make_mock_client(handler)

    yield install
    client.app.state.client = original


@pytest.fixture
def upstream_ok():
    """Handler answering every request with the sample HTML page."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, text=UPSTREAM_HTML, headers={"content-type": "text/html"})

    handler.calls = calls
    handler.body = UPSTREAM_HTML
    return handler
