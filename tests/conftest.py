"""Pytest fixtures for running the harness against the mock catalog API."""
import socket
import threading
import time

import httpx
import pytest
from werkzeug.serving import make_server

from tests.mock_catalog_api import (
    MOCK_EMAIL,
    MOCK_PASSWORD,
    create_mock_api_app,
    reset_mock_state,
)
from travel_catalog_contracts.auth import authenticate
from travel_catalog_contracts.config import Credentials, HarnessConfig
from travel_catalog_contracts.context import SuiteContext
from travel_catalog_contracts.http_client import CatalogHttpClient
from travel_catalog_contracts.resources import CatalogApi
from travel_catalog_contracts.scenarios import ScenarioSession


class MockCatalogAPIServer:
    """Wrapper for running the mock catalog API in a background thread."""

    def __init__(self, host='127.0.0.1', port=0):
        self.host = host
        self.port = port
        self.app = create_mock_api_app()
        self.server = None
        self.thread = None

    def start(self):
        """Start the mock API server in a background thread."""
        self.server = make_server(self.host, self.port, self.app, threaded=True)
        self.port = self.server.server_port
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self.thread.start()

        # Wait for server to be ready
        for _ in range(50):  # 5 seconds max
            try:
                httpx.get(f"http://{self.host}:{self.port}/", timeout=0.5)
                break
            except httpx.TransportError:
                time.sleep(0.1)

    def stop(self):
        """Stop the mock API server."""
        if self.server:
            self.server.shutdown()
            self.thread.join(timeout=5)

    @property
    def url(self):
        """Get the catalog API base URL."""
        return f"http://{self.host}:{self.port}/api"


@pytest.fixture(scope='session')
def _mock_server():
    server = MockCatalogAPIServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def mock_catalog_api(_mock_server):
    """Running mock catalog API with freshly seeded state.

    Usage:
        def test_something(mock_catalog_api):
            base_url = mock_catalog_api.url
    """
    reset_mock_state()
    yield _mock_server
    reset_mock_state()


@pytest.fixture
def closed_port_url():
    """Base URL on a local port nobody listens on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}/api"


@pytest.fixture
def harness_config(mock_catalog_api):
    return HarnessConfig(
        base_url=mock_catalog_api.url,
        credentials=Credentials(MOCK_EMAIL, MOCK_PASSWORD),
        timeout=5.0,
    )


@pytest.fixture
def catalog_client(harness_config):
    with CatalogHttpClient(harness_config.base_url, harness_config.timeout) as client:
        yield client


@pytest.fixture
def token(catalog_client, harness_config):
    return authenticate(catalog_client, harness_config.credentials)


@pytest.fixture
def suite_context():
    return SuiteContext("test")


@pytest.fixture
def make_session(catalog_client, token, suite_context):
    """Factory for scenario sessions sharing one client, token and context."""
    def _make(context=None):
        if context is None:
            context = suite_context
        return ScenarioSession(api=CatalogApi(catalog_client), token=token, context=context)
    return _make
