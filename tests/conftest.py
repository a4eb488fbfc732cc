"""
Pytest fixtures for the YaYa Wallet proxy.

Credentials are placed in the environment before the application module is
imported, since importing backend.main loads settings and refuses to start
without them. The upstream API is replaced by an httpx.MockTransport.
"""

from __future__ import annotations

import os

os.environ["YAYA_API_KEY"] = "test-key"
os.environ["YAYA_API_SECRET"] = "test-secret"
os.environ["YAYA_API_BASE_URL"] = "https://upstream.test"

import httpx
import pytest

from backend.config import Settings
from backend.app.wallet_integration import RequestSigner, YayaWalletGateway

FIXED_TIMESTAMP = "1700000000000"


class StubUpstream:
    """Records every request and answers with a configurable response."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.payload = {"data": [], "total": 0}
        self.error = None

    def respond(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def fail_with(self, error):
        self.error = error

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def settings():
    return Settings(
        yaya_api_key="test-key",
        yaya_api_secret="test-secret",
        yaya_api_base_url="https://upstream.test",
        _env_file=None,
    )


@pytest.fixture
def upstream():
    return StubUpstream()


@pytest.fixture
def signer():
    return RequestSigner("test-key", "test-secret", clock=lambda: FIXED_TIMESTAMP)


@pytest.fixture
def gateway(settings, signer, upstream):
    return YayaWalletGateway(
        settings,
        signer=signer,
        transport=httpx.MockTransport(upstream.handle),
    )


@pytest.fixture
def client(gateway):
    """FastAPI TestClient with the gateway dependency pointed at the stub upstream."""
    from fastapi.testclient import TestClient

    from backend.main import app
    from backend.app.dependencies import get_wallet_gateway

    app.dependency_overrides[get_wallet_gateway] = lambda: gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
