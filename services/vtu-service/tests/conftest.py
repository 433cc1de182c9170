"""
Pytest fixtures for vtu service tests
"""

import json
from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.utils.config import Settings

EBILLS_API = "https://ebills.test/wp-json/api/v2/"
EBILLS_AUTH = "https://ebills.test/wp-json/jwt-auth/v1/token"
PAYSTACK_API = "https://paystack.test"

Responder = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeUpstream:
    """
    Stand-in for both providers.

    Responses are registered per (method, url path); every request that
    reaches the transport is recorded for assertions.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Responder] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, responder: Responder):
        self.routes[(method.upper(), path)] = responder

    def json(self, method: str, path: str, payload: Any, status_code: int = 200):
        self.add(method, path, httpx.Response(status_code, json=payload))

    def calls(self, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def body_of(self, request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get((request.method, request.url.path))
        if responder is None:
            return httpx.Response(404, json={"message": f"no stub for {request.method} {request.url.path}"})
        if callable(responder):
            return responder(request)
        return responder


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at the fake upstream hosts"""
    return Settings(
        ebills_api_url=EBILLS_API,
        ebills_auth_url=EBILLS_AUTH,
        ebills_username="reseller",
        ebills_password="s3cret",
        ebills_user_pin="1234",
        paystack_api_url=PAYSTACK_API,
        paystack_secret_key="sk_test_abc",
        app_url="https://app.test",
        _env_file=None,
    )


@pytest.fixture
def upstream() -> FakeUpstream:
    fake = FakeUpstream()
    fake.json("POST", "/wp-json/jwt-auth/v1/token", {"token": "ebills-token-1"})
    return fake


@pytest.fixture
def client(settings, upstream):
    """Test client whose upstream calls land on the fake upstream"""
    app = create_app(settings, transport=httpx.MockTransport(upstream))
    with TestClient(app) as test_client:
        yield test_client
