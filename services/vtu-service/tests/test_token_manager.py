"""
Unit tests for TokenManager
"""

import asyncio
import json

import httpx
import pytest

from app.utils.errors import AuthenticationError, TransportError
from app.utils.token_manager import TokenManager

AUTH_URL = "https://ebills.test/wp-json/jwt-auth/v1/token"


def make_manager(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TokenManager(client, AUTH_URL, "reseller", "s3cret"), client


class TestTokenManager:
    """Test token acquisition and caching"""

    @pytest.mark.asyncio
    async def test_first_call_authenticates_then_reuses(self):
        calls = []

        def handler(request):
            calls.append(json.loads(request.content))
            return httpx.Response(200, json={"token": f"token-{len(calls)}"})

        manager, client = make_manager(handler)
        try:
            assert manager.token is None
            assert await manager.ensure_token() == "token-1"
            assert await manager.ensure_token() == "token-1"
            assert calls == [{"username": "reseller", "password": "s3cret"}]
        finally:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_concurrent_first_calls_share_one_authentication(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"token": "shared"})

        manager, client = make_manager(handler)
        try:
            tokens = await asyncio.gather(*(manager.ensure_token() for _ in range(5)))
            assert tokens == ["shared"] * 5
            assert len(calls) == 1
        finally:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_rejected_credentials_raise_with_upstream_status(self):
        manager, client = make_manager(lambda request: httpx.Response(403, json={"message": "bad creds"}))
        try:
            with pytest.raises(AuthenticationError) as exc_info:
                await manager.ensure_token()
            assert exc_info.value.upstream_status == 403
            assert exc_info.value.status_code == 500
            assert manager.token is None
        finally:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_response_without_token_is_an_auth_failure(self):
        manager, client = make_manager(lambda request: httpx.Response(200, json={"code": "ok"}))
        try:
            with pytest.raises(AuthenticationError):
                await manager.ensure_token()
        finally:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_network_failure_is_a_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        manager, client = make_manager(handler)
        try:
            with pytest.raises(TransportError):
                await manager.ensure_token()
        finally:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_refresh_replaces_and_invalidate_drops(self):
        counter = {"n": 0}

        def handler(request):
            counter["n"] += 1
            return httpx.Response(200, json={"token": f"token-{counter['n']}"})

        manager, client = make_manager(handler)
        try:
            assert await manager.ensure_token() == "token-1"
            assert await manager.refresh() == "token-2"
            assert manager.token == "token-2"

            manager.invalidate()
            assert manager.token is None
            assert await manager.ensure_token() == "token-3"
        finally:
            await client.aclose()
