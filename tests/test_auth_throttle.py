"""
Quai Antique API — Authentication Throttle Tests
===================================================

What:  The per-IP sliding window on POST /api/login and POST /api/registration.
How:   Limits are lowered through `settings` before the app handles its first
       request (Starlette builds the middleware stack lazily).
"""

import time
from unittest.mock import AsyncMock

import pytest
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings
from app.middleware.auth_throttle import AuthThrottleMiddleware

CREDENTIALS = {"username": "nobody@x.com", "password": "wrong"}


def login_request(client_ip):
    return Request({
        "type": "http",
        "method": "POST",
        "path": "/api/login",
        "query_string": b"",
        "headers": [],
        "client": (client_ip, 50000),
    })


@pytest.fixture
def strict_limits(monkeypatch):
    monkeypatch.setattr(settings, "auth_rate_limit_requests", 2)
    monkeypatch.setattr(settings, "auth_rate_limit_window", 60)


class TestAuthThrottle:

    @pytest.mark.asyncio
    async def test_blocks_after_limit(self, strict_limits, client):
        assert (await client.post("/api/login", json=CREDENTIALS)).status_code == 401
        assert (await client.post("/api/login", json=CREDENTIALS)).status_code == 401

        response = await client.post("/api/login", json=CREDENTIALS)
        assert response.status_code == 429
        assert response.json()["error"] == "rate_limit_exceeded"
        assert response.json()["request_id"] == response.headers["X-Request-ID"]
        assert 1 <= int(response.headers["Retry-After"]) <= 61

    @pytest.mark.asyncio
    async def test_registration_shares_the_window(self, strict_limits, client):
        await client.post("/api/login", json=CREDENTIALS)
        await client.post("/api/registration", json={"email": "a@x.com", "password": "secret123"})
        response = await client.post("/api/registration", json={"email": "b@x.com", "password": "secret123"})
        assert response.status_code == 429

    @pytest.mark.asyncio
    async def test_other_routes_not_throttled(self, strict_limits, client):
        for _ in range(5):
            response = await client.get("/api/me")
            assert response.status_code == 401

class TestWindow:

    @pytest.mark.asyncio
    async def test_expired_attempts_are_pruned(self):
        middleware = AuthThrottleMiddleware(app=None, max_attempts=1, window_seconds=10)
        middleware._attempts["10.0.0.1"].append(time.monotonic() - 11)
        call_next = AsyncMock(return_value=Response(status_code=200))

        response = await middleware.dispatch(login_request("10.0.0.1"), call_next)

        assert response.status_code == 200
        call_next.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_limit_is_per_client(self):
        middleware = AuthThrottleMiddleware(app=None, max_attempts=1, window_seconds=60)
        call_next = AsyncMock(return_value=Response(status_code=401))

        await middleware.dispatch(login_request("10.0.0.1"), call_next)
        blocked = await middleware.dispatch(login_request("10.0.0.1"), call_next)
        other = await middleware.dispatch(login_request("10.0.0.2"), call_next)

        assert blocked.status_code == 429
        assert other.status_code == 401

    def test_idle_clients_are_forgotten(self):
        middleware = AuthThrottleMiddleware(app=None, max_attempts=3, window_seconds=10)
        middleware._attempts["10.0.0.1"].append(0.0)
        middleware._attempts["10.0.0.2"].append(95.0)
        middleware._forget_idle_clients(now=100.0)
        assert list(middleware._attempts) == ["10.0.0.2"]

    @pytest.mark.asyncio
    async def test_sweep_waits_for_threshold(self, monkeypatch):
        middleware = AuthThrottleMiddleware(app=None, max_attempts=3, window_seconds=10)
        call_next = AsyncMock(return_value=Response(status_code=401))
        middleware._attempts["10.0.0.9"].append(time.monotonic() - 60)

        await middleware.dispatch(login_request("10.0.0.1"), call_next)
        assert "10.0.0.9" in middleware._attempts

        monkeypatch.setattr("app.middleware.auth_throttle.IDLE_SWEEP_THRESHOLD", 1)
        await middleware.dispatch(login_request("10.0.0.1"), call_next)
        assert list(middleware._attempts) == ["10.0.0.1"]
