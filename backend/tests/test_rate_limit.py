"""Tests for the in-memory rate limiter."""

from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException

from app.core import rate_limit
from app.core.config import settings
from conftest import auth_headers, register, student_payload


@pytest.fixture
def enabled(monkeypatch):
    monkeypatch.setattr(settings, "rate_limit_enabled", True)
    rate_limit.reset_rate_limits()
    yield monkeypatch
    rate_limit.reset_rate_limits()


def _request(ip: str = "10.0.0.1"):
    request = MagicMock()
    request.headers = {}
    request.client.host = ip
    return request


class TestEnforceRateLimit:
    def test_limit_exceeded(self, enabled):
        request = _request()
        for _ in range(3):
            rate_limit.enforce_rate_limit(request, user_id="u1", limit_per_minute=3, scope="t")

        with pytest.raises(HTTPException) as exc_info:
            rate_limit.enforce_rate_limit(request, user_id="u1", limit_per_minute=3, scope="t")

        assert exc_info.value.status_code == 429
        assert "Retry-After" in exc_info.value.headers

    def test_window_resets(self, enabled):
        clock = [1000.0]
        enabled.setattr(rate_limit, "_now", lambda: clock[0])
        request = _request()

        rate_limit.enforce_rate_limit(request, user_id=None, limit_per_minute=1, scope="t")
        clock[0] += 61
        rate_limit.enforce_rate_limit(request, user_id=None, limit_per_minute=1, scope="t")

    def test_scopes_and_clients_are_separate(self, enabled):
        rate_limit.enforce_rate_limit(_request("1.1.1.1"), user_id=None, limit_per_minute=1, scope="a")
        rate_limit.enforce_rate_limit(_request("2.2.2.2"), user_id=None, limit_per_minute=1, scope="a")
        rate_limit.enforce_rate_limit(_request("1.1.1.1"), user_id=None, limit_per_minute=1, scope="b")

    def test_forwarded_for_used_when_trusted(self, enabled):
        enabled.setattr(settings, "trust_forwarded_for", True)
        request = _request()
        request.headers = {"x-forwarded-for": "203.0.113.9, 10.0.0.1"}

        assert rate_limit._get_client_key(request, None) == "ip:203.0.113.9"

    def test_forwarded_for_ignored_by_default(self, enabled):
        request = _request("10.0.0.1")
        request.headers = {"x-forwarded-for": "203.0.113.9"}

        assert rate_limit._get_client_key(request, None) == "ip:10.0.0.1"

    def test_rotating_forwarded_for_does_not_reset_limit(self, enabled):
        for i in range(2):
            request = _request()
            request.headers = {"x-forwarded-for": f"198.51.100.{i}"}
            rate_limit.enforce_rate_limit(request, user_id=None, limit_per_minute=2, scope="t")

        request = _request()
        request.headers = {"x-forwarded-for": "198.51.100.99"}
        with pytest.raises(HTTPException):
            rate_limit.enforce_rate_limit(request, user_id=None, limit_per_minute=2, scope="t")

    def test_expired_buckets_are_evicted(self, enabled):
        clock = [1000.0]
        enabled.setattr(rate_limit, "_now", lambda: clock[0])
        for i in range(500):
            rate_limit.enforce_rate_limit(
                _request(f"10.1.{i // 256}.{i % 256}"), user_id=None, limit_per_minute=5, scope="t"
            )
        assert rate_limit.bucket_count() == 500

        clock[0] += 3600
        rate_limit.enforce_rate_limit(_request("10.9.9.9"), user_id=None, limit_per_minute=5, scope="t")

        assert rate_limit.bucket_count() == 1

    def test_disabled_never_raises(self, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_enabled", False)
        request = _request()
        for _ in range(5):
            rate_limit.enforce_rate_limit(request, user_id="u", limit_per_minute=1, scope="t")


class TestEndpointRateLimits:
    @pytest.mark.asyncio
    async def test_chat_limited_per_user(self, client, fake_llm, monkeypatch):
        user = await register(client)
        monkeypatch.setattr(settings, "rate_limit_enabled", True)
        monkeypatch.setattr(settings, "rate_limit_chat_per_minute", 2)

        codes = [
            (
                await client.post(
                    "/api/ai/chat", json={"message": f"q{i}"}, headers=auth_headers(user)
                )
            ).status_code
            for i in range(3)
        ]

        assert codes == [200, 200, 429]

    @pytest.mark.asyncio
    async def test_register_limited_per_client(self, client, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_enabled", True)
        monkeypatch.setattr(settings, "rate_limit_per_minute", 2)

        codes = [
            (
                await client.post(
                    "/api/auth/register",
                    json=student_payload(email=f"student{i}@example.com"),
                )
            ).status_code
            for i in range(3)
        ]

        assert codes == [201, 201, 429]

    @pytest.mark.asyncio
    async def test_login_limited_per_client(self, client, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_enabled", True)
        monkeypatch.setattr(settings, "rate_limit_per_minute", 2)
        credentials = {"email": "ghost@example.com", "password": "guess"}

        codes = [
            (await client.post("/api/auth/login", json=credentials)).status_code
            for _ in range(3)
        ]

        assert codes == [401, 401, 429]
        response = await client.post("/api/auth/login", json=credentials)
        assert response.json()["error"] == "Rate limit exceeded"
        assert "retry-after" in response.headers
