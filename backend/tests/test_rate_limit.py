"""
Tests for the fixed-window rate limiter and its middleware
"""
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.rate_limit import FixedWindowRateLimiter, RateLimitMiddleware


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class TestFixedWindowRateLimiter:
    def test_allows_up_to_limit_then_refuses(self):
        limiter = FixedWindowRateLimiter(3, 60, clock=FakeClock())
        results = [limiter.hit("1.2.3.4")[0] for _ in range(4)]
        assert results == [True, True, True, False]

    def test_remaining_counts_down(self):
        limiter = FixedWindowRateLimiter(2, 60, clock=FakeClock())
        assert limiter.hit("ip")[1]["remaining"] == 1
        assert limiter.hit("ip")[1]["remaining"] == 0

    def test_window_resets_after_expiry(self):
        clock = FakeClock()
        limiter = FixedWindowRateLimiter(1, 60, clock=clock)
        assert limiter.hit("ip")[0]
        clock.now += 30
        allowed, info = limiter.hit("ip")
        assert not allowed
        assert info["retry_after"] == 30
        clock.now += 30
        assert limiter.hit("ip")[0]

    def test_keys_are_independent(self):
        limiter = FixedWindowRateLimiter(1, 60, clock=FakeClock())
        assert limiter.hit("a")[0]
        assert limiter.hit("b")[0]
        assert not limiter.hit("a")[0]

    def test_reset_clears_windows(self):
        limiter = FixedWindowRateLimiter(1, 60, clock=FakeClock())
        limiter.hit("a")
        limiter.reset()
        assert limiter.hit("a")[0]


@pytest.fixture
def limited_client(monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)

    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, limiter=FixedWindowRateLimiter(2, 900, clock=FakeClock()))

    @app.get("/api/ping")
    async def ping():
        return {"ok": True}

    @app.get("/health")
    async def health():
        return {"status": "OK"}

    return TestClient(app)


class TestRateLimitMiddleware:
    def test_sets_headers_and_refuses_over_limit(self, limited_client):
        first = limited_client.get("/api/ping")
        assert first.status_code == 200
        assert first.headers["X-RateLimit-Limit"] == "2"
        assert first.headers["X-RateLimit-Remaining"] == "1"

        limited_client.get("/api/ping")
        refused = limited_client.get("/api/ping")
        assert refused.status_code == 429
        assert refused.json() == {"error": "Too many requests from this IP, please try again later."}
        assert refused.headers["Retry-After"] == "900"
        assert refused.headers["X-RateLimit-Remaining"] == "0"

    def test_non_api_paths_are_not_limited(self, limited_client):
        for _ in range(5):
            response = limited_client.get("/health")
            assert response.status_code == 200
            assert "X-RateLimit-Limit" not in response.headers

    def test_forwarded_for_identifies_client(self, limited_client):
        for _ in range(2):
            limited_client.get("/api/ping", headers={"X-Forwarded-For": "10.0.0.1"})
        assert limited_client.get("/api/ping", headers={"X-Forwarded-For": "10.0.0.1"}).status_code == 429
        assert limited_client.get("/api/ping", headers={"X-Forwarded-For": "10.0.0.2"}).status_code == 200
