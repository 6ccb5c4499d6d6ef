"""Shared fixtures: fake clock, settings, mock upstream and app wiring."""

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from config import Settings
from services.auth import Authenticator
from services.cache import TTLCache
from services.pipeline import ProxyPipeline
from services.rate_limiter import FixedWindowRateLimiter
from services.upstream import UpstreamClient

WEATHER_BODY = '{"location": {"name": "London"}, "current": {"temp_c": 11.0}}'


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class UpstreamStub:
    """Records calls and replies through an httpx.MockTransport."""

    def __init__(self):
        self.calls = 0
        self.requests: list[httpx.Request] = []
        self.responder = lambda request: httpx.Response(200, text=WEATHER_BODY)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        self.requests.append(request)
        return self.responder(request)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def upstream_stub():
    return UpstreamStub()


@pytest.fixture
def settings():
    s = Settings()
    s.rate_limit_window_ms = 60000
    s.rate_limit_max_requests = 5
    s.cache_duration_seconds = 300
    s.proxy_api_key = "hello"
    s.weather_api_key = "test-key"
    s.environment = "local"
    return s


@pytest.fixture
def pipeline(settings, clock, upstream_stub):
    return ProxyPipeline(
        cache=TTLCache(clock=clock),
        rate_limiter=FixedWindowRateLimiter(
            window_ms=settings.rate_limit_window_ms,
            max_requests=settings.rate_limit_max_requests,
            clock=clock,
        ),
        authenticator=Authenticator(settings.proxy_api_key),
        upstream=UpstreamClient(access_key=settings.weather_api_key, transport=upstream_stub.transport()),
        cache_ttl_seconds=settings.cache_duration_seconds,
    )


@pytest.fixture
def client(settings, pipeline):
    return TestClient(create_app(settings, pipeline))
