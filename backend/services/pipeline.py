"""Request pipeline for GET /proxy.

Stages run strictly in order and stop at the first one that produces a
response:

    rate limit -> authenticate -> cache lookup -> upstream fetch -> cache store

Failures are raised as ``ProxyError`` subclasses (see errors.py) with the
rate-limit decision attached, so the error handler can still emit the
X-RateLimit-* headers.
"""

import logging
from dataclasses import dataclass

from config import Settings
from errors import (
    ForbiddenError,
    ProxyError,
    RateLimitExceededError,
    UnauthorizedError,
    UpstreamInternalError,
    UpstreamStatusError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from services.auth import AuthResult, Authenticator
from services.cache import TTLCache
from services.rate_limiter import FixedWindowRateLimiter, RateLimitDecision
from services.upstream import (
    InternalError,
    NoResponse,
    Success,
    Timeout,
    UpstreamClient,
    UpstreamError,
)

logger = logging.getLogger(__name__)

# The proxy serves exactly one upstream resource, so one cache key.
CACHE_KEY = "weather:current"


@dataclass(frozen=True)
class ProxyResult:
    data: str
    source: str  # "cache" or "api"
    rate_limit: RateLimitDecision

    def body(self) -> dict:
        return {"data": self.data, "source": self.source}


class ProxyPipeline:
    def __init__(
        self,
        cache: TTLCache,
        rate_limiter: FixedWindowRateLimiter,
        authenticator: Authenticator,
        upstream: UpstreamClient,
        cache_ttl_seconds: float,
    ):
        self.cache = cache
        self.rate_limiter = rate_limiter
        self.authenticator = authenticator
        self.upstream = upstream
        self.cache_ttl_seconds = cache_ttl_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProxyPipeline":
        return cls(
            cache=TTLCache(),
            rate_limiter=FixedWindowRateLimiter(
                window_ms=settings.rate_limit_window_ms,
                max_requests=settings.rate_limit_max_requests,
            ),
            authenticator=Authenticator(settings.proxy_api_key),
            upstream=UpstreamClient(access_key=settings.weather_api_key),
            cache_ttl_seconds=settings.cache_duration_seconds,
        )

    async def handle(self, client_key: str, credential: str | None) -> ProxyResult:
        decision = self.rate_limiter.admit(client_key)
        if not decision.allowed:
            logger.warning("Rate limit exceeded for %s", client_key)
            raise RateLimitExceededError(decision)

        try:
            data, source = await self._serve(credential)
        except ProxyError as exc:
            exc.rate_limit = decision
            raise
        return ProxyResult(data=data, source=source, rate_limit=decision)

    async def _serve(self, credential: str | None) -> tuple[str, str]:
        auth = self.authenticator.authenticate(credential)
        if auth is AuthResult.MISSING:
            logger.info("Rejected request without API key")
            raise UnauthorizedError()
        if auth is AuthResult.INVALID:
            logger.info("Rejected request with invalid API key")
            raise ForbiddenError()

        cached = self.cache.get(CACHE_KEY)
        if cached is not None:
            logger.info("Serving cached data")
            return cached, "cache"

        result = await self.upstream.fetch()
        if isinstance(result, Success):
            self.cache.set(CACHE_KEY, result.body, ttl_seconds=self.cache_ttl_seconds)
            return result.body, "api"
        if isinstance(result, UpstreamError):
            raise UpstreamStatusError(result.status_code, result.body)
        if isinstance(result, NoResponse):
            raise UpstreamUnavailableError()
        if isinstance(result, Timeout):
            raise UpstreamTimeoutError()
        if isinstance(result, InternalError):
            raise UpstreamInternalError()
        raise TypeError(f"Unknown upstream result: {result!r}")
