"""Custom exceptions and centralized FastAPI error handlers."""

import json
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from services.rate_limiter import RateLimitDecision

logger = logging.getLogger(__name__)


class ProxyError(Exception):
    """Base exception with HTTP status code and client-facing error body."""

    error = "Internal Server Error"

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.rate_limit: RateLimitDecision | None = None

    def body(self) -> dict:
        return {"error": self.error, "message": self.message}


class UnauthorizedError(ProxyError):
    error = "Unauthorized"

    def __init__(self):
        super().__init__(
            "No API key provided. Please include the Authorization header.",
            status_code=401,
        )


class ForbiddenError(ProxyError):
    error = "Forbidden"

    def __init__(self):
        super().__init__("Invalid API key.", status_code=403)


class RateLimitExceededError(ProxyError):
    error = "Too Many Requests"

    def __init__(self, decision: RateLimitDecision):
        super().__init__("Too many requests, please try again later.", status_code=429)
        self.rate_limit = decision


class UpstreamStatusError(ProxyError):
    """Upstream answered with a non-200 status; status and body pass through."""

    error = "Error getting data from the external API"

    def __init__(self, status_code: int, upstream_body: str):
        super().__init__(upstream_body, status_code=status_code)
        self.upstream_body = upstream_body

    def body(self) -> dict:
        try:
            message = json.loads(self.upstream_body)
        except ValueError:
            message = self.upstream_body
        return {"error": self.error, "message": message}


class UpstreamUnavailableError(ProxyError):
    error = "No response from external API"

    def __init__(self):
        super().__init__(
            "The external API is not responding, please try again later.",
            status_code=503,
        )


class UpstreamTimeoutError(ProxyError):
    error = "Request timed out"

    def __init__(self):
        super().__init__(
            "The external API request timed out. Please try again later.",
            status_code=504,
        )


class UpstreamInternalError(ProxyError):
    def __init__(self):
        super().__init__("An unexpected error occurred while fetching data.", status_code=500)


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(ProxyError)
    async def handle_proxy_error(_request: Request, exc: ProxyError):
        headers = exc.rate_limit.headers() if exc.rate_limit else None
        if isinstance(exc, RateLimitExceededError):
            return PlainTextResponse(exc.message, status_code=exc.status_code, headers=headers)
        return JSONResponse(exc.body(), status_code=exc.status_code, headers=headers)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": "Internal Server Error", "message": "An unexpected error occurred."},
            status_code=500,
        )
