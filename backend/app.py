"""FastAPI application entry point for the weather proxy."""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, settings as default_settings
from errors import register_error_handlers
from services.pipeline import ProxyPipeline

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("proxy.access")


def configure_logging(settings: Settings) -> None:
    # Structured logging: JSON for production, human-readable for local
    if settings.is_production:
        logging.basicConfig(
            level=logging.INFO,
            format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
            stream=sys.stdout,
        )
    else:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s | %(message)s")


def _format_reset(reset: str | None) -> str:
    if not reset:
        return "-"
    return datetime.fromtimestamp(int(reset), tz=timezone.utc).isoformat()


def _log_access(request: Request, status_code: int, headers) -> None:
    access_logger.info(
        "IP: %s | Method: %s | URL: %s | Status: %d | RateLimit: %s/%s remaining | Reset: %s",
        request.client.host if request.client else "-",
        request.method,
        request.url.path,
        status_code,
        headers.get("X-RateLimit-Remaining", "-"),
        headers.get("X-RateLimit-Limit", "-"),
        _format_reset(headers.get("X-RateLimit-Reset")),
    )


def create_app(settings: Settings | None = None, pipeline: ProxyPipeline | None = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        missing = settings.validate()
        if missing:
            logger.warning("Missing env vars (upstream calls may fail): %s", ", ".join(missing))
        yield

    app = FastAPI(title="Weather Proxy", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.pipeline = pipeline or ProxyPipeline.from_settings(settings)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # One access line per completed request, with the rate-limit counters
    @app.middleware("http")
    async def log_request(request: Request, call_next):
        try:
            response: Response = await call_next(request)
        except Exception:
            # Unhandled errors are turned into a 500 further out, by the
            # server error middleware.
            _log_access(request, 500, {})
            raise
        _log_access(request, response.status_code, response.headers)
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.health import router as health_router
    from routes.proxy import router as proxy_router

    app.include_router(health_router)
    app.include_router(proxy_router)

    return app


app = create_app()
