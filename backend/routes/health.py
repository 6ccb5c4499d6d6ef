"""Readiness check route."""

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request) -> dict:
    """Lightweight readiness check. Skips auth and rate limiting."""
    settings = request.app.state.settings
    return {"status": "ok", "service": "weather-proxy", "commit": settings.git_sha}
