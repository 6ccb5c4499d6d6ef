"""Proxied weather endpoint."""

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse

from services.pipeline import ProxyPipeline

router = APIRouter()


def get_pipeline(request: Request) -> ProxyPipeline:
    return request.app.state.pipeline


@router.get("/proxy")
async def proxy(
    request: Request,
    authorization: str | None = Header(None),
    pipeline: ProxyPipeline = Depends(get_pipeline),
) -> JSONResponse:
    """Current London weather from the upstream API, cached for a few minutes."""
    client_key = request.client.host if request.client else "unknown"
    result = await pipeline.handle(client_key, authorization)
    return JSONResponse(result.body(), headers=result.rate_limit.headers())
