"""WeatherAPI client for the proxied resource.

Makes a single GET against a fixed endpoint and returns a tagged result
instead of raising, so the pipeline can map each failure kind to its own
response without inspecting exception internals.
"""

import asyncio
import logging
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)

WEATHER_URL = "http://api.weatherapi.com/v1/current.json"
WEATHER_QUERY = {"q": "London", "aqi": "no"}

DEFAULT_TIMEOUT_SECONDS = 5.0


@dataclass(frozen=True)
class Success:
    body: str


@dataclass(frozen=True)
class UpstreamError:
    """Upstream answered with something other than 200."""

    status_code: int
    body: str


@dataclass(frozen=True)
class NoResponse:
    detail: str


@dataclass(frozen=True)
class Timeout:
    detail: str


@dataclass(frozen=True)
class InternalError:
    detail: str


FetchResult = Success | UpstreamError | NoResponse | Timeout | InternalError


class UpstreamClient:
    def __init__(
        self,
        access_key: str | None,
        url: str = WEATHER_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self.params = {"key": access_key or "", **WEATHER_QUERY}
        self.timeout = timeout
        self._transport = transport

    async def _get(self) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await client.get(self.url, params=self.params)

    async def fetch(self) -> FetchResult:
        """Fetch the current conditions. Never raises.

        The timeout bounds the whole request, body included, not just each
        connect or read phase.
        """
        try:
            resp = await asyncio.wait_for(self._get(), timeout=self.timeout)
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            logger.error("Upstream request timed out after %.1fs: %r", self.timeout, e)
            return Timeout(detail=repr(e))
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            logger.error("Upstream request could not be built: %r", e)
            return InternalError(detail=repr(e))
        except httpx.TransportError as e:
            logger.error("No response received from upstream: %r", e)
            return NoResponse(detail=repr(e))
        except Exception as e:
            logger.exception("Unexpected error calling upstream")
            return InternalError(detail=repr(e))

        # Only an exact 200 counts as success; 201/204 etc. are passed through.
        if resp.status_code != 200:
            logger.error("Error response from upstream (%d): %s", resp.status_code, resp.text)
            return UpstreamError(status_code=resp.status_code, body=resp.text)

        return Success(body=resp.text)
