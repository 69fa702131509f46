# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: HTTP transport: outbound calls to the Steam community site.
Handles timeouts & fault tolerance; errors never propagate to the caller.
"""

import time
from typing import Optional

import httpx

from roster_sync.core.logging import get_logger
from roster_sync.metrics.prometheus import FETCH_LATENCY

logger = get_logger(__name__)

USER_AGENT = "roster-sync/1.0"


class HttpTransport:
    """Shared httpx.AsyncClient; opened and closed by the app lifespan."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None) -> None:
        self._client = client

    def open(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                follow_redirects=True,
                headers={"User-Agent": USER_AGENT},
            )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get(self, url: str, timeout: float) -> tuple[int, Optional[str]]:
        """GET url. Timeouts and connection errors are reported as (0, None)."""
        self.open()
        start = time.monotonic()
        try:
            resp = await self._client.get(url, timeout=timeout)
        except httpx.TimeoutException:
            logger.warning("Request timed out after %.1fs: %s", timeout, url)
            return 0, None
        except httpx.HTTPError as exc:
            logger.warning("Request failed: %s (%s)", url, exc)
            return 0, None
        finally:
            FETCH_LATENCY.observe(time.monotonic() - start)
        return resp.status_code, resp.text
