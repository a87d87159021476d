"""HTTP prober backed by httpx.

Sends the endpoint's configured request and reports the status code and the
elapsed time. Transport failures are raised as ``ProbeError`` so the cycle
runner can turn them into DOWN results.
"""

from __future__ import annotations

import logging
import time

import httpx

from uptime_monitor.config.endpoints import Endpoint
from uptime_monitor.middleware.error_handler import ProbeError, ProbeTimeoutError
from uptime_monitor.models.results import ProbeOutcome
from uptime_monitor.probes.base import Prober

logger = logging.getLogger(__name__)


class HttpProber(Prober):
    """Probe endpoints with a real HTTP request.

    Parameters
    ----------
    timeout_seconds:
        Timeout per request. Exceeding it raises ``ProbeTimeoutError`` with
        the same reason and latency the cycle runner reports when its
        ``asyncio.wait_for`` ceiling of equal length fires, so whichever
        timeout trips first the DOWN result is identical.
    """

    mode = "http"

    def __init__(self, timeout_seconds: float = 5.0) -> None:
        self._timeout_seconds = timeout_seconds

    async def _probe(self, endpoint: Endpoint) -> ProbeOutcome:
        start = time.monotonic()
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout_seconds),
                follow_redirects=False,
            ) as client:
                response = await client.request(
                    endpoint.method,
                    endpoint.url,
                    headers=endpoint.headers,
                    content=endpoint.body,
                )
        except httpx.TimeoutException as exc:
            # Reported like the cycle runner's own ceiling: latency is the timeout.
            timeout_ms = int(self._timeout_seconds * 1000)
            raise ProbeTimeoutError(
                f"Request to {endpoint.url} timed out",
                reason=f"(response timed out after {timeout_ms} ms)",
                latency_ms=timeout_ms,
            ) from exc
        except httpx.HTTPError as exc:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.debug("Request to %s failed: %s", endpoint.url, exc)
            raise ProbeError(
                f"Request to {endpoint.url} failed: {exc}",
                reason=f"(connection error: {type(exc).__name__})",
                latency_ms=elapsed_ms,
            ) from exc

        latency_ms = int((time.monotonic() - start) * 1000)
        return ProbeOutcome(response_code=response.status_code, latency_ms=latency_ms)
