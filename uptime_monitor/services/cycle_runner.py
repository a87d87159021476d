"""One test cycle: probe and classify every endpoint.

Probes run concurrently as asyncio tasks, bounded by a semaphore and each
wrapped in a timeout. ``asyncio.gather`` returns results in the order the
endpoints were given, so concurrency never shows up in the output order.

A failing probe never aborts the cycle. Transport errors, timeouts and
unexpected exceptions all become DOWN results with a descriptive reason.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from uptime_monitor.config.endpoints import Endpoint
from uptime_monitor.middleware.error_handler import ProbeError
from uptime_monitor.models.results import Result, Status
from uptime_monitor.probes.base import Prober
from uptime_monitor.services.classifier import classify

logger = logging.getLogger(__name__)


class CycleRunner:
    """Runs the prober and classifier over a list of endpoints.

    Parameters
    ----------
    prober:
        Capability used to contact each endpoint.
    probe_timeout_seconds:
        Ceiling on a single probe. A probe exceeding it is reported DOWN.
    max_concurrent_probes:
        Maximum number of probes in flight at once.
    """

    def __init__(
        self,
        prober: Prober,
        *,
        probe_timeout_seconds: float = 5.0,
        max_concurrent_probes: int = 10,
    ) -> None:
        self._prober = prober
        self._probe_timeout = probe_timeout_seconds
        self._max_concurrent_probes = max_concurrent_probes

    async def run_cycle(
        self, endpoints: Sequence[Endpoint], cycle: int | None = None
    ) -> list[Result]:
        """Return one Result per endpoint, in input order."""
        semaphore = asyncio.Semaphore(self._max_concurrent_probes)

        async def _bounded(endpoint: Endpoint) -> Result:
            async with semaphore:
                return await self._probe_one(endpoint, cycle)

        return list(await asyncio.gather(*(_bounded(ep) for ep in endpoints)))

    async def _probe_one(self, endpoint: Endpoint, cycle: int | None) -> Result:
        context = {"cycle": cycle, "endpoint_name": endpoint.name, "url": endpoint.url}
        try:
            outcome = await asyncio.wait_for(
                self._prober.probe(endpoint), timeout=self._probe_timeout
            )
        except asyncio.TimeoutError:
            timeout_ms = int(self._probe_timeout * 1000)
            reason = f"(response timed out after {timeout_ms} ms)"
            logger.warning(
                "Probe of %s timed out after %d ms",
                endpoint.name,
                timeout_ms,
                extra={**context, "error_reason": reason},
            )
            return _down(endpoint, reason, latency_ms=timeout_ms)
        except ProbeError as exc:
            logger.warning(
                "Probe of %s failed: %s",
                endpoint.name,
                exc.message,
                extra={**context, "error_reason": exc.reason},
            )
            return _down(endpoint, exc.reason, latency_ms=exc.latency_ms)
        except Exception as exc:
            reason = f"(probe failed: {type(exc).__name__})"
            logger.exception(
                "Unexpected error probing %s",
                endpoint.name,
                extra={**context, "error_reason": reason},
            )
            return _down(endpoint, reason)

        status, reason = classify(outcome)
        return Result(
            endpoint_name=endpoint.name,
            url=endpoint.url,
            status=status,
            response_code=outcome.response_code,
            latency_ms=outcome.latency_ms,
            reason=reason,
        )


def _down(endpoint: Endpoint, reason: str, *, latency_ms: int = 0) -> Result:
    """Build a DOWN result for a probe that produced no response."""
    return Result(
        endpoint_name=endpoint.name,
        url=endpoint.url,
        status=Status.DOWN,
        response_code=0,
        latency_ms=latency_ms,
        reason=reason,
    )
