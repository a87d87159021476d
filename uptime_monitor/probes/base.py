"""Abstract base class for endpoint probers.

A prober contacts one endpoint and reports what it observed: the response
code and the latency in whole milliseconds. It does not decide UP or DOWN;
classification happens afterwards and is identical for every prober.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from uptime_monitor.middleware.error_handler import ProbeError

if TYPE_CHECKING:
    from uptime_monitor.config.endpoints import Endpoint
    from uptime_monitor.models.results import ProbeOutcome


class Prober(ABC):
    """Capability interface ``probe(endpoint) -> ProbeOutcome``.

    Subclasses implement ``_probe``; ``probe`` validates the endpoint first.
    """

    mode: str

    async def probe(self, endpoint: "Endpoint") -> "ProbeOutcome":
        """Probe *endpoint* once.

        Raises
        ------
        ProbeError
            If the endpoint has no url or no response could be obtained.
            ``ProbeTimeoutError`` signals that the response took too long.
        """
        if not endpoint.url:
            raise ProbeError(
                f"Endpoint {endpoint.name!r} has no url",
                reason="(endpoint has no url)",
            )
        return await self._probe(endpoint)

    @abstractmethod
    async def _probe(self, endpoint: "Endpoint") -> "ProbeOutcome":
        ...
