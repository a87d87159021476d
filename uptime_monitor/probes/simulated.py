"""Random-outcome prober used in place of a real network call.

Latency is uniform over the integers 50..649 ms. The response code is 200
with probability 0.8, otherwise one of 400, 404, 500 with equal probability.
"""

from __future__ import annotations

import random

from uptime_monitor.config.endpoints import Endpoint
from uptime_monitor.models.results import ProbeOutcome
from uptime_monitor.probes.base import Prober

MIN_LATENCY_MS = 50
LATENCY_SPAN_MS = 600
SUCCESS_PROBABILITY = 0.8
FAILURE_CODES: tuple[int, ...] = (400, 404, 500)


class SimulatedProber(Prober):
    """Prober that draws outcomes from a random source.

    Args:
        rng: Random source; pass a seeded ``random.Random`` for repeatable runs.
    """

    mode = "simulated"

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    async def _probe(self, endpoint: Endpoint) -> ProbeOutcome:
        latency_ms = int(self._rng.random() * LATENCY_SPAN_MS) + MIN_LATENCY_MS
        if self._rng.random() < SUCCESS_PROBABILITY:
            response_code = 200
        else:
            response_code = FAILURE_CODES[int(self._rng.random() * len(FAILURE_CODES))]
        return ProbeOutcome(response_code=response_code, latency_ms=latency_ms)
