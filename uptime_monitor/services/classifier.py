"""UP/DOWN classification of a probe outcome.

An outcome is UP if and only if the response code is 200 and the latency is
below 500 ms. When both conditions fail, the latency reason wins.
"""

from __future__ import annotations

from uptime_monitor.models.results import ProbeOutcome, Status

HEALTHY_RESPONSE_CODE = 200
LATENCY_THRESHOLD_MS = 500

LATENCY_REASON = "(response latency is not less than 500 ms)"
RESPONSE_CODE_REASON = "(response code is not in range 200–299)"


def classify(outcome: ProbeOutcome) -> tuple[Status, str]:
    """Return ``(status, reason)`` for *outcome*; reason is empty when UP."""
    if outcome.latency_ms >= LATENCY_THRESHOLD_MS:
        return Status.DOWN, LATENCY_REASON
    if outcome.response_code != HEALTHY_RESPONSE_CODE:
        return Status.DOWN, RESPONSE_CODE_REASON
    return Status.UP, ""
