"""In-memory models for probe outcomes, cycle results, and per-domain counters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Status(str, Enum):
    """Verdict for a single probe."""

    UP = "UP"
    DOWN = "DOWN"


@dataclass(frozen=True)
class ProbeOutcome:
    """Raw observation returned by a prober."""

    response_code: int
    latency_ms: int


@dataclass(frozen=True)
class Result:
    """Classified outcome for one endpoint in one cycle."""

    endpoint_name: str
    url: str
    status: Status
    response_code: int
    latency_ms: int
    reason: str = ""  # Empty unless DOWN

    @property
    def is_up(self) -> bool:
        return self.status == Status.UP


@dataclass
class DomainStats:
    """Cumulative counters for one hostname.

    Invariant: ``success_count <= total_count``.
    """

    success_count: int = 0
    total_count: int = 0

    def record(self, *, success: bool) -> None:
        self.total_count += 1
        if success:
            self.success_count += 1
