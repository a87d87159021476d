"""Cumulative per-domain availability.

Counters are keyed by the hostname of each result's URL and kept in the order
domains were first seen. A result whose URL has no extractable hostname is
left out of the counters (it still appears in the cycle log) and a warning is
logged; the rest of the batch is aggregated normally.

Percentages round half up: 1 of 8 checks passed is 12.5%, reported as 13%.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from urllib.parse import urlparse

from uptime_monitor.middleware.error_handler import InvalidURLError
from uptime_monitor.models.results import DomainStats, Result

logger = logging.getLogger(__name__)


def extract_hostname(url: str) -> str:
    """Return the lower-cased host component of *url*.

    Raises
    ------
    InvalidURLError
        If the URL cannot be parsed or has no host.
    """
    try:
        hostname = urlparse(url).hostname
    except ValueError as exc:
        raise InvalidURLError(f"Cannot parse URL {url!r}: {exc}", url=url) from exc
    if not hostname:
        raise InvalidURLError(f"URL {url!r} has no hostname", url=url)
    return hostname


def availability_percentage(success_count: int, total_count: int) -> int:
    """Whole-number percentage of passed checks, rounding half up."""
    if total_count <= 0:
        return 0
    return (success_count * 200 + total_count) // (total_count * 2)


class CumulativeState:
    """Insertion-ordered mapping of hostname to DomainStats.

    Owned by a single scheduler and mutated only between cycles. Hand out
    ``copy()`` to anyone who needs to read it concurrently.
    """

    def __init__(self, stats: dict[str, DomainStats] | None = None) -> None:
        self._stats: dict[str, DomainStats] = stats if stats is not None else {}

    def get(self, domain: str) -> DomainStats | None:
        return self._stats.get(domain)

    def get_or_create(self, domain: str) -> DomainStats:
        if domain not in self._stats:
            self._stats[domain] = DomainStats()
        return self._stats[domain]

    def items(self) -> Iterator[tuple[str, DomainStats]]:
        return iter(self._stats.items())

    def copy(self) -> CumulativeState:
        return CumulativeState(copy.deepcopy(self._stats))

    def as_dict(self) -> dict[str, tuple[int, int]]:
        """``{domain: (success_count, total_count)}``, mainly for comparisons."""
        return {d: (s.success_count, s.total_count) for d, s in self._stats.items()}

    def __iter__(self) -> Iterator[str]:
        return iter(self._stats)

    def __len__(self) -> int:
        return len(self._stats)

    def __contains__(self, domain: object) -> bool:
        return domain in self._stats


@dataclass(frozen=True)
class DomainAvailability:
    """One line of the availability report."""

    domain: str
    success_count: int
    total_count: int
    percentage: int

    def line(self) -> str:
        return (
            f"{self.domain} has {self.percentage}% availability percentage "
            f"({self.success_count}/{self.total_count} checks passed)"
        )


@dataclass(frozen=True)
class AvailabilityReport:
    """Availability for every known domain, in first-seen order."""

    domains: tuple[DomainAvailability, ...]

    @classmethod
    def from_state(cls, state: CumulativeState) -> AvailabilityReport:
        return cls(
            domains=tuple(
                DomainAvailability(
                    domain=domain,
                    success_count=stats.success_count,
                    total_count=stats.total_count,
                    percentage=availability_percentage(
                        stats.success_count, stats.total_count
                    ),
                )
                for domain, stats in state.items()
            )
        )

    def lines(self) -> list[str]:
        return [entry.line() for entry in self.domains]


def update_and_report(
    state: CumulativeState,
    results: Iterable[Result],
    cycle: int | None = None,
) -> tuple[CumulativeState, AvailabilityReport]:
    """Fold *results* into *state* and report availability for every domain.

    *state* is updated in place and returned for convenience.
    """
    for result in results:
        try:
            domain = extract_hostname(result.url)
        except InvalidURLError as exc:
            logger.warning(
                "Excluding result for %s from availability: %s",
                result.endpoint_name,
                exc.message,
                extra={
                    "cycle": cycle,
                    "endpoint_name": result.endpoint_name,
                    "url": result.url,
                },
            )
            continue
        state.get_or_create(domain).record(success=result.is_up)

    return state, AvailabilityReport.from_state(state)
