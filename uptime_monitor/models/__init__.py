"""Public models for the uptime monitor."""

from uptime_monitor.models.responses import ApiResponse, DomainAvailabilityView
from uptime_monitor.models.results import DomainStats, ProbeOutcome, Result, Status

__all__ = [
    "ApiResponse",
    "DomainAvailabilityView",
    "DomainStats",
    "ProbeOutcome",
    "Result",
    "Status",
]
