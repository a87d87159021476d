"""Health-check cycle engine: classify, run cycles, aggregate, schedule."""

from uptime_monitor.services.aggregator import (
    AvailabilityReport,
    CumulativeState,
    DomainAvailability,
    availability_percentage,
    extract_hostname,
    update_and_report,
)
from uptime_monitor.services.classifier import classify
from uptime_monitor.services.cycle_runner import CycleRunner
from uptime_monitor.services.scheduler import (
    AsyncioTimer,
    CycleSummary,
    Scheduler,
    SchedulerState,
)
from uptime_monitor.services.sinks import ConsoleReporter, CycleLogSink, format_cycle_block

__all__ = [
    "AsyncioTimer",
    "AvailabilityReport",
    "ConsoleReporter",
    "CumulativeState",
    "CycleLogSink",
    "CycleRunner",
    "CycleSummary",
    "DomainAvailability",
    "Scheduler",
    "SchedulerState",
    "availability_percentage",
    "classify",
    "extract_hostname",
    "format_cycle_block",
    "update_and_report",
]
