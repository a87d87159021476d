"""Probers: the capability that turns an endpoint into a probe outcome."""

from __future__ import annotations

from uptime_monitor.config.settings import MonitorSettings
from uptime_monitor.probes.base import Prober
from uptime_monitor.probes.http import HttpProber
from uptime_monitor.probes.simulated import SimulatedProber


def build_prober(settings: MonitorSettings) -> Prober:
    """Select the prober implementation configured by ``probe_mode``."""
    if settings.probe_mode == "http":
        return HttpProber(timeout_seconds=settings.probe_timeout_seconds)
    return SimulatedProber()


__all__ = ["HttpProber", "Prober", "SimulatedProber", "build_prober"]
