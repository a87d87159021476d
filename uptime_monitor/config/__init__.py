"""Configuration module: settings and endpoint definitions."""

from uptime_monitor.config.endpoints import Endpoint, load_endpoints
from uptime_monitor.config.settings import MonitorSettings

__all__ = [
    "Endpoint",
    "MonitorSettings",
    "load_endpoints",
]
