"""Middleware package: error hierarchy and exception handlers."""

from uptime_monitor.middleware.error_handler import (
    ConfigurationError,
    DomainNotFoundError,
    InvalidURLError,
    MonitorError,
    ProbeError,
    ProbeTimeoutError,
    SinkWriteError,
    register_error_handlers,
)

__all__ = [
    "ConfigurationError",
    "DomainNotFoundError",
    "InvalidURLError",
    "MonitorError",
    "ProbeError",
    "ProbeTimeoutError",
    "SinkWriteError",
    "register_error_handlers",
]
