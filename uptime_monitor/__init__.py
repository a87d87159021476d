"""Periodic endpoint health checks with cumulative per-domain availability."""

__version__ = "1.0.0"
