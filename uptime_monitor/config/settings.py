"""Pydantic Settings for the uptime monitor.

All environment variables use the UPTIME_ prefix.
Example: UPTIME_CONFIG_PATH=/etc/uptime/config.yaml, UPTIME_PROBE_MODE=http
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class MonitorSettings(BaseSettings):
    """Monitor configuration validated from environment variables."""

    # Inputs / outputs
    config_path: str = "config.yaml"  # YAML list of endpoints
    log_file: str = "health_check.log"  # Durable cycle log (append-only)
    log_level: str = "INFO"

    # Scheduling
    interval_seconds: float = Field(default=15, ge=0)

    # Probing
    probe_mode: Literal["simulated", "http"] = "simulated"
    probe_timeout_seconds: float = Field(default=5.0, gt=0)
    max_concurrent_probes: int = Field(default=10, ge=1)

    # Cycle log sink
    sink_max_retries: int = Field(default=3, ge=1)
    sink_backoff_base_seconds: float = Field(default=1.0, ge=0)  # 1s, 2s, 4s

    # Status API
    api_host: str = "127.0.0.1"
    api_port: int = Field(default=8001, ge=1, le=65535)

    model_config = {"env_prefix": "UPTIME_"}
