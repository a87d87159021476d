"""Endpoint model and YAML loader.

The configuration file is a YAML list with one mapping per endpoint::

    - name: fetch index page
      url: https://fetch.com/
    - name: fetch careers page
      url: https://fetch.com/careers
      method: GET
      headers:
        user-agent: fetch-synthetic-monitor

Only ``name`` and ``url`` are required. Loading happens once before the
scheduler starts; any failure is fatal.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from uptime_monitor.middleware.error_handler import ConfigurationError

logger = logging.getLogger(__name__)


class Endpoint(BaseModel):
    """A named network target to be health-checked."""

    model_config = {"frozen": True}

    name: str = Field(min_length=1)
    url: str = Field(min_length=1)
    method: str = "GET"
    headers: dict[str, str] | None = None
    body: str | None = None

    @field_validator("name", "url", mode="before")
    @classmethod
    def _strip_required_text(cls, value: object) -> object:
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValueError("must be a non-empty string")
            return stripped
        return value


def load_endpoints(yaml_path: str) -> list[Endpoint]:
    """Parse the endpoints YAML file into typed Endpoint objects.

    Args:
        yaml_path: Path to the YAML configuration file.

    Returns:
        The endpoints in file order. Duplicates are kept.

    Raises:
        ConfigurationError: If the file is missing or unreadable, is not valid
            YAML, is not a list, or contains an invalid entry.
    """
    path = Path(yaml_path)

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            f"Cannot read endpoint configuration at {yaml_path}: {exc}",
            path=yaml_path,
        ) from exc

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"Failed to parse endpoint configuration YAML at {yaml_path}: {exc}",
            path=yaml_path,
        ) from exc

    if not isinstance(raw, list):
        raise ConfigurationError(
            f"Endpoint configuration at {yaml_path} must be a YAML list of endpoints",
            path=yaml_path,
        )

    endpoints: list[Endpoint] = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ConfigurationError(
                f"Endpoint #{index} in {yaml_path} must be a mapping with 'name' and 'url'",
                path=yaml_path,
                index=index,
            )
        try:
            endpoints.append(Endpoint.model_validate(item))
        except ValidationError as exc:
            fields = ", ".join(
                ".".join(str(loc) for loc in err["loc"]) for err in exc.errors()
            )
            raise ConfigurationError(
                f"Endpoint #{index} in {yaml_path} is invalid ({fields})",
                path=yaml_path,
                index=index,
            ) from exc

    logger.info("Loaded %d endpoints from %s", len(endpoints), yaml_path)
    return endpoints
