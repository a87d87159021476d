"""Global error hierarchy and FastAPI exception handlers.

All monitor-specific errors extend MonitorError. The engine raises and
recovers most of them locally (probe and URL failures become DOWN results or
skipped aggregation); configuration and sink failures are fatal. The FastAPI
exception handlers render the same errors for the status API in a consistent
JSON envelope: { success, data, error, meta }.
"""

from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Error hierarchy
# ---------------------------------------------------------------------------


class MonitorError(Exception):
    """Base error for all monitor-specific errors."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None, **kwargs: object) -> None:
        self.message = message or self.__class__.message
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(MonitorError):
    """Endpoint configuration is unreadable or structurally invalid."""

    message = "Invalid endpoint configuration"


class ProbeError(MonitorError):
    """A probe could not obtain a response from the endpoint.

    ``reason`` is the text shown on the DOWN line of the cycle log;
    ``latency_ms`` is the time spent before the failure, when known.
    """

    status_code = 502
    message = "Probe failed"
    reason: str = "(connection error)"

    def __init__(
        self,
        message: str | None = None,
        *,
        reason: str | None = None,
        latency_ms: int = 0,
        **kwargs: object,
    ) -> None:
        super().__init__(message, **kwargs)
        self.reason = reason or self.__class__.reason
        self.latency_ms = latency_ms


class ProbeTimeoutError(ProbeError):
    """The endpoint did not answer within the probe timeout."""

    status_code = 504
    message = "Probe timed out"
    reason = "(response timed out)"


class InvalidURLError(MonitorError):
    """A hostname could not be extracted from an endpoint URL."""

    status_code = 422
    message = "Invalid URL"


class SinkWriteError(MonitorError):
    """The cycle log or the availability report could not be written."""

    message = "Failed to write cycle output"


class DomainNotFoundError(MonitorError):
    """No availability has been recorded for the requested domain."""

    status_code = 404
    message = "Domain not found"


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------


def _envelope(
    status_code: int,
    error: str,
    meta: dict | None = None,
) -> JSONResponse:
    """Build a JSON envelope error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "data": None,
            "error": error,
            "meta": meta,
        },
    )


async def _monitor_error_handler(_request: Request, exc: MonitorError) -> JSONResponse:
    """Handle MonitorError subclasses."""
    meta = exc.details if exc.details else None
    return _envelope(exc.status_code, exc.message, meta=meta)


async def _validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle FastAPI / Pydantic RequestValidationError (422)."""
    field_errors = [
        {
            "field": " -> ".join(str(loc) for loc in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    return _envelope(
        status_code=422,
        error="Validation error",
        meta={"fields": field_errors},
    )


async def _unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions: log traceback, return generic 500."""
    logger.error(
        "Unhandled exception: %s\n%s",
        exc,
        traceback.format_exc(),
    )
    return _envelope(status_code=500, error="Internal server error")


# ---------------------------------------------------------------------------
# Registration helper
# ---------------------------------------------------------------------------


def register_error_handlers(app: FastAPI) -> None:
    """Wire up all exception handlers on the FastAPI application."""
    app.add_exception_handler(MonitorError, _monitor_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)  # type: ignore[arg-type]
