"""Health and availability endpoints.

- GET /health: service status and scheduler progress
- GET /availability: availability per domain, as of the last completed cycle
- GET /availability/{domain}: availability for a single domain

Availability is always read from a scheduler snapshot, never from live state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import APIRouter

from uptime_monitor.middleware.error_handler import DomainNotFoundError
from uptime_monitor.models.responses import ApiResponse, DomainAvailabilityView
from uptime_monitor.services.aggregator import AvailabilityReport

if TYPE_CHECKING:
    from uptime_monitor.services.scheduler import Scheduler


def _views(scheduler: "Scheduler") -> list[DomainAvailabilityView]:
    report = AvailabilityReport.from_state(scheduler.snapshot())
    return [
        DomainAvailabilityView(
            domain=entry.domain,
            percentage=entry.percentage,
            success_count=entry.success_count,
            total_count=entry.total_count,
        )
        for entry in report.domains
    ]


def create_status_router(*, scheduler: Any = None) -> APIRouter:
    """Factory that creates the status router with an injected scheduler.

    ``scheduler`` may also be a zero-argument callable returning the
    scheduler, for apps that build it during lifespan startup.
    """

    status_router = APIRouter(tags=["status"])

    def _scheduler() -> "Scheduler | None":
        if callable(scheduler):
            return scheduler()
        return scheduler

    @status_router.get("/health")
    async def health() -> dict:
        """Service health with scheduler progress."""
        current = _scheduler()
        if current is None:
            return ApiResponse(
                success=False,
                data={"status": "starting"},
                error="Scheduler not started",
            ).model_dump()

        return ApiResponse(
            success=True,
            data={
                "status": "healthy",
                "scheduler_state": current.state.value,
                "next_cycle": current.cycle_number,
                "endpoint_count": len(current.endpoints),
            },
        ).model_dump()

    @status_router.get("/availability")
    async def availability() -> dict:
        """Availability for every known domain, in first-seen order."""
        current = _scheduler()
        views = _views(current) if current is not None else []
        return ApiResponse(
            success=True,
            data=[view.model_dump() for view in views],
        ).model_dump()

    @status_router.get("/availability/{domain}")
    async def domain_availability(domain: str) -> dict:
        """Availability for one domain; 404 if it has not been probed."""
        current = _scheduler()
        views = _views(current) if current is not None else []
        for view in views:
            if view.domain == domain.lower():
                return ApiResponse(success=True, data=view.model_dump()).model_dump()
        raise DomainNotFoundError(
            f"No availability recorded for domain '{domain}'", domain=domain
        )

    return status_router
