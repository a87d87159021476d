"""Shared test fixtures and hypothesis strategies for the uptime monitor test suite."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

import pytest
from hypothesis import strategies as st

from uptime_monitor.config.endpoints import Endpoint
from uptime_monitor.config.settings import MonitorSettings
from uptime_monitor.models.results import ProbeOutcome, Result, Status
from uptime_monitor.probes.base import Prober


# ---------------------------------------------------------------------------
# Keep the environment from leaking into MonitorSettings
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clear_uptime_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove UPTIME_* variables so settings defaults are predictable."""
    import os

    for key in list(os.environ):
        if key.startswith("UPTIME_"):
            monkeypatch.delenv(key)


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class ScriptedProber(Prober):
    """Prober that returns pre-arranged outcomes per endpoint name.

    Each endpoint name maps to a list consumed one item per probe. An item is
    either a ``(code, latency)`` tuple or an exception instance to raise.
    """

    mode = "scripted"

    def __init__(self, script: dict[str, list[object]] | None = None) -> None:
        self._script = {name: list(items) for name, items in (script or {}).items()}
        self.calls: list[str] = []

    def push(self, name: str, *items: object) -> None:
        self._script.setdefault(name, []).extend(items)

    async def _probe(self, endpoint: Endpoint) -> ProbeOutcome:
        self.calls.append(endpoint.name)
        item = self._script[endpoint.name].pop(0)
        if isinstance(item, BaseException):
            raise item
        code, latency = item  # type: ignore[misc]
        return ProbeOutcome(response_code=code, latency_ms=latency)


class FakeTimer:
    """Timer that never sleeps; requests a stop after ``stop_after`` waits."""

    def __init__(self, stop_after: int | None = None) -> None:
        self.waits: list[float] = []
        self._stop_after = stop_after
        self.on_wait: list = []

    async def wait(self, seconds: float, stop_event: asyncio.Event) -> bool:
        self.waits.append(seconds)
        for callback in self.on_wait:
            callback(len(self.waits))
        if self._stop_after is not None and len(self.waits) >= self._stop_after:
            stop_event.set()
        return stop_event.is_set()


class ListReporter:
    """Reporter that keeps every report it receives."""

    def __init__(self) -> None:
        self.reports: list = []

    def report(self, report) -> None:
        self.reports.append(report)


def make_result(
    url: str,
    status: Status = Status.UP,
    name: str = "ep",
    code: int | None = None,
    latency: int = 100,
) -> Result:
    return Result(
        endpoint_name=name,
        url=url,
        status=status,
        response_code=code if code is not None else (200 if status == Status.UP else 500),
        latency_ms=latency,
        reason="" if status == Status.UP else "(response code is not in range 200–299)",
    )


def make_endpoints(pairs: Iterable[tuple[str, str]]) -> list[Endpoint]:
    return [Endpoint(name=name, url=url) for name, url in pairs]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path) -> MonitorSettings:
    """Test settings writing to a temporary directory."""
    return MonitorSettings(
        config_path=str(tmp_path / "config.yaml"),
        log_file=str(tmp_path / "health_check.log"),
        sink_backoff_base_seconds=0,
    )


@pytest.fixture
def two_endpoints() -> list[Endpoint]:
    return make_endpoints(
        [("A", "http://a.example.com"), ("B", "http://b.example.com")]
    )


# ---------------------------------------------------------------------------
# Hypothesis strategies (reusable across property tests)
# ---------------------------------------------------------------------------

response_codes = st.sampled_from([200, 201, 204, 301, 400, 404, 500, 503])
latencies = st.integers(min_value=0, max_value=5000)
probe_outcomes = st.builds(ProbeOutcome, response_code=response_codes, latency_ms=latencies)

hostnames = st.from_regex(r"[a-z]{1,8}\.(example|test)\.(com|org)", fullmatch=True)
urls = st.builds(
    lambda scheme, host, path: f"{scheme}://{host}{path}",
    st.sampled_from(["http", "https"]),
    hostnames,
    st.sampled_from(["", "/", "/health", "/api/v1/status"]),
)
invalid_urls = st.sampled_from(["", "not a url", "example.com/path", "http://", "/relative"])

results = st.builds(
    make_result,
    url=urls,
    status=st.sampled_from(list(Status)),
)
result_batches = st.lists(results, min_size=0, max_size=30)
