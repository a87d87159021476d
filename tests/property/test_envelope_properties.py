"""Property tests for JSON envelope consistency.

Validates that status API errors conform to the { success, data, error, meta }
envelope schema, with the status code and message of the raised MonitorError.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from hypothesis import given, settings
from hypothesis import strategies as st

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


# ---------------------------------------------------------------------------
# Minimal test app
# ---------------------------------------------------------------------------

_ERROR_CLASSES: dict[str, type[MonitorError]] = {
    cls.__name__: cls
    for cls in (
        ConfigurationError,
        DomainNotFoundError,
        InvalidURLError,
        ProbeError,
        ProbeTimeoutError,
        SinkWriteError,
    )
}


def _create_test_app() -> FastAPI:
    """Create a minimal FastAPI app with error handlers registered."""
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/raise/{slug}")
    async def raise_error(slug: str, domain: str | None = None) -> None:
        if domain is None:
            raise _ERROR_CLASSES[slug]()
        raise _ERROR_CLASSES[slug](domain=domain)

    @app.get("/raise-unhandled")
    async def raise_unhandled() -> None:
        raise RuntimeError("unexpected failure")

    return app


_client = TestClient(_create_test_app(), raise_server_exceptions=False)


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

error_slugs = st.sampled_from(sorted(_ERROR_CLASSES))
domains = st.from_regex(r"[a-z]{1,10}\.(com|org|test)", fullmatch=True)


@settings(max_examples=50)
@given(slug=error_slugs)
def test_errors_render_their_status_and_message(slug: str) -> None:
    cls = _ERROR_CLASSES[slug]
    resp = _client.get(f"/raise/{slug}")
    body = resp.json()

    assert set(body) == {"success", "data", "error", "meta"}
    assert resp.status_code == cls.status_code
    assert body["success"] is False
    assert body["data"] is None
    assert body["error"] == cls.message
    assert body["meta"] is None


@settings(max_examples=50)
@given(slug=error_slugs, domain=domains)
def test_error_details_become_meta(slug: str, domain: str) -> None:
    body = _client.get(f"/raise/{slug}", params={"domain": domain}).json()
    assert body["meta"] == {"domain": domain}


def test_unhandled_exception_returns_generic_500_envelope() -> None:
    resp = _client.get("/raise-unhandled")
    body = resp.json()

    assert resp.status_code == 500
    assert body == {
        "success": False,
        "data": None,
        "error": "Internal server error",
        "meta": None,
    }
