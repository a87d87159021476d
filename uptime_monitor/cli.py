"""Command-line entry point.

Runs the scheduler directly, or with ``--serve`` runs the status API under
uvicorn with the scheduler as a background task.

Exit codes: 0 after a graceful stop (SIGINT/SIGTERM), 1 on configuration
errors and on any unrecovered error from the scheduler loop, 2 on invalid
arguments.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
from collections.abc import Sequence

import uvicorn
from pydantic import ValidationError

from uptime_monitor.config.endpoints import load_endpoints
from uptime_monitor.config.settings import MonitorSettings
from uptime_monitor.logging_config import configure_logging
from uptime_monitor.main import build_scheduler, create_app
from uptime_monitor.middleware.error_handler import ConfigurationError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uptime-monitor",
        description="Periodically probe endpoints and report per-domain availability.",
    )
    parser.add_argument("--config", dest="config_path", help="endpoint YAML file")
    parser.add_argument("--log-file", dest="log_file", help="cycle log file (appended)")
    parser.add_argument(
        "--interval", dest="interval_seconds", type=float, help="seconds between cycles"
    )
    parser.add_argument(
        "--probe-mode", dest="probe_mode", choices=["simulated", "http"]
    )
    parser.add_argument("--log-level", dest="log_level")
    parser.add_argument(
        "--serve", action="store_true", help="also serve the status API"
    )
    return parser


def load_settings(args: argparse.Namespace) -> MonitorSettings:
    """Settings from the environment, overridden by explicit CLI flags."""
    overrides = {
        key: value
        for key, value in vars(args).items()
        if key != "serve" and value is not None
    }
    return MonitorSettings(**overrides)


async def run_scheduler(settings: MonitorSettings) -> None:
    """Load endpoints and run the scheduler until SIGINT/SIGTERM."""
    endpoints = load_endpoints(settings.config_path)
    scheduler, log_sink = build_scheduler(settings, endpoints)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, scheduler.stop)
        except NotImplementedError:
            logger.debug("Signal handlers not supported on this platform")

    try:
        await scheduler.run()
    finally:
        log_sink.close()


async def serve(settings: MonitorSettings) -> None:
    """Run the status API; fail if the scheduler loop dies."""
    failures: list[BaseException] = []
    server: uvicorn.Server | None = None

    def _on_scheduler_error(exc: BaseException) -> None:
        failures.append(exc)
        if server is not None:
            server.should_exit = True

    app = create_app(settings, on_scheduler_error=_on_scheduler_error)
    config = uvicorn.Config(
        app,
        host=settings.api_host,
        port=settings.api_port,
        # logging already setup
        log_config=None,
    )
    server = uvicorn.Server(config)
    await server.serve()

    if failures:
        raise failures[0]
    if not server.started:
        raise RuntimeError("Status API failed to start")


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args)
    except ValidationError as exc:
        configure_logging()
        logger.error("Invalid settings: %s", exc)
        return EXIT_FAILURE

    configure_logging(settings.log_level)

    try:
        if args.serve:
            asyncio.run(serve(settings))
        else:
            asyncio.run(run_scheduler(settings))
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc.message)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return EXIT_OK
    except Exception:
        logger.exception("Uptime monitor failed")
        return EXIT_FAILURE

    return EXIT_OK
