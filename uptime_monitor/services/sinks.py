"""Output sinks for cycle results.

``CycleLogSink`` appends one block per cycle to a durable, append-only file.
Failed writes are retried with exponential backoff; when retries are exhausted
``SinkWriteError`` is raised. A cycle's log is never dropped silently.

``ConsoleReporter`` prints the availability report to a terminal stream. It
is not durable and does not retry.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from collections.abc import Awaitable, Callable, Sequence
from typing import IO

from uptime_monitor.middleware.error_handler import SinkWriteError
from uptime_monitor.models.results import Result
from uptime_monitor.services.aggregator import AvailabilityReport

logger = logging.getLogger(__name__)


def format_result_line(result: Result) -> str:
    return (
        f"● Endpoint with name {result.endpoint_name} has HTTP response code "
        f"{result.response_code} and response latency {result.latency_ms} ms "
        f"=> {result.status.value} {result.reason}"
    )


def format_cycle_block(
    cycle: int, results: Sequence[Result], interval_seconds: float = 15
) -> str:
    """Render the log block for one cycle, trailing newline included."""
    start_seconds = (cycle - 1) * interval_seconds
    if float(start_seconds).is_integer():
        start_seconds = int(start_seconds)
    lines = [f"Test cycle #{cycle} begins at time = {start_seconds} seconds:"]
    lines.extend(format_result_line(result) for result in results)
    lines.append(f"Test cycle #{cycle} ends. The program logs to the console:")
    return "\n".join(lines) + "\n"


class CycleLogSink:
    """Append-only cycle log file.

    The file is held as an unbuffered ``O_APPEND`` descriptor, so a failed
    write leaves nothing pending in a userspace buffer. Before a retry the
    file is truncated back to its size when the append began, so a block that
    was partly or fully written before the failure is never duplicated.

    Parameters
    ----------
    path:
        Log file path. Created if missing. Content written by earlier cycles
        or earlier runs is never truncated.
    max_retries:
        Attempts per append before giving up (default 3).
    backoff_base_seconds:
        Base backoff in seconds. Schedule: base, 2*base, 4*base...
    interval_seconds:
        Scheduler interval, used for the nominal start time of each cycle.
    sleep:
        Awaitable sleep used between retries (injectable for tests).
    """

    def __init__(
        self,
        path: str,
        *,
        max_retries: int = 3,
        backoff_base_seconds: float = 1.0,
        interval_seconds: float = 15,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._path = path
        self._max_retries = max_retries
        self._backoff_base = backoff_base_seconds
        self._interval_seconds = interval_seconds
        self._sleep = sleep
        self._fd: int | None = None

    @property
    def path(self) -> str:
        return self._path

    def open(self) -> None:
        """Open the log file for appending. Safe to call more than once."""
        if self._fd is None:
            self._fd = os.open(self._path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, 0o644)

    def close(self) -> None:
        if self._fd is not None:
            fd, self._fd = self._fd, None
            os.close(fd)

    async def append(self, cycle: int, results: Sequence[Result]) -> None:
        """Durably append the block for *cycle*.

        Raises
        ------
        SinkWriteError
            If every attempt failed.
        """
        block = format_cycle_block(cycle, results, self._interval_seconds)
        start_offset: int | None = None
        last_exception: OSError | None = None

        for attempt in range(self._max_retries):
            try:
                self.open()
                if start_offset is None:
                    start_offset = self._size()
                else:
                    self._rewind(start_offset)
                self._write(block)
                return
            except OSError as exc:
                last_exception = exc
                self._discard()
                backoff = self._backoff_base * 2**attempt
                logger.warning(
                    "Cycle log write failed (attempt %d/%d) for %s, retrying in %.1fs",
                    attempt + 1,
                    self._max_retries,
                    self._path,
                    backoff,
                    extra={
                        "cycle": cycle,
                        "retry_attempts": attempt + 1,
                        "error_reason": str(exc),
                    },
                )
                if attempt < self._max_retries - 1:
                    await self._sleep(backoff)

        logger.error(
            "Failed to write cycle #%d to %s after %d attempts",
            cycle,
            self._path,
            self._max_retries,
            extra={"cycle": cycle, "retry_attempts": self._max_retries},
        )
        raise SinkWriteError(
            f"Failed to append cycle #{cycle} to {self._path} "
            f"after {self._max_retries} attempts",
            path=self._path,
            cycle=cycle,
        ) from last_exception

    def _size(self) -> int:
        assert self._fd is not None
        return os.fstat(self._fd).st_size

    def _rewind(self, offset: int) -> None:
        """Drop anything a failed attempt left past *offset*."""
        assert self._fd is not None
        if self._size() > offset:
            logger.info("Truncating %s to %d bytes before retrying", self._path, offset)
            os.ftruncate(self._fd, offset)

    def _discard(self) -> None:
        """Drop the descriptor after a failure; a close error is not retried."""
        try:
            self.close()
        except OSError as exc:
            logger.debug("Closing %s after a failed write also failed: %s", self._path, exc)

    def _write(self, block: str) -> None:
        assert self._fd is not None
        data = memoryview(block.encode("utf-8"))
        while data:
            written = os.write(self._fd, data)
            data = data[written:]
        os.fsync(self._fd)



class ConsoleReporter:
    """Prints the availability report, one line per known domain."""

    def __init__(self, stream: IO[str] | None = None) -> None:
        self._stream = stream

    def report(self, report: AvailabilityReport) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        try:
            for line in report.lines():
                stream.write(line + "\n")
            stream.write("\n")
            stream.flush()
        except OSError as exc:
            raise SinkWriteError(f"Failed to write availability report: {exc}") from exc
