"""Pausable wall-clock timer for measured workload invocations.

A :class:`Timer` accumulates elapsed time across any number of
start/stop cycles. The executor starts it right before calling a
workload and stops it right after; the workload may pause and resume it
to keep setup and cleanup out of the measurement.
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager

_NANOS_PER_MILLI = 1_000_000


def format_clock(nanos: int) -> str:
    """Render a nanosecond duration as ``HH:MM:SS.mmm``.

    Milliseconds are truncated, not rounded. Hours wrap at 24 because
    the value is rendered as a time of day.
    """
    millis_total = int(nanos) // _NANOS_PER_MILLI
    millis = millis_total % 1000
    seconds_total = millis_total // 1000
    hours = (seconds_total // 3600) % 24
    minutes = (seconds_total // 60) % 60
    seconds = seconds_total % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}"


class Timer:
    """Measure elapsed time, excluding paused intervals."""

    def __init__(self) -> None:
        self._accumulated = 0
        self._checkpoint = time.perf_counter_ns()
        self._stopped = True

    def start(self) -> None:
        """Start accumulating time. No-op while already running."""
        if self._stopped:
            self._checkpoint = time.perf_counter_ns()
            self._stopped = False

    def resume(self) -> None:
        """Alias of :meth:`start`."""
        self.start()

    def stop(self) -> None:
        """Add the running interval to the total. No-op while stopped."""
        if not self._stopped:
            self._accumulated += max(time.perf_counter_ns() - self._checkpoint, 0)
            self._stopped = True

    def pause(self) -> None:
        """Alias of :meth:`stop`."""
        self.stop()

    def reset(self) -> None:
        """Zero the accumulated time and leave the timer stopped."""
        self._accumulated = 0
        self._checkpoint = time.perf_counter_ns()
        self._stopped = True

    @property
    def running(self) -> bool:
        return not self._stopped

    def accumulated(self) -> int:
        """Total accumulated nanoseconds, including the in-flight interval."""
        if self._stopped:
            return self._accumulated
        return self._accumulated + max(time.perf_counter_ns() - self._checkpoint, 0)

    @property
    def accumulated_seconds(self) -> float:
        return self.accumulated() / 1e9

    @contextmanager
    def paused(self) -> Iterator[Timer]:
        """Exclude the body of a ``with`` block from the measurement.

        The timer is resumed on exit only if it was running on entry.
        """
        was_running = self.running
        self.pause()
        try:
            yield self
        finally:
            if was_running:
                self.resume()

    def __str__(self) -> str:
        return format_clock(self.accumulated())

    def __repr__(self) -> str:
        state = "running" if self.running else "stopped"
        return f"Timer({self.accumulated()}ns, {state})"
