#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""One-shot and periodic timers, behind a small protocol so that callers (and
tests) can swap the threading implementation."""

import logging
import threading
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class Timer(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


class TimerFactory(Protocol):
    """Callable type def for creating a timer which runs `callback` once,
    `delay_seconds` after it is started."""

    def __call__(self, delay_seconds: float, callback: Callable[[], None]) -> Timer: ...


def threading_timer(delay_seconds: float, callback: Callable[[], None]) -> Timer:
    timer = threading.Timer(delay_seconds, callback)
    timer.daemon = True
    return timer


class PeriodicTask:
    """Runs `callback` every `interval_seconds` until stopped.

    The presentation layer uses this to request a status refresh and a
    re-render at a fixed rate.
    """

    def __init__(
        self,
        interval_seconds: float,
        callback: Callable[[], None],
        timer_factory: TimerFactory = threading_timer,
    ):
        if interval_seconds <= 0:
            raise ValueError("The interval must be positive.")
        self.interval_seconds = interval_seconds
        self.callback = callback
        self._timer_factory = timer_factory
        self._timer: Timer | None = None
        self._lock = threading.Lock()
        self._running = False
        self._generation = 0

    @property
    def running(self) -> bool:
        return self._running

    def _schedule(self) -> None:
        generation = self._generation
        self._timer = self._timer_factory(
            self.interval_seconds, lambda: self._run(generation)
        )
        self._timer.start()

    def _is_current(self, generation: int) -> bool:
        return self._running and generation == self._generation

    def _run(self, generation: int) -> None:
        # ticks scheduled before the last `start` belong to a stopped chain
        with self._lock:
            if not self._is_current(generation):
                return
        try:
            self.callback()
        except Exception:
            logger.exception("Periodic task failed")
        with self._lock:
            if self._is_current(generation):
                self._schedule()

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            self._running = True
            self._generation += 1
            self._schedule()

    def stop(self) -> None:
        with self._lock:
            self._running = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
