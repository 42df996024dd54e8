"""Countdown for the quiz time limit, driven by the Qt event loop."""

from __future__ import annotations

from collections.abc import Callable
import logging
import math
import time

from PySide6.QtCore import QObject, Qt, QTimer, Signal

from quiz_taker.constants.quiz_constants import TIMER_TICK_INTERVAL_MS

logger = logging.getLogger(__name__)


class CountdownTimer(QObject):
    """Counts remaining seconds down to zero and signals expiry once.

    Each tick removes at least one second. Remaining time is also checked
    against a monotonic deadline, so time spent while the process was
    suspended still counts against the limit.
    """

    remaining_changed = Signal(int)
    expired = Signal()

    def __init__(
        self,
        total_seconds: int,
        interval_ms: int = TIMER_TICK_INTERVAL_MS,
        clock: Callable[[], float] = time.monotonic,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        if total_seconds < 0:
            raise ValueError("Countdown length must not be negative.")
        self._clock = clock
        self._remaining: int = total_seconds
        self._deadline: float | None = None
        self._running: bool = False
        self._expired: bool = False

        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_tick)

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    def is_running(self) -> bool:
        return self._running

    def has_expired(self) -> bool:
        return self._expired

    def start(self) -> None:
        if self._running or self._expired:
            return
        self._running = True
        self._deadline = self._clock() + self._remaining
        if self._remaining <= 0:
            self._finish()
            return
        self._timer.start()

    def stop(self) -> None:
        """Cancel the countdown. Safe to call repeatedly."""
        self._running = False
        if self._timer.isActive():
            self._timer.stop()

    def _on_tick(self) -> None:
        # A queued tick can still arrive after stop(); drop it.
        if not self._running or self._deadline is None:
            return
        by_clock = math.ceil(self._deadline - self._clock())
        self._remaining = max(0, min(self._remaining - 1, by_clock))
        self.remaining_changed.emit(self._remaining)
        if self._remaining == 0:
            self._finish()

    def _finish(self) -> None:
        self.stop()
        if self._expired:
            return
        self._expired = True
        logger.info("Countdown expired")
        self.expired.emit()
