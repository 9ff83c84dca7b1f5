"""Background loop that keeps the workstation looking active."""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Protocol

from .auto_pause import AutoPauseController
from .config import LoopSettings
from .models import AutoPauseState, PauseDecision, StatusLine, StatusTier
from .pointer import PointerNudger
from .schedule import ScheduleEvaluator

logger = logging.getLogger(__name__)

UPDATE_ROW = 0
STATUS_ROW = 2

WARNING_THRESHOLD = timedelta(minutes=10)
CRITICAL_THRESHOLD = timedelta(minutes=1)


class StatusDisplay(Protocol):
    def show(self, line: StatusLine) -> None: ...

    def clear(self) -> None: ...


@dataclass(slots=True)
class TickSchedule:
    next_update_at: datetime
    next_display_at: datetime


def format_hours_minutes(duration: timedelta) -> str:
    total_minutes = int(duration.total_seconds()) // 60
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}h  {minutes:02d}m"


def format_countdown(duration: timedelta) -> str:
    total_seconds = int(duration.total_seconds())
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}h  {minutes:02d}m  {secs:02d}s"


def countdown_tier(remaining: timedelta) -> StatusTier:
    if remaining < CRITICAL_THRESHOLD:
        return StatusTier.CRITICAL
    if remaining < WARNING_THRESHOLD:
        return StatusTier.WARNING
    return StatusTier.NORMAL


def auto_pause_status(state: AutoPauseState, now: datetime) -> StatusLine:
    """Describe the countdown as it should appear on the status row."""
    if state.configured_duration is None:
        return StatusLine(
            STATUS_ROW,
            "AutoPause: never   =>  pick a duration with [1]-[9] or [+]",
            StatusTier.IDLE,
        )
    duration_text = format_hours_minutes(state.configured_duration)
    if state.deadline is None:
        return StatusLine(
            STATUS_ROW,
            f"AutoPause: {duration_text}   =>  NOT STARTED (start with [S])",
            StatusTier.IDLE,
        )
    remaining = max(timedelta(0), state.deadline - now)
    return StatusLine(
        STATUS_ROW,
        f"AutoPause: {duration_text}   =>  remaining: {format_countdown(remaining)}"
        f"  => {state.deadline:%H:%M:%S}",
        countdown_tier(remaining),
    )


class ActivityLoop:
    """Ticks on a fixed interval, nudging the pointer unless paused."""

    def __init__(
        self,
        evaluator: ScheduleEvaluator,
        controller: AutoPauseController,
        nudger: PointerNudger,
        display: StatusDisplay,
        settings: Optional[LoopSettings] = None,
        clock: Callable[[], datetime] = datetime.now,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.evaluator = evaluator
        self.controller = controller
        self.settings = settings or LoopSettings()
        self._nudger = nudger
        self._display = display
        self._clock = clock
        self._rng = rng or random.Random()
        self._refresh_requested = threading.Event()
        self.failure: Optional[BaseException] = None
        self.last_decision: Optional[PauseDecision] = None

    def request_refresh(self) -> None:
        """Ask for the status row to be redrawn on the next tick."""
        self._refresh_requested.set()

    def run_until_stopped(self, stop_event: threading.Event) -> None:
        """Run until ``stop_event`` is set or a tick fails."""
        logger.info("Starting activity loop.")
        now = self._clock()
        schedule = TickSchedule(next_update_at=now, next_display_at=now)
        interval = self.settings.tick_interval.total_seconds()
        try:
            while not stop_event.is_set():
                self.tick(schedule)
                stop_event.wait(interval)
        except Exception as exc:
            self.failure = exc
            logger.exception("Activity loop failed; stopping.")
            self._report_failure(exc)
        finally:
            logger.info("Activity loop stopped.")

    def _report_failure(self, exc: Exception) -> None:
        try:
            self._display.show(StatusLine(UPDATE_ROW, f"ERROR: {exc}", StatusTier.ERROR))
        except Exception:
            logger.exception("Failed to show the loop error on the display.")

    def tick(self, schedule: TickSchedule) -> None:
        now = self._clock()
        if self._refresh_requested.is_set():
            self._refresh_requested.clear()
            schedule.next_display_at = now

        if now >= schedule.next_update_at:
            self.update(now)
            # Measured from now so a stalled tick does not cause a burst.
            schedule.next_update_at = now + self.settings.update_interval

        if now >= schedule.next_display_at:
            if self.refresh_display(now):
                schedule.next_update_at = now
            schedule.next_display_at = now + self.settings.display_interval

    def update(self, now: datetime) -> PauseDecision:
        decision = self.evaluator.evaluate(now, self.controller.snapshot())
        if decision.is_paused:
            line = StatusLine(UPDATE_ROW, decision.reason, StatusTier.IDLE)
        else:
            jitter = self.settings.jitter
            dx = self._rng.randrange(-jitter, jitter)
            dy = self._rng.randrange(-jitter, jitter)
            self._nudger.nudge(dx, dy)
            line = StatusLine(UPDATE_ROW, f"x={dx:4d}, y={dy:4d}", StatusTier.INFO)
        if decision != self.last_decision:
            logger.info("Pause state: %s", decision.reason)
        self.last_decision = decision
        self._display.show(line)
        return decision

    def refresh_display(self, now: datetime) -> bool:
        """Render the countdown; returns True once an armed countdown expired."""
        state = self.controller.snapshot()
        self._display.show(auto_pause_status(state, now))
        return state.deadline is not None and state.deadline <= now
