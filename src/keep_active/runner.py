"""Wiring for interactive and headless sessions."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from .activity import ActivityLoop, StatusDisplay
from .auto_pause import AutoPauseController
from .config import AutoPauseSettings, LoopSettings, ScheduleSettings
from .models import StatusLine, StatusTier
from .pointer import LoggingNudger, PointerNudger, PyAutoGuiNudger
from .schedule import ScheduleEvaluator

logger = logging.getLogger(__name__)

HELP_LINE = StatusLine(
    4,
    "[S]tart/stop  [R] pause now  [0-9] preset  [+/-] adjust  [C]lear  [X] quit",
    StatusTier.INFO,
)


class ActivityRunner:
    """Manage the activity loop in a background thread."""

    def __init__(self, loop: ActivityLoop, join_timeout: float = 10.0) -> None:
        self.loop = loop
        self._join_timeout = join_timeout
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None

    def start(self) -> None:
        with self._lock:
            if self._thread and self._thread.is_alive():
                return
            stop_event = threading.Event()
            thread = threading.Thread(
                target=self.loop.run_until_stopped,
                args=(stop_event,),
                name="activity-loop",
                daemon=True,
            )
            self._thread = thread
            self._stop_event = stop_event
            thread.start()
            logger.info("Activity loop thread started.")

    def request_stop(self) -> None:
        """Signal cancellation without waiting for the loop to exit."""
        with self._lock:
            if self._stop_event is not None:
                self._stop_event.set()

    def stop(self) -> bool:
        """Signal cancellation and wait for the loop; returns True once it exited."""
        thread: Optional[threading.Thread] = None
        with self._lock:
            if not self._thread or not self._stop_event:
                return True
            self._stop_event.set()
            thread = self._thread
            self._thread = None
            self._stop_event = None
        thread.join(timeout=self._join_timeout)
        if thread.is_alive():
            logger.warning("Activity loop did not stop within %.1fs.", self._join_timeout)
            return False
        logger.info("Activity loop thread stopped.")
        return True

    def is_running(self) -> bool:
        with self._lock:
            return bool(self._thread and self._thread.is_alive())


def build_loop(
    display: StatusDisplay,
    *,
    schedule_settings: Optional[ScheduleSettings] = None,
    auto_pause_settings: Optional[AutoPauseSettings] = None,
    loop_settings: Optional[LoopSettings] = None,
    dry_run: bool = False,
    nudger: Optional[PointerNudger] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> ActivityLoop:
    if nudger is None:
        nudger = LoggingNudger() if dry_run else PyAutoGuiNudger()
    return ActivityLoop(
        evaluator=ScheduleEvaluator(schedule_settings),
        controller=AutoPauseController(auto_pause_settings),
        nudger=nudger,
        display=display,
        settings=loop_settings,
        clock=clock,
    )


def run_console_session(
    *,
    schedule_settings: Optional[ScheduleSettings] = None,
    auto_pause_settings: Optional[AutoPauseSettings] = None,
    loop_settings: Optional[LoopSettings] = None,
    dry_run: bool = False,
) -> None:
    """Run the interactive session until a quit key (or a fatal loop error)."""
    from .commands import CommandDispatcher
    from .console import ConsoleDisplay, ConsoleKeySource

    display = ConsoleDisplay(footer=HELP_LINE)
    loop = build_loop(
        display,
        schedule_settings=schedule_settings,
        auto_pause_settings=auto_pause_settings,
        loop_settings=loop_settings,
        dry_run=dry_run,
    )
    runner = ActivityRunner(loop)
    dispatcher = CommandDispatcher(loop.controller, display, loop.request_refresh)

    display.clear()
    runner.start()
    try:
        with ConsoleKeySource() as keys:
            dispatcher.run(keys.events(), keep_running=runner.is_running)
    except KeyboardInterrupt:
        logger.info("Interrupted; stopping session.")
    finally:
        runner.request_stop()
        display.message("wait to complete the background task")
        runner.stop()
        display.message("completed")

    if loop.failure is not None:
        display.message(f"Stopped after an error: {loop.failure}")
