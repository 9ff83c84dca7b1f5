"""Auto-pause countdown shared between the activity loop and the key handler."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Optional

from .config import AutoPauseSettings
from .models import AutoPauseState

logger = logging.getLogger(__name__)


class AutoPauseController:
    """Owns the countdown deadline and its configured duration.

    Every read and write happens under a single lock so that compound updates
    such as a toggle never interleave with a snapshot taken by another thread.
    """

    def __init__(self, settings: Optional[AutoPauseSettings] = None) -> None:
        self.settings = settings or AutoPauseSettings()
        self._lock = threading.Lock()
        self._duration: Optional[timedelta] = self.settings.default_duration
        self._deadline: Optional[datetime] = None

    def snapshot(self) -> AutoPauseState:
        with self._lock:
            return AutoPauseState(self._duration, self._deadline)

    def remaining(self, now: datetime) -> Optional[timedelta]:
        """Time left before auto-pause kicks in, or ``None`` if not armed."""
        with self._lock:
            if self._deadline is None:
                return None
            return max(timedelta(0), self._deadline - now)

    def toggle_auto_pause(self, now: datetime) -> AutoPauseState:
        with self._lock:
            if self._duration is None:
                logger.debug("Auto-pause duration is 'never'; toggle ignored.")
            elif self._deadline is None:
                self._deadline = now + self._duration
                logger.info("Auto-pause armed until %s", self._deadline)
            else:
                self._deadline = None
                logger.info("Auto-pause disarmed.")
            return AutoPauseState(self._duration, self._deadline)

    def set_configured_duration(self, duration: timedelta, now: datetime) -> bool:
        """Replace the duration (clamped); returns whether it changed."""
        with self._lock:
            return self._apply_duration_locked(duration, now)

    def adjust_duration(self, step: timedelta, init: timedelta, now: datetime) -> bool:
        """Grow or shrink the duration, seeding it with ``init`` when "never"."""
        with self._lock:
            target = init if self._duration is None else self._duration + step
            return self._apply_duration_locked(target, now)

    def reset(self) -> bool:
        with self._lock:
            changed = self._duration != self.settings.default_duration or self._deadline is not None
            self._duration = self.settings.default_duration
            self._deadline = None
            return changed

    def force_resume_now(self, now: datetime) -> AutoPauseState:
        with self._lock:
            self._duration = self.settings.force_resume_duration
            self._deadline = now
            logger.info("Auto-pause forced at %s", now)
            return AutoPauseState(self._duration, self._deadline)

    def _apply_duration_locked(self, duration: timedelta, now: datetime) -> bool:
        clamped = min(max(duration, self.settings.min_duration), self.settings.max_duration)
        if clamped == self._duration:
            return False
        self._duration = clamped
        if self._deadline is not None:
            self._deadline = now + clamped
        logger.debug("Auto-pause duration set to %s (deadline=%s)", clamped, self._deadline)
        return True
