"""Keyboard command handling."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

from .activity import StatusDisplay
from .auto_pause import AutoPauseController
from .models import KeyEvent, Modifier

logger = logging.getLogger(__name__)

TOGGLE_KEY = "s"
FORCE_RESUME_KEY = "r"
CLEAR_KEY = "c"
RESET_KEY = "0"
INCREMENT_KEYS = frozenset({"+", "="})
DECREMENT_KEYS = frozenset({"-", "_"})
QUIT_KEYS = frozenset({"x", "escape"})

_HOUR_PRESETS = {str(n): timedelta(hours=n) for n in range(1, 10)}
_MODIFIED_PRESETS = {
    "1": timedelta(minutes=15),
    "2": timedelta(minutes=30),
    "3": timedelta(minutes=45),
}


def _noop() -> None:
    return None


class CommandDispatcher:
    """Translates key events into auto-pause changes and session control."""

    def __init__(
        self,
        controller: AutoPauseController,
        display: StatusDisplay,
        request_refresh: Callable[[], None] = _noop,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.controller = controller
        self._display = display
        self._request_refresh = request_refresh
        self._clock = clock

    def run(
        self,
        events: Iterable[Optional[KeyEvent]],
        keep_running: Callable[[], bool] = lambda: True,
    ) -> None:
        """Consume events until a quit key arrives.

        ``None`` entries are idle polls; they give the loop a chance to notice
        that ``keep_running`` turned false.
        """
        for event in events:
            if not keep_running():
                logger.info("Background task ended; leaving command loop.")
                return
            if event is None:
                continue
            if not self.handle(event):
                return

    def handle(self, event: KeyEvent) -> bool:
        """Apply one key event; returns False when the session should end."""
        key = event.key.lower()
        now = self._clock()

        if key in QUIT_KEYS or (key == CLEAR_KEY and Modifier.CTRL in event.modifiers):
            logger.info("Quit requested.")
            return False
        if key == CLEAR_KEY:
            self._display.clear()
            self._request_refresh()
            return True

        settings = self.controller.settings
        changed = False
        if key == TOGGLE_KEY:
            self.controller.toggle_auto_pause(now)
            changed = True
        elif key == FORCE_RESUME_KEY:
            self.controller.force_resume_now(now)
            changed = True
        elif key == RESET_KEY:
            changed = self.controller.reset()
        elif key in _HOUR_PRESETS:
            preset = _HOUR_PRESETS[key]
            if event.any_modifier:
                preset = _MODIFIED_PRESETS.get(key, preset)
            changed = self.controller.set_configured_duration(preset, now)
        elif key in INCREMENT_KEYS or key in DECREMENT_KEYS:
            step = settings.fine_step if event.any_modifier else settings.coarse_step
            init = settings.fine_init if event.any_modifier else settings.coarse_init
            if key in DECREMENT_KEYS:
                step = -step
            changed = self.controller.adjust_duration(step, init, now)
        else:
            logger.debug("Ignoring key %r (%s)", event.key, event.modifiers)

        if changed:
            self._request_refresh()
        return True
