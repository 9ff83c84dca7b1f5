"""Pointer-nudge capabilities."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class PointerNudger(Protocol):
    def nudge(self, dx: int, dy: int) -> None: ...


class PyAutoGuiNudger:
    """Moves the real pointer relative to its current position."""

    def __init__(self) -> None:
        import pyautogui

        self._pyautogui = pyautogui

    def nudge(self, dx: int, dy: int) -> None:
        # Skip pyautogui's post-call sleep; the loop has its own cadence.
        self._pyautogui.move(dx, dy, _pause=False)


class LoggingNudger:
    """Dry-run nudger that only records the requested offsets."""

    def __init__(self) -> None:
        self.last_move: Optional[tuple[int, int]] = None
        self.count = 0

    def nudge(self, dx: int, dy: int) -> None:
        self.last_move = (dx, dy)
        self.count += 1
        logger.debug("Dry run: would move pointer by (%d, %d)", dx, dy)
