"""Domain models shared by the schedule, countdown and console layers."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import NamedTuple, Optional


class PauseKind(enum.Enum):
    ACTIVE = "active"
    PAUSED_WEEKEND = "paused_weekend"
    PAUSED_BEFORE_WORK = "paused_before_work"
    PAUSED_AFTER_WORK = "paused_after_work"
    PAUSED_LUNCH = "paused_lunch"
    PAUSED_AUTO_PAUSE = "paused_auto_pause"


@dataclass(frozen=True, slots=True)
class PauseDecision:
    """Outcome of evaluating the schedule at a single instant."""

    kind: PauseKind
    reason: str

    @property
    def is_paused(self) -> bool:
        return self.kind is not PauseKind.ACTIVE


@dataclass(frozen=True, slots=True)
class AutoPauseState:
    """Snapshot of the auto-pause countdown.

    ``configured_duration`` is ``None`` while auto-pause is set to "never";
    ``deadline`` is ``None`` while the countdown is not armed.
    """

    configured_duration: Optional[timedelta]
    deadline: Optional[datetime] = None

    @property
    def is_armed(self) -> bool:
        return self.deadline is not None


class StatusTier(enum.Enum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"
    IDLE = "idle"
    INFO = "info"
    ERROR = "error"


class StatusLine(NamedTuple):
    """A line of status text destined for a fixed row of the display."""

    row: int
    text: str
    tier: StatusTier = StatusTier.INFO


class Modifier(enum.Flag):
    NONE = 0
    SHIFT = enum.auto()
    CTRL = enum.auto()
    ALT = enum.auto()


@dataclass(frozen=True, slots=True)
class KeyEvent:
    key: str
    modifiers: Modifier = Modifier.NONE

    @property
    def any_modifier(self) -> bool:
        return bool(self.modifiers)
