"""Configuration models and helpers for keep-active."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = range(7)


def parse_clock(value: str) -> time:
    """Parse ``HH:MM`` into a :class:`datetime.time`."""
    return datetime.strptime(value.strip(), "%H:%M").time()


@dataclass(frozen=True, slots=True)
class ScheduleSettings:
    """Weekly work-hours table used to decide when activity is suppressed."""

    work_start: time = time(7, 0)
    work_end: time = time(18, 30)
    short_day: int = FRIDAY
    short_day_end: time = time(17, 30)
    lunch_start: time = time(11, 45)
    lunch_end: time = time(12, 30)
    weekend_days: frozenset[int] = frozenset({SATURDAY, SUNDAY})

    def __post_init__(self) -> None:
        if self.work_start >= self.work_end:
            raise ValueError("work start must be before work end")
        if self.work_start >= self.short_day_end:
            raise ValueError("work start must be before the short day's work end")
        if self.lunch_start >= self.lunch_end:
            raise ValueError("lunch start must be before lunch end")

    @classmethod
    def from_clock_strings(
        cls,
        work_start: str = "07:00",
        work_end: str = "18:30",
        short_day_end: str = "17:30",
        lunch_start: str = "11:45",
        lunch_end: str = "12:30",
    ) -> "ScheduleSettings":
        return cls(
            work_start=parse_clock(work_start),
            work_end=parse_clock(work_end),
            short_day_end=parse_clock(short_day_end),
            lunch_start=parse_clock(lunch_start),
            lunch_end=parse_clock(lunch_end),
        )


@dataclass(frozen=True, slots=True)
class LoopSettings:
    """Cadences of the background activity loop."""

    tick_interval: timedelta = timedelta(milliseconds=200)
    update_interval: timedelta = timedelta(seconds=2)
    display_interval: timedelta = timedelta(seconds=0.5)
    # Offsets are drawn from [-jitter, jitter).
    jitter: int = 2


@dataclass(frozen=True, slots=True)
class AutoPauseSettings:
    """Bounds and presets for the auto-pause countdown."""

    default_duration: Optional[timedelta] = timedelta(minutes=30)
    min_duration: timedelta = timedelta(minutes=1)
    max_duration: timedelta = timedelta(hours=12)
    force_resume_duration: timedelta = timedelta(minutes=30)
    coarse_step: timedelta = timedelta(minutes=15)
    fine_step: timedelta = timedelta(minutes=1)
    coarse_init: timedelta = timedelta(minutes=15)
    fine_init: timedelta = timedelta(minutes=60)

    def __post_init__(self) -> None:
        if self.default_duration is not None:
            clamped = min(max(self.default_duration, self.min_duration), self.max_duration)
            object.__setattr__(self, "default_duration", clamped)

    @classmethod
    def from_minutes(cls, default_minutes: float) -> "AutoPauseSettings":
        """Build settings; ``0`` minutes means auto-pause starts as "never"."""
        default = timedelta(minutes=default_minutes) if default_minutes > 0 else None
        return cls(default_duration=default)
