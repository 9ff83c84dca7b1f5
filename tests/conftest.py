"""Shared fixtures: a controllable clock and in-memory pointer/display fakes."""

from datetime import datetime, timedelta

import pytest

from keep_active.auto_pause import AutoPauseController
from keep_active.models import StatusLine

MONDAY = datetime(2026, 10, 19)
FRIDAY = datetime(2026, 10, 23)
SATURDAY = datetime(2026, 10, 24)
SUNDAY = datetime(2026, 10, 25)


def at(day: datetime, hour: int, minute: int = 0, second: int = 0) -> datetime:
    return day.replace(hour=hour, minute=minute, second=second)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class RecordingNudger:
    def __init__(self, fail_with: Exception | None = None) -> None:
        self.moves: list[tuple[int, int]] = []
        self.fail_with = fail_with

    def nudge(self, dx: int, dy: int) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.moves.append((dx, dy))


class RecordingDisplay:
    def __init__(self) -> None:
        self.lines: list[StatusLine] = []
        self.clears = 0

    def show(self, line: StatusLine) -> None:
        self.lines.append(line)

    def clear(self) -> None:
        self.clears += 1

    def rows(self, row: int) -> list[StatusLine]:
        return [line for line in self.lines if line.row == row]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(at(MONDAY, 9, 0))


@pytest.fixture
def controller() -> AutoPauseController:
    return AutoPauseController()


@pytest.fixture
def nudger() -> RecordingNudger:
    return RecordingNudger()


@pytest.fixture
def display() -> RecordingDisplay:
    return RecordingDisplay()
