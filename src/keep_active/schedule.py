"""Work-hours schedule evaluation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from .config import ScheduleSettings
from .models import AutoPauseState, PauseDecision, PauseKind

_PREFIX = "UPDATE PAUSED - "


@dataclass(frozen=True, slots=True)
class ScheduleRule:
    """A pause condition paired with the text describing it."""

    kind: PauseKind
    applies: Callable[[datetime, AutoPauseState], bool]
    describe: Callable[[datetime, AutoPauseState], str]


def build_rules(settings: ScheduleSettings) -> list[ScheduleRule]:
    """Return the pause rules in priority order (first match wins)."""

    def is_weekend(now: datetime) -> bool:
        return now.weekday() in settings.weekend_days

    def is_short_day(now: datetime) -> bool:
        return now.weekday() == settings.short_day

    def deadline_text(state: AutoPauseState) -> str:
        deadline = f"{state.deadline:%H:%M}" if state.deadline is not None else "--:--"
        return f"{_PREFIX}auto pause: {deadline}"

    return [
        ScheduleRule(
            PauseKind.PAUSED_WEEKEND,
            lambda now, _: is_weekend(now),
            lambda now, _: f"{_PREFIX}WEEKEND",
        ),
        ScheduleRule(
            PauseKind.PAUSED_AFTER_WORK,
            lambda now, _: is_short_day(now) and now.time() > settings.short_day_end,
            lambda now, _: f"{_PREFIX}after work end: {settings.short_day_end:%H:%M}",
        ),
        ScheduleRule(
            PauseKind.PAUSED_AFTER_WORK,
            lambda now, _: not is_short_day(now) and now.time() > settings.work_end,
            lambda now, _: f"{_PREFIX}after work end: {settings.work_end:%H:%M}",
        ),
        ScheduleRule(
            PauseKind.PAUSED_BEFORE_WORK,
            lambda now, _: now.time() < settings.work_start,
            lambda now, _: f"{_PREFIX}before work start: {settings.work_start:%H:%M}",
        ),
        ScheduleRule(
            PauseKind.PAUSED_LUNCH,
            lambda now, _: settings.lunch_start <= now.time() <= settings.lunch_end,
            lambda now, _: (
                f"{_PREFIX}lunch: {settings.lunch_start:%H:%M}-{settings.lunch_end:%H:%M}"
            ),
        ),
        ScheduleRule(
            PauseKind.PAUSED_AUTO_PAUSE,
            lambda now, state: state.deadline is not None and now >= state.deadline,
            lambda now, state: deadline_text(state),
        ),
    ]


class ScheduleEvaluator:
    """Decides whether activity should be suppressed at a given instant."""

    def __init__(
        self,
        settings: Optional[ScheduleSettings] = None,
        rules: Optional[Sequence[ScheduleRule]] = None,
    ) -> None:
        self.settings = settings or ScheduleSettings()
        self._rules = tuple(rules) if rules is not None else tuple(build_rules(self.settings))

    def evaluate(self, now: datetime, state: AutoPauseState) -> PauseDecision:
        for rule in self._rules:
            if rule.applies(now, state):
                return PauseDecision(rule.kind, rule.describe(now, state))
        return PauseDecision(PauseKind.ACTIVE, "ACTIVE")
