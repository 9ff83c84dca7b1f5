from datetime import time, timedelta

import pytest

from conftest import FRIDAY, MONDAY, SATURDAY, SUNDAY, at
from keep_active.config import ScheduleSettings
from keep_active.models import AutoPauseState, PauseKind
from keep_active.schedule import ScheduleEvaluator, ScheduleRule, build_rules

UNARMED = AutoPauseState(timedelta(minutes=30))


@pytest.fixture
def evaluator() -> ScheduleEvaluator:
    return ScheduleEvaluator()


class TestWeekend:
    @pytest.mark.parametrize("day", [SATURDAY, SUNDAY])
    @pytest.mark.parametrize("hour", [0, 6, 9, 12, 19, 23])
    def test_weekend_always_paused(self, evaluator, day, hour):
        armed = AutoPauseState(timedelta(minutes=30), at(day, 0))
        for state in (UNARMED, armed):
            decision = evaluator.evaluate(at(day, hour), state)
            assert decision.kind is PauseKind.PAUSED_WEEKEND
            assert decision.reason == "UPDATE PAUSED - WEEKEND"

    def test_weekend_days_are_configurable(self):
        evaluator = ScheduleEvaluator(ScheduleSettings(weekend_days=frozenset({6})))
        assert evaluator.evaluate(at(SATURDAY, 9), UNARMED).kind is PauseKind.ACTIVE
        assert evaluator.evaluate(at(SUNDAY, 9), UNARMED).kind is PauseKind.PAUSED_WEEKEND


class TestWorkHours:
    def test_active_during_work_hours(self, evaluator):
        decision = evaluator.evaluate(at(MONDAY, 9, 30), UNARMED)
        assert decision.kind is PauseKind.ACTIVE
        assert not decision.is_paused

    def test_before_work_start(self, evaluator):
        decision = evaluator.evaluate(at(MONDAY, 6, 59), UNARMED)
        assert decision.kind is PauseKind.PAUSED_BEFORE_WORK
        assert decision.reason.endswith("before work start: 07:00")

    def test_work_start_is_active(self, evaluator):
        assert evaluator.evaluate(at(MONDAY, 7, 0), UNARMED).kind is PauseKind.ACTIVE

    def test_after_work_end_on_normal_day(self, evaluator):
        decision = evaluator.evaluate(at(MONDAY, 18, 31), UNARMED)
        assert decision.kind is PauseKind.PAUSED_AFTER_WORK
        assert decision.reason.endswith("after work end: 18:30")

    def test_normal_day_between_short_and_normal_end_is_active(self, evaluator):
        assert evaluator.evaluate(at(MONDAY, 18, 0), UNARMED).kind is PauseKind.ACTIVE

    def test_short_day_ends_early(self, evaluator):
        decision = evaluator.evaluate(at(FRIDAY, 17, 45), UNARMED)
        assert decision.kind is PauseKind.PAUSED_AFTER_WORK
        assert decision.reason.endswith("after work end: 17:30")

    def test_short_day_before_early_end_is_active(self, evaluator):
        assert evaluator.evaluate(at(FRIDAY, 17, 0), UNARMED).kind is PauseKind.ACTIVE


class TestLunch:
    @pytest.mark.parametrize(
        "hour,minute", [(11, 45), (12, 0), (12, 30)]
    )
    def test_lunch_bounds_are_inclusive(self, evaluator, hour, minute):
        decision = evaluator.evaluate(at(MONDAY, hour, minute), UNARMED)
        assert decision.kind is PauseKind.PAUSED_LUNCH
        assert decision.reason.endswith("lunch: 11:45-12:30")

    def test_just_outside_lunch_is_active(self, evaluator):
        assert evaluator.evaluate(at(MONDAY, 11, 44, 59), UNARMED).kind is PauseKind.ACTIVE
        assert evaluator.evaluate(at(MONDAY, 12, 30, 1), UNARMED).kind is PauseKind.ACTIVE

    def test_lunch_wins_over_expired_auto_pause(self, evaluator):
        expired = AutoPauseState(timedelta(minutes=30), at(MONDAY, 10))
        decision = evaluator.evaluate(at(MONDAY, 12), expired)
        assert decision.kind is PauseKind.PAUSED_LUNCH


class TestAutoPause:
    def test_past_deadline_is_paused(self, evaluator):
        state = AutoPauseState(timedelta(hours=1), at(MONDAY, 10))
        decision = evaluator.evaluate(at(MONDAY, 10, 1), state)
        assert decision.kind is PauseKind.PAUSED_AUTO_PAUSE
        assert decision.reason == "UPDATE PAUSED - auto pause: 10:00"

    def test_reaching_deadline_is_paused(self, evaluator):
        state = AutoPauseState(timedelta(hours=1), at(MONDAY, 10))
        assert evaluator.evaluate(at(MONDAY, 10), state).kind is PauseKind.PAUSED_AUTO_PAUSE

    def test_before_deadline_is_active(self, evaluator):
        state = AutoPauseState(timedelta(hours=1), at(MONDAY, 10))
        assert evaluator.evaluate(at(MONDAY, 9, 59), state).kind is PauseKind.ACTIVE

    def test_work_end_precedes_auto_pause(self, evaluator):
        state = AutoPauseState(timedelta(hours=1), at(FRIDAY, 16))
        decision = evaluator.evaluate(at(FRIDAY, 17, 31), state)
        assert decision.kind is PauseKind.PAUSED_AFTER_WORK


def test_custom_rule_table_is_used_in_order():
    rules = [
        ScheduleRule(PauseKind.PAUSED_LUNCH, lambda now, _: True, lambda now, _: "first"),
        ScheduleRule(PauseKind.PAUSED_WEEKEND, lambda now, _: True, lambda now, _: "second"),
    ]
    decision = ScheduleEvaluator(rules=rules).evaluate(at(MONDAY, 9), UNARMED)
    assert decision.reason == "first"


class TestScheduleSettings:
    def test_rejects_inverted_work_hours(self):
        with pytest.raises(ValueError):
            ScheduleSettings(work_start=time(19, 0))

    def test_rejects_inverted_lunch(self):
        with pytest.raises(ValueError):
            ScheduleSettings(lunch_start=time(13, 0), lunch_end=time(12, 0))

    def test_from_clock_strings(self):
        settings = ScheduleSettings.from_clock_strings(work_start="08:15", lunch_end="13:00")
        assert settings.work_start == time(8, 15)
        assert settings.lunch_end == time(13, 0)
        assert settings.work_end == time(18, 30)


def test_auto_pause_reason_without_deadline():
    rule = build_rules(ScheduleSettings())[-1]
    assert rule.kind is PauseKind.PAUSED_AUTO_PAUSE
    assert rule.describe(at(MONDAY, 9), UNARMED) == "UPDATE PAUSED - auto pause: --:--"
