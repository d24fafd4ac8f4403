"""
Tests for the weekly summary: promise roll-ups, energy and legacy units.

Week under test: Monday 2026-03-02 .. Sunday 2026-03-08.
"""
from datetime import date, timedelta

import pytest

from promise_ledger.services.entities import (
    Commitment,
    CommitmentKind,
    CompletionEvent,
    DailyAudit,
    Goal,
    Sprint,
    SprintPriority,
)
from promise_ledger.services.rollup import roll_up_goals, split_units, summarize_priorities
from promise_ledger.services.weekly_summary import calculate_weekly_summary

MON = date(2026, 3, 2)


def _day(offset: int) -> date:
    return MON + timedelta(days=offset)


def _audit(offset: int, energy: int = 3, **units) -> DailyAudit:
    return DailyAudit(day=_day(offset), energy=energy, priority_units=dict(units))


def _sprint(priorities=()) -> Sprint:
    return Sprint(
        id=1,
        name="March",
        start_date=date(2026, 3, 1),
        end_date=date(2026, 3, 31),
        goals=(
            Goal(id=10, text="Thesis", commitments=(
                Commitment(id=1, goal_id=10, text="Promise 1", kind=CommitmentKind.daily,
                           schedule_days=frozenset({1, 2, 3, 4, 5})),
            )),
            Goal(id=20, text="Health", commitments=(
                Commitment(id=2, goal_id=20, text="Gym", kind=CommitmentKind.weekly,
                           weekly_target=3),
                Commitment(id=3, goal_id=20, text="Walk", kind=CommitmentKind.daily,
                           schedule_days=frozenset({0, 6})),
            )),
        ),
        priorities=tuple(priorities),
    )


def _done(cid: int, *offsets: int) -> list[CompletionEvent]:
    return [CompletionEvent(commitment_id=cid, day=_day(o), completed=True) for o in offsets]


class TestPromiseSection:
    def test_promise_scenarios(self):
        events = _done(1, 0, 1, 2) + _done(2, 0, 3) + _done(3, 5, 6)
        s = calculate_weekly_summary([], _sprint(), events, _day(2))

        p1 = s.promise_summaries[1]
        assert (p1.actual, p1.target, p1.status.value) == (3, 5, "at-risk")
        assert p1.ratio == pytest.approx(0.6)

        gym = s.promise_summaries[2]
        assert (gym.actual, gym.target, gym.status.value) == (2, 3, "at-risk")

        walk = s.promise_summaries[3]
        assert (walk.actual, walk.target, walk.status.value) == (2, 2, "on-track")

    def test_goal_rollups_and_totals(self):
        events = _done(1, 0, 1, 2) + _done(2, 0, 3) + _done(3, 5, 6)
        s = calculate_weekly_summary([], _sprint(), events, _day(2))
        goals = {g.goal_id: g for g in s.goal_summaries}
        assert (goals[10].total_kept, goals[10].total_target) == (3, 5)
        assert (goals[20].total_kept, goals[20].total_target) == (4, 5)
        assert goals[20].ratio == pytest.approx(0.8)
        assert s.total_promises_kept == 7
        assert s.total_promises_target == 10
        assert s.promises_at_risk == 2

    def test_events_outside_week_ignored(self):
        events = _done(1, -1, 7)
        s = calculate_weekly_summary([], _sprint(), events, _day(2))
        assert s.total_promises_kept == 0

    def test_no_sprint_yields_empty_promise_section(self):
        s = calculate_weekly_summary([_audit(0, energy=4)], None, _done(1, 0), _day(0))
        assert s.promise_summaries == {}
        assert s.goal_summaries == []
        assert s.total_promises_target == 0
        assert s.avg_energy == 4


class TestEnergy:
    def test_seven_audits_average_four(self):
        energies = [3, 4, 5, 4, 4, 3, 5]
        audits = [_audit(i, energy=e) for i, e in enumerate(energies)]
        s = calculate_weekly_summary(audits, _sprint(), [], _day(0))
        assert s.avg_energy == pytest.approx(4)
        assert s.logs_count == 7

    def test_no_audits_zero_energy(self):
        s = calculate_weekly_summary([], _sprint(), [], _day(0))
        assert s.avg_energy == 0
        assert s.logs_count == 0

    def test_audits_outside_week_ignored(self):
        s = calculate_weekly_summary([_audit(-1, energy=1), _audit(0, energy=5)], None, [], _day(0))
        assert s.logs_count == 1
        assert s.avg_energy == 5


class TestLegacyPriorityUnits:
    PRIORITIES = (
        SprintPriority(key="priority-1", label="Priority 1", weekly_target_units=10),
        SprintPriority(key="priority-2", label="Priority 2", weekly_target_units=5),
    )

    def test_priority_summary(self):
        audits = [
            _audit(0, **{"priority-1": 3, "priority-2": 2}),
            _audit(1, **{"priority-1": 4, "priority-2": 1}),
        ]
        summary = summarize_priorities(audits, self.PRIORITIES)
        p1, p2 = summary["priority-1"], summary["priority-2"]
        assert (p1.label, p1.actual, p1.target) == ("Priority 1", 7, 10)
        assert p1.ratio == pytest.approx(0.7)
        assert (p2.actual, p2.target) == (3, 5)
        assert p2.ratio == pytest.approx(0.6)

    def test_ratio_capped_at_one(self):
        summary = summarize_priorities(
            [_audit(0, **{"priority-2": 10})], self.PRIORITIES
        )
        assert summary["priority-2"].ratio == 1.0

    def test_zero_target_treated_as_one(self):
        summary = summarize_priorities(
            [_audit(0, x=2)], [SprintPriority(key="x", label="X", weekly_target_units=0)]
        )
        assert summary["x"].target == 1

    def test_motion_and_action_split(self):
        audits = [
            _audit(0, a=1, b=3),
            _audit(1, a=1, b=2, c=0),
        ]
        units = split_units(audits)
        assert units.total_units == 7
        assert units.motion_units == 2
        assert units.action_units == 5

    def test_weekly_summary_carries_units(self):
        audits = [_audit(0, **{"priority-1": 1}), _audit(1, **{"priority-1": 4})]
        s = calculate_weekly_summary(audits, _sprint(self.PRIORITIES), [], _day(0))
        assert s.motion_units == 1
        assert s.action_units == 4
        assert s.total_actual_units == 5
        assert set(s.priority_summary) == {"priority-1", "priority-2"}


def test_roll_up_goals_empty():
    assert roll_up_goals([]) == []
