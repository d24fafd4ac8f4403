"""
Monthly summary — one calendar month of promises and audits.

Adds to the shared roll-ups:
  - longest_streak : longest run of consecutive days with a DailyAudit
  - per-goal trend : up (ratio >= 0.8) / down (ratio < 0.5) / stable
  - weekly breakdown (Monday weeks clipped to the month)
  - calendar cells   (one per day: has_log, kept, committed). Only daily
    commitments due that day count, so kept <= committed.

Targets use the day-exact Target Resolver over each window.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from promise_ledger.services.calendar import (
    Window,
    clip,
    is_scheduled_on,
    month_window,
    sprint_weeks,
)
from promise_ledger.services.entities import (
    CommitmentKind,
    CompletionEvent,
    DailyAudit,
    Sprint,
)
from promise_ledger.services.progress import (
    AT_RISK_RATIO,
    ON_TRACK_RATIO,
    calculate_promise_summaries,
    safe_ratio,
)
from promise_ledger.services.rollup import (
    GoalSummary,
    audits_in,
    average_energy,
    roll_up_goals,
)

logger = logging.getLogger(__name__)


class Trend(str, enum.Enum):
    up = "up"
    down = "down"
    stable = "stable"


@dataclass
class MonthlyGoalSummary:
    goal: GoalSummary
    trend: Trend


@dataclass(frozen=True)
class WeekOfMonth:
    week_number: int
    window: Window
    kept: int
    committed: int
    ratio: float


@dataclass(frozen=True)
class CalendarDay:
    day: date
    has_log: bool
    kept: int
    committed: int
    ratio: float


@dataclass
class MonthlySummary:
    window: Window
    total_promises_kept: int = 0
    total_promises_target: int = 0
    promises_kept_ratio: float = 0.0
    days_logged: int = 0
    total_days_in_month: int = 0
    longest_streak: int = 0
    avg_energy: float = 0.0
    goal_summaries: list[MonthlyGoalSummary] = field(default_factory=list)
    weekly_summaries: list[WeekOfMonth] = field(default_factory=list)
    calendar: list[CalendarDay] = field(default_factory=list)


def trend_for(ratio: float) -> Trend:
    if ratio >= ON_TRACK_RATIO:
        return Trend.up
    if ratio < AT_RISK_RATIO:
        return Trend.down
    return Trend.stable


def longest_streak(days: Iterable[date]) -> int:
    """Longest run of consecutive calendar days (gap of exactly one day)."""
    ordered = sorted(set(days))
    if not ordered:
        return 0
    best = current = 1
    for prev, nxt in zip(ordered, ordered[1:]):
        if (nxt - prev).days == 1:
            current += 1
            best = max(best, current)
        else:
            current = 1
    return best


def _weekly_breakdown(
    sprint: Sprint,
    events: tuple[CompletionEvent, ...],
    month: Window,
) -> list[WeekOfMonth]:
    weeks: list[WeekOfMonth] = []
    for index, week in enumerate(sprint_weeks(month.start, month.end), start=1):
        clipped = clip(week, month)
        summaries = calculate_promise_summaries(sprint, events, clipped).values()
        kept = sum(s.actual for s in summaries)
        committed = sum(s.target for s in summaries)
        weeks.append(WeekOfMonth(
            week_number=index,
            window=clipped,
            kept=kept,
            committed=committed,
            ratio=safe_ratio(kept, committed),
        ))
    return weeks


def _calendar(
    sprint: Optional[Sprint],
    events: tuple[CompletionEvent, ...],
    logged_days: set[date],
    month: Window,
) -> list[CalendarDay]:
    daily = [
        c for c in (sprint.commitments if sprint else ())
        if c.kind == CommitmentKind.daily
    ]
    cells: list[CalendarDay] = []
    for day in month.iter_days():
        due = {c.id for c in daily if is_scheduled_on(c.schedule_days, day)}
        kept = sum(
            1 for e in events
            if e.day == day and e.completed and e.commitment_id in due
        )
        committed = len(due)
        cells.append(CalendarDay(
            day=day,
            has_log=day in logged_days,
            kept=kept,
            committed=committed,
            ratio=safe_ratio(kept, committed),
        ))
    return cells


def calculate_monthly_summary(
    audits: Iterable[DailyAudit],
    sprint: Optional[Sprint],
    events: Iterable[CompletionEvent],
    reference_date: date,
) -> MonthlySummary:
    month = month_window(reference_date)
    events = tuple(events)
    month_audits = audits_in(audits, month)
    logged_days = {a.day for a in month_audits}

    summary = MonthlySummary(
        window=month,
        days_logged=len(logged_days),
        total_days_in_month=month.days,
        longest_streak=longest_streak(logged_days),
        avg_energy=average_energy(month_audits),
        calendar=_calendar(sprint, events, logged_days, month),
    )
    if sprint is None:
        return summary

    promise_summaries = calculate_promise_summaries(sprint, events, month)
    goals = roll_up_goals(promise_summaries.values())
    summary.goal_summaries = [MonthlyGoalSummary(goal=g, trend=trend_for(g.ratio)) for g in goals]
    summary.total_promises_kept = sum(g.total_kept for g in goals)
    summary.total_promises_target = sum(g.total_target for g in goals)
    summary.promises_kept_ratio = safe_ratio(
        summary.total_promises_kept, summary.total_promises_target
    )
    summary.weekly_summaries = _weekly_breakdown(sprint, events, month)

    logger.debug(
        "monthly summary %s kept=%d/%d streak=%d",
        month.start.strftime("%Y-%m"),
        summary.total_promises_kept, summary.total_promises_target,
        summary.longest_streak,
    )
    return summary
