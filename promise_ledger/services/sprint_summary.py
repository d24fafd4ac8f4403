"""
Sprint summary — the whole sprint window, which need not align to weeks.

  sprint_duration_days = end - start + 1
  elapsed_days         = clamp(today - start + 1, 0, sprint_duration_days)
  velocity             = total_kept / elapsed_days   (0 before the sprint starts)

The weekly breakdown covers every calendar week overlapping the sprint,
clipped to the sprint, and `weekly_promise_rate` averages those ratios
without proration.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from promise_ledger.services.calendar import Window, clip, sprint_weeks
from promise_ledger.services.entities import CompletionEvent, DailyAudit, Sprint
from promise_ledger.services.integrity import calculate_sprint_weekly_promise_rate
from promise_ledger.services.progress import calculate_promise_summaries, safe_ratio
from promise_ledger.services.rollup import (
    GoalSummary,
    audits_in,
    average_energy,
    roll_up_goals,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SprintWeek:
    window: Window
    kept: int
    target: int
    ratio: float


@dataclass
class SprintSummary:
    sprint_id: int
    window: Window
    goal_summaries: list[GoalSummary] = field(default_factory=list)
    avg_energy: float = 0.0
    logs_count: int = 0
    total_promises_kept: int = 0
    total_promises_target: int = 0
    sprint_duration_days: int = 0
    elapsed_days: int = 0
    velocity: float = 0.0
    weekly_breakdown: list[SprintWeek] = field(default_factory=list)
    weekly_promise_rate: float = 0.0


def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


def elapsed_days(start: date, duration_days: int, today: date) -> int:
    return min(duration_days, max(0, (today - start).days + 1))


def calculate_sprint_summary(
    audits: Iterable[DailyAudit],
    sprint: Sprint,
    events: Iterable[CompletionEvent],
    today: Optional[date] = None,
) -> SprintSummary:
    window = Window(sprint.start_date, sprint.end_date)
    events = tuple(events)
    sprint_audits = audits_in(audits, window)

    goals = roll_up_goals(calculate_promise_summaries(sprint, events, window).values())
    kept = sum(g.total_kept for g in goals)
    duration = window.days
    elapsed = elapsed_days(sprint.start_date, duration, today or _today())

    weeks: list[SprintWeek] = []
    for week in sprint_weeks(sprint.start_date, sprint.end_date):
        clipped = clip(week, window)
        week_summaries = calculate_promise_summaries(sprint, events, clipped).values()
        week_kept = sum(s.actual for s in week_summaries)
        week_target = sum(s.target for s in week_summaries)
        weeks.append(SprintWeek(
            window=clipped,
            kept=week_kept,
            target=week_target,
            ratio=safe_ratio(week_kept, week_target),
        ))

    summary = SprintSummary(
        sprint_id=sprint.id,
        window=window,
        goal_summaries=goals,
        avg_energy=average_energy(sprint_audits),
        logs_count=len(sprint_audits),
        total_promises_kept=kept,
        total_promises_target=sum(g.total_target for g in goals),
        sprint_duration_days=duration,
        elapsed_days=elapsed,
        velocity=safe_ratio(kept, elapsed),
        weekly_breakdown=weeks,
        weekly_promise_rate=calculate_sprint_weekly_promise_rate([w.ratio for w in weeks]),
    )
    logger.debug(
        "sprint summary id=%s kept=%d/%d elapsed=%d/%d",
        sprint.id, kept, summary.total_promises_target, elapsed, duration,
    )
    return summary
