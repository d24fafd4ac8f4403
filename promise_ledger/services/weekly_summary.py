"""
Weekly summary — one calendar week (Monday..Sunday) of promises and audits.

Public API
----------
calculate_weekly_summary(audits, sprint, events, reference_date) -> WeeklySummary

The result feeds the Alert Rule Engine, the Insight Generator and the ABS.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from promise_ledger.services.calendar import Window, week_window
from promise_ledger.services.entities import CompletionEvent, DailyAudit, Sprint
from promise_ledger.services.progress import PromiseSummary, calculate_promise_summaries
from promise_ledger.services.rollup import (
    GoalSummary,
    PrioritySummary,
    audits_in,
    average_energy,
    roll_up_goals,
    split_units,
    summarize_priorities,
)

logger = logging.getLogger(__name__)


@dataclass
class WeeklySummary:
    window: Window
    promise_summaries: dict[int, PromiseSummary] = field(default_factory=dict)
    goal_summaries: list[GoalSummary] = field(default_factory=list)
    total_promises_kept: int = 0
    total_promises_target: int = 0
    promises_at_risk: int = 0
    priority_summary: dict[str, PrioritySummary] = field(default_factory=dict)
    avg_energy: float = 0.0
    logs_count: int = 0
    total_actual_units: int = 0
    motion_units: int = 0
    action_units: int = 0


def calculate_weekly_summary(
    audits: Iterable[DailyAudit],
    sprint: Optional[Sprint],
    events: Iterable[CompletionEvent],
    reference_date: date,
) -> WeeklySummary:
    """
    Summarize the calendar week containing `reference_date`.

    With no sprint, promise and priority sections stay empty but energy and
    unit totals are still computed from the audits.
    """
    window = week_window(reference_date)
    week_audits = audits_in(audits, window)
    units = split_units(week_audits)

    summary = WeeklySummary(
        window=window,
        avg_energy=average_energy(week_audits),
        logs_count=len(week_audits),
        total_actual_units=units.total_units,
        motion_units=units.motion_units,
        action_units=units.action_units,
    )
    if sprint is None:
        return summary

    summary.promise_summaries = calculate_promise_summaries(sprint, events, window)
    summary.goal_summaries = roll_up_goals(summary.promise_summaries.values())
    summary.total_promises_kept = sum(g.total_kept for g in summary.goal_summaries)
    summary.total_promises_target = sum(g.total_target for g in summary.goal_summaries)
    summary.promises_at_risk = sum(
        1 for ps in summary.promise_summaries.values() if ps.is_behind
    )
    summary.priority_summary = summarize_priorities(week_audits, sprint.priorities)

    logger.debug(
        "weekly summary %s..%s kept=%d/%d logs=%d motion=%d action=%d",
        window.start, window.end,
        summary.total_promises_kept, summary.total_promises_target,
        summary.logs_count, summary.motion_units, summary.action_units,
    )
    return summary
