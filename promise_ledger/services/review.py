"""
Review orchestration: load owner-scoped records, then run the pure engine.

Public API
----------
weekly_review(db, owner_id, reference_date)        -> WeeklyReview
monthly_review(db, owner_id, reference_date)       -> MonthlySummary
sprint_review(db, owner_id, sprint_id, today)      -> SprintSummary

Nothing computed here is persisted; every call recomputes from source rows.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from promise_ledger.core.errors import NoActiveSprintError
from promise_ledger.services import repository
from promise_ledger.services.alerts import generate_alerts
from promise_ledger.services.calendar import Window, month_window, week_window
from promise_ledger.services.entities import Sprint
from promise_ledger.services.insights import InsightReport, generate_insights
from promise_ledger.services.integrity import calculate_abs
from promise_ledger.services.monthly_summary import MonthlySummary, calculate_monthly_summary
from promise_ledger.services.sprint_summary import SprintSummary, calculate_sprint_summary
from promise_ledger.services.weekly_summary import WeeklySummary, calculate_weekly_summary

logger = logging.getLogger(__name__)


@dataclass
class WeeklyReview:
    summary: WeeklySummary
    alerts: list[str]
    insights: InsightReport
    integrity_score: int


def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


def _active_sprint(db: Session, owner_id: str) -> Optional[Sprint]:
    row = repository.get_active_sprint_row(db, owner_id)
    return repository.load_sprint(db, row) if row is not None else None


def weekly_review(
    db: Session,
    owner_id: str,
    reference_date: Optional[date] = None,
) -> WeeklyReview:
    ref = reference_date or _today()
    window = week_window(ref)
    audits = repository.load_audits(db, owner_id, window)
    events = repository.load_events(db, owner_id, window)
    sprint = _active_sprint(db, owner_id)

    summary = calculate_weekly_summary(audits, sprint, events, ref)
    alerts = generate_alerts(audits, summary)
    review = WeeklyReview(
        summary=summary,
        alerts=alerts,
        insights=generate_insights(audits, summary),
        integrity_score=calculate_abs(summary.motion_units, summary.action_units),
    )
    logger.info(
        "weekly review owner=%s week=%s alerts=%d abs=%d",
        owner_id, window.start, len(alerts), review.integrity_score,
    )
    return review


def monthly_review(
    db: Session,
    owner_id: str,
    reference_date: Optional[date] = None,
) -> MonthlySummary:
    ref = reference_date or _today()
    window = month_window(ref)
    return calculate_monthly_summary(
        repository.load_audits(db, owner_id, window),
        _active_sprint(db, owner_id),
        repository.load_events(db, owner_id, window),
        ref,
    )


def sprint_review(
    db: Session,
    owner_id: str,
    sprint_id: Optional[int] = None,
    today: Optional[date] = None,
) -> SprintSummary:
    if sprint_id is not None:
        row = repository.get_sprint_row(db, owner_id, sprint_id)
    else:
        row = repository.get_active_sprint_row(db, owner_id)
        if row is None:
            raise NoActiveSprintError()
    sprint = repository.load_sprint(db, row)
    window = Window(sprint.start_date, sprint.end_date)
    return calculate_sprint_summary(
        repository.load_audits(db, owner_id, window),
        sprint,
        repository.load_events(db, owner_id, window),
        today=today,
    )
