"""
Metrics router — weekly / monthly / sprint reviews and the integrity score.

GET  /metrics/weekly          — weekly summary + alerts + insight + ABS
GET  /metrics/monthly         — monthly summary (streaks, trends, calendar)
GET  /metrics/sprint          — sprint summary (active sprint or sprint_id)
POST /metrics/integrity       — ABS for a motion / action split
POST /metrics/proof-of-work   — proof-of-work check
"""
from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from promise_ledger.core.owner import get_owner_id
from promise_ledger.db.base import get_db
from promise_ledger.schemas.common import ErrorResponse, WindowOut
from promise_ledger.schemas.metrics import (
    CalendarDayOut,
    GoalSummaryOut,
    InsightActionOut,
    InsightOut,
    IntegrityRequest,
    IntegrityResponse,
    MonthlySummaryResponse,
    PrioritySummaryOut,
    ProofOfWorkRequest,
    ProofOfWorkResponse,
    PromiseSummaryOut,
    SprintSummaryResponse,
    SprintWeekOut,
    WeekOfMonthOut,
    WeeklyReviewResponse,
    WeeklySummaryOut,
)
from promise_ledger.services.calendar import Window
from promise_ledger.services.insights import Insight
from promise_ledger.services.integrity import calculate_abs, validate_proof_of_work
from promise_ledger.services.monthly_summary import MonthlySummary
from promise_ledger.services.progress import PromiseSummary
from promise_ledger.services.review import (
    WeeklyReview,
    monthly_review,
    sprint_review,
    weekly_review,
)
from promise_ledger.services.rollup import GoalSummary
from promise_ledger.services.sprint_summary import SprintSummary

router = APIRouter(prefix="/metrics", tags=["metrics"])


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _window(w: Window) -> WindowOut:
    return WindowOut(start=str(w.start), end=str(w.end))


def _promise(p: PromiseSummary) -> PromiseSummaryOut:
    return PromiseSummaryOut(
        promise_id=p.promise_id,
        label=p.label,
        goal_id=p.goal_id,
        goal_text=p.goal_text,
        kind=p.kind.value,
        actual=p.actual,
        target=p.target,
        ratio=p.ratio,
        status=p.status.value,
    )


def _goal(g: GoalSummary, trend: Optional[str] = None) -> GoalSummaryOut:
    return GoalSummaryOut(
        goal_id=g.goal_id,
        goal_text=g.goal_text,
        promises=[_promise(p) for p in g.promises],
        total_kept=g.total_kept,
        total_target=g.total_target,
        ratio=g.ratio,
        trend=trend,
    )


def _insight(i: Optional[Insight]) -> Optional[InsightOut]:
    if i is None:
        return None
    return InsightOut(
        id=i.id,
        code=i.code.value,
        title=i.title,
        description=i.description,
        priority=i.priority,
        action=InsightActionOut(
            label=i.action.label, href=i.action.href, kind=i.action.kind,
        ) if i.action else None,
    )


def _goals(goals: Iterable[GoalSummary]) -> list[GoalSummaryOut]:
    return [_goal(g) for g in goals]


def _weekly_to_response(r: WeeklyReview) -> WeeklyReviewResponse:
    s = r.summary
    return WeeklyReviewResponse(
        summary=WeeklySummaryOut(
            window=_window(s.window),
            goal_summaries=_goals(s.goal_summaries),
            total_promises_kept=s.total_promises_kept,
            total_promises_target=s.total_promises_target,
            promises_at_risk=s.promises_at_risk,
            priority_summary=[
                PrioritySummaryOut(
                    key=p.key, label=p.label, actual=p.actual, target=p.target, ratio=p.ratio,
                )
                for p in s.priority_summary.values()
            ],
            avg_energy=s.avg_energy,
            logs_count=s.logs_count,
            total_actual_units=s.total_actual_units,
            motion_units=s.motion_units,
            action_units=s.action_units,
        ),
        alerts=r.alerts,
        primary_insight=_insight(r.insights.primary_insight),
        at_risk_promises=[_promise(p) for p in r.insights.at_risk_promises],
        integrity_score=r.integrity_score,
    )


def _monthly_to_response(m: MonthlySummary) -> MonthlySummaryResponse:
    return MonthlySummaryResponse(
        window=_window(m.window),
        total_promises_kept=m.total_promises_kept,
        total_promises_target=m.total_promises_target,
        promises_kept_ratio=m.promises_kept_ratio,
        days_logged=m.days_logged,
        total_days_in_month=m.total_days_in_month,
        longest_streak=m.longest_streak,
        avg_energy=m.avg_energy,
        goal_summaries=[_goal(g.goal, trend=g.trend.value) for g in m.goal_summaries],
        weekly_summaries=[
            WeekOfMonthOut(
                week_number=w.week_number,
                window=_window(w.window),
                kept=w.kept,
                committed=w.committed,
                ratio=w.ratio,
            )
            for w in m.weekly_summaries
        ],
        calendar=[
            CalendarDayOut(
                day=str(c.day), has_log=c.has_log, kept=c.kept, committed=c.committed, ratio=c.ratio,
            )
            for c in m.calendar
        ],
    )


def _sprint_to_response(s: SprintSummary) -> SprintSummaryResponse:
    return SprintSummaryResponse(
        sprint_id=s.sprint_id,
        window=_window(s.window),
        goal_summaries=_goals(s.goal_summaries),
        avg_energy=s.avg_energy,
        logs_count=s.logs_count,
        total_promises_kept=s.total_promises_kept,
        total_promises_target=s.total_promises_target,
        sprint_duration_days=s.sprint_duration_days,
        elapsed_days=s.elapsed_days,
        velocity=s.velocity,
        weekly_breakdown=[
            SprintWeekOut(window=_window(w.window), kept=w.kept, target=w.target, ratio=w.ratio)
            for w in s.weekly_breakdown
        ],
        weekly_promise_rate=s.weekly_promise_rate,
    )


# ---------------------------------------------------------------------------
# GET /metrics/weekly
# ---------------------------------------------------------------------------

@router.get(
    "/weekly",
    response_model=WeeklyReviewResponse,
    summary="Weekly review — promises, alerts, primary insight, integrity score",
)
def get_weekly(
    reference_date: Optional[date] = Query(
        default=None,
        description="Any day inside the Monday..Sunday week to review. Defaults to today (UTC).",
        examples=["2026-03-04"],
    ),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """
    Recompute the weekly review from source records.

    ### Alert codes
    | Code | Trigger |
    |---|---|
    | `CRITICAL_ENERGY_LEVEL` | ≥ 3 audits and average energy < 3 |
    | `SIMULATION_TRAP`       | motion units > action units |
    | `VISIBILITY_GAP`        | fewer than 5 audits this week |
    | `SCOPE_OVERLOAD`        | ≥ 2 tracked items below ratio 0.5 |
    """
    return _weekly_to_response(weekly_review(db, owner_id, reference_date))


@router.get(
    "/monthly",
    response_model=MonthlySummaryResponse,
    summary="Monthly summary — streaks, goal trends, calendar",
)
def get_monthly(
    reference_date: Optional[date] = Query(
        default=None,
        description="Any day inside the month. Defaults to today (UTC).",
        examples=["2026-03-15"],
    ),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return _monthly_to_response(monthly_review(db, owner_id, reference_date))


@router.get(
    "/sprint",
    response_model=SprintSummaryResponse,
    summary="Sprint summary — day-exact targets, elapsed days, velocity",
    responses={404: {"model": ErrorResponse}},
)
def get_sprint(
    sprint_id: Optional[int] = Query(default=None, description="Defaults to the active sprint."),
    today: Optional[date] = Query(
        default=None,
        description="Override 'today' for elapsed-day math. Defaults to today (UTC).",
    ),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return _sprint_to_response(sprint_review(db, owner_id, sprint_id=sprint_id, today=today))


# ---------------------------------------------------------------------------
# Stateless calculators
# ---------------------------------------------------------------------------

@router.post(
    "/integrity",
    response_model=IntegrityResponse,
    summary="Anti-Bullshit Score for a motion / action split",
)
def post_integrity(body: IntegrityRequest):
    """
    | action ratio | score band |
    |---|---|
    | ≥ 0.8       | 90–100 |
    | 0.5 – 0.8   | 60–89 |
    | < 0.5       | 0–59 |

    No activity at all scores 100.
    """
    return IntegrityResponse(
        score=calculate_abs(body.motion_units, body.action_units),
        motion_units=body.motion_units,
        action_units=body.action_units,
    )


@router.post(
    "/proof-of-work",
    response_model=ProofOfWorkResponse,
    summary="Check that claimed units carry enough written proof",
)
def post_proof_of_work(body: ProofOfWorkRequest):
    return ProofOfWorkResponse(valid=validate_proof_of_work(body.units, body.proof))
