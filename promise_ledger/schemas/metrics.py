"""
Metrics schemas.

GET  /metrics/weekly          → WeeklyReviewResponse
GET  /metrics/monthly         → MonthlySummaryResponse
GET  /metrics/sprint          → SprintSummaryResponse
POST /metrics/integrity       → IntegrityRequest → IntegrityResponse
POST /metrics/proof-of-work   → ProofOfWorkRequest → ProofOfWorkResponse
"""
from __future__ import annotations

from typing import Annotated, Optional

from pydantic import BaseModel, Field

from promise_ledger.schemas.common import WindowOut


class PromiseSummaryOut(BaseModel):
    promise_id: int
    label: str
    goal_id: int
    goal_text: str
    kind: str
    actual: int
    target: int
    ratio: float = Field(description="actual / target; 0 when target is 0. Not capped.")
    status: str = Field(description='"on-track" | "at-risk" | "missed"')


class GoalSummaryOut(BaseModel):
    goal_id: int
    goal_text: str
    promises: list[PromiseSummaryOut]
    total_kept: int
    total_target: int
    ratio: float
    trend: Optional[str] = Field(default=None, description='Monthly only: "up" | "down" | "stable"')


class PrioritySummaryOut(BaseModel):
    key: str
    label: str
    actual: int
    target: int
    ratio: float = Field(description="Capped at 1.0.")


class WeeklySummaryOut(BaseModel):
    window: WindowOut
    goal_summaries: list[GoalSummaryOut]
    total_promises_kept: int
    total_promises_target: int
    promises_at_risk: int
    priority_summary: list[PrioritySummaryOut]
    avg_energy: float
    logs_count: int
    total_actual_units: int
    motion_units: int
    action_units: int


class InsightActionOut(BaseModel):
    label: str
    href: Optional[str] = None
    kind: str


class InsightOut(BaseModel):
    id: str
    code: str
    title: str
    description: str
    priority: int
    action: Optional[InsightActionOut] = None


class WeeklyReviewResponse(BaseModel):
    summary: WeeklySummaryOut
    alerts: list[str] = Field(description='Each entry starts with its code, e.g. "VISIBILITY_GAP: ..."')
    primary_insight: Optional[InsightOut] = None
    at_risk_promises: list[PromiseSummaryOut]
    integrity_score: int = Field(ge=0, le=100)


class WeekOfMonthOut(BaseModel):
    week_number: int
    window: WindowOut
    kept: int
    committed: int
    ratio: float


class CalendarDayOut(BaseModel):
    day: str
    has_log: bool
    kept: int
    committed: int
    ratio: float


class MonthlySummaryResponse(BaseModel):
    window: WindowOut
    total_promises_kept: int
    total_promises_target: int
    promises_kept_ratio: float
    days_logged: int
    total_days_in_month: int
    longest_streak: int
    avg_energy: float
    goal_summaries: list[GoalSummaryOut]
    weekly_summaries: list[WeekOfMonthOut]
    calendar: list[CalendarDayOut]


class SprintWeekOut(BaseModel):
    window: WindowOut
    kept: int
    target: int
    ratio: float


class SprintSummaryResponse(BaseModel):
    sprint_id: int
    window: WindowOut
    goal_summaries: list[GoalSummaryOut]
    avg_energy: float
    logs_count: int
    total_promises_kept: int
    total_promises_target: int
    sprint_duration_days: int
    elapsed_days: int
    velocity: float = Field(description="Promises kept per elapsed day.")
    weekly_breakdown: list[SprintWeekOut]
    weekly_promise_rate: float


class IntegrityRequest(BaseModel):
    motion_units: Annotated[int, Field(ge=0)]
    action_units: Annotated[int, Field(ge=0)]


class IntegrityResponse(BaseModel):
    score: int = Field(ge=0, le=100)
    motion_units: int
    action_units: int


class ProofOfWorkRequest(BaseModel):
    units: Annotated[int, Field(ge=0)]
    proof: Optional[str] = None


class ProofOfWorkResponse(BaseModel):
    valid: bool
