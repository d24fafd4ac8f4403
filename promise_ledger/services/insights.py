"""
Insight Generator — picks one primary insight and lists promises falling behind.

Candidates (higher priority wins):
  visibility-gap   priority 10   fewer than 5 days logged
  scope-overload   priority 8    >= 2 tracked items below ratio 0.5
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from promise_ledger.services.alerts import (
    AlertCode,
    CUT_SCOPE,
    days_logged,
    is_scope_overload,
    is_visibility_gap,
)
from promise_ledger.services.entities import DailyAudit
from promise_ledger.services.progress import PromiseSummary
from promise_ledger.services.weekly_summary import WeeklySummary

VISIBILITY_GAP_PRIORITY = 10
SCOPE_OVERLOAD_PRIORITY = 8


@dataclass(frozen=True)
class InsightAction:
    label: str
    href: Optional[str] = None
    kind: str = "primary"


@dataclass(frozen=True)
class Insight:
    id: str
    code: AlertCode
    title: str
    description: str
    priority: int
    action: Optional[InsightAction] = None


@dataclass
class InsightReport:
    primary_insight: Optional[Insight] = None
    at_risk_promises: list[PromiseSummary] = field(default_factory=list)


def _candidates(audits: list[DailyAudit], summary: WeeklySummary) -> list[Insight]:
    found: list[Insight] = []
    if is_visibility_gap(audits):
        found.append(Insight(
            id="visibility-gap",
            code=AlertCode.VISIBILITY_GAP,
            title="Visibility Gap",
            description=(
                f"Only {days_logged(audits)} days logged this week. "
                "Integrity requires daily audits."
            ),
            priority=VISIBILITY_GAP_PRIORITY,
            action=InsightAction(label="Log today", href="/daily-audits"),
        ))
    if is_scope_overload(summary):
        found.append(Insight(
            id="scope-overload",
            code=AlertCode.SCOPE_OVERLOAD,
            title="Scope Overload",
            description=f"Multiple targets missed by >50%. Consider: {CUT_SCOPE}.",
            priority=SCOPE_OVERLOAD_PRIORITY,
            action=InsightAction(label="Adjust sprint", href="/sprints"),
        ))
    return found


def at_risk_promises(summaries: Iterable[PromiseSummary]) -> list[PromiseSummary]:
    """Promises at-risk or missed, most behind first."""
    return sorted((s for s in summaries if s.is_behind), key=lambda s: s.ratio)


def generate_insights(audits: Iterable[DailyAudit], summary: WeeklySummary) -> InsightReport:
    candidates = _candidates(list(audits), summary)
    primary = max(candidates, key=lambda i: i.priority) if candidates else None
    return InsightReport(
        primary_insight=primary,
        at_risk_promises=at_risk_promises(summary.promise_summaries.values()),
    )
