"""
Alert Rule Engine — stateless threshold rules over one period.

Rules
-----
  1. CRITICAL_ENERGY_LEVEL
     Trigger : >= 3 DailyAudits AND average energy < 3
  2. SIMULATION_TRAP
     Trigger : motion_units > action_units
  3. VISIBILITY_GAP
     Trigger : fewer than 5 DailyAudits in the period
  4. SCOPE_OVERLOAD
     Trigger : >= 2 tracked items (commitments with a target, plus legacy
               priorities) below ratio 0.5

No rule short-circuits another. Each alert renders as "<CODE>: <message>";
callers match on the code.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Sequence

from promise_ledger.services.entities import DailyAudit
from promise_ledger.services.progress import AT_RISK_RATIO
from promise_ledger.services.rollup import average_energy
from promise_ledger.services.weekly_summary import WeeklySummary


class AlertCode(str, enum.Enum):
    CRITICAL_ENERGY_LEVEL = "CRITICAL_ENERGY_LEVEL"
    SIMULATION_TRAP = "SIMULATION_TRAP"
    VISIBILITY_GAP = "VISIBILITY_GAP"
    SCOPE_OVERLOAD = "SCOPE_OVERLOAD"


# Thresholds
_LOW_ENERGY = 3
_MIN_LOGS_FOR_ENERGY = 3
_MIN_DAYS_LOGGED = 5
_SCOPE_OVERLOAD_MIN_MISSED = 2

CUT_SCOPE = "CUT_SCOPE"


@dataclass(frozen=True)
class Alert:
    code: AlertCode
    message: str

    def render(self) -> str:
        return f"{self.code.value}: {self.message}"


def days_logged(audits: Iterable[DailyAudit]) -> int:
    return len({a.day for a in audits})


def missed_targets(summary: WeeklySummary) -> int:
    """Tracked items (promises with a target, legacy priorities) below 0.5."""
    promises = sum(
        1 for ps in summary.promise_summaries.values()
        if ps.target > 0 and ps.ratio < AT_RISK_RATIO
    )
    priorities = sum(1 for p in summary.priority_summary.values() if p.ratio < AT_RISK_RATIO)
    return promises + priorities


def is_visibility_gap(audits: Sequence[DailyAudit]) -> bool:
    return days_logged(audits) < _MIN_DAYS_LOGGED


def is_scope_overload(summary: WeeklySummary) -> bool:
    return missed_targets(summary) >= _SCOPE_OVERLOAD_MIN_MISSED


def evaluate_alerts(audits: Iterable[DailyAudit], summary: WeeklySummary) -> list[Alert]:
    audits = tuple(audits)
    alerts: list[Alert] = []

    if len(audits) >= _MIN_LOGS_FOR_ENERGY and average_energy(audits) < _LOW_ENERGY:
        alerts.append(Alert(
            AlertCode.CRITICAL_ENERGY_LEVEL,
            "Your average energy is below baseline. Priority: RECOVERY.",
        ))

    if summary.motion_units > summary.action_units:
        alerts.append(Alert(
            AlertCode.SIMULATION_TRAP,
            "Motion units exceed action units. You are planning more than executing.",
        ))

    if is_visibility_gap(audits):
        alerts.append(Alert(
            AlertCode.VISIBILITY_GAP,
            f"Only {days_logged(audits)} days logged this week. "
            "Integrity requires daily audits.",
        ))

    if is_scope_overload(summary):
        alerts.append(Alert(
            AlertCode.SCOPE_OVERLOAD,
            f"Multiple targets missed by >50%. Recommended: {CUT_SCOPE}.",
        ))

    return alerts


def generate_alerts(audits: Iterable[DailyAudit], summary: WeeklySummary) -> list[str]:
    return [a.render() for a in evaluate_alerts(audits, summary)]
