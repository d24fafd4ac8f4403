"""
Shared roll-ups for the weekly / monthly / sprint aggregators.

- Goal roll-up: sum actual and target across a goal's promises.
- Energy: mean over DailyAudits, 0 when there are none.
- Legacy priority units: per-key totals against weekly_target_units (capped
  ratio), plus the motion / action split that feeds the ABS and alerts.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from promise_ledger.services.calendar import Window
from promise_ledger.services.entities import DailyAudit, SprintPriority
from promise_ledger.services.progress import PromiseSummary, safe_ratio

# A unit logged at exactly this value is "motion" (planning, admin, talk).
MOTION_UNIT_VALUE = 1
# Units at or above this are "action" (deep work, shipped output).
ACTION_UNIT_THRESHOLD = 2


@dataclass
class GoalSummary:
    goal_id: int
    goal_text: str
    promises: list[PromiseSummary] = field(default_factory=list)
    total_kept: int = 0
    total_target: int = 0
    ratio: float = 0.0


@dataclass(frozen=True)
class PrioritySummary:
    key: str
    label: str
    actual: int
    target: int
    ratio: float  # capped at 1.0


@dataclass(frozen=True)
class UnitSplit:
    total_units: int
    motion_units: int
    action_units: int


def roll_up_goals(summaries: Iterable[PromiseSummary]) -> list[GoalSummary]:
    """Group promise summaries by goal, preserving first-seen goal order."""
    goals: dict[int, GoalSummary] = {}
    for ps in summaries:
        goal = goals.get(ps.goal_id)
        if goal is None:
            goal = goals[ps.goal_id] = GoalSummary(goal_id=ps.goal_id, goal_text=ps.goal_text)
        goal.promises.append(ps)
        goal.total_kept += ps.actual
        goal.total_target += ps.target
    for goal in goals.values():
        goal.ratio = safe_ratio(goal.total_kept, goal.total_target)
    return list(goals.values())


def audits_in(audits: Iterable[DailyAudit], window: Window) -> list[DailyAudit]:
    return [a for a in audits if window.contains(a.day)]


def average_energy(audits: Iterable[DailyAudit]) -> float:
    energies = [a.energy for a in audits]
    return sum(energies) / len(energies) if energies else 0.0


def summarize_priorities(
    audits: Iterable[DailyAudit],
    priorities: Iterable[SprintPriority],
) -> dict[str, PrioritySummary]:
    audits = tuple(audits)
    summary: dict[str, PrioritySummary] = {}
    for priority in priorities:
        target = priority.weekly_target_units or 1
        actual = sum(a.priority_units.get(priority.key, 0) for a in audits)
        summary[priority.key] = PrioritySummary(
            key=priority.key,
            label=priority.label or priority.key,
            actual=actual,
            target=target,
            ratio=min(1.0, actual / target),
        )
    return summary


def split_units(audits: Iterable[DailyAudit]) -> UnitSplit:
    total = motion = action = 0
    for audit in audits:
        for units in audit.priority_units.values():
            total += units
            if units == MOTION_UNIT_VALUE:
                motion += units
            elif units >= ACTION_UNIT_THRESHOLD:
                action += units
    return UnitSplit(total_units=total, motion_units=motion, action_units=action)
