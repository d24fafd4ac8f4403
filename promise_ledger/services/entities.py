"""
Immutable records consumed by the analytics engine.

The repository converts ORM rows into these before any calculation runs, so
engine code never touches a Session or a mutable row. All dates are plain
`datetime.date` values (day granularity).
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from typing import Optional


class CommitmentKind(str, enum.Enum):
    daily = "daily"
    weekly = "weekly"


class PriorityType(str, enum.Enum):
    habit = "habit"
    work = "work"


@dataclass(frozen=True)
class Commitment:
    id: int
    goal_id: int
    text: str
    kind: CommitmentKind
    # 0=Sunday .. 6=Saturday. Only meaningful for daily commitments.
    schedule_days: frozenset[int] = frozenset()
    weekly_target: Optional[int] = None


@dataclass(frozen=True)
class Goal:
    id: int
    text: str
    commitments: tuple[Commitment, ...] = ()


@dataclass(frozen=True)
class SprintPriority:
    """Legacy per-sprint priority tracked through DailyAudit unit counts."""
    key: str
    label: str
    type: PriorityType = PriorityType.work
    weekly_target_units: int = 1


@dataclass(frozen=True)
class Sprint:
    id: int
    name: str
    start_date: date
    end_date: date
    goals: tuple[Goal, ...] = ()
    priorities: tuple[SprintPriority, ...] = ()
    active: bool = False

    @property
    def commitments(self) -> tuple[Commitment, ...]:
        return tuple(c for g in self.goals for c in g.commitments)

    def goal_for(self, commitment: Commitment) -> Optional[Goal]:
        for g in self.goals:
            if g.id == commitment.goal_id:
                return g
        return None


@dataclass(frozen=True)
class CompletionEvent:
    commitment_id: int
    day: date
    completed: bool
    daily_audit_id: Optional[int] = None


@dataclass(frozen=True)
class ProofEntry:
    type: str
    value: str
    url: Optional[str] = None


@dataclass(frozen=True)
class DailyAudit:
    day: date
    energy: int
    # priority key -> logged unit count (legacy tracking system)
    priority_units: dict[str, int] = field(default_factory=dict)
    proof_of_work: tuple[ProofEntry, ...] = ()
    notes: Optional[str] = None
    id: Optional[int] = None
