"""
Data access: owner-scoped reads and the two upserts the data model requires.

Public API
----------
create_sprint(db, owner_id, request)                     -> models.Sprint
get_sprint_row / get_active_sprint_row / list_sprint_rows
load_sprint(db, row)                                     -> entities.Sprint
load_audits(db, owner_id, window)                        -> list[entities.DailyAudit]
load_events(db, owner_id, window)                        -> list[entities.CompletionEvent]
upsert_daily_audit(db, owner_id, day, ...)               -> models.DailyAudit
record_completion(db, owner_id, commitment_id, day, ...) -> models.CompletionEvent

Every read filters by owner_id. The engine only ever sees the frozen records
from `services.entities`, never ORM rows.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from promise_ledger.core.errors import (
    CommitmentNotFoundError,
    SprintNotFoundError,
    UnknownPriorityKeyError,
)
from promise_ledger.models.commitment import (
    Commitment as CommitmentRow,
    CompletionEvent as CompletionEventRow,
)
from promise_ledger.models.daily_audit import DailyAudit as DailyAuditRow
from promise_ledger.models.sprint import (
    Goal as GoalRow,
    Sprint as SprintRow,
    SprintPriority as SprintPriorityRow,
)
from promise_ledger.schemas.sprint import SprintCreateRequest
from promise_ledger.services import entities
from promise_ledger.services.calendar import Window, normalize_schedule

logger = logging.getLogger(__name__)


def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


# ---------------------------------------------------------------------------
# Sprints
# ---------------------------------------------------------------------------

def create_sprint(db: Session, owner_id: str, request: SprintCreateRequest) -> SprintRow:
    """Insert a sprint with its goals, commitments and legacy priorities."""
    if request.active:
        (
            db.query(SprintRow)
            .filter(SprintRow.owner_id == owner_id, SprintRow.active.is_(True))
            .update({SprintRow.active: False}, synchronize_session=False)
        )

    sprint = SprintRow(
        owner_id=owner_id,
        name=request.name,
        start_date=request.start_date,
        end_date=request.end_date,
        active=request.active,
    )
    db.add(sprint)
    db.flush()  # get sprint.id

    for goal_order, goal_in in enumerate(request.goals):
        goal = GoalRow(sprint_id=sprint.id, text=goal_in.text, sort_order=goal_order)
        db.add(goal)
        db.flush()
        for order, c in enumerate(goal_in.commitments):
            db.add(CommitmentRow(
                owner_id=owner_id,
                sprint_id=sprint.id,
                goal_id=goal.id,
                text=c.text,
                kind=c.kind,
                schedule_days=c.schedule_days if _ev(c.kind) == "daily" else None,
                weekly_target=c.weekly_target if _ev(c.kind) == "weekly" else None,
                sort_order=order,
            ))

    for p in request.priorities:
        db.add(SprintPriorityRow(
            sprint_id=sprint.id,
            key=p.key,
            label=p.label,
            type=p.type,
            weekly_target_units=p.weekly_target_units,
        ))

    db.commit()
    db.refresh(sprint)
    logger.info(
        "created sprint id=%s owner=%s %s..%s goals=%d active=%s",
        sprint.id, owner_id, sprint.start_date, sprint.end_date,
        len(request.goals), sprint.active,
    )
    return sprint


def get_sprint_row(db: Session, owner_id: str, sprint_id: int) -> SprintRow:
    row = (
        db.query(SprintRow)
        .filter(SprintRow.id == sprint_id, SprintRow.owner_id == owner_id)
        .first()
    )
    if row is None:
        raise SprintNotFoundError(sprint_id)
    return row


def get_active_sprint_row(db: Session, owner_id: str) -> Optional[SprintRow]:
    return (
        db.query(SprintRow)
        .filter(SprintRow.owner_id == owner_id, SprintRow.active.is_(True))
        .order_by(SprintRow.start_date.desc())
        .first()
    )


def list_sprint_rows(db: Session, owner_id: str) -> list[SprintRow]:
    return (
        db.query(SprintRow)
        .filter(SprintRow.owner_id == owner_id)
        .order_by(SprintRow.start_date.desc())
        .all()
    )


def _to_commitment(row: CommitmentRow) -> entities.Commitment:
    return entities.Commitment(
        id=row.id,
        goal_id=row.goal_id,
        text=row.text,
        kind=entities.CommitmentKind(_ev(row.kind)),
        schedule_days=normalize_schedule(row.schedule_days),
        weekly_target=row.weekly_target,
    )


def load_sprint(db: Session, row: SprintRow) -> entities.Sprint:
    goal_rows = (
        db.query(GoalRow)
        .filter(GoalRow.sprint_id == row.id)
        .order_by(GoalRow.sort_order, GoalRow.id)
        .all()
    )
    commitment_rows = (
        db.query(CommitmentRow)
        .filter(CommitmentRow.sprint_id == row.id)
        .order_by(CommitmentRow.sort_order, CommitmentRow.id)
        .all()
    )
    priority_rows = (
        db.query(SprintPriorityRow)
        .filter(SprintPriorityRow.sprint_id == row.id)
        .order_by(SprintPriorityRow.id)
        .all()
    )
    goals = tuple(
        entities.Goal(
            id=g.id,
            text=g.text,
            commitments=tuple(
                _to_commitment(c) for c in commitment_rows if c.goal_id == g.id
            ),
        )
        for g in goal_rows
    )
    priorities = tuple(
        entities.SprintPriority(
            key=p.key,
            label=p.label,
            type=entities.PriorityType(_ev(p.type)),
            weekly_target_units=p.weekly_target_units or 1,
        )
        for p in priority_rows
    )
    return entities.Sprint(
        id=row.id,
        name=row.name,
        start_date=row.start_date,
        end_date=row.end_date,
        goals=goals,
        priorities=priorities,
        active=row.active,
    )


def get_commitment(db: Session, owner_id: str, commitment_id: int) -> entities.Commitment:
    row = (
        db.query(CommitmentRow)
        .filter(CommitmentRow.id == commitment_id, CommitmentRow.owner_id == owner_id)
        .first()
    )
    if row is None:
        raise CommitmentNotFoundError(commitment_id)
    return _to_commitment(row)


# ---------------------------------------------------------------------------
# Daily audits
# ---------------------------------------------------------------------------

def to_audit(row: DailyAuditRow) -> entities.DailyAudit:
    units = {
        str(k): int(v)
        for k, v in (row.priority_units or {}).items()
        if isinstance(v, (int, float)) and v >= 0
    }
    proofs = tuple(
        entities.ProofEntry(type=str(p.get("type", "")), value=str(p.get("value", "")), url=p.get("url"))
        for p in (row.proof_of_work or [])
        if isinstance(p, dict)
    )
    return entities.DailyAudit(
        id=row.id,
        day=row.day,
        energy=row.energy,
        priority_units=units,
        proof_of_work=proofs,
        notes=row.notes,
    )


def list_audit_rows(db: Session, owner_id: str, window: Window) -> list[DailyAuditRow]:
    return (
        db.query(DailyAuditRow)
        .filter(
            DailyAuditRow.owner_id == owner_id,
            DailyAuditRow.day >= window.start,
            DailyAuditRow.day <= window.end,
        )
        .order_by(DailyAuditRow.day)
        .all()
    )


def load_audits(db: Session, owner_id: str, window: Window) -> list[entities.DailyAudit]:
    return [to_audit(r) for r in list_audit_rows(db, owner_id, window)]


def _check_priority_keys(db: Session, sprint_id: Optional[int], keys: list[str]) -> None:
    if sprint_id is None or not keys:
        return
    allowed = [
        k for (k,) in db.query(SprintPriorityRow.key)
        .filter(SprintPriorityRow.sprint_id == sprint_id)
        .all()
    ]
    if not allowed:
        return
    unknown = sorted(set(keys) - set(allowed))
    if unknown:
        raise UnknownPriorityKeyError(unknown=unknown, allowed=sorted(allowed))


def upsert_daily_audit(
    db: Session,
    owner_id: str,
    day: date,
    energy: int,
    priority_units: dict[str, int],
    proof_of_work: list[dict[str, Any]],
    notes: Optional[str] = None,
    sprint_id: Optional[int] = None,
) -> DailyAuditRow:
    """Create or replace the owner's audit for `day`. Keyed on (owner_id, day)."""
    if sprint_id is not None:
        get_sprint_row(db, owner_id, sprint_id)
    else:
        active = get_active_sprint_row(db, owner_id)
        sprint_id = active.id if active else None
    _check_priority_keys(db, sprint_id, list(priority_units))

    values = {
        "sprint_id": sprint_id,
        "energy": energy,
        "priority_units": dict(priority_units),
        "proof_of_work": list(proof_of_work),
        "notes": notes,
    }

    def _apply() -> DailyAuditRow:
        row = (
            db.query(DailyAuditRow)
            .filter(DailyAuditRow.owner_id == owner_id, DailyAuditRow.day == day)
            .first()
        )
        if row is None:
            row = DailyAuditRow(owner_id=owner_id, day=day, **values)
            db.add(row)
        else:
            for field, value in values.items():
                setattr(row, field, value)
        db.commit()
        return row

    try:
        row = _apply()
    except IntegrityError:
        # Race condition: another request inserted the same (owner, day) first
        db.rollback()
        row = _apply()
    db.refresh(row)
    logger.info("upserted daily audit owner=%s day=%s energy=%d", owner_id, day, energy)
    return row


# ---------------------------------------------------------------------------
# Completion events
# ---------------------------------------------------------------------------

def record_completion(
    db: Session,
    owner_id: str,
    commitment_id: int,
    day: date,
    completed: bool,
    daily_audit_id: Optional[int] = None,
) -> CompletionEventRow:
    """Set the completion flag for (commitment, day). Later writes overwrite."""
    get_commitment(db, owner_id, commitment_id)

    def _apply() -> CompletionEventRow:
        row = (
            db.query(CompletionEventRow)
            .filter(
                CompletionEventRow.commitment_id == commitment_id,
                CompletionEventRow.day == day,
            )
            .first()
        )
        if row is None:
            row = CompletionEventRow(
                owner_id=owner_id,
                commitment_id=commitment_id,
                day=day,
                completed=completed,
                daily_audit_id=daily_audit_id,
            )
            db.add(row)
        else:
            row.completed = completed
            row.daily_audit_id = daily_audit_id
        db.commit()
        return row

    try:
        row = _apply()
    except IntegrityError:
        db.rollback()
        row = _apply()
    db.refresh(row)
    logger.info(
        "recorded completion owner=%s commitment=%s day=%s completed=%s",
        owner_id, commitment_id, day, completed,
    )
    return row


def get_completion(
    db: Session,
    owner_id: str,
    commitment_id: int,
    day: date,
) -> Optional[bool]:
    row = (
        db.query(CompletionEventRow.completed)
        .filter(
            CompletionEventRow.owner_id == owner_id,
            CompletionEventRow.commitment_id == commitment_id,
            CompletionEventRow.day == day,
        )
        .first()
    )
    return row[0] if row is not None else None


def load_events(db: Session, owner_id: str, window: Window) -> list[entities.CompletionEvent]:
    rows = (
        db.query(CompletionEventRow)
        .filter(
            CompletionEventRow.owner_id == owner_id,
            CompletionEventRow.day >= window.start,
            CompletionEventRow.day <= window.end,
        )
        .order_by(CompletionEventRow.day)
        .all()
    )
    return [
        entities.CompletionEvent(
            commitment_id=r.commitment_id,
            day=r.day,
            completed=r.completed,
            daily_audit_id=r.daily_audit_id,
        )
        for r in rows
    ]
