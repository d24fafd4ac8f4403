"""
Logging router — daily audits and per-commitment completion events.

PUT /daily-audits/{day}                 — upsert the owner's audit for a day
GET /daily-audits?start=&end=           — audits in an inclusive date range
PUT /commitments/{id}/logs/{day}        — upsert a completion event
GET /commitments/{id}/status/{day}      — done / not_done / na for a day
"""
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from promise_ledger.core.errors import InvalidWindowError
from promise_ledger.core.owner import get_owner_id
from promise_ledger.db.base import get_db
from promise_ledger.models.daily_audit import DailyAudit as DailyAuditRow
from promise_ledger.schemas.common import ErrorResponse
from promise_ledger.schemas.logs import (
    CompletionEventResponse,
    CompletionLogRequest,
    DailyAuditListResponse,
    DailyAuditRequest,
    DailyAuditResponse,
    DayStatusResponse,
    ProofEntryIn,
)
from promise_ledger.services import repository
from promise_ledger.services.calendar import Window, day_status, days_left_in_week
from promise_ledger.services.integrity import proof_text, validate_proof_of_work

router = APIRouter(tags=["logs"])


# ---------------------------------------------------------------------------
# Serialization helper
# ---------------------------------------------------------------------------

def _audit_to_response(row: DailyAuditRow) -> DailyAuditResponse:
    audit = repository.to_audit(row)
    units = sum(audit.priority_units.values())
    return DailyAuditResponse(
        id=row.id,
        day=str(row.day),
        energy=audit.energy,
        sprint_id=row.sprint_id,
        priority_units=audit.priority_units,
        proof_of_work=[
            ProofEntryIn(type=p.type, value=p.value, url=p.url) for p in audit.proof_of_work
        ],
        notes=audit.notes,
        proof_of_work_valid=validate_proof_of_work(units, proof_text(audit.proof_of_work)),
    )


# ---------------------------------------------------------------------------
# Daily audits
# ---------------------------------------------------------------------------

@router.put(
    "/daily-audits/{day}",
    response_model=DailyAuditResponse,
    summary="Create or replace the daily audit for a day",
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def put_daily_audit(
    day: date,
    body: DailyAuditRequest,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """
    Upsert keyed on (owner, day): calling twice for the same day replaces
    the first audit instead of creating a second one.

    Priority keys must belong to the audit's sprint when that sprint tracks
    priorities; unknown keys are rejected with `UNKNOWN_PRIORITY_KEY`.
    """
    row = repository.upsert_daily_audit(
        db,
        owner_id=owner_id,
        day=day,
        energy=body.energy,
        priority_units=body.priority_units,
        proof_of_work=[p.model_dump() for p in body.proof_of_work],
        notes=body.notes,
        sprint_id=body.sprint_id,
    )
    return _audit_to_response(row)


@router.get(
    "/daily-audits",
    response_model=DailyAuditListResponse,
    summary="List daily audits in a date range",
    responses={422: {"model": ErrorResponse}},
)
def list_daily_audits(
    start: date = Query(description="First day (inclusive).", examples=["2026-03-02"]),
    end: date = Query(description="Last day (inclusive).", examples=["2026-03-08"]),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    if end < start:
        raise InvalidWindowError(start, end)
    rows = repository.list_audit_rows(db, owner_id, Window(start, end))
    return DailyAuditListResponse(
        total=len(rows),
        items=[_audit_to_response(r) for r in rows],
    )


# ---------------------------------------------------------------------------
# Completion events
# ---------------------------------------------------------------------------

@router.put(
    "/commitments/{commitment_id}/logs/{day}",
    response_model=CompletionEventResponse,
    summary="Record whether a commitment was kept on a day",
    responses={404: {"model": ErrorResponse}},
)
def put_completion(
    commitment_id: int,
    day: date,
    body: CompletionLogRequest,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """At most one event per (commitment, day); a later write overwrites."""
    row = repository.record_completion(
        db,
        owner_id=owner_id,
        commitment_id=commitment_id,
        day=day,
        completed=body.completed,
        daily_audit_id=body.daily_audit_id,
    )
    return CompletionEventResponse(
        commitment_id=row.commitment_id,
        day=str(row.day),
        completed=row.completed,
        daily_audit_id=row.daily_audit_id,
    )


@router.get(
    "/commitments/{commitment_id}/status/{day}",
    response_model=DayStatusResponse,
    summary="Display status of a commitment on a day",
    responses={404: {"model": ErrorResponse}},
)
def get_day_status(
    commitment_id: int,
    day: date,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    commitment = repository.get_commitment(db, owner_id, commitment_id)
    completed = repository.get_completion(db, owner_id, commitment_id, day)
    return DayStatusResponse(
        commitment_id=commitment_id,
        day=str(day),
        status=day_status(commitment, day, completed).value,
        days_left_in_week=days_left_in_week(day),
    )
