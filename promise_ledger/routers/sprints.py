"""
Sprints router.

POST /sprints          — create a sprint with goals, commitments and priorities
GET  /sprints          — list the owner's sprints (newest first)
GET  /sprints/{id}     — one sprint
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from promise_ledger.core.owner import get_owner_id
from promise_ledger.db.base import get_db
from promise_ledger.models.sprint import Sprint as SprintRow
from promise_ledger.schemas.common import ErrorResponse
from promise_ledger.schemas.sprint import (
    CommitmentOut,
    GoalOut,
    PriorityOut,
    SprintCreateRequest,
    SprintResponse,
)
from promise_ledger.services import repository

router = APIRouter(prefix="/sprints", tags=["sprints"])


# ---------------------------------------------------------------------------
# Serialization helper
# ---------------------------------------------------------------------------

def _sprint_to_response(db: Session, row: SprintRow) -> SprintResponse:
    sprint = repository.load_sprint(db, row)
    return SprintResponse(
        id=sprint.id,
        name=sprint.name,
        start_date=str(sprint.start_date),
        end_date=str(sprint.end_date),
        active=sprint.active,
        goals=[
            GoalOut(
                id=g.id,
                text=g.text,
                commitments=[
                    CommitmentOut(
                        id=c.id,
                        goal_id=c.goal_id,
                        text=c.text,
                        kind=c.kind.value,
                        schedule_days=sorted(c.schedule_days),
                        weekly_target=c.weekly_target,
                    )
                    for c in g.commitments
                ],
            )
            for g in sprint.goals
        ],
        priorities=[
            PriorityOut(
                key=p.key,
                label=p.label,
                type=p.type.value,
                weekly_target_units=p.weekly_target_units,
            )
            for p in sprint.priorities
        ],
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=SprintResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a sprint",
    responses={422: {"model": ErrorResponse}},
)
def create_sprint(
    body: SprintCreateRequest,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """
    Create a sprint with its goals and commitments in one call.

    When `active` is true (the default) every other sprint of the owner is
    deactivated, so there is at most one active sprint per owner.
    """
    row = repository.create_sprint(db, owner_id, body)
    return _sprint_to_response(db, row)


@router.get("", response_model=list[SprintResponse], summary="List sprints")
def list_sprints(
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return [_sprint_to_response(db, row) for row in repository.list_sprint_rows(db, owner_id)]


@router.get(
    "/{sprint_id}",
    response_model=SprintResponse,
    summary="Get one sprint",
    responses={404: {"model": ErrorResponse}},
)
def get_sprint(
    sprint_id: int,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return _sprint_to_response(db, repository.get_sprint_row(db, owner_id, sprint_id))
