"""
Daily audit and completion-event schemas.

PUT /daily-audits/{day}                  → DailyAuditRequest → DailyAuditResponse
PUT /commitments/{id}/logs/{day}         → CompletionLogRequest → CompletionEventResponse
GET /commitments/{id}/status/{day}       → DayStatusResponse
"""
from __future__ import annotations

from typing import Annotated, Optional

from pydantic import BaseModel, Field, field_validator


class ProofEntryIn(BaseModel):
    type: Annotated[str, Field(min_length=1, max_length=64, examples=["commit"])]
    value: Annotated[str, Field(max_length=5_000)]
    url: Optional[str] = None

    @field_validator("url", mode="before")
    @classmethod
    def blank_url_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class DailyAuditRequest(BaseModel):
    energy: Annotated[int, Field(ge=1, le=5, description="Energy level 1-5.")]
    priority_units: dict[str, Annotated[int, Field(ge=0)]] = Field(
        default_factory=dict,
        description="Legacy priority key → units logged today.",
        examples=[{"deep-work": 3, "admin": 1}],
    )
    proof_of_work: list[ProofEntryIn] = Field(default_factory=list)
    notes: Optional[Annotated[str, Field(max_length=10_000)]] = None
    sprint_id: Optional[int] = Field(
        default=None,
        description="Sprint this audit belongs to. Defaults to the active sprint.",
    )


class DailyAuditResponse(BaseModel):
    id: int
    day: str
    energy: int
    sprint_id: Optional[int] = None
    priority_units: dict[str, int]
    proof_of_work: list[ProofEntryIn]
    notes: Optional[str] = None
    proof_of_work_valid: bool = Field(
        description="False when units were claimed without >= 10 chars of proof."
    )


class DailyAuditListResponse(BaseModel):
    total: int
    items: list[DailyAuditResponse]


class CompletionLogRequest(BaseModel):
    completed: bool
    daily_audit_id: Optional[int] = None


class CompletionEventResponse(BaseModel):
    commitment_id: int
    day: str
    completed: bool
    daily_audit_id: Optional[int] = None


class DayStatusResponse(BaseModel):
    commitment_id: int
    day: str
    status: str = Field(description='"done" | "not_done" | "na"')
    days_left_in_week: int
