"""
Sprint schemas.

POST /sprints        → SprintCreateRequest → SprintResponse
GET  /sprints        → list[SprintResponse]
GET  /sprints/{id}   → SprintResponse
"""
from __future__ import annotations

from datetime import date
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from promise_ledger.models.commitment import CommitmentKind
from promise_ledger.models.sprint import PriorityType


class CommitmentIn(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    text: Annotated[str, Field(min_length=1, max_length=1_000, examples=["Research thesis 30 min"])]
    kind: CommitmentKind
    schedule_days: Optional[list[Annotated[int, Field(ge=0, le=6)]]] = Field(
        default=None,
        description="Daily kind only. 0=Sunday .. 6=Saturday.",
        examples=[[1, 3, 5]],
    )
    weekly_target: Optional[Annotated[int, Field(ge=1)]] = Field(
        default=None,
        description="Weekly kind only. Completions expected per calendar week.",
        examples=[3],
    )

    @field_validator("schedule_days")
    @classmethod
    def dedupe_days(cls, v: Optional[list[int]]) -> Optional[list[int]]:
        return sorted(set(v)) if v is not None else None

    @model_validator(mode="after")
    def check_kind_fields(self) -> "CommitmentIn":
        if self.kind == CommitmentKind.daily.value and not self.schedule_days:
            raise ValueError("daily commitments need at least one schedule day")
        if self.kind == CommitmentKind.weekly.value and self.weekly_target is None:
            raise ValueError("weekly commitments need weekly_target >= 1")
        return self


class GoalIn(BaseModel):
    text: Annotated[str, Field(min_length=1, max_length=1_000)]
    commitments: Annotated[list[CommitmentIn], Field(min_length=1)]


class PriorityIn(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    key: Annotated[str, Field(min_length=1, max_length=64, examples=["deep-work"])]
    label: Annotated[str, Field(min_length=1, max_length=256)]
    type: PriorityType = PriorityType.work
    weekly_target_units: Annotated[int, Field(ge=1)] = 1


class SprintCreateRequest(BaseModel):
    name: Annotated[str, Field(min_length=1, max_length=256, examples=["Q3 sprint 1"])]
    start_date: date
    end_date: date
    active: bool = True
    goals: list[GoalIn] = Field(default_factory=list)
    priorities: list[PriorityIn] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_dates_and_keys(self) -> "SprintCreateRequest":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        keys = [p.key for p in self.priorities]
        if len(keys) != len(set(keys)):
            raise ValueError("priority keys must be unique within a sprint")
        return self


class CommitmentOut(BaseModel):
    id: int
    goal_id: int
    text: str
    kind: str
    schedule_days: list[int] = Field(default_factory=list)
    weekly_target: Optional[int] = None


class GoalOut(BaseModel):
    id: int
    text: str
    commitments: list[CommitmentOut]


class PriorityOut(BaseModel):
    key: str
    label: str
    type: str
    weekly_target_units: int


class SprintResponse(BaseModel):
    id: int
    name: str
    start_date: str
    end_date: str
    active: bool
    goals: list[GoalOut]
    priorities: list[PriorityOut]
