"""
Commitment (a "promise") and its dated CompletionEvents.

A commitment is create-only: once logged against, it is never edited, so
history always reflects the definition it was logged under.

CompletionEvent: at most one row per (commitment_id, day). Writers upsert;
the unique constraint is the final guard.
"""
from datetime import datetime, date
from sqlalchemy import (
    JSON, Boolean, Date, DateTime, Enum, ForeignKey, Integer, String, Text,
    UniqueConstraint, func,
)
from sqlalchemy.orm import Mapped, mapped_column
import enum

from promise_ledger.db.base import Base


class CommitmentKind(str, enum.Enum):
    daily = "daily"
    weekly = "weekly"


class Commitment(Base):
    __tablename__ = "commitments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    sprint_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sprints.id", ondelete="CASCADE"), nullable=False, index=True
    )
    goal_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    kind: Mapped[str] = mapped_column(
        Enum(CommitmentKind, name="commitment_kind_enum"),
        nullable=False,
    )
    # For daily: [1,2,3,4,5] = Mon-Fri (0=Sun .. 6=Sat)
    schedule_days: Mapped[list | None] = mapped_column(JSON, nullable=True)
    # For weekly: e.g. 3 for "gym 3x/week"
    weekly_target: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class CompletionEvent(Base):
    __tablename__ = "completion_events"
    __table_args__ = (
        UniqueConstraint("commitment_id", "day", name="uq_completion_commitment_day"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    commitment_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("commitments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    day: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    daily_audit_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("daily_audits.id", ondelete="SET NULL"), nullable=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
