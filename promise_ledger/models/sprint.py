from datetime import datetime, date
from sqlalchemy import (
    Boolean, Date, DateTime, Enum, ForeignKey, Integer, String, Text,
    UniqueConstraint, func,
)
from sqlalchemy.orm import Mapped, mapped_column
import enum

from promise_ledger.db.base import Base


class PriorityType(str, enum.Enum):
    habit = "habit"
    work = "work"


class Sprint(Base):
    """A time-boxed window [start_date, end_date], inclusive. One active per owner."""

    __tablename__ = "sprints"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class Goal(Base):
    __tablename__ = "goals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    sprint_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sprints.id", ondelete="CASCADE"), nullable=False, index=True
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class SprintPriority(Base):
    """Legacy per-sprint priority, tracked through DailyAudit unit counts."""

    __tablename__ = "sprint_priorities"
    __table_args__ = (
        UniqueConstraint("sprint_id", "key", name="uq_sprint_priority_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    sprint_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sprints.id", ondelete="CASCADE"), nullable=False, index=True
    )
    key: Mapped[str] = mapped_column(String(64), nullable=False)
    label: Mapped[str] = mapped_column(String(256), nullable=False)
    type: Mapped[str] = mapped_column(
        Enum(PriorityType, name="priority_type_enum"),
        nullable=False,
        default=PriorityType.work,
    )
    weekly_target_units: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
