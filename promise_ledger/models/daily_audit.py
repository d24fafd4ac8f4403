from datetime import datetime, date
from sqlalchemy import (
    JSON, Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func,
)
from sqlalchemy.orm import Mapped, mapped_column

from promise_ledger.db.base import Base


class DailyAudit(Base):
    """One self-audit per owner per day. Upserted on (owner_id, day)."""

    __tablename__ = "daily_audits"
    __table_args__ = (
        UniqueConstraint("owner_id", "day", name="uq_daily_audit_owner_day"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    sprint_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("sprints.id", ondelete="SET NULL"), nullable=True, index=True
    )
    day: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    energy: Mapped[int] = mapped_column(Integer, nullable=False)
    # {"priority_key": units}
    priority_units: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    # [{"type": ..., "value": ..., "url": ...}]
    proof_of_work: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
