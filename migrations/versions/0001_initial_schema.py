"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

Sprints own goals, goals own commitments. Daily audits are unique per
(owner_id, day); completion events are unique per (commitment_id, day).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- sprints ---
    op.create_table(
        "sprints",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("owner_id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sprints_id", "sprints", ["id"])
    op.create_index("ix_sprints_owner_id", "sprints", ["owner_id"])
    op.create_index("ix_sprints_active", "sprints", ["active"])

    # --- goals ---
    op.create_table(
        "goals",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("sprint_id", sa.Integer(), sa.ForeignKey("sprints.id", ondelete="CASCADE"), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_goals_id", "goals", ["id"])
    op.create_index("ix_goals_sprint_id", "goals", ["sprint_id"])

    # --- sprint_priorities (legacy unit tracking) ---
    op.create_table(
        "sprint_priorities",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("sprint_id", sa.Integer(), sa.ForeignKey("sprints.id", ondelete="CASCADE"), nullable=False),
        sa.Column("key", sa.String(64), nullable=False),
        sa.Column("label", sa.String(256), nullable=False),
        sa.Column("type", sa.Enum("habit", "work", name="priority_type_enum"), nullable=False),
        sa.Column("weekly_target_units", sa.Integer(), nullable=False, server_default="1"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("sprint_id", "key", name="uq_sprint_priority_key"),
    )
    op.create_index("ix_sprint_priorities_id", "sprint_priorities", ["id"])
    op.create_index("ix_sprint_priorities_sprint_id", "sprint_priorities", ["sprint_id"])

    # --- commitments ---
    op.create_table(
        "commitments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("owner_id", sa.String(64), nullable=False),
        sa.Column("sprint_id", sa.Integer(), sa.ForeignKey("sprints.id", ondelete="CASCADE"), nullable=False),
        sa.Column("goal_id", sa.Integer(), sa.ForeignKey("goals.id", ondelete="CASCADE"), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("kind", sa.Enum("daily", "weekly", name="commitment_kind_enum"), nullable=False),
        sa.Column("schedule_days", sa.JSON(), nullable=True),
        sa.Column("weekly_target", sa.Integer(), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_commitments_id", "commitments", ["id"])
    op.create_index("ix_commitments_owner_id", "commitments", ["owner_id"])
    op.create_index("ix_commitments_sprint_id", "commitments", ["sprint_id"])
    op.create_index("ix_commitments_goal_id", "commitments", ["goal_id"])

    # --- daily_audits ---
    op.create_table(
        "daily_audits",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("owner_id", sa.String(64), nullable=False),
        sa.Column("sprint_id", sa.Integer(), sa.ForeignKey("sprints.id", ondelete="SET NULL"), nullable=True),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("energy", sa.Integer(), nullable=False),
        sa.Column("priority_units", sa.JSON(), nullable=False),
        sa.Column("proof_of_work", sa.JSON(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("owner_id", "day", name="uq_daily_audit_owner_day"),
        sa.CheckConstraint("energy BETWEEN 1 AND 5", name="ck_daily_audit_energy"),
    )
    op.create_index("ix_daily_audits_id", "daily_audits", ["id"])
    op.create_index("ix_daily_audits_owner_id", "daily_audits", ["owner_id"])
    op.create_index("ix_daily_audits_sprint_id", "daily_audits", ["sprint_id"])
    op.create_index("ix_daily_audits_day", "daily_audits", ["day"])

    # --- completion_events ---
    op.create_table(
        "completion_events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("owner_id", sa.String(64), nullable=False),
        sa.Column("commitment_id", sa.Integer(), sa.ForeignKey("commitments.id", ondelete="CASCADE"), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("daily_audit_id", sa.Integer(), sa.ForeignKey("daily_audits.id", ondelete="SET NULL"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("commitment_id", "day", name="uq_completion_commitment_day"),
    )
    op.create_index("ix_completion_events_id", "completion_events", ["id"])
    op.create_index("ix_completion_events_owner_id", "completion_events", ["owner_id"])
    op.create_index("ix_completion_events_commitment_id", "completion_events", ["commitment_id"])
    op.create_index("ix_completion_events_day", "completion_events", ["day"])


def downgrade() -> None:
    op.drop_table("completion_events")
    op.drop_table("daily_audits")
    op.drop_table("commitments")
    op.drop_table("sprint_priorities")
    op.drop_table("goals")
    op.drop_table("sprints")
    sa.Enum(name="commitment_kind_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="priority_type_enum").drop(op.get_bind(), checkfirst=True)
