"""Initial tables: scenarios, shifts, decisions, user_progress.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "scenarios",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("channel", sa.String(20), nullable=False),
        sa.Column("sender_name", sa.String(255), nullable=False),
        sa.Column("sender_address", sa.String(255), nullable=True),
        sa.Column("subject", sa.String(500), nullable=True),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("legitimacy", sa.String(30), nullable=False),
        sa.Column("correct_action", sa.String(20), nullable=False),
        sa.Column("attack_family", sa.String(30), nullable=True),
        sa.Column("risk_type", sa.String(30), nullable=False),
        sa.Column("cues", sa.JSON(), nullable=False),
        sa.Column("premise_factors", sa.JSON(), nullable=False),
        sa.Column("explanation", sa.Text(), nullable=False),
        sa.Column("difficulty_score", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("chain_id", sa.String(100), nullable=True),
        sa.Column("chain_order", sa.Integer(), nullable=True),
        sa.Column("chain_name", sa.String(255), nullable=True),
        sa.Column("previous_action", sa.String(20), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_scenarios_chain_id"), "scenarios", ["chain_id"], unique=False)

    op.create_table(
        "shifts",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("scenario_ids", sa.JSON(), nullable=False),
        sa.Column("verification_budget", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("verifications_used", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("correct_decisions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("false_positives", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("compromised", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("started_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_shifts_user_id"), "shifts", ["user_id"], unique=False)

    op.create_table(
        "decisions",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("shift_id", sa.String(64), nullable=False),
        sa.Column("scenario_id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("action", sa.String(20), nullable=False),
        sa.Column("confidence", sa.Integer(), nullable=False),
        sa.Column("outcome", sa.String(30), nullable=False),
        sa.Column("points_earned", sa.Integer(), nullable=False),
        sa.Column("used_verification", sa.Boolean(), nullable=False),
        sa.Column("idempotency_key", sa.String(128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["shift_id"], ["shifts.id"]),
        sa.ForeignKeyConstraint(["scenario_id"], ["scenarios.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("shift_id", "idempotency_key", name="uq_decisions_shift_idempotency"),
    )
    op.create_index(op.f("ix_decisions_shift_id"), "decisions", ["shift_id"], unique=False)
    op.create_index(op.f("ix_decisions_scenario_id"), "decisions", ["scenario_id"], unique=False)
    op.create_index(op.f("ix_decisions_user_id"), "decisions", ["user_id"], unique=False)

    op.create_table(
        "user_progress",
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("total_shifts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_decisions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("correct_decisions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("false_positives", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("compromised", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("malicious_seen", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("malicious_handled", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("legitimate_seen", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("legitimate_handled", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("reports_made", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("correct_reports", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("high_confidence_errors", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("longest_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("missed_cues", sa.JSON(), nullable=False),
        sa.Column("earned_badges", sa.JSON(), nullable=False),
        sa.Column("last_played_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("user_id"),
    )


def downgrade() -> None:
    op.drop_table("user_progress")
    op.drop_index(op.f("ix_decisions_user_id"), table_name="decisions")
    op.drop_index(op.f("ix_decisions_scenario_id"), table_name="decisions")
    op.drop_index(op.f("ix_decisions_shift_id"), table_name="decisions")
    op.drop_table("decisions")
    op.drop_index(op.f("ix_shifts_user_id"), table_name="shifts")
    op.drop_table("shifts")
    op.drop_index(op.f("ix_scenarios_chain_id"), table_name="scenarios")
    op.drop_table("scenarios")
