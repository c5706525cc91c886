"""baseline schema: users, call sessions, api credentials

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 00:00:01
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None

MONEY = sa.Numeric(12, 2)
JSON_DOCUMENT = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")
CALL_CHANNEL = sa.Enum("VAPI", "MANUAL", "INBOUND", name="call_channel")
CALL_OUTCOME = sa.Enum("SUCCESS", "PARTIAL", "REFUSED", name="call_outcome")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("phone_number", sa.String(20), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("total_debt", MONEY, nullable=False),
        sa.Column("remaining_debt", MONEY, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("total_debt >= 0", name="ck_users_total_debt_non_negative"),
        sa.CheckConstraint("remaining_debt >= 0", name="ck_users_remaining_debt_non_negative"),
        sa.CheckConstraint("remaining_debt <= total_debt", name="ck_users_debt_consistency"),
    )
    op.create_index("ix_users_phone_number", "users", ["phone_number"], unique=True)
    op.create_index("idx_users_remaining_debt", "users", ["remaining_debt"])

    op.create_table(
        "call_sessions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("external_session_id", sa.String(100), nullable=False),
        sa.Column("call_channel", CALL_CHANNEL, nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("outcome", CALL_OUTCOME, nullable=True),
        sa.Column("initial_offer", MONEY, nullable=False),
        sa.Column("final_amount", MONEY, nullable=False),
        sa.Column("debt_before", MONEY, nullable=False),
        sa.Column("debt_after", MONEY, nullable=False),
        sa.Column("negotiation_data", JSON_DOCUMENT, nullable=False),
        sa.Column("integrations", JSON_DOCUMENT, nullable=False),
        sa.Column("success_rate", MONEY, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("initial_offer >= 0", name="ck_call_sessions_initial_offer_non_negative"),
        sa.CheckConstraint("final_amount >= 0", name="ck_call_sessions_final_amount_non_negative"),
        sa.CheckConstraint("debt_before >= 0", name="ck_call_sessions_debt_before_non_negative"),
        sa.CheckConstraint("debt_after >= 0", name="ck_call_sessions_debt_after_non_negative"),
        sa.CheckConstraint("debt_after <= debt_before", name="ck_call_sessions_financial_consistency"),
        sa.CheckConstraint(
            "(outcome = 'REFUSED' AND final_amount = 0) OR "
            "(outcome IN ('SUCCESS', 'PARTIAL') AND final_amount > 0)",
            name="ck_call_sessions_outcome_amount_consistency",
        ),
    )
    op.create_index("idx_call_sessions_user_outcome", "call_sessions", ["user_id", "outcome"])
    op.create_index("idx_call_sessions_started_at", "call_sessions", ["started_at"])
    op.create_index("idx_call_sessions_external_session", "call_sessions", ["external_session_id"])
    op.create_index("idx_call_sessions_channel_outcome", "call_sessions", ["call_channel", "outcome"])
    op.create_index(
        "idx_active_call_sessions",
        "call_sessions",
        ["user_id"],
        unique=True,
        postgresql_where=sa.text("ended_at IS NULL"),
        sqlite_where=sa.text("ended_at IS NULL"),
    )

    op.create_table(
        "api_credentials",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("key_hash", sa.Text(), nullable=False),
        sa.Column("scopes", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("request_count", sa.BigInteger().with_variant(sa.Integer(), "sqlite"), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_api_credentials_active", "api_credentials", ["is_active", "expires_at"])


def downgrade() -> None:
    op.drop_index("idx_api_credentials_active", table_name="api_credentials")
    op.drop_table("api_credentials")

    op.drop_index("idx_active_call_sessions", table_name="call_sessions")
    op.drop_index("idx_call_sessions_channel_outcome", table_name="call_sessions")
    op.drop_index("idx_call_sessions_external_session", table_name="call_sessions")
    op.drop_index("idx_call_sessions_started_at", table_name="call_sessions")
    op.drop_index("idx_call_sessions_user_outcome", table_name="call_sessions")
    op.drop_table("call_sessions")
    CALL_OUTCOME.drop(op.get_bind(), checkfirst=True)
    CALL_CHANNEL.drop(op.get_bind(), checkfirst=True)

    op.drop_index("idx_users_remaining_debt", table_name="users")
    op.drop_index("ix_users_phone_number", table_name="users")
    op.drop_table("users")
