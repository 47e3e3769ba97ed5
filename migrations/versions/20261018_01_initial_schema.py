"""sessions, registrations, wallet ledger and weekly reports

Revision ID: 3f9c1e7a2b40
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f9c1e7a2b40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "play_sessions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="draft"),
        sa.Column("day_label", sa.String(length=50)),
        sa.Column("session_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time()),
        sa.Column("end_time", sa.Time()),
        sa.Column("max_players", sa.Integer(), nullable=False),
        sa.Column("payment_amount", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("published_at", sa.DateTime(timezone=True)),
        sa.Column("locked_at", sa.DateTime(timezone=True)),
        sa.Column("closed_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_play_sessions_session_date", "play_sessions", ["session_date"])
    op.create_index("ix_play_sessions_closed_at", "play_sessions", ["closed_at"])

    op.create_table(
        "registrations",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("session_id", sa.String(length=36), sa.ForeignKey("play_sessions.id"), nullable=False),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("user_id", sa.String(length=64)),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("paid", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("clicked_payment_link", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_guest", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("registered_by", sa.String(length=64), nullable=False),
        sa.Column("registered_at", sa.DateTime(timezone=True)),
        sa.UniqueConstraint("session_id", "position", name="uq_registrations_session_position"),
        sa.UniqueConstraint("session_id", "name", name="uq_registrations_session_name"),
    )
    op.create_index("ix_registrations_session_id", "registrations", ["session_id"])
    op.create_index("ix_registrations_user_id", "registrations", ["user_id"])
    op.create_index("ix_registrations_registered_by", "registrations", ["registered_by"])

    op.create_table(
        "wallets",
        sa.Column("user_id", sa.String(length=64), primary_key=True),
        sa.Column("balance", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("overdraft_limit", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_sequence", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(length=10), nullable=False, server_default="THB"),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )

    op.create_table(
        "wallet_transactions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=64), sa.ForeignKey("wallets.user_id"), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(length=30), nullable=False),
        sa.Column("session_id", sa.String(length=36), sa.ForeignKey("play_sessions.id")),
        sa.Column("counterparty_id", sa.String(length=64)),
        sa.Column("transfer_id", sa.String(length=36)),
        sa.Column("description", sa.String(length=255)),
        sa.Column("balance_after", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "sequence", name="uq_wallet_transactions_user_sequence"),
    )
    op.create_index("ix_wallet_transactions_user_id", "wallet_transactions", ["user_id"])
    op.create_index("ix_wallet_transactions_session_id", "wallet_transactions", ["session_id"])
    op.create_index("ix_wallet_transactions_transfer_id", "wallet_transactions", ["transfer_id"])

    op.create_table(
        "weekly_balance_reports",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("week_id", sa.String(length=20), nullable=False),
        sa.Column("revision", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("session_count", sa.Integer(), nullable=False),
        sa.Column("total_players", sa.Integer(), nullable=False),
        sa.Column("total_income", sa.Integer(), nullable=False),
        sa.Column("total_refunds", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("court_cost", sa.Integer(), nullable=False),
        sa.Column("shuttlecock_cost", sa.Integer(), nullable=False),
        sa.Column("total_expenses", sa.Integer(), nullable=False),
        sa.Column("gross_profit", sa.Integer(), nullable=False),
        sa.Column("weekly_cost", sa.Integer(), nullable=False),
        sa.Column("base_price", sa.Integer(), nullable=False),
        sa.Column("current_balance", sa.Integer(), nullable=False),
        sa.Column("weeks_to_distribute", sa.Integer(), nullable=False),
        sa.Column("players_per_week", sa.Integer(), nullable=False),
        sa.Column("balance_to_distribute", sa.Integer(), nullable=False),
        sa.Column("price_adjustment", sa.Integer(), nullable=False),
        sa.Column("recommended_price", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("superseded_at", sa.DateTime(timezone=True)),
        sa.UniqueConstraint("week_id", "revision", name="uq_weekly_balance_reports_week_revision"),
    )
    op.create_index("ix_weekly_balance_reports_week_id", "weekly_balance_reports", ["week_id"])


def downgrade() -> None:
    op.drop_index("ix_weekly_balance_reports_week_id", table_name="weekly_balance_reports")
    op.drop_table("weekly_balance_reports")
    op.drop_index("ix_wallet_transactions_transfer_id", table_name="wallet_transactions")
    op.drop_index("ix_wallet_transactions_session_id", table_name="wallet_transactions")
    op.drop_index("ix_wallet_transactions_user_id", table_name="wallet_transactions")
    op.drop_table("wallet_transactions")
    op.drop_table("wallets")
    op.drop_index("ix_registrations_registered_by", table_name="registrations")
    op.drop_index("ix_registrations_user_id", table_name="registrations")
    op.drop_index("ix_registrations_session_id", table_name="registrations")
    op.drop_table("registrations")
    op.drop_index("ix_play_sessions_closed_at", table_name="play_sessions")
    op.drop_index("ix_play_sessions_session_date", table_name="play_sessions")
    op.drop_table("play_sessions")
