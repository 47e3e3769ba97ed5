"""add regular players per weekday

Revision ID: 20261019_01
Revises: 3f9c1e7a2b40
Create Date: 2026-10-19 08:30:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_01"
down_revision = "3f9c1e7a2b40"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "regular_players",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("weekday", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.UniqueConstraint("weekday", "name", name="uq_regular_players_weekday_name"),
    )
    op.create_index("ix_regular_players_weekday", "regular_players", ["weekday"])

    with op.batch_alter_table("registrations") as batch_op:
        batch_op.add_column(sa.Column("is_regular", sa.Boolean(), nullable=False, server_default=sa.false()))


def downgrade() -> None:
    with op.batch_alter_table("registrations") as batch_op:
        batch_op.drop_column("is_regular")
    op.drop_index("ix_regular_players_weekday", table_name="regular_players")
    op.drop_table("regular_players")
