# ruff: noqa: I001
"""Daily expense table.

Revision ID: 0003_daily_expense
Revises: 0002_action_description
Create Date: 2025-01-11
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0003_daily_expense"
down_revision: str | None = "0002_action_description"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    if sa.inspect(op.get_bind()).has_table("daily_expense"):
        return

    op.create_table(
        "daily_expense",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("category", sa.Text(), nullable=False),
        # Milliseconds since the epoch, same unit as action_record.timestamp
        sa.Column("date", sa.BigInteger(), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("origin", sa.Text(), nullable=True),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_daily_expense_date", "daily_expense", ["date"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_daily_expense_date", table_name="daily_expense")
    op.drop_table("daily_expense")
