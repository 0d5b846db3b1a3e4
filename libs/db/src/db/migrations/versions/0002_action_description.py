# ruff: noqa: I001
"""Add an optional free-text description to action records (food entries).

Revision ID: 0002_action_description
Revises: 0001_action_record
Create Date: 2024-11-16
"""

from __future__ import annotations  # ruff: noqa: I001

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0002_action_description"
down_revision: str | None = "0001_action_record"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    columns = {c["name"] for c in sa.inspect(op.get_bind()).get_columns("action_record")}
    if "description" in columns:
        return
    # Nullable additive column: existing rows keep their values and read NULL here.
    op.add_column("action_record", sa.Column("description", sa.Text(), nullable=True))


def downgrade() -> None:
    with op.batch_alter_table("action_record") as batch:
        batch.drop_column("description")
