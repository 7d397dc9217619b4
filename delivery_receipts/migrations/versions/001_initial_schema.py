"""Initial schema baseline

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates the receipts table. Databases created by init_db() already match
this revision and can be marked complete without running it:
    alembic stamp 001
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "receipts",
        sa.Column("sequence", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("content_id", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("sequence"),
        sqlite_autoincrement=True,
    )


def downgrade() -> None:
    op.drop_table("receipts")
