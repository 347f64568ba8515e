"""Create notes table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

Creates the `notes` table: title/body text, AI result columns, JSON tag list,
created/updated timestamps and the created_at DESC index used for listing.

Rollback: downgrade() drops the table (all notes are lost).
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
        "notes",
        sa.Column("id", sa.Uuid(), nullable=False, comment="Unique identifier, assigned on creation"),
        sa.Column("title", sa.Text(), nullable=True, comment="Optional note title"),
        sa.Column("body", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column(
            "summary",
            sa.Text(),
            nullable=False,
            server_default=sa.text("''"),
            comment="Set only by the summarize operation",
        ),
        sa.Column(
            "elaboration",
            sa.Text(),
            nullable=False,
            server_default=sa.text("''"),
            comment="Set only by the elaborate operation",
        ),
        sa.Column("tags", sa.JSON(), nullable=False, comment="Ordered list of text labels"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index(
        "idx_notes_created_at",
        "notes",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_notes_created_at", table_name="notes")
    op.drop_table("notes")
