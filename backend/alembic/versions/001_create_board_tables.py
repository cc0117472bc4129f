"""Create boards, pages and elements tables

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates the three tables of the board hierarchy.
How:   Generic UUID type (native UUID on PostgreSQL), TIMESTAMP WITH TIME ZONE,
       JSONB payloads, CHECK constraints on element kind and size.

Rollback: downgrade() drops all three tables (destructive — all boards lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create boards → pages → elements with their indexes and constraints."""
    op.create_table(
        "boards",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("skin", sa.String(50), nullable=False, server_default=sa.text("'default'")),
        sa.Column(
            "edit_token",
            sa.Uuid(),
            nullable=False,
            comment="Capability token granting read + write",
        ),
        sa.Column(
            "public_token",
            sa.Uuid(),
            nullable=False,
            comment="Capability token granting read only",
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("edit_token", name="uq_boards_edit_token"),
        sa.UniqueConstraint("public_token", name="uq_boards_public_token"),
    )

    op.create_table(
        "pages",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("board_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column(
            "order_idx",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
            comment="Rank of the page within its board (0..n-1)",
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["board_id"], ["boards.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_pages_board_id", "pages", ["board_id"])
    op.create_index("idx_pages_board_order", "pages", ["board_id", "order_idx"])
    op.create_index("idx_pages_board_date", "pages", ["board_id", "date"])

    op.create_table(
        "elements",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("page_id", sa.Uuid(), nullable=False),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("x", sa.Float(), nullable=False),
        sa.Column("y", sa.Float(), nullable=False),
        sa.Column("w", sa.Float(), nullable=False),
        sa.Column("h", sa.Float(), nullable=False),
        sa.Column("rotation", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "z",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
            comment="Stacking rank within the page (0..n-1)",
        ),
        sa.Column("visible", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("locked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "payload",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=True,
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["page_id"], ["pages.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "kind IN ('text', 'image', 'sticker', 'shape')", name="ck_elements_kind",
        ),
        sa.CheckConstraint("w > 0", name="ck_elements_w_positive"),
        sa.CheckConstraint("h > 0", name="ck_elements_h_positive"),
    )
    op.create_index("ix_elements_page_id", "elements", ["page_id"])
    op.create_index("idx_elements_page_z", "elements", ["page_id", "z"])


def downgrade() -> None:
    """Drop the tables in reverse dependency order."""
    op.drop_index("idx_elements_page_z", table_name="elements")
    op.drop_index("ix_elements_page_id", table_name="elements")
    op.drop_table("elements")

    op.drop_index("idx_pages_board_date", table_name="pages")
    op.drop_index("idx_pages_board_order", table_name="pages")
    op.drop_index("ix_pages_board_id", table_name="pages")
    op.drop_table("pages")

    op.drop_table("boards")
