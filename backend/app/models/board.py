"""
Journal Board Backend — Board SQLAlchemy Model
================================================

What:  ORM model representing the `boards` table.
Why:   A board is the root of the document hierarchy and the unit of access
       control: it owns the two capability tokens every request is checked against.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Loaded by the access gate (token columns only) and by BoardService.

Capability Tokens:
    edit_token   — grants read + write on the board and everything below it
    public_token — grants read only
    Both are random UUIDv4 values (122 bits of entropy), generated once at
    creation and never rotated. UNIQUE constraints make an accidental
    collision fail loudly instead of silently sharing access.
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

BOARD_SKINS = ("default", "wood", "notebook", "cork")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Board(Base):
    """
    A journal board: title, skin, capability tokens, and an ordered set of pages.

    Page order is held in Page.order_idx, not in this row; see
    app/services/ordering.py for how it is kept dense.
    """

    __tablename__ = "boards"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Visual skin selector; the closed set is enforced by the API schemas
    skin: Mapped[str] = mapped_column(String(50), nullable=False, default="default")

    # ── Capability Tokens ─────────────────────────────────────────────────
    # Never serialized by default: only the create response and the
    # edit-token lookup return edit_token to the caller
    edit_token: Mapped[uuid.UUID] = mapped_column(
        Uuid, nullable=False, unique=True, default=uuid.uuid4,
    )
    public_token: Mapped[uuid.UUID] = mapped_column(
        Uuid, nullable=False, unique=True, default=uuid.uuid4,
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    pages: Mapped[List["Page"]] = relationship(  # noqa: F821
        "Page",
        back_populates="board",
        order_by="Page.order_idx",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Board(id={self.id}, title='{self.title}')>"
