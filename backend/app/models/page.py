"""
Journal Board Backend — Page SQLAlchemy Model
===============================================

What:  ORM model representing the `pages` table.
Why:   Pages are the ordered children of a board; each holds a z-stack of elements.

Ordering:
    order_idx is the page's rank within its board. Appends take max + 1,
    explicit moves shift the affected range (app/services/ordering.py).
    Deletes leave gaps that the next move of the same board closes, so there
    is deliberately no UNIQUE(board_id, order_idx) constraint: a batch of
    per-row updates passes through transient duplicates inside its transaction.

Query Patterns:
    - Board page list: WHERE board_id = :id ORDER BY order_idx
      → idx_pages_board_order
    - Recap range:     WHERE board_id = :id AND date BETWEEN :start AND :end
      → idx_pages_board_date
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Page(Base):
    """A dated page on a board. board_id never changes after creation."""

    __tablename__ = "pages"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    board_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    # User-facing date of the journal entry (not the creation time)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    order_idx: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    board: Mapped["Board"] = relationship("Board", back_populates="pages")  # noqa: F821

    elements: Mapped[List["Element"]] = relationship(  # noqa: F821
        "Element",
        back_populates="page",
        order_by="Element.z",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_pages_board_order", "board_id", "order_idx"),
        Index("idx_pages_board_date", "board_id", "date"),
    )

    def __repr__(self) -> str:
        return f"<Page(id={self.id}, board_id={self.board_id}, order_idx={self.order_idx})>"
