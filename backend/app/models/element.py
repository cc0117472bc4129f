"""
Journal Board Backend — Element SQLAlchemy Model
==================================================

What:  ORM model representing the `elements` table.
Why:   Elements are the visual items placed on a page (text, images, stickers, shapes).

Table Design Rationale:
    - kind:     closed set, enforced by a CHECK constraint and by the API enum
    - w, h:     strictly positive (CHECK) so a zero-area element can never be stored
    - z:        rank in the page's stack; appended as max + 1, restacked in batches
    - payload:  kind-specific JSON the server stores and returns untouched
"""

import enum
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class ElementKind(str, enum.Enum):
    """Closed set of element kinds."""
    TEXT = "text"
    IMAGE = "image"
    STICKER = "sticker"
    SHAPE = "shape"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Element(Base):
    """A positioned item on a page. page_id never changes after creation."""

    __tablename__ = "elements"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    page_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("pages.id", ondelete="CASCADE"), nullable=False, index=True,
    )

    kind: Mapped[str] = mapped_column(String(20), nullable=False)

    # ── Geometry ──────────────────────────────────────────────────────────
    x: Mapped[float] = mapped_column(Float, nullable=False)
    y: Mapped[float] = mapped_column(Float, nullable=False)
    w: Mapped[float] = mapped_column(Float, nullable=False)
    h: Mapped[float] = mapped_column(Float, nullable=False)
    rotation: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    z: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
    payload: Mapped[Any] = mapped_column(JSON().with_variant(JSONB(), "postgresql"), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    page: Mapped["Page"] = relationship("Page", back_populates="elements")  # noqa: F821

    __table_args__ = (
        CheckConstraint(
            "kind IN ('text', 'image', 'sticker', 'shape')", name="ck_elements_kind",
        ),
        CheckConstraint("w > 0", name="ck_elements_w_positive"),
        CheckConstraint("h > 0", name="ck_elements_h_positive"),
        Index("idx_elements_page_z", "page_id", "z"),
    )

    def __repr__(self) -> str:
        return f"<Element(id={self.id}, kind='{self.kind}', z={self.z})>"
