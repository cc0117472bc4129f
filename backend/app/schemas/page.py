"""
Journal Board Backend — Page Schemas
======================================

What:  Request/response models for pages.

order_idx semantics:
    - On create: omitted → appended after the last page; given → the page
      is appended and then moved there (clamped to the valid range).
    - On update: given → the page moves there, siblings shift to make room.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.schemas.element import ElementResponse


class PageCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    date: datetime = Field(description="User-facing date of the journal entry (ISO 8601)")
    order_idx: Optional[int] = Field(default=None, ge=0)


class PageUpdate(BaseModel):
    """Partial update; every field is optional."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    date: Optional[datetime] = None
    order_idx: Optional[int] = Field(default=None, ge=0)


class PageResponse(BaseModel):
    id: uuid.UUID
    board_id: uuid.UUID
    title: str
    date: datetime
    order_idx: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PageWithElementsResponse(PageResponse):
    """A page plus its elements, bottom of the stack first (ascending z)."""
    elements: List[ElementResponse] = Field(default_factory=list)


class PageListResponse(BaseModel):
    pages: List[PageWithElementsResponse]
    total: int
