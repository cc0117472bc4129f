"""
Journal Board Backend — Element Schemas
=========================================

What:  Request/response models for elements and the batch restack body.
Why:   Shape validation (kind in the closed set, w/h > 0, z >= 0) happens
       here, before any service or storage code runs.

Payload:
    `payload` is carried as opaque JSON. Text elements usually hold
    {"text", "font", "color"}, images {"url"}, stickers {"sticker_id"}; none
    of that is interpreted server-side.
"""

import uuid
from datetime import datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field

from app.models.element import ElementKind


class ElementCreate(BaseModel):
    """Body of POST /boards/{board_id}/pages/{page_id}/elements. z is always appended."""
    kind: ElementKind
    x: float
    y: float
    w: float = Field(gt=0, description="Width, strictly positive")
    h: float = Field(gt=0, description="Height, strictly positive")
    rotation: float = 0.0
    visible: bool = True
    locked: bool = False
    payload: Any = Field(default_factory=dict)


class ElementUpdate(BaseModel):
    """
    Partial update. Only fields present in the body are applied.

    z is deliberately absent: stacking order changes only through the
    reorder endpoint, which keeps the whole page consistent.
    """
    x: Optional[float] = None
    y: Optional[float] = None
    w: Optional[float] = Field(default=None, gt=0)
    h: Optional[float] = Field(default=None, gt=0)
    rotation: Optional[float] = None
    visible: Optional[bool] = None
    locked: Optional[bool] = None
    payload: Optional[Any] = None


class ElementZUpdate(BaseModel):
    """One (element, target z) pair of a batch restack."""
    id: uuid.UUID
    z: int = Field(ge=0)


class ElementReorderRequest(BaseModel):
    """
    Body of PUT /boards/{board_id}/pages/{page_id}/elements/reorder.

    Accepts {"elements": [...]} and, for older clients, {"updates": [...]}.
    """
    elements: List[ElementZUpdate] = Field(
        min_length=1,
        validation_alias=AliasChoices("elements", "updates"),
    )


class ElementResponse(BaseModel):
    id: uuid.UUID
    page_id: uuid.UUID
    kind: str
    x: float
    y: float
    w: float
    h: float
    rotation: float
    z: int
    visible: bool
    locked: bool
    payload: Any = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ElementListResponse(BaseModel):
    elements: List[ElementResponse]
    total: int
