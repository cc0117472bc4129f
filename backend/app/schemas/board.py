"""
Journal Board Backend — Board Schemas
=======================================

What:  Request/response models for boards.
Why:   Controls exactly which token leaves the server in which response.

Token exposure:
    - BoardResponse:            public_token only (safe to share)
    - BoardWithTokensResponse:  edit_token + public_token; returned only on
                                create and to a caller who already holds the
                                edit token
"""

import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from app.schemas.page import PageResponse

BoardSkin = Literal["default", "wood", "notebook", "cork"]


class BoardCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(default="", max_length=500)
    skin: BoardSkin = "default"


class BoardUpdate(BaseModel):
    """Partial update; omitted fields keep their value."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=500)
    skin: Optional[BoardSkin] = None


class BoardResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: str
    skin: str
    public_token: uuid.UUID
    created_at: datetime
    updated_at: datetime
    page_count: int = 0
    pages: List[PageResponse] = Field(default_factory=list)


class BoardWithTokensResponse(BoardResponse):
    edit_token: uuid.UUID


class BoardCreateResponse(BaseModel):
    """
    Returned by POST /boards with HTTP 201.

    edit_url / public_url are the share links the web client shows the
    creator; whoever holds edit_url can modify the board.
    """
    board: BoardWithTokensResponse
    edit_url: str
    public_url: str
