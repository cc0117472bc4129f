"""
Journal Board Backend — Upload Schemas
========================================

What:  Response returned after an image is stored for a board.
Who:   POST /boards/{board_id}/upload; the client puts `url` into an image
       element's payload.
"""

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    url: str = Field(description="Absolute URL the stored image is served from")
    filename: str = Field(description="Stored file name (UUID + extension)")
    size: int = Field(description="Size in bytes")
    mime_type: str = Field(description="Detected image type, e.g. image/png")
