"""
Journal Board Backend — Recap Schemas
=======================================

What:  Response model for the recap summary (pages dated within a day,
       week or month, with element counts).
"""

import uuid
from datetime import datetime
from typing import List

from pydantic import BaseModel


class RecapDateRange(BaseModel):
    start_date: datetime
    end_date: datetime


class RecapPage(BaseModel):
    id: uuid.UUID
    title: str
    date: datetime
    order_idx: int
    element_count: int
    created_at: datetime
    updated_at: datetime


class RecapResponse(BaseModel):
    filter: str
    date_range: RecapDateRange
    page_count: int
    element_count: int
    pages: List[RecapPage]
