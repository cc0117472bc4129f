"""
Journal Board Backend — Shared Route Dependencies
===================================================

Capability tokens travel as query parameters:
    - mutations read `edit_token` only
    - reads accept `edit_token` first, then `public_token`

The values are passed to the services untouched; parsing and comparison
happen in app/services/access.py.
"""

from typing import Optional

from fastapi import Query


def edit_token_param(
    edit_token: Optional[str] = Query(
        default=None,
        description="Edit token of the board (required for changes)",
    ),
) -> Optional[str]:
    return edit_token


def read_token_param(
    edit_token: Optional[str] = Query(default=None, description="Edit token of the board"),
    public_token: Optional[str] = Query(default=None, description="Public (read-only) token of the board"),
) -> Optional[str]:
    return edit_token or public_token
