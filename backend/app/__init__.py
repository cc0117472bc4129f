"""
Journal Board Backend — Application Package Initializer
=========================================================

What: The `app` package: a FastAPI service for junk-journal boards.
Who:  Imported by uvicorn (app.main:app), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, {"data": ...} envelopes
    ├─────────────────────────────────────┤
    │   Access Gate  │  Ordering Engine   │  ← capability tokens, dense positions
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← boards, pages, elements, recap, uploads
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← async sessions, one transaction per request
    └─────────────────────────────────────┘

    Boards contain ordered pages (order_idx); pages contain z-stacked
    elements. A board is reachable through two tokens: edit (read + write)
    and public (read only).
"""

__version__ = "1.0.0"
