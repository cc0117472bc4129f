"""
Journal Board Backend — Database Session Management
=====================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   Creates an async engine with connection pooling, provides a session
       dependency that commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Transaction Model:
    One request = one session = one transaction. Every position-mutating
    operation (append, move, batch restack, cascade delete) runs inside that
    transaction, so either the whole logical operation commits or nothing does.
    Nothing here retries: a failed commit surfaces to the caller, who must
    resubmit the whole operation.

Isolation:
    PostgreSQL's default READ COMMITTED. Readers see only committed states.
    Position writers additionally lock the parent row (SELECT ... FOR UPDATE,
    see app/services/ordering.py) so two moves in the same sibling collection
    serialize, while moves under different boards/pages never block each other.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import settings


def _engine_options() -> Dict[str, Any]:
    """
    Pool configuration for the configured backend.

    SQLite's async driver uses a single-connection pool that rejects
    pool_size/max_overflow, so those are only passed for server databases.
    """
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,  # Recycle after 1 hour to prevent stale connections
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay readable after commit, which the
# routes rely on when serializing the objects a service returned
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Boards, pages and elements register their tables on this metadata,
    which Alembic reads for migrations and the test suite uses for create_all().
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler (the handler calls services)
        3. On success: commits the transaction
        4. On error: rolls back, so no partial position update is ever visible
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/boards/{board_id}/pages")
        async def list_pages(board_id: UUID, db: AsyncSession = Depends(get_db_session)):
            return await page_service.list_pages(db, board_id, token=None)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            # Any failure (storage, authorization, consistency) discards the
            # whole logical operation
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Close all pooled connections. Called from the application lifespan on shutdown."""
    await engine.dispose()
