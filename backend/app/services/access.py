"""
Journal Board Backend — Access Gate (Capability Tokens)
=========================================================

What:  Decides whether a request may read or edit a board, given the token
       it presented.
Why:   There are no user accounts. Possession of a board's edit token grants
       write access; possession of its public token grants read access.
How:   Two layers:
       1. verify_token(): pure comparison of a presented value against a
          board's two secrets. No I/O, trivially unit-testable.
       2. AccessGate: loads the secrets for a board id (token columns only)
          and combines existence with verify_token() into one outcome.
Who:   Every board, page, element, recap and upload service call.
When:  First step of every operation, before any ordering or storage write.

Outcome table:
    ┌─────────────────────────────┬──────────────────┬──────────────────┐
    │ situation                   │ authorize_edit   │ authorize_read   │
    ├─────────────────────────────┼──────────────────┼──────────────────┤
    │ board absent                │ NOT_FOUND *      │ NOT_FOUND        │
    │ no token                    │ UNAUTHORIZED     │ READ if anonymous│
    │                             │                  │ reads allowed    │
    │ edit token                  │ EDIT_AUTHORIZED  │ READ_AUTHORIZED  │
    │ public token                │ UNAUTHORIZED     │ READ_AUTHORIZED  │
    │ anything else               │ UNAUTHORIZED     │ UNAUTHORIZED     │
    └─────────────────────────────┴──────────────────┴──────────────────┘
    * an edit request without any token is rejected before the lookup

Comparison:
    The presented value is parsed as a UUID; anything that does not parse
    matches nothing (no prefix or case games). Canonical strings are compared
    with secrets.compare_digest. Tokens are 122-bit random values, so timing
    is not what protects them, but the constant-time compare costs nothing.
"""

import enum
import logging
import secrets
import uuid
from typing import NamedTuple, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import NotFoundError, UnauthorizedError
from app.models.board import Board

logger = logging.getLogger(__name__)

TokenLike = Union[str, uuid.UUID, None]


class AccessOutcome(str, enum.Enum):
    EDIT_AUTHORIZED = "edit_authorized"
    READ_AUTHORIZED = "read_authorized"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"


class BoardSecrets(NamedTuple):
    """The two capability tokens of one board."""
    edit_token: uuid.UUID
    public_token: uuid.UUID


def _parse_token(presented: TokenLike) -> Optional[uuid.UUID]:
    if presented is None:
        return None
    if isinstance(presented, uuid.UUID):
        return presented
    try:
        return uuid.UUID(str(presented).strip())
    except ValueError:
        return None


def _matches(candidate: uuid.UUID, secret: uuid.UUID) -> bool:
    return secrets.compare_digest(str(candidate), str(secret))


def verify_token(presented: TokenLike, board_secrets: Optional[BoardSecrets]) -> AccessOutcome:
    """
    Compare a presented token against a board's secrets.

    Args:
        presented:      Raw token from the request (None when absent)
        board_secrets:  The board's tokens, or None when the board does not exist

    Returns:
        NOT_FOUND when the board is absent, UNAUTHORIZED when no token was
        presented or it matches neither secret, otherwise EDIT_AUTHORIZED or
        READ_AUTHORIZED depending on which secret matched.
    """
    if board_secrets is None:
        return AccessOutcome.NOT_FOUND
    if presented is None or presented == "":
        return AccessOutcome.UNAUTHORIZED

    candidate = _parse_token(presented)
    if candidate is None:
        return AccessOutcome.UNAUTHORIZED

    if _matches(candidate, board_secrets.edit_token):
        return AccessOutcome.EDIT_AUTHORIZED
    if _matches(candidate, board_secrets.public_token):
        return AccessOutcome.READ_AUTHORIZED
    return AccessOutcome.UNAUTHORIZED


class AccessGate:
    """
    Storage-backed authorization for board-scoped operations.

    Stateless; a module-level `access_gate` instance is shared by all services.
    """

    async def load_secrets(self, db: AsyncSession, board_id: uuid.UUID) -> Optional[BoardSecrets]:
        """Fetch only the token columns of a board (None if it does not exist)."""
        result = await db.execute(
            select(Board.edit_token, Board.public_token).where(Board.id == board_id)
        )
        row = result.first()
        if row is None:
            return None
        return BoardSecrets(edit_token=row.edit_token, public_token=row.public_token)

    async def authorize_edit(
        self,
        db: AsyncSession,
        board_id: uuid.UUID,
        token: TokenLike,
    ) -> AccessOutcome:
        if token is None or token == "":
            return AccessOutcome.UNAUTHORIZED

        outcome = verify_token(token, await self.load_secrets(db, board_id))
        # A public token is a valid credential, just not for writing
        if outcome == AccessOutcome.READ_AUTHORIZED:
            return AccessOutcome.UNAUTHORIZED
        return outcome

    async def authorize_read(
        self,
        db: AsyncSession,
        board_id: uuid.UUID,
        token: TokenLike,
        allow_anonymous: bool = False,
    ) -> AccessOutcome:
        board_secrets = await self.load_secrets(db, board_id)
        if board_secrets is None:
            return AccessOutcome.NOT_FOUND

        if token is None or token == "":
            return AccessOutcome.READ_AUTHORIZED if allow_anonymous else AccessOutcome.UNAUTHORIZED

        outcome = verify_token(token, board_secrets)
        if outcome == AccessOutcome.EDIT_AUTHORIZED:
            return AccessOutcome.READ_AUTHORIZED
        return outcome

    # ── Raising variants used by the services ─────────────────────────────

    async def require_edit(self, db: AsyncSession, board_id: uuid.UUID, token: TokenLike) -> None:
        outcome = await self.authorize_edit(db, board_id, token)
        _raise_for(outcome, board_id, "edit")

    async def require_read(
        self,
        db: AsyncSession,
        board_id: uuid.UUID,
        token: TokenLike,
        allow_anonymous: bool = False,
    ) -> None:
        outcome = await self.authorize_read(db, board_id, token, allow_anonymous)
        _raise_for(outcome, board_id, "read")


def _raise_for(outcome: AccessOutcome, board_id: uuid.UUID, action: str) -> None:
    if outcome == AccessOutcome.NOT_FOUND:
        raise NotFoundError(resource="board", resource_id=str(board_id))
    if outcome == AccessOutcome.UNAUTHORIZED:
        logger.info("Rejected %s access to board %s", action, board_id)
        if action == "edit":
            raise UnauthorizedError(message="A valid edit token is required for this operation")
        raise UnauthorizedError(message="A valid board token is required to view this board")


access_gate = AccessGate()
