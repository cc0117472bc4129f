"""
Journal Board Backend — Ordering Engine
=========================================

What:  Keeps page order within a board (pages.order_idx) and element stacking
       within a page (elements.z) consistent across append, move and batch
       restack.
Why:   Both are dense ranks 0..n-1 that the client renders directly. A half
       applied shift would show two pages in the same slot.
How:   Planning is pure: functions take {id: position} mappings and return
       only the positions that change. OrderingEngine loads the mapping,
       plans, and applies per-row UPDATEs inside the caller's transaction.
Who:   PageService (append, move) and ElementService (append, batch restack).
When:  After the access gate has authorized the request.

Move semantics (dense collection, subject at old → new):
    new > old:  siblings in (old, new]  shift down by one
    new < old:  siblings in [new, old)  shift up by one
    new == old: nothing is written

    Example: pages [A=0, B=1, C=2], move C to 0 → C=0, A=1, B=2

Gap policy:
    Deletes never renumber siblings, so a collection may carry gaps
    ([0, 2, 3] after deleting the element at z=1). The next move in that
    collection first re-ranks it (by position, ties broken by id) and then
    shifts on the ranks, so every move leaves the collection dense. A batch
    restack that assigns a full permutation also restores density.

Concurrency:
    Writers lock the parent row (SELECT ... FOR UPDATE on the board or page)
    before reading sibling positions. Two moves on the same board serialize;
    moves on different boards never wait on each other. SQLite ignores
    FOR UPDATE, which is fine for its single-writer test usage.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Hashable, Iterable, Mapping, Sequence, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConsistencyViolationError, NotFoundError
from app.models.board import Board
from app.models.element import Element
from app.models.page import Page

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Pure planning functions
# ══════════════════════════════════════════════════════════════════════════


def assign_append_position(positions: Iterable[int]) -> int:
    """Position for a new sibling: one past the current maximum, 0 when empty."""
    return max(positions, default=-1) + 1


def clamp_position(target: int, count: int) -> int:
    """Clamp a requested position into [0, count - 1] for a collection of `count` rows."""
    if count <= 0:
        return 0
    return max(0, min(target, count - 1))


def is_dense(positions: Iterable[int]) -> bool:
    """True when the positions are exactly 0..n-1 (in any order)."""
    ordered = sorted(positions)
    return ordered == list(range(len(ordered)))


def rank(siblings: Mapping[Hashable, int]) -> Dict[Hashable, int]:
    """Re-number siblings 0..n-1 preserving current order; ties are broken by id."""
    ordered = sorted(siblings.items(), key=lambda item: (item[1], str(item[0])))
    return {sibling_id: idx for idx, (sibling_id, _) in enumerate(ordered)}


def plan_move(
    siblings: Mapping[Hashable, int],
    subject_id: Hashable,
    old_pos: int,
    new_pos: int,
) -> Dict[Hashable, int]:
    """
    Plan moving one sibling to a new position.

    Args:
        siblings:    Current {id: position} of the whole collection, subject included
        subject_id:  The sibling being moved
        old_pos:     The subject's stored position
        new_pos:     Target rank, already clamped into [0, len(siblings) - 1]

    Returns:
        {id: new_position} for every sibling whose stored position changes.
        Empty when the collection is dense and new_pos == old_pos.

    Raises:
        ValueError: subject not in the collection, old_pos does not match the
                    stored position, or new_pos outside the valid range
    """
    if subject_id not in siblings:
        raise ValueError(f"{subject_id} is not a member of this collection")
    if siblings[subject_id] != old_pos:
        raise ValueError(
            f"Stale position for {subject_id}: stored {siblings[subject_id]}, given {old_pos}"
        )
    if not 0 <= new_pos < len(siblings):
        raise ValueError(f"Target position {new_pos} outside [0, {len(siblings) - 1}]")

    # Gapped collections are compacted first so the shift runs on ranks
    current = dict(siblings) if is_dense(siblings.values()) else rank(siblings)
    old_rank = current[subject_id]

    target: Dict[Hashable, int] = {}
    for sibling_id, pos in current.items():
        if sibling_id == subject_id:
            target[sibling_id] = new_pos
        elif new_pos > old_rank and old_rank < pos <= new_pos:
            target[sibling_id] = pos - 1
        elif new_pos < old_rank and new_pos <= pos < old_rank:
            target[sibling_id] = pos + 1
        else:
            target[sibling_id] = pos

    return {
        sibling_id: pos
        for sibling_id, pos in target.items()
        if siblings[sibling_id] != pos
    }


def plan_batch(
    siblings: Mapping[Hashable, int],
    assignments: Sequence[Tuple[Hashable, int]],
) -> Dict[Hashable, int]:
    """
    Validate a batch of explicit (id, position) assignments.

    Every subject must belong to the collection and appear once, and no two
    subjects may share a target. The batch is trusted to describe the
    caller's intended order; density of the whole collection afterwards is
    not checked.

    Returns:
        {id: position} for the assignments that change a stored position.

    Raises:
        ConsistencyViolationError: before anything is written, if any rule fails
    """
    foreign = [sid for sid, _ in assignments if sid not in siblings]
    if foreign:
        raise ConsistencyViolationError(
            context={"foreign_ids": [str(sid) for sid in foreign]},
        )

    seen_subjects = set()
    seen_targets = set()
    for sid, pos in assignments:
        if sid in seen_subjects:
            raise ConsistencyViolationError(
                message="The same element appears more than once in the reorder request",
                context={"duplicate_id": str(sid)},
            )
        if pos in seen_targets:
            raise ConsistencyViolationError(
                message="Two elements were given the same position",
                context={"duplicate_position": pos},
            )
        seen_subjects.add(sid)
        seen_targets.add(pos)

    return {sid: pos for sid, pos in assignments if siblings[sid] != pos}


# ══════════════════════════════════════════════════════════════════════════
# Storage applier
# ══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class SiblingCollection:
    """
    Describes one kind of ordered collection.

    name:             resource name used in NotFound errors
    model:            the ordered rows
    parent_model:     the row that owns the collection (locked while writing)
    parent_column:    attribute on `model` referencing the parent
    position_column:  attribute on `model` holding the rank
    """
    name: str
    model: Any
    parent_model: Any
    parent_column: str
    position_column: str

    @property
    def parent_attr(self):
        return getattr(self.model, self.parent_column)

    @property
    def position_attr(self):
        return getattr(self.model, self.position_column)


PAGES = SiblingCollection(
    name="page",
    model=Page,
    parent_model=Board,
    parent_column="board_id",
    position_column="order_idx",
)

ELEMENTS = SiblingCollection(
    name="element",
    model=Element,
    parent_model=Page,
    parent_column="page_id",
    position_column="z",
)


class OrderingEngine:
    """
    Applies ordering plans to storage.

    Never commits: every method runs inside the request transaction opened
    by get_db_session, so a failure anywhere rolls back every position write.
    """

    async def next_position(
        self, db: AsyncSession, collection: SiblingCollection, parent_id: uuid.UUID,
    ) -> int:
        """SELECT COALESCE(MAX(pos), -1) + 1 for the parent's collection."""
        result = await db.execute(
            select(func.coalesce(func.max(collection.position_attr), -1) + 1)
            .where(collection.parent_attr == parent_id)
        )
        return int(result.scalar_one())

    async def lock_parent(
        self, db: AsyncSession, collection: SiblingCollection, parent_id: uuid.UUID,
    ) -> None:
        """Row-lock the parent so concurrent writers of this collection serialize."""
        parent = collection.parent_model
        await db.execute(
            select(parent.id).where(parent.id == parent_id).with_for_update()
        )

    async def load_positions(
        self, db: AsyncSession, collection: SiblingCollection, parent_id: uuid.UUID,
    ) -> Dict[uuid.UUID, int]:
        result = await db.execute(
            select(collection.model.id, collection.position_attr)
            .where(collection.parent_attr == parent_id)
        )
        return {row[0]: row[1] for row in result.all()}

    async def apply(
        self, db: AsyncSession, collection: SiblingCollection, plan: Mapping[uuid.UUID, int],
    ) -> None:
        """One UPDATE per changed row; updated_at is set alongside the position."""
        now = datetime.now(timezone.utc)
        for subject_id, pos in plan.items():
            await db.execute(
                update(collection.model)
                .where(collection.model.id == subject_id)
                .values({collection.position_column: pos, "updated_at": now})
            )

    async def append_position(
        self, db: AsyncSession, collection: SiblingCollection, parent_id: uuid.UUID,
    ) -> int:
        """Lock the parent, then compute the append position for a new sibling."""
        await self.lock_parent(db, collection, parent_id)
        return await self.next_position(db, collection, parent_id)

    async def move(
        self,
        db: AsyncSession,
        collection: SiblingCollection,
        parent_id: uuid.UUID,
        subject_id: uuid.UUID,
        new_pos: int,
    ) -> Dict[uuid.UUID, int]:
        """
        Move one sibling to `new_pos`, shifting the others to keep the ranks dense.

        `new_pos` must already be clamped by the caller. Returns the applied
        plan ({} when nothing changed).
        """
        await self.lock_parent(db, collection, parent_id)
        positions = await self.load_positions(db, collection, parent_id)
        if subject_id not in positions:
            raise NotFoundError(resource=collection.name, resource_id=str(subject_id))

        plan = plan_move(positions, subject_id, positions[subject_id], new_pos)
        await self.apply(db, collection, plan)

        logger.info(
            "Moved %s %s to %d (%d rows updated)",
            collection.name, subject_id, new_pos, len(plan),
        )
        return plan

    async def batch_assign(
        self,
        db: AsyncSession,
        collection: SiblingCollection,
        parent_id: uuid.UUID,
        assignments: Sequence[Tuple[uuid.UUID, int]],
    ) -> Dict[uuid.UUID, int]:
        """
        Apply explicit positions to several siblings at once.

        The whole batch is validated against the parent's current members
        before the first UPDATE; a foreign or duplicated id fails the batch
        with ConsistencyViolationError and nothing is written.
        """
        await self.lock_parent(db, collection, parent_id)
        positions = await self.load_positions(db, collection, parent_id)

        try:
            plan = plan_batch(positions, assignments)
        except ConsistencyViolationError:
            logger.warning(
                "Rejected %s batch for parent %s (%d assignments)",
                collection.name, parent_id, len(assignments),
            )
            raise

        await self.apply(db, collection, plan)
        logger.info(
            "Restacked %d %ss under %s (%d rows updated)",
            len(assignments), collection.name, parent_id, len(plan),
        )
        return plan


ordering_engine = OrderingEngine()
