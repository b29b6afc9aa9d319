"""Ordering engine for sibling groups.

Every operation here works on a plain list of sibling records (projects, the
milestones of one project or the tasks of one milestone) and rewrites their
``order`` field. The engine never touches the store, so the caller decides
which group is affected.

In strict mode every operation leaves the group dense (orders ``0..n-1``).
In lenient mode explicit orders are taken as given and removals leave gaps
until the next ``reorder``.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Protocol, TypeVar

import structlog

from taskboard.errors import ValidationError
from taskboard.validation import check_order

logger = structlog.get_logger()


class Ordered(Protocol):
    id: str
    order: int
    created_at: datetime


T = TypeVar("T", bound=Ordered)


def sort_key(entity: Ordered) -> tuple[int, datetime, str]:
    """Read order: by order, then creation time, then id."""
    return (entity.order, entity.created_at, entity.id)


def sorted_siblings(siblings: Iterable[T]) -> list[T]:
    return sorted(siblings, key=sort_key)


def is_dense(siblings: Iterable[Ordered]) -> bool:
    orders = sorted(entity.order for entity in siblings)
    return orders == list(range(len(orders)))


class OrderingEngine:
    """Computes and rewrites sibling orders."""

    def __init__(self, strict: bool = True) -> None:
        self.strict = strict

    def append_order(self, siblings: Sequence[Ordered]) -> int:
        return len(siblings)

    def insert(self, siblings: Sequence[T], entity: T, order: int | None = None) -> None:
        """Place ``entity`` among ``siblings`` (which must not contain it).

        Without ``order`` the entity is appended. With ``order`` strict mode shifts
        the siblings at or after that position up by one.
        """
        if order is not None:
            check_order(order)

        if not self.strict:
            entity.order = self.append_order(siblings) if order is None else order
            return

        ordered = sorted_siblings(siblings)
        position = len(ordered) if order is None else min(order, len(ordered))
        ordered.insert(position, entity)
        self._assign(ordered)

    def reposition(self, siblings: Sequence[T], entity: T, order: int) -> None:
        """Move ``entity`` to ``order`` inside its own group."""
        check_order(order)
        if not self.strict:
            entity.order = order
            return
        others = [sibling for sibling in siblings if sibling.id != entity.id]
        self.insert(others, entity, order)

    def remove(self, remaining: Sequence[Ordered]) -> None:
        """Close the gap left by a removed sibling (strict mode only)."""
        if self.strict:
            self.compact(remaining)

    def compact(self, siblings: Sequence[Ordered]) -> int:
        """Renumber siblings to ``0..n-1`` keeping their read order."""
        return self._assign(sorted_siblings(siblings))

    def reorder(self, siblings: Sequence[T], ordered_ids: Sequence[str]) -> None:
        """Assign ``order = index`` following ``ordered_ids``.

        Strict mode requires ``ordered_ids`` to be exactly the current sibling set.
        Lenient mode skips ids that are not siblings.
        """
        by_id = {sibling.id: sibling for sibling in siblings}

        if self.strict:
            self._validate_permutation(by_id, ordered_ids)
            self._assign([by_id[entity_id] for entity_id in ordered_ids])
            return

        foreign = [entity_id for entity_id in ordered_ids if entity_id not in by_id]
        if foreign:
            logger.warning("Ignoring ids outside the sibling group", ids=foreign)
        for index, entity_id in enumerate(ordered_ids):
            entity = by_id.get(entity_id)
            if entity is not None:
                entity.order = index

    def _validate_permutation(self, by_id: dict[str, Ordered], ordered_ids: Sequence[str]) -> None:
        seen: set[str] = set()
        duplicates = []
        for entity_id in ordered_ids:
            if entity_id in seen:
                duplicates.append(entity_id)
            seen.add(entity_id)
        if duplicates:
            raise ValidationError(f"Duplicate ids in reorder: {', '.join(duplicates)}")

        foreign = [entity_id for entity_id in ordered_ids if entity_id not in by_id]
        if foreign:
            raise ValidationError(f"Ids do not belong to this group: {', '.join(foreign)}")

        missing = sorted(set(by_id) - seen)
        if missing:
            raise ValidationError(f"Reorder is missing ids: {', '.join(missing)}")

    def _assign(self, ordered: Sequence[Ordered]) -> int:
        changed = 0
        for index, entity in enumerate(ordered):
            if entity.order != index:
                entity.order = index
                changed += 1
        logger.debug("Renumbered sibling group", size=len(ordered), changed=changed)
        return changed
