"""
Position reindexing for ordered children (lists on a board, cards in a list,
checklist items on a card).

Every container keeps its active children at positions ``0..N-1``. The
planning functions below are pure: they describe which siblings must move
as a list of ``Shift`` values. ``PositionScope`` applies those shifts to a
table as bulk conditional updates inside the caller's session, so the shift
set and the target row change are committed together.
"""
from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Optional
import logging

from sqlalchemy import update
from sqlmodel import Session, SQLModel, select, func

from ..exceptions import InvalidPositionError, NotFoundError
from ..models import BoardList, Card, ChecklistItem


# Logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Shift:
    """Add ``delta`` to every sibling of ``container`` whose position lies
    in ``[lower, upper]``. ``upper=None`` leaves the range open-ended."""
    container: Hashable
    lower: int
    upper: Optional[int]
    delta: int

    def covers(self, position: int) -> bool:
        if position < self.lower:
            return False
        return self.upper is None or position <= self.upper

    def apply(self, positions: Dict[Any, int]) -> Dict[Any, int]:
        """Apply to an in-memory ``{entry: position}`` map of one container."""
        return {
            key: position + self.delta if self.covers(position) else position
            for key, position in positions.items()
        }


def append_position(max_position: Optional[int]) -> int:
    return 0 if max_position is None else max_position + 1


def removal_shifts(container: Hashable, position: int) -> List[Shift]:
    return [Shift(container, position + 1, None, -1)]


def reorder_shifts(container: Hashable, old: int, new: int) -> List[Shift]:
    if old < new:
        return [Shift(container, old + 1, new, -1)]
    if old > new:
        return [Shift(container, new, old - 1, 1)]
    return []


def move_shifts(source: Hashable, old: int, target: Hashable, new: int) -> List[Shift]:
    if source == target:
        return reorder_shifts(source, old, new)
    return [
        Shift(source, old + 1, None, -1),
        Shift(target, new, None, 1),
    ]


class PositionScope:
    """Binds the reindexing protocol to one table.

    ``container_field`` names the column holding the parent id. ``active``
    optionally restricts which rows take part in the sequence (archived
    cards do not).
    """

    def __init__(self, model, container_field: str, entity: str, active=None):
        self.model = model
        self.container_field = container_field
        self.entity = entity
        self.active = active

    @property
    def container_column(self):
        return getattr(self.model, self.container_field)

    def _scoped(self, container: str) -> list:
        criteria = [self.container_column == container]
        if self.active is not None:
            criteria.append(self.active)
        return criteria

    def get(self, session: Session, entry_id: str):
        entry = session.get(self.model, entry_id)
        if not entry:
            raise NotFoundError(self.entity)
        return entry

    def is_active(self, session: Session, entry: SQLModel) -> bool:
        """Whether the stored row takes part in its container's sequence."""
        if self.active is None:
            return True
        statement = (
            select(func.count())
            .select_from(self.model)
            .where(self.model.id == entry.id, self.active)
        )
        return session.exec(statement).one() > 0

    def require_active(self, session: Session, entry: SQLModel):
        if not self.is_active(session, entry):
            raise InvalidPositionError(f"{self.entity} is not part of the ordering")

    def count(self, session: Session, container: str) -> int:
        statement = select(func.count()).select_from(self.model).where(*self._scoped(container))
        return session.exec(statement).one()

    def max_position(self, session: Session, container: str) -> Optional[int]:
        statement = select(func.max(self.model.position)).where(*self._scoped(container))
        return session.exec(statement).one()

    def next_position(self, session: Session, container: str) -> int:
        return append_position(self.max_position(session, container))

    def siblings(self, session: Session, container: str) -> list:
        statement = (
            select(self.model)
            .where(*self._scoped(container))
            .order_by(self.model.position)
        )
        return session.exec(statement).all()

    def apply(self, session: Session, shifts: List[Shift]):
        for shift in shifts:
            criteria = self._scoped(shift.container)
            criteria.append(self.model.position >= shift.lower)
            if shift.upper is not None:
                criteria.append(self.model.position <= shift.upper)
            logger.debug(
                f"Shifting {self.model.__tablename__} in {shift.container}: "
                f"[{shift.lower}, {shift.upper}] by {shift.delta:+d}"
            )
            session.exec(
                update(self.model)
                .where(*criteria)
                .values(position=self.model.position + shift.delta)
            )

    def insert(self, session: Session, entry: SQLModel, position: Optional[int] = None):
        """Place a new entry at the end of its container.

        Only the append slot is accepted as an explicit position, anything
        else would collide with an existing sibling.
        """
        container = getattr(entry, self.container_field)
        slot = self.next_position(session, container)
        if position is not None and position != slot:
            raise InvalidPositionError(
                f"{self.entity} can only be appended at position {slot}"
            )
        entry.position = slot
        session.add(entry)
        return entry

    def detach(self, session: Session, entry: SQLModel):
        """Close the gap an entry leaves when it drops out of the sequence."""
        self.require_active(session, entry)
        self.apply(session, removal_shifts(getattr(entry, self.container_field), entry.position))

    def remove(self, session: Session, entry_id: str):
        """Delete an entry, closing its gap only if it held a live position."""
        entry = self.get(session, entry_id)
        active = self.is_active(session, entry)
        container = getattr(entry, self.container_field)
        position = entry.position
        session.delete(entry)
        session.flush()
        if active:
            self.apply(session, removal_shifts(container, position))
        return entry

    def move(self, session: Session, entry_id: str, position: int,
             container: Optional[str] = None):
        """Reorder within the current container, or move to ``container``.

        Returns the entry; when source and destination are the same slot
        nothing is written.
        """
        entry = self.get(session, entry_id)
        self.require_active(session, entry)
        source = getattr(entry, self.container_field)
        target = source if container is None else container
        old = entry.position

        size = self.count(session, target)
        upper = size - 1 if target == source else size
        if position < 0 or position > upper:
            raise InvalidPositionError(
                f"Position must be between 0 and {max(upper, 0)}"
            )

        if target == source and old == position:
            return entry

        # Siblings first, the moved entry still carries its old placement here
        self.apply(session, move_shifts(source, old, target, position))
        setattr(entry, self.container_field, target)
        entry.position = position
        session.add(entry)
        return entry


list_positions = PositionScope(BoardList, "board_id", "List")
card_positions = PositionScope(Card, "list_id", "Card", active=(Card.archived == False))
checklist_positions = PositionScope(ChecklistItem, "card_id", "Checklist item")
