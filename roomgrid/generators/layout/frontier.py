"""
Frontier of open doors with an explicit undo log.

Each placement plugs one open door, closes any other open doors the new room
happens to meet, and appends the new room's remaining doors. ``plug`` records
that change as a ``FrontierDelta`` and ``revert`` undoes it, restoring the
exact previous sequence. Deltas must be reverted most-recent-first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence, Tuple

from ..errors import FrontierError
from .grid_types import Door


@dataclass(frozen=True)
class FrontierDelta:
    """One plug operation.

    ``removed`` lists (position, door) pairs in the order they were taken
    out; positions are relative to the sequence at the moment of removal.
    """
    removed: Tuple[Tuple[int, Door], ...]
    added: int
    depth: int  # Log length before this delta was applied

    @property
    def plugged(self) -> Door:
        return self.removed[0][1]


class Frontier:
    """Ordered sequence of doors not yet connected to a neighbouring room."""

    def __init__(self, doors: Iterable[Door] = ()):
        self._doors: List[Door] = list(doors)
        self._log: List[FrontierDelta] = []

    def plug(self, index: int, new_doors: Sequence[Door],
             closed: Sequence[Door] = ()) -> FrontierDelta:
        """Remove the door at ``index``, then each door in ``closed``, then append ``new_doors``.

        Raises:
            FrontierError: If index is out of range or a closed door is not present
        """
        if not 0 <= index < len(self._doors):
            raise FrontierError(f"Frontier index {index} out of range (size {len(self._doors)})")
        removed = [(index, self._doors.pop(index))]
        for door in closed:
            try:
                position = self._doors.index(door)
            except ValueError:
                self._restore(removed)
                raise FrontierError(f"Door {door} is not on the frontier")
            removed.append((position, self._doors.pop(position)))
        self._doors.extend(new_doors)
        delta = FrontierDelta(removed=tuple(removed), added=len(new_doors), depth=len(self._log))
        self._log.append(delta)
        return delta

    def revert(self, delta: FrontierDelta) -> None:
        """Undo ``delta``; it must be the most recent unreverted plug.

        Raises:
            FrontierError: If the delta is not the last one applied
        """
        if not self._log or self._log[-1] is not delta:
            raise FrontierError("Frontier deltas must be reverted most-recent-first")
        self._log.pop()
        if delta.added:
            del self._doors[-delta.added:]
        self._restore(delta.removed)

    def _restore(self, removed: Sequence[Tuple[int, Door]]) -> None:
        for position, door in reversed(removed):
            self._doors.insert(position, door)

    def index_of(self, door: Door) -> int:
        """Position of ``door``, or -1."""
        try:
            return self._doors.index(door)
        except ValueError:
            return -1

    @property
    def pending(self) -> int:
        """Number of applied, unreverted plugs."""
        return len(self._log)

    def as_tuple(self) -> Tuple[Door, ...]:
        return tuple(self._doors)

    def __getitem__(self, index: int) -> Door:
        return self._doors[index]

    def __len__(self) -> int:
        return len(self._doors)

    def __iter__(self) -> Iterator[Door]:
        return iter(self._doors)

    def __contains__(self, door: object) -> bool:
        return door in self._doors
