"""
Layout Types for Grid Room Assembly

This module defines the accumulating layout the placement search mutates:
placed rooms keyed by grid cell, the occupied-cell set used for O(1) overlap
checks, a door -> owner index, and the connection made by each placement.

Rooms are appended and removed strictly last-in-first-out, which is all the
backtracking search needs and keeps every undo O(1).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Hashable, Iterator, List, Optional, Set, Tuple

import numpy as np

from ..errors import LayoutError
from .grid_types import CellCoord, Door


# Value written into occupancy grids for cells no room covers
EMPTY_CELL = -1


@dataclass(frozen=True)
class PlacedRoom:
    """A template instance committed to a grid cell."""
    handle: Hashable              # Opaque handle from the instantiator
    template_id: str
    cell: CellCoord
    doors: Tuple[Door, ...]

    def door_matching(self, door: Door) -> Optional[Door]:
        """This room's door that plugs ``door``, if any."""
        for own in self.doors:
            if door.matches(own):
                return own
        return None

    def key(self) -> Tuple[str, CellCoord]:
        return (self.template_id, self.cell)


@dataclass(frozen=True)
class RoomConnection:
    """Link made when a room is placed to plug an open door."""
    parent_index: int
    parent_door: Door
    child_index: int
    child_door: Door


LayoutSnapshot = Tuple[FrozenSet[CellCoord], Tuple[Tuple[str, CellCoord], ...], int]


class Layout:
    """
    Accumulating set of placed rooms.

    Invariant: ``occupied`` is exactly the set of cells of ``placed``; a cell
    is never inserted twice.
    """

    def __init__(self):
        self.placed: List[PlacedRoom] = []
        self.occupied: Set[CellCoord] = set()
        self.connections: List[RoomConnection] = []
        self._door_owners: Dict[Door, List[int]] = {}

    # -- mutation --

    def add(self, room: PlacedRoom, connection: Optional[RoomConnection] = None) -> int:
        """Insert a room and return its index.

        Raises:
            LayoutError: If the room's cell is already occupied
        """
        if room.cell in self.occupied:
            raise LayoutError(f"Cell {room.cell} already occupied")
        index = len(self.placed)
        self.placed.append(room)
        self.occupied.add(room.cell)
        for door in room.doors:
            self._door_owners.setdefault(door, []).append(index)
        if connection is not None:
            self.connections.append(connection)
        return index

    def pop_last(self) -> PlacedRoom:
        """Remove and return the most recently added room.

        The connection that placed it (if any) goes with it.

        Raises:
            LayoutError: If the layout is empty
        """
        if not self.placed:
            raise LayoutError("Cannot remove a room from an empty layout")
        index = len(self.placed) - 1
        room = self.placed.pop()
        self.occupied.discard(room.cell)
        for door in room.doors:
            owners = self._door_owners[door]
            owners.remove(index)
            if not owners:
                del self._door_owners[door]
        if self.connections and self.connections[-1].child_index == index:
            self.connections.pop()
        return room

    def clear(self) -> None:
        self.placed.clear()
        self.occupied.clear()
        self.connections.clear()
        self._door_owners.clear()

    # -- queries --

    def owner_of(self, door: Door) -> Optional[PlacedRoom]:
        """Placed room that carries ``door``."""
        owners = self._door_owners.get(door)
        if not owners:
            return None
        return self.placed[owners[0]]

    def index_of_owner(self, door: Door) -> Optional[int]:
        owners = self._door_owners.get(door)
        return owners[0] if owners else None

    def room_at(self, cell: CellCoord) -> Optional[PlacedRoom]:
        if cell not in self.occupied:
            return None
        for room in reversed(self.placed):
            if room.cell == cell:
                return room
        return None

    def is_occupied(self, cell: CellCoord) -> bool:
        return cell in self.occupied

    def entries(self) -> List[Tuple[str, CellCoord]]:
        """Final output: (template id, cell) for every placed room."""
        return [room.key() for room in self.placed]

    def open_doors(self) -> List[Door]:
        """Doors of placed rooms that no other placed room plugs."""
        present = set(self._door_owners)
        return [
            door for room in self.placed for door in room.doors
            if door.matching() not in present
        ]

    def snapshot(self) -> LayoutSnapshot:
        """Comparable value capturing occupied cells, placements and connections."""
        return (
            frozenset(self.occupied),
            tuple(room.key() for room in self.placed),
            len(self.connections),
        )

    def bounds(self) -> Optional[Tuple[CellCoord, CellCoord]]:
        """(min corner, max corner) of occupied cells, or None when empty."""
        if not self.occupied:
            return None
        xs = [c.x for c in self.occupied]
        ys = [c.y for c in self.occupied]
        return CellCoord(min(xs), min(ys)), CellCoord(max(xs), max(ys))

    def occupancy_grid(self) -> np.ndarray:
        """
        Grid over the layout's bounding box.

        Row 0 is the southernmost row. Each cell holds the index of the room
        in ``placed`` that occupies it, or EMPTY_CELL.
        """
        bounds = self.bounds()
        if bounds is None:
            return np.full((0, 0), EMPTY_CELL, dtype=np.int32)
        lo, hi = bounds
        grid = np.full((hi.y - lo.y + 1, hi.x - lo.x + 1), EMPTY_CELL, dtype=np.int32)
        for index, room in enumerate(self.placed):
            grid[room.cell.y - lo.y, room.cell.x - lo.x] = index
        return grid

    def __len__(self) -> int:
        return len(self.placed)

    def __iter__(self) -> Iterator[PlacedRoom]:
        return iter(self.placed)
