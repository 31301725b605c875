"""
Grid primitives shared by the layout, catalog and placement search.

Defines:
- Direction: Cardinal doorway facing (NORTH, SOUTH, EAST, WEST)
- CellCoord: Integer grid position
- Door: A doorway at a cell facing a direction

Coordinate System:
- +X is EAST, +Y is NORTH
- Each room occupies exactly one cell; a door sits on its room's cell and
  faces the neighbouring cell it must connect to
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union


class Direction(Enum):
    """Cardinal direction for doorway facing."""
    NORTH = "north"  # +Y direction
    SOUTH = "south"  # -Y direction
    EAST = "east"    # +X direction
    WEST = "west"    # -X direction

    def opposite(self) -> 'Direction':
        """Return the opposite direction."""
        return _OPPOSITES[self]

    @property
    def offset(self) -> 'CellCoord':
        """Unit step in grid space for this direction."""
        return _OFFSETS[self]

    @staticmethod
    def parse(value: Union[str, 'Direction']) -> 'Direction':
        """Parse a direction from its name or value (case-insensitive).

        Raises:
            ValueError: If the value names no direction
        """
        if isinstance(value, Direction):
            return value
        key = str(value).strip().lower()
        for direction in Direction:
            if direction.value == key:
                return direction
        raise ValueError(f"Unknown direction: {value!r}")


@dataclass(frozen=True)
class CellCoord:
    """Grid cell coordinate."""
    x: int
    y: int

    def __add__(self, other: 'CellCoord') -> 'CellCoord':
        return CellCoord(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'CellCoord') -> 'CellCoord':
        return CellCoord(self.x - other.x, self.y - other.y)

    def neighbor(self, direction: Direction) -> 'CellCoord':
        """Get the neighboring cell in the given direction."""
        return self + direction.offset

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @staticmethod
    def of(value: Union['CellCoord', Tuple[int, int]]) -> 'CellCoord':
        """Coerce an (x, y) pair into a CellCoord."""
        if isinstance(value, CellCoord):
            return value
        x, y = value
        return CellCoord(int(x), int(y))

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


ORIGIN = CellCoord(0, 0)

_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}

_OFFSETS = {
    Direction.NORTH: CellCoord(0, 1),
    Direction.SOUTH: CellCoord(0, -1),
    Direction.EAST: CellCoord(1, 0),
    Direction.WEST: CellCoord(-1, 0),
}


@dataclass(frozen=True)
class Door:
    """A doorway on a placed room.

    Two doors connect when each sits on the cell the other faces and they
    face opposite ways. The relation is symmetric: ``a.matches(b)`` holds
    exactly when ``b.matches(a)`` does.
    """
    cell: CellCoord
    direction: Direction

    def matching_cell(self) -> CellCoord:
        """Cell on the far side of the doorway."""
        return self.cell.neighbor(self.direction)

    def matching_direction(self) -> Direction:
        """Facing a door must have to plug this one."""
        return self.direction.opposite()

    def matching(self) -> 'Door':
        """The exact door that would plug this one."""
        return Door(self.matching_cell(), self.matching_direction())

    def matches(self, other: 'Door') -> bool:
        """Check if ``other`` plugs this doorway."""
        return (other.cell == self.matching_cell()
                and other.direction == self.matching_direction())

    def __str__(self) -> str:
        return f"{self.cell}:{self.direction.name}"
