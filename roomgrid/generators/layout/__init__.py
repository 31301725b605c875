"""
Layout Types Module for Grid Room Assembly

Grid primitives (directions, cells, doors), the accumulating room layout and
the reversible frontier of open doors.
"""

from .grid_types import Direction, CellCoord, Door, ORIGIN
from .layout_types import (
    Layout,
    PlacedRoom,
    RoomConnection,
    LayoutSnapshot,
    EMPTY_CELL,
)
from .frontier import Frontier, FrontierDelta

__all__ = [
    'Direction',
    'CellCoord',
    'Door',
    'ORIGIN',
    'Layout',
    'PlacedRoom',
    'RoomConnection',
    'LayoutSnapshot',
    'EMPTY_CELL',
    'Frontier',
    'FrontierDelta',
]
