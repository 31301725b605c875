"""
Room templates: the entrance and single-door chambers that cap corridors.
"""

from ...layout.grid_types import Direction
from ..base import CATEGORY_DEAD_END, CATEGORY_START, RoomTemplate

N, S, E, W = Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST


ENTRANCE = RoomTemplate.simple(
    "Entrance", N, E, S, W, category=CATEGORY_START,
    description="Level entrance with an exit on every side.",
)

# Each chamber's single door faces the corridor that reaches it
CHAMBERS = [
    RoomTemplate.simple("ChamberN", N, category=CATEGORY_DEAD_END),
    RoomTemplate.simple("ChamberE", E, category=CATEGORY_DEAD_END),
    RoomTemplate.simple("ChamberS", S, category=CATEGORY_DEAD_END),
    RoomTemplate.simple("ChamberW", W, category=CATEGORY_DEAD_END),
]

ROOM_TEMPLATES = [ENTRANCE] + CHAMBERS
