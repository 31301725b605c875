"""
Hall templates: single-cell corridor pieces in every orientation.
"""

from ...layout.grid_types import Direction
from ..base import CATEGORY_HALL, RoomTemplate

N, S, E, W = Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST


STRAIGHT_HALLS = [
    RoomTemplate.simple("StraightHallNS", N, S, category=CATEGORY_HALL,
                        description="Straight corridor running north-south."),
    RoomTemplate.simple("StraightHallEW", E, W, category=CATEGORY_HALL,
                        description="Straight corridor running east-west."),
]

CORNER_HALLS = [
    RoomTemplate.simple("CornerNE", N, E, category=CATEGORY_HALL),
    RoomTemplate.simple("CornerES", E, S, category=CATEGORY_HALL),
    RoomTemplate.simple("CornerSW", S, W, category=CATEGORY_HALL),
    RoomTemplate.simple("CornerWN", W, N, category=CATEGORY_HALL),
]

# Named after the side with no opening
T_JUNCTIONS = [
    RoomTemplate.simple("TJunctionN", E, S, W, category=CATEGORY_HALL),
    RoomTemplate.simple("TJunctionE", N, S, W, category=CATEGORY_HALL),
    RoomTemplate.simple("TJunctionS", N, E, W, category=CATEGORY_HALL),
    RoomTemplate.simple("TJunctionW", N, E, S, category=CATEGORY_HALL),
]

CROSSROADS = RoomTemplate.simple("Crossroads", N, E, S, W, category=CATEGORY_HALL,
                                 description="Four-way corridor intersection.")

HALL_TEMPLATES = STRAIGHT_HALLS + CORNER_HALLS + T_JUNCTIONS + [CROSSROADS]
