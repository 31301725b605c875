"""
RoomTemplate dataclass: a catalog blueprint for one grid cell of level.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ..layout.grid_types import CellCoord, Direction, Door, ORIGIN


# Category names with special meaning to the search and catalog
CATEGORY_START = "start"
CATEGORY_HALL = "hall"
CATEGORY_ROOM = "room"
CATEGORY_DEAD_END = "dead_end"


@dataclass(frozen=True)
class DoorSpec:
    """Doorway definition relative to a room origin."""
    direction: Direction
    offset: CellCoord = ORIGIN  # Offset from room origin (in cells)

    def at(self, origin: CellCoord) -> Door:
        """World-space door for a room placed at ``origin``."""
        return Door(origin + self.offset, self.direction)

    @staticmethod
    def from_door(door: Door, origin: CellCoord) -> 'DoorSpec':
        """Recover the relative spec of a door read off a placed room."""
        return DoorSpec(door.direction, door.cell - origin)


@dataclass(frozen=True)
class RoomTemplate:
    """
    A reusable room blueprint.

    ``door_specs`` is fixed at catalog-load time. ``None`` means the doorway
    layout is only known once the template has been instantiated; the
    catalog then probes it and caches the result.
    """

    # Identity
    template_id: str
    category: str = CATEGORY_ROOM
    description: str = ""

    door_specs: Optional[Tuple[DoorSpec, ...]] = None

    # Opaque data for the instantiator (prefab path, tileset, ...)
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self):
        if self.door_specs is not None and not isinstance(self.door_specs, tuple):
            object.__setattr__(self, 'door_specs', tuple(self.door_specs))

    @property
    def is_start(self) -> bool:
        return self.category == CATEGORY_START

    @property
    def has_static_doors(self) -> bool:
        return self.door_specs is not None

    def doors_at(self, origin: CellCoord) -> Tuple[Door, ...]:
        """World doors for this template at ``origin``.

        Raises:
            ValueError: If the doorway layout is not statically known
        """
        if self.door_specs is None:
            raise ValueError(f"Template '{self.template_id}' has no static door layout")
        return tuple(spec.at(origin) for spec in self.door_specs)

    @staticmethod
    def simple(template_id: str, *directions: Direction,
               category: str = CATEGORY_ROOM, description: str = "") -> 'RoomTemplate':
        """Single-cell template with one door per direction at its own cell."""
        return RoomTemplate(
            template_id=template_id,
            category=category,
            description=description,
            door_specs=tuple(DoorSpec(d) for d in directions),
        )
