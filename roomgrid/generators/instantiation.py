"""
Room instantiation collaborators.

The placement search never touches a scene graph directly. It asks a
``RoomInstantiator`` to create a room footprint at a grid cell (receiving an
opaque handle plus the room's world doors) and to destroy it again when a
branch is abandoned.

``InMemoryInstantiator`` is the reference implementation; it keeps live
handles in a dict and counts every create/destroy so callers can verify that
backtracking released everything.
"""

from __future__ import annotations

import itertools
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Hashable, Optional, Set, Tuple

from .errors import LayoutError
from .layout.grid_types import CellCoord, Door
from .templates.base import RoomTemplate

logger = logging.getLogger(__name__)


class RoomInstantiator(ABC):
    """Creates and destroys room footprints for the placement search."""

    @abstractmethod
    def instantiate(self, template: RoomTemplate, cell: CellCoord) -> Tuple[Hashable, Tuple[Door, ...]]:
        """
        Create ``template`` at ``cell``.

        Returns:
            Tuple of (handle, world doors of the new room)
        """
        pass

    @abstractmethod
    def destroy(self, handle: Hashable) -> None:
        """Release a handle returned by ``instantiate``."""
        pass


@dataclass(frozen=True)
class RoomHandle:
    """Handle issued by InMemoryInstantiator."""
    serial: int
    template_id: str
    cell: CellCoord


class InMemoryInstantiator(RoomInstantiator):
    """
    Dict-backed instantiator.

    Doors are computed from the template's static door specs. Templates with
    no static layout can be given one through ``hidden_doors`` (template id
    -> specs), which models prefabs whose doorways are only discoverable
    after instantiation.
    """

    def __init__(self, hidden_doors: Optional[Dict[str, tuple]] = None):
        self._serials = itertools.count(1)
        self._live: Dict[RoomHandle, Tuple[Door, ...]] = {}
        self._hidden_doors = dict(hidden_doors or {})
        self.instantiated = 0
        self.destroyed = 0

    def instantiate(self, template: RoomTemplate, cell: CellCoord) -> Tuple[RoomHandle, Tuple[Door, ...]]:
        if template.has_static_doors:
            doors = template.doors_at(cell)
        elif template.template_id in self._hidden_doors:
            doors = tuple(spec.at(cell) for spec in self._hidden_doors[template.template_id])
        else:
            doors = ()
        handle = RoomHandle(next(self._serials), template.template_id, cell)
        self._live[handle] = doors
        self.instantiated += 1
        return handle, doors

    def destroy(self, handle: RoomHandle) -> None:
        if handle not in self._live:
            raise LayoutError(f"Destroying unknown or already destroyed handle: {handle}")
        del self._live[handle]
        self.destroyed += 1

    @property
    def live_handles(self) -> Set[RoomHandle]:
        return set(self._live)

    @property
    def live_count(self) -> int:
        return len(self._live)
