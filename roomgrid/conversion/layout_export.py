"""
Layout export utilities.

Turns a finished layout into:
- a JSON document (rooms, doors, connections, world positions) that an
  external renderer can instantiate from
- a numpy occupancy grid
- a plain-text map for terminals and logs
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Union

import numpy as np

from ..generators.layout.grid_types import Direction
from ..generators.layout.layout_types import EMPTY_CELL, Layout, PlacedRoom
from .world_coords import GridMapping

logger = logging.getLogger(__name__)


FORMAT_VERSION = 1

N, S, E, W = Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST

# Glyph per set of door directions on a cell
_DOOR_GLYPHS: Dict[FrozenSet[Direction], str] = {
    frozenset(): "#",
    frozenset({N}): "n", frozenset({S}): "s", frozenset({E}): "e", frozenset({W}): "w",
    frozenset({N, S}): "|", frozenset({E, W}): "-",
    frozenset({N, E}): "L", frozenset({E, S}): "r", frozenset({S, W}): "7", frozenset({W, N}): "J",
    frozenset({E, S, W}): "T", frozenset({N, S, W}): "]", frozenset({N, E, W}): "A",
    frozenset({N, E, S}): "[",
    frozenset({N, E, S, W}): "+",
}

START_GLYPH = "@"
EMPTY_GLYPH = " "


def layout_to_dict(layout: Layout, mapping: Optional[GridMapping] = None,
                   seed: Optional[int] = None) -> Dict[str, Any]:
    """Serializable description of a layout.

    Args:
        layout: Finished layout
        mapping: Grid-to-world mapping for world positions (omitted when None)
        seed: Seed that produced the layout, recorded for reproducibility
    """
    rooms = []
    for index, room in enumerate(layout.placed):
        entry: Dict[str, Any] = {
            "index": index,
            "template": room.template_id,
            "cell": [room.cell.x, room.cell.y],
            "doors": [
                {"cell": [d.cell.x, d.cell.y], "direction": d.direction.value}
                for d in room.doors
            ],
        }
        if mapping is not None:
            entry["world"] = list(mapping.grid_to_world(room.cell))
        rooms.append(entry)

    return {
        "format_version": FORMAT_VERSION,
        "seed": seed,
        "room_count": len(layout),
        "cell_size": mapping.cell_size if mapping is not None else None,
        "rooms": rooms,
        "connections": [
            {
                "parent": c.parent_index,
                "child": c.child_index,
                "direction": c.parent_door.direction.value,
            }
            for c in layout.connections
        ],
        "open_doors": [
            {"cell": [d.cell.x, d.cell.y], "direction": d.direction.value}
            for d in layout.open_doors()
        ],
    }


def write_layout_json(path: Union[str, Path], layout: Layout,
                      mapping: Optional[GridMapping] = None,
                      seed: Optional[int] = None) -> Path:
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(layout_to_dict(layout, mapping, seed), f, indent=2)
    logger.info("Layout JSON written: %s (%d rooms)", file_path, len(layout))
    return file_path


def occupancy_grid(layout: Layout) -> np.ndarray:
    """Room index per cell over the layout bounds (EMPTY_CELL where no room)."""
    return layout.occupancy_grid()


def room_glyph(room: PlacedRoom, is_start: bool = False) -> str:
    if is_start:
        return START_GLYPH
    facing = frozenset(d.direction for d in room.doors if d.cell == room.cell)
    return _DOOR_GLYPHS.get(facing, "?")


def render_ascii(layout: Layout) -> str:
    """Draw the layout with north at the top, one character per cell."""
    grid = layout.occupancy_grid()
    if grid.size == 0:
        return ""
    lines = []
    for row in np.flipud(grid):
        chars = []
        for index in row:
            if index == EMPTY_CELL:
                chars.append(EMPTY_GLYPH)
            else:
                chars.append(room_glyph(layout.placed[int(index)], is_start=(index == 0)))
        lines.append("".join(chars).rstrip())
    return "\n".join(lines)
