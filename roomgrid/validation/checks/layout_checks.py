"""
Layout validation checks.

Validates a finished layout:
- No two rooms share a cell (LAYOUT-001)
- Room count matches the request (LAYOUT-002)
- Occupied set matches placed cells (LAYOUT-003)
- Placed rooms match the door they plug (DOOR-001)
- Connected rooms are neighbours (DOOR-002)
- Open doors remaining (DOOR-003)
"""

from collections import Counter
from typing import Iterable, Optional

from ...generators.layout.grid_types import CellCoord
from ...generators.layout.layout_types import Layout
from ..core import ValidationResult
from ..rules import (
    LAYOUT_001, LAYOUT_002, LAYOUT_003,
    DOOR_001, DOOR_002, DOOR_003,
)


def _cells_text(cells: Iterable[CellCoord]) -> str:
    return ", ".join(str(c) for c in sorted(cells, key=lambda c: c.as_tuple()))


def check_room_overlap(layout: Layout) -> ValidationResult:
    """Report every cell claimed by more than one placed room (LAYOUT-001)."""
    result = ValidationResult()
    counts = Counter(room.cell for room in layout.placed)
    for cell, count in sorted(counts.items(), key=lambda item: item[0].as_tuple()):
        if count < 2:
            continue
        templates = ", ".join(r.template_id for r in layout.placed if r.cell == cell)
        result.add_issue(LAYOUT_001.issue(cell=cell, count=count, templates=templates))
    return result


def check_room_count(layout: Layout, expected_rooms: int) -> ValidationResult:
    result = ValidationResult()
    if len(layout) != expected_rooms:
        result.add_issue(LAYOUT_002.issue(actual=len(layout), expected=expected_rooms))
    return result


def check_occupied_sync(layout: Layout) -> ValidationResult:
    """The occupied set must equal the set of placed cells (LAYOUT-003)."""
    result = ValidationResult()
    placed_cells = {room.cell for room in layout.placed}
    missing = placed_cells - layout.occupied
    stray = layout.occupied - placed_cells
    if missing or stray:
        parts = []
        if missing:
            parts.append("unmarked " + _cells_text(missing))
        if stray:
            parts.append("stray " + _cells_text(stray))
        result.add_issue(LAYOUT_003.issue(details="; ".join(parts)))
    return result


def check_connections(layout: Layout) -> ValidationResult:
    """Validate each recorded connection.

    Checks:
    - DOOR-001: the child's door is the match of the parent's door and the
      child actually carries it
    - DOOR-002: parent and child occupy neighbouring cells
    """
    result = ValidationResult()
    count = len(layout.placed)

    for conn in layout.connections:
        if not (0 <= conn.parent_index < count and 0 <= conn.child_index < count):
            result.add_issue(DOOR_001.issue(
                message=f"Connection {conn.parent_index} -> {conn.child_index} references a missing room",
            ))
            continue

        parent = layout.placed[conn.parent_index]
        child = layout.placed[conn.child_index]

        if not conn.parent_door.matches(conn.child_door) or conn.child_door not in child.doors:
            result.add_issue(DOOR_001.issue(
                template=child.template_id, cell=child.cell,
                child_door=conn.child_door, parent_door=conn.parent_door,
            ))

        delta = child.cell - parent.cell
        if abs(delta.x) + abs(delta.y) != 1:
            result.add_issue(DOOR_002.issue(
                template=child.template_id, cell=child.cell,
                parent=conn.parent_index, child=conn.child_index,
            ))

    return result


def check_open_doors(layout: Layout) -> ValidationResult:
    result = ValidationResult()
    open_doors = layout.open_doors()
    if open_doors:
        result.add_issue(DOOR_003.issue(count=len(open_doors)))
    return result


def validate_layout(layout: Layout, expected_rooms: Optional[int] = None) -> ValidationResult:
    """Run all layout checks.

    Args:
        layout: Layout to inspect
        expected_rooms: Requested room count (LAYOUT-002 is skipped when None)
    """
    result = ValidationResult()
    result.merge(check_room_overlap(layout))
    if expected_rooms is not None:
        result.merge(check_room_count(layout, expected_rooms))
    result.merge(check_occupied_sync(layout))
    result.merge(check_connections(layout))
    result.merge(check_open_doors(layout))
    return result
