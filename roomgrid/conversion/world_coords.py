"""
Grid <-> world coordinate mapping.

Rooms live on an integer grid; renderers and engines want continuous world
positions. ``GridMapping`` converts between the two. ``grid_to_world``
returns the centre of a cell and is injective for any positive cell size.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from ..generators.errors import ConfigurationError
from ..generators.layout.grid_types import CellCoord


# Default world units per grid cell
DEFAULT_CELL_SIZE = 10.0


@dataclass(frozen=True)
class GridMapping:
    """Maps grid cells to world-space cell centres on the X/Y plane."""
    cell_size: float = DEFAULT_CELL_SIZE
    origin_x: float = 0.0
    origin_y: float = 0.0

    def __post_init__(self):
        if not self.cell_size > 0:
            raise ConfigurationError(f"cell_size must be positive (got {self.cell_size})")

    def grid_to_world(self, cell: CellCoord) -> Tuple[float, float]:
        """Convert to world coordinates (center of cell)."""
        return (self.origin_x + cell.x * self.cell_size + self.cell_size / 2,
                self.origin_y + cell.y * self.cell_size + self.cell_size / 2)

    def world_to_grid(self, x: float, y: float) -> CellCoord:
        """Convert from world coordinates to the cell containing them."""
        return CellCoord(int(math.floor((x - self.origin_x) / self.cell_size)),
                         int(math.floor((y - self.origin_y) / self.cell_size)))
