"""
Conversion package.

Maps grid layouts into world coordinates and export formats.
"""

from .world_coords import GridMapping, DEFAULT_CELL_SIZE
from .layout_export import (
    layout_to_dict,
    write_layout_json,
    occupancy_grid,
    render_ascii,
)

__all__ = [
    'GridMapping',
    'DEFAULT_CELL_SIZE',
    'layout_to_dict',
    'write_layout_json',
    'occupancy_grid',
    'render_ascii',
]
