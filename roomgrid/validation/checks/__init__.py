"""
Validation check modules.

- layout_checks: Overlap, room count, occupancy and door connections
- catalog_checks: Catalog contents and door coverage
"""

from .layout_checks import (
    validate_layout,
    check_room_overlap,
    check_room_count,
    check_occupied_sync,
    check_connections,
    check_open_doors,
)

from .catalog_checks import (
    validate_catalog,
    check_not_empty,
    check_start_template,
    check_door_coverage,
)

__all__ = [
    # Layout
    'validate_layout',
    'check_room_overlap',
    'check_room_count',
    'check_occupied_sync',
    'check_connections',
    'check_open_doors',
    # Catalog
    'validate_catalog',
    'check_not_empty',
    'check_start_template',
    'check_door_coverage',
]
