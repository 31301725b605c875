"""
Room templates: blueprints, the catalog that serves them, and JSON storage.
"""

from .base import (
    DoorSpec,
    RoomTemplate,
    CATEGORY_START,
    CATEGORY_HALL,
    CATEGORY_ROOM,
    CATEGORY_DEAD_END,
)
from .catalog import RoomCatalog, build_default_catalog
from .catalog_storage import save_catalog, load_catalog, get_catalogs_dir

__all__ = [
    'DoorSpec',
    'RoomTemplate',
    'CATEGORY_START',
    'CATEGORY_HALL',
    'CATEGORY_ROOM',
    'CATEGORY_DEAD_END',
    'RoomCatalog',
    'build_default_catalog',
    'save_catalog',
    'load_catalog',
    'get_catalogs_dir',
]
