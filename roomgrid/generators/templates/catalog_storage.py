"""
Catalog persistence layer.

Saves and loads room catalogs as JSON, by default under
~/.config/roomgrid/catalogs/.

File format:
    {
      "name": "crypt",
      "templates": [
        {"id": "Entrance", "category": "start", "description": "",
         "doors": [{"dx": 0, "dy": 0, "direction": "east"}]},
        {"id": "Prefab7", "category": "room", "doors": null}
      ]
    }

``"doors": null`` marks a template whose doorways are discovered by probing.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..errors import CatalogError
from ..layout.grid_types import CellCoord, Direction
from .base import CATEGORY_ROOM, DoorSpec, RoomTemplate
from .catalog import RoomCatalog

logger = logging.getLogger(__name__)


def get_catalogs_dir() -> Path:
    """
    Get the directory for storing catalogs.

    Returns:
        Path to ~/.config/roomgrid/catalogs/
        Creates the directory if it doesn't exist.
    """
    config_dir = Path.home() / ".config" / "roomgrid" / "catalogs"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def _template_to_dict(template: RoomTemplate) -> Dict[str, Any]:
    """Convert a RoomTemplate to a JSON-serializable dictionary."""
    doors = None
    if template.has_static_doors:
        doors = [
            {"dx": spec.offset.x, "dy": spec.offset.y, "direction": spec.direction.value}
            for spec in template.door_specs
        ]
    return {
        "id": template.template_id,
        "category": template.category,
        "description": template.description,
        "doors": doors,
        "metadata": template.metadata,
    }


def _dict_to_template(data: Dict[str, Any]) -> RoomTemplate:
    """Create a RoomTemplate from a dictionary."""
    doors = data.get("doors")
    specs = None
    if doors is not None:
        specs = tuple(
            DoorSpec(
                direction=Direction.parse(door["direction"]),
                offset=CellCoord(int(door.get("dx", 0)), int(door.get("dy", 0))),
            )
            for door in doors
        )
    return RoomTemplate(
        template_id=str(data["id"]),
        category=data.get("category", CATEGORY_ROOM),
        description=data.get("description", ""),
        door_specs=specs,
        metadata=dict(data.get("metadata") or {}),
    )


def catalog_to_dict(catalog: RoomCatalog) -> Dict[str, Any]:
    return {
        "name": catalog.name,
        "templates": [_template_to_dict(t) for t in catalog],
    }


def catalog_from_dict(data: Dict[str, Any]) -> RoomCatalog:
    """Build a catalog from its dictionary form.

    Raises:
        CatalogError: On missing keys, bad directions or duplicate ids
    """
    try:
        templates = [_dict_to_template(entry) for entry in data["templates"]]
        name = data.get("name", "catalog")
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise CatalogError(f"Malformed catalog data: {e}") from e
    return RoomCatalog(templates, name=name)


def save_catalog(catalog: RoomCatalog, path: Optional[Union[str, Path]] = None) -> Path:
    """
    Save a catalog as JSON.

    Args:
        catalog: The catalog to save
        path: Target file (default: <catalogs dir>/<name>.json)

    Returns:
        Path to the saved file
    """
    if path is None:
        path = get_catalogs_dir() / (_sanitize_filename(catalog.name) + ".json")
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(catalog_to_dict(catalog), f, indent=2, ensure_ascii=False)

    logger.info("Catalog '%s' saved: %s (%d templates)", catalog.name, file_path, len(catalog))
    return file_path


def load_catalog(path: Union[str, Path]) -> RoomCatalog:
    """
    Load a catalog from a JSON file.

    Args:
        path: Path to the JSON catalog file

    Raises:
        CatalogError: If the file is missing, is not valid JSON, or is malformed
    """
    file_path = Path(path)
    if not file_path.exists():
        raise CatalogError(f"Catalog file not found: {file_path}")

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise CatalogError(f"Invalid JSON in catalog file {file_path}: {e}") from e

    try:
        catalog = catalog_from_dict(data)
    except CatalogError as e:
        raise CatalogError(f"{file_path}: {e}") from e
    logger.info("Catalog '%s' loaded: %s (%d templates)", catalog.name, file_path, len(catalog))
    return catalog


def list_saved_catalogs() -> List[str]:
    """Sorted file stems of catalogs in the catalogs directory."""
    return sorted(fp.stem for fp in get_catalogs_dir().glob("*.json"))


def _sanitize_filename(name: str) -> str:
    """
    Sanitize a catalog name for use as a filename.

    Lowercases, replaces spaces with underscores and drops anything that is
    not alphanumeric, underscore or hyphen.
    """
    safe = name.lower().replace(" ", "_")
    safe = "".join(c for c in safe if c.isalnum() or c in "_-")
    return safe or "catalog"
