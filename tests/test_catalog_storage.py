import json

import pytest

from roomgrid.generators.errors import CatalogError
from roomgrid.generators.layout.grid_types import CellCoord, Direction
from roomgrid.generators.templates.base import DoorSpec, RoomTemplate
from roomgrid.generators.templates.catalog import RoomCatalog
from roomgrid.generators.templates.catalog_storage import (
    _sanitize_filename,
    catalog_from_dict,
    load_catalog,
    save_catalog,
)


def test_save_and_load_through_file(tmp_path, default_catalog):
    default_catalog.register(RoomTemplate(
        "Prefab", description="probed", metadata={"prefab": "crypt/prefab.tscn"},
    ))
    default_catalog.register(RoomTemplate(
        "Offset", door_specs=(DoorSpec(Direction.EAST, CellCoord(0, 1)),),
    ))

    path = save_catalog(default_catalog, tmp_path / "builtin.json")
    loaded = load_catalog(path)

    assert loaded.name == "builtin"
    assert loaded.list_templates() == default_catalog.list_templates()
    assert loaded.get_template("Prefab").door_specs is None
    assert loaded.get_template("Prefab").metadata == {"prefab": "crypt/prefab.tscn"}
    assert loaded.get_template("Offset").door_specs == (DoorSpec(Direction.EAST, CellCoord(0, 1)),)
    assert loaded.get_template("Entrance").is_start


def test_load_missing_file(tmp_path):
    with pytest.raises(CatalogError, match="not found"):
        load_catalog(tmp_path / "nope.json")


def test_load_invalid_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError, match="Invalid JSON"):
        load_catalog(path)


@pytest.mark.parametrize("payload", [
    {"name": "x"},
    {"templates": [{"category": "room"}]},
    {"templates": [{"id": "A", "doors": [{"direction": "up"}]}]},
    ["not", "a", "dict"],
])
def test_load_malformed_reports_path(tmp_path, payload):
    path = tmp_path / "malformed.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(CatalogError) as excinfo:
        load_catalog(path)
    assert str(path) in str(excinfo.value)


def test_duplicate_ids_rejected():
    data = {"templates": [{"id": "A", "doors": []}, {"id": "A", "doors": []}]}
    with pytest.raises(CatalogError):
        catalog_from_dict(data)


def test_sanitize_filename():
    assert _sanitize_filename("My Crypt!") == "my_crypt"
    assert _sanitize_filename("???") == "catalog"


def test_default_path_uses_catalogs_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    path = save_catalog(RoomCatalog(name="Deep Halls"))
    assert path == tmp_path / ".config" / "roomgrid" / "catalogs" / "deep_halls.json"
    assert path.exists()
