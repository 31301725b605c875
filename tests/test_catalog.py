import random

import pytest

from roomgrid.generators.errors import CatalogError
from roomgrid.generators.instantiation import InMemoryInstantiator
from roomgrid.generators.layout.grid_types import CellCoord, Direction
from roomgrid.generators.templates.base import (
    CATEGORY_HALL, CATEGORY_START, DoorSpec, RoomTemplate,
)
from roomgrid.generators.templates.catalog import RoomCatalog

N, S, E, W = Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST


def test_register_duplicate_raises(corridor_catalog):
    with pytest.raises(CatalogError):
        corridor_catalog.register(RoomTemplate.simple("Straight", N, S))


def test_register_replace_updates_index(corridor_catalog):
    assert [t.template_id for t in corridor_catalog.find_matching(N)] == []
    corridor_catalog.register(RoomTemplate.simple("Straight", N, S), replace=True)
    assert [t.template_id for t in corridor_catalog.find_matching(N)] == ["Straight"]


def test_find_matching_excludes_start_by_default(corridor_catalog):
    ids = [t.template_id for t in corridor_catalog.find_matching(E)]
    assert ids == ["Straight"]
    ids = [t.template_id for t in corridor_catalog.find_matching(E, include_start=True)]
    assert ids == ["Start", "Straight"]


def test_find_matching_returns_empty_when_nothing_faces(corridor_catalog):
    assert corridor_catalog.find_matching(S) == []


def test_draw_candidates_covers_pool_without_repeats(default_catalog):
    rng = random.Random(3)
    expected = {t.template_id for t in default_catalog.find_matching(W)}
    drawn = [t.template_id for t in default_catalog.draw_candidates(W, rng)]
    assert len(drawn) == len(expected)
    assert set(drawn) == expected


def test_draw_candidates_respects_limit(default_catalog):
    drawn = list(default_catalog.draw_candidates(W, random.Random(1), limit=2))
    assert len(drawn) == 2


def test_draw_candidates_is_seeded(default_catalog):
    a = [t.template_id for t in default_catalog.draw_candidates(N, random.Random(11))]
    b = [t.template_id for t in default_catalog.draw_candidates(N, random.Random(11))]
    assert a == b


def test_pick_random_none_when_no_match(start_only_catalog):
    assert start_only_catalog.pick_random(W, random.Random(0)) is None


def test_resolve_start(corridor_catalog, make_catalog):
    assert corridor_catalog.resolve_start().template_id == "Start"
    assert corridor_catalog.resolve_start("Straight").template_id == "Straight"
    with pytest.raises(CatalogError):
        corridor_catalog.resolve_start("Missing")
    with pytest.raises(CatalogError):
        make_catalog().resolve_start()
    with pytest.raises(CatalogError):
        make_catalog(RoomTemplate.simple("Hall", E, W)).resolve_start()


def test_listing_and_membership(default_catalog):
    assert "Entrance" in default_catalog
    assert default_catalog.list_templates(CATEGORY_START) == ["Entrance"]
    assert "StraightHallEW" in default_catalog.list_templates(CATEGORY_HALL)
    assert default_catalog.list_categories() == ["dead_end", "hall", "start"]
    assert [t.template_id for t in default_catalog] == default_catalog.list_templates()


def test_unregister_removes_from_index(corridor_catalog):
    assert corridor_catalog.unregister("Straight") is not None
    assert [t.template_id for t in corridor_catalog.find_matching(W)] == ["DeadEnd"]
    assert corridor_catalog.unregister("Straight") is None


def test_probe_is_cached_and_destroyed():
    prefab = RoomTemplate("Prefab")
    catalog = RoomCatalog([prefab])
    assert not prefab.has_static_doors
    assert RoomTemplate.simple("Hall", W, E).has_static_doors
    inst = InMemoryInstantiator(hidden_doors={"Prefab": (DoorSpec(W), DoorSpec(N))})

    specs = catalog.door_specs(prefab, inst)
    assert {s.direction for s in specs} == {W, N}
    assert inst.instantiated == 1
    assert inst.live_count == 0

    catalog.door_specs(prefab, inst)
    catalog.find_matching(W, inst)
    assert inst.instantiated == 1
    assert catalog.probed_ids() == ["Prefab"]


def test_probe_requires_instantiator():
    catalog = RoomCatalog([RoomTemplate("Prefab")])
    with pytest.raises(CatalogError):
        catalog.find_matching(W)


class _BrokenDoorsInstantiator(InMemoryInstantiator):
    """Hands back something that is not a door list."""

    def instantiate(self, template, cell):
        handle, _ = super().instantiate(template, cell)
        return handle, ("not-a-door",)


def test_probe_destroys_instance_when_reading_doors_fails():
    catalog = RoomCatalog([RoomTemplate("Prefab")])
    inst = _BrokenDoorsInstantiator()
    with pytest.raises(AttributeError):
        catalog.door_specs(catalog.require_template("Prefab"), inst)
    assert inst.live_count == 0
    assert inst.destroyed == 1
    assert catalog.probed_ids() == []


def test_door_spec_offsets_are_relative():
    spec = DoorSpec(E, CellCoord(0, 1))
    door = spec.at(CellCoord(3, 3))
    assert door.cell == CellCoord(3, 4)
    assert DoorSpec.from_door(door, CellCoord(3, 3)) == spec
