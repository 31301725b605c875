import sys

import pytest

from roomgrid.generators.errors import CatalogError, ConfigurationError, SearchInvariantError
from roomgrid.generators.instantiation import InMemoryInstantiator
from roomgrid.generators.layout.frontier import Frontier
from roomgrid.generators.layout.grid_types import CellCoord, Direction, Door
from roomgrid.generators.placement.search import (
    REASON_BUDGET,
    REASON_EXHAUSTED,
    PlacementSearch,
    SearchConfig,
    generate_layout,
)
from roomgrid.generators.templates.base import CATEGORY_START, DoorSpec, RoomTemplate

N, S, E, W = Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST


def _assert_valid_layout(layout):
    cells = [room.cell for room in layout.placed]
    assert len(cells) == len(set(cells)), "rooms share a cell"
    assert layout.occupied == set(cells)
    for conn in layout.connections:
        parent = layout.placed[conn.parent_index]
        child = layout.placed[conn.child_index]
        assert conn.parent_door in parent.doors
        assert conn.child_door in child.doors
        assert conn.parent_door.matches(conn.child_door)
    # Every room but the start plugs exactly one door of an earlier room
    assert sorted(c.child_index for c in layout.connections) == list(range(1, len(layout)))


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("seed", range(10))
def test_corridor_of_three(corridor_catalog, seed):
    result = generate_layout(corridor_catalog, 3, seed=seed)

    assert result.success
    assert [cell for _, cell in result.rooms] == [CellCoord(0, 0), CellCoord(1, 0), CellCoord(2, 0)]
    assert result.rooms[0][0] == "Start"
    assert result.rooms[1][0] == "Straight"
    assert result.rooms[2][0] in ("Straight", "DeadEnd")
    _assert_valid_layout(result.layout)


def test_start_only_catalog_fails_with_empty_layout(start_only_catalog):
    inst = InMemoryInstantiator()
    search = PlacementSearch(start_only_catalog, SearchConfig(total_rooms=2, seed=5), inst)
    result = search.run()

    assert not result.success
    assert result.reason == REASON_EXHAUSTED
    assert result.rooms == []
    assert len(search.layout) == 0
    assert len(search.frontier) == 0
    assert inst.live_count == 0
    assert result.stats.no_candidate_rejections >= 1


def test_single_room_is_just_the_start(corridor_catalog):
    result = generate_layout(corridor_catalog, 1, seed=0)
    assert result.success
    assert result.rooms == [("Start", CellCoord(0, 0))]
    assert result.stats.steps == 0


def test_both_matching_templates_appear_across_seeds(make_catalog):
    catalog = make_catalog(
        RoomTemplate.simple("Start", E, category=CATEGORY_START),
        RoomTemplate.simple("RoomA", W),
        RoomTemplate.simple("RoomB", W),
    )
    seen = set()
    for seed in range(50):
        result = generate_layout(catalog, 2, seed=seed)
        assert result.success
        seen.add(result.rooms[1][0])
    assert seen == {"RoomA", "RoomB"}


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("seed", [1, 2, 3, 17, 99])
def test_default_catalog_layouts_are_valid(default_catalog, seed):
    inst = InMemoryInstantiator()
    result = generate_layout(default_catalog, 40, seed=seed, instantiator=inst)

    assert result.success
    assert result.room_count == 40
    _assert_valid_layout(result.layout)
    # Only the placed rooms are still instantiated
    assert inst.live_count == 40


def test_same_seed_same_layout(default_catalog):
    a = generate_layout(default_catalog, 30, seed=1234)
    b = generate_layout(default_catalog, 30, seed=1234)
    assert a.rooms == b.rooms
    assert a.stats.steps == b.stats.steps


def test_unseeded_run_records_seed(default_catalog):
    result = generate_layout(default_catalog, 5)
    assert result.success
    assert generate_layout(default_catalog, 5, seed=result.seed).rooms == result.rooms


def test_frontier_never_faces_a_placed_door(default_catalog):
    search = PlacementSearch(default_catalog, SearchConfig(total_rooms=60, seed=8))
    assert search.run().success
    placed_doors = {door for room in search.layout.placed for door in room.doors}
    for door in search.frontier:
        assert door.matching() not in placed_doors


class _RollbackAuditingSearch(PlacementSearch):
    """Snapshots state around every commit and checks rollbacks restore it exactly."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.snapshots = {}
        self.rollbacks = 0

    def _state(self):
        return (self.layout.snapshot(), self.frontier.as_tuple(),
                frozenset(self.instantiator.live_handles))

    def _commit(self, frame, template):
        before = self._state()
        committed = super()._commit(frame, template)
        if committed:
            self.snapshots[id(frame)] = before
        else:
            assert self._state() == before
        return committed

    def _rollback(self, frame):
        super()._rollback(frame)
        assert self._state() == self.snapshots.pop(id(frame))
        self.rollbacks += 1


def test_rollback_restores_state_exactly(make_catalog):
    # Corners and dead ends force plenty of backtracking on a small grid
    catalog = make_catalog(
        RoomTemplate.simple("Start", E, N, category=CATEGORY_START),
        RoomTemplate.simple("CornerWN", W, N),
        RoomTemplate.simple("CornerSW", S, W),
        RoomTemplate.simple("CornerES", E, S),
        RoomTemplate.simple("CornerNE", N, E),
        RoomTemplate.simple("CapW", W),
        RoomTemplate.simple("CapS", S),
    )
    for seed in range(5):
        search = _RollbackAuditingSearch(catalog, SearchConfig(total_rooms=10, seed=seed),
                                         InMemoryInstantiator())
        result = search.run()
        if result.success:
            _assert_valid_layout(result.layout)
        assert search.rollbacks == result.stats.backtracks or not result.success


def test_failed_search_rolls_back_everything(make_catalog):
    # A dead end is the only way out of the start: three rooms can never fit
    catalog = make_catalog(
        RoomTemplate.simple("Start", E, category=CATEGORY_START),
        RoomTemplate.simple("DeadEnd", W),
    )
    inst = InMemoryInstantiator()
    search = _RollbackAuditingSearch(catalog, SearchConfig(total_rooms=3, seed=0), inst)
    result = search.run()

    assert not result.success
    assert search.rollbacks == 1
    assert inst.live_count == 0
    assert inst.instantiated == inst.destroyed


def test_misaligned_door_is_rejected(make_catalog):
    catalog = make_catalog(
        RoomTemplate.simple("Start", E, category=CATEGORY_START),
        RoomTemplate("Offset", door_specs=(DoorSpec(W, CellCoord(0, 1)),)),
    )
    inst = InMemoryInstantiator()
    result = generate_layout(catalog, 2, seed=0, instantiator=inst)

    assert not result.success
    assert result.stats.misaligned_rejections == 1
    assert inst.live_count == 0


def test_blocked_doors_count_overlaps(default_catalog):
    # Dense layouts leave doors pointing into rooms that cannot plug them
    total = sum(
        generate_layout(default_catalog, 150, seed=seed).stats.overlap_rejections
        for seed in range(3)
    )
    assert total > 0


class _OrphanDoorSearch(PlacementSearch):
    """Puts a door no placed room owns at the head of the frontier."""

    def _search(self, rooms_remaining):
        orphan = Door(CellCoord(9, 9), E)
        self.frontier = Frontier([orphan, *self.frontier])
        return super()._search(rooms_remaining)


def test_unowned_frontier_door_raises(corridor_catalog):
    search = _OrphanDoorSearch(corridor_catalog, SearchConfig(total_rooms=3, seed=0))
    with pytest.raises(SearchInvariantError):
        search.run()


# ---------------------------------------------------------------------------
# Budgets, probing, configuration
# ---------------------------------------------------------------------------

def test_step_budget_stops_search(corridor_catalog):
    inst = InMemoryInstantiator()
    result = generate_layout(corridor_catalog, 3, seed=0, instantiator=inst, max_steps=0)

    assert not result.success
    assert result.reason == REASON_BUDGET
    assert result.rooms == []
    assert inst.live_count == 0


def test_one_candidate_per_door_can_fail(corridor_catalog):
    outcomes = {
        generate_layout(corridor_catalog, 3, seed=s, max_candidates_per_door=1).success
        for s in range(40)
    }
    assert outcomes == {True, False}


def test_deep_layout_beyond_recursion_limit(default_catalog):
    total = sys.getrecursionlimit() + 200
    result = generate_layout(default_catalog, total, seed=7)

    assert result.success
    assert result.room_count == total
    assert result.stats.max_depth == total - 1
    _assert_valid_layout(result.layout)


def test_probed_templates_are_probed_once(make_catalog):
    catalog = make_catalog(
        RoomTemplate.simple("Start", E, category=CATEGORY_START),
        RoomTemplate("PrefabHall"),
        RoomTemplate("PrefabCap"),
    )
    inst = InMemoryInstantiator(hidden_doors={
        "PrefabHall": (DoorSpec(W), DoorSpec(E)),
        "PrefabCap": (DoorSpec(W),),
    })
    result = generate_layout(catalog, 6, seed=4, instantiator=inst)

    assert result.success
    assert catalog.probed_ids() == ["PrefabCap", "PrefabHall"]
    # Two probes plus one instance per placement attempt
    assert inst.instantiated == 2 + 1 + result.stats.steps
    assert inst.live_count == 6


def test_start_template_override(default_catalog):
    result = generate_layout(default_catalog, 4, seed=2, start_template="Crossroads")
    assert result.success
    assert result.rooms[0][0] == "Crossroads"


def test_custom_grid_origin(corridor_catalog):
    result = generate_layout(corridor_catalog, 2, seed=0, grid_origin=CellCoord(10, -4))
    assert result.rooms[0][1] == CellCoord(10, -4)
    assert result.rooms[1][1] == CellCoord(11, -4)


def test_grid_origin_accepts_plain_pair(corridor_catalog):
    result = generate_layout(corridor_catalog, 2, seed=0, grid_origin=(3, 2))
    assert [cell for _, cell in result.rooms] == [CellCoord(3, 2), CellCoord(4, 2)]


@pytest.mark.parametrize("options", [
    {"total_rooms": 0},
    {"total_rooms": -3},
    {"total_rooms": 5, "max_steps": -1},
    {"total_rooms": 5, "max_candidates_per_door": 0},
    {"total_rooms": 5, "grid_origin": 7},
])
def test_invalid_config_raises(corridor_catalog, options):
    with pytest.raises(ConfigurationError):
        PlacementSearch(corridor_catalog, SearchConfig(**options))


def test_empty_catalog_raises(make_catalog):
    with pytest.raises(CatalogError):
        generate_layout(make_catalog(), 3, seed=0)


def test_search_instance_can_rerun(corridor_catalog):
    search = PlacementSearch(corridor_catalog, SearchConfig(total_rooms=3, seed=9))
    first = search.run()
    second = search.run()
    assert first.rooms == second.rooms
