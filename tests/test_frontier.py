import pytest

from roomgrid.generators.errors import FrontierError
from roomgrid.generators.layout.frontier import Frontier
from roomgrid.generators.layout.grid_types import CellCoord, Direction, Door

N, S, E, W = Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST


def _door(x, y, d):
    return Door(CellCoord(x, y), d)


def test_plug_removes_index_and_appends_new_doors():
    a, b, c = _door(0, 0, N), _door(0, 0, E), _door(0, 0, S)
    frontier = Frontier([a, b, c])
    new = [_door(1, 0, E), _door(1, 0, N)]

    delta = frontier.plug(1, new)

    assert frontier.as_tuple() == (a, c) + tuple(new)
    assert delta.plugged == b
    assert delta.added == 2
    assert frontier.pending == 1


def test_revert_restores_exact_sequence():
    doors = [_door(0, 0, N), _door(0, 0, E), _door(0, 0, S), _door(0, 0, W)]
    frontier = Frontier(doors)
    before = frontier.as_tuple()

    d1 = frontier.plug(2, [_door(0, -1, S)], closed=[doors[0]])
    mid = frontier.as_tuple()
    d2 = frontier.plug(0, [_door(1, 0, E), _door(1, 0, S)])

    frontier.revert(d2)
    assert frontier.as_tuple() == mid
    frontier.revert(d1)
    assert frontier.as_tuple() == before
    assert frontier.pending == 0


def test_revert_out_of_order_raises():
    frontier = Frontier([_door(0, 0, N), _door(0, 0, E)])
    d1 = frontier.plug(0, [_door(0, 1, N)])
    frontier.plug(0, [])
    with pytest.raises(FrontierError):
        frontier.revert(d1)


def test_plug_with_missing_closed_door_leaves_frontier_untouched():
    doors = [_door(0, 0, N), _door(0, 0, E)]
    frontier = Frontier(doors)
    with pytest.raises(FrontierError):
        frontier.plug(0, [_door(9, 9, N)], closed=[_door(5, 5, W)])
    assert frontier.as_tuple() == tuple(doors)
    assert frontier.pending == 0


def test_plug_bad_index_raises():
    frontier = Frontier([_door(0, 0, N)])
    with pytest.raises(FrontierError):
        frontier.plug(3, [])


def test_membership_and_lookup():
    a = _door(0, 0, N)
    frontier = Frontier([a])
    assert a in frontier
    assert frontier.index_of(a) == 0
    assert frontier.index_of(_door(0, 0, S)) == -1
    assert len(frontier) == 1
    assert list(frontier) == [a]
