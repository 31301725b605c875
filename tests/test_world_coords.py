import pytest

from roomgrid.conversion.world_coords import DEFAULT_CELL_SIZE, GridMapping
from roomgrid.generators.errors import ConfigurationError
from roomgrid.generators.layout.grid_types import CellCoord


def test_grid_to_world_is_cell_center():
    mapping = GridMapping()
    assert mapping.cell_size == DEFAULT_CELL_SIZE
    assert mapping.grid_to_world(CellCoord(0, 0)) == (5.0, 5.0)
    assert mapping.grid_to_world(CellCoord(-1, 2)) == (-5.0, 25.0)


def test_mapping_is_injective_and_roundtrips():
    mapping = GridMapping(cell_size=2.5, origin_x=100.0, origin_y=-40.0)
    cells = [CellCoord(x, y) for x in range(-6, 7) for y in range(-6, 7)]
    positions = [mapping.grid_to_world(c) for c in cells]
    assert len(set(positions)) == len(cells)
    for cell, (x, y) in zip(cells, positions):
        assert mapping.world_to_grid(x, y) == cell


def test_world_to_grid_floors():
    mapping = GridMapping(cell_size=10.0)
    assert mapping.world_to_grid(9.99, 0.0) == CellCoord(0, 0)
    assert mapping.world_to_grid(10.0, -0.01) == CellCoord(1, -1)


@pytest.mark.parametrize("size", [0, -1.0])
def test_cell_size_must_be_positive(size):
    with pytest.raises(ConfigurationError):
        GridMapping(cell_size=size)
