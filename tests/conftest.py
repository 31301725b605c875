import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from roomgrid.generators.instantiation import InMemoryInstantiator  # noqa: E402
from roomgrid.generators.layout.grid_types import Direction  # noqa: E402
from roomgrid.generators.templates.base import CATEGORY_START, RoomTemplate  # noqa: E402
from roomgrid.generators.templates.catalog import RoomCatalog, build_default_catalog  # noqa: E402
from roomgrid.validation import reset_validator  # noqa: E402

N, S, E, W = Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST


def start_east():
    return RoomTemplate.simple("Start", E, category=CATEGORY_START)


@pytest.fixture()
def instantiator():
    return InMemoryInstantiator()


@pytest.fixture()
def default_catalog():
    return build_default_catalog()


@pytest.fixture()
def make_catalog():
    """Factory: make_catalog(*templates, name=...) -> RoomCatalog."""
    def _make(*templates, name="test"):
        return RoomCatalog(templates, name=name)
    return _make


@pytest.fixture()
def corridor_catalog(make_catalog):
    """Start[E], Straight[W,E], DeadEnd[W]."""
    return make_catalog(
        start_east(),
        RoomTemplate.simple("Straight", W, E),
        RoomTemplate.simple("DeadEnd", W),
        name="corridor",
    )


@pytest.fixture()
def start_only_catalog(make_catalog):
    return make_catalog(start_east(), name="start_only")


@pytest.fixture(autouse=True)
def _fresh_validator():
    reset_validator()
    yield
    reset_validator()
