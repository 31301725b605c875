"""
roomgrid - procedural room layouts on an integer grid.

Rooms are drawn from a template catalog and placed by randomized backtracking
so that every new room plugs an open doorway and no two rooms share a cell.
"""

from .generators.errors import (
    GenerationError,
    ConfigurationError,
    CatalogError,
    LayoutError,
    FrontierError,
    SearchInvariantError,
)
from .generators.layout import CellCoord, Direction, Door, Frontier, Layout, PlacedRoom
from .generators.instantiation import InMemoryInstantiator, RoomHandle, RoomInstantiator
from .generators.templates import (
    DoorSpec,
    RoomTemplate,
    RoomCatalog,
    build_default_catalog,
    load_catalog,
    save_catalog,
)
from .generators.placement import (
    PlacementSearch,
    SearchConfig,
    SearchResult,
    SearchStats,
    generate_layout,
)
from .conversion import GridMapping, layout_to_dict, render_ascii
from .pipeline import GenerationPipeline, GenerationSettings, GenerationResult, PipelineError

__version__ = "0.1.0"

__all__ = [
    # Errors
    'GenerationError',
    'ConfigurationError',
    'CatalogError',
    'LayoutError',
    'FrontierError',
    'SearchInvariantError',
    # Grid
    'CellCoord',
    'Direction',
    'Door',
    'Frontier',
    'Layout',
    'PlacedRoom',
    # Instantiation
    'InMemoryInstantiator',
    'RoomHandle',
    'RoomInstantiator',
    # Templates
    'DoorSpec',
    'RoomTemplate',
    'RoomCatalog',
    'build_default_catalog',
    'load_catalog',
    'save_catalog',
    # Search
    'PlacementSearch',
    'SearchConfig',
    'SearchResult',
    'SearchStats',
    'generate_layout',
    # Conversion
    'GridMapping',
    'layout_to_dict',
    'render_ascii',
    # Pipeline
    'GenerationPipeline',
    'GenerationSettings',
    'GenerationResult',
    'PipelineError',
]
