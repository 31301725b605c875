"""
Placement search: assembles a layout from catalog templates by randomized backtracking.
"""

from .search import (
    PlacementSearch,
    SearchConfig,
    SearchResult,
    SearchStats,
    generate_layout,
    REASON_EXHAUSTED,
    REASON_BUDGET,
)

__all__ = [
    'PlacementSearch',
    'SearchConfig',
    'SearchResult',
    'SearchStats',
    'generate_layout',
    'REASON_EXHAUSTED',
    'REASON_BUDGET',
]
