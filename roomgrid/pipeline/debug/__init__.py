"""Debug utilities for the generation pipeline."""

from .graph_export import export_layout_dot, export_layout_json

__all__ = ['export_layout_dot', 'export_layout_json']
