"""
Graph export utilities for layout debugging.

Provides export functions to visualize room layouts in:
- DOT format (Graphviz) for visual graph inspection
- JSON format for programmatic analysis and reproducibility tracking
"""

from typing import Any, Dict, Optional
import json

from ...generators.layout.layout_types import Layout


# Node fill colour by template category
CATEGORY_COLORS = {
    'start': '#90EE90',      # Light green
    'hall': '#87CEEB',       # Sky blue
    'room': '#FFD700',       # Gold
    'dead_end': '#FFB6C1',   # Light pink
}
DEFAULT_COLOR = '#D3D3D3'


def export_layout_dot(layout: Layout, categories: Optional[Dict[str, str]] = None) -> str:
    """Export a layout as Graphviz DOT format.

    Args:
        layout: Finished layout
        categories: Optional template id -> category map used for node colours

    Returns:
        DOT format string for visualization with Graphviz or online viewers
    """
    categories = categories or {}
    lines = ['digraph RoomLayout {']
    lines.append('  rankdir=LR;')
    lines.append('  node [shape=box, style=filled];')
    lines.append('')

    # Nodes (rooms)
    for index, room in enumerate(layout.placed):
        category = categories.get(room.template_id, '')
        label_lines = [
            room.template_id,
            f"id: {index}",
            f"cell: ({room.cell.x}, {room.cell.y})",
        ]
        label = '\\n'.join(label_lines)
        color = CATEGORY_COLORS.get(category.lower(), DEFAULT_COLOR)
        lines.append(f'  room_{index} [label="{label}" fillcolor="{color}"];')

    lines.append('')

    # Edges (plugged doors), labelled with the parent door's facing
    for conn in layout.connections:
        lines.append(
            f'  room_{conn.parent_index} -> room_{conn.child_index} '
            f'[label="{conn.parent_door.direction.value}"];'
        )

    # Unplugged doors hang off their room as dashed stubs
    for n, door in enumerate(layout.open_doors()):
        owner = layout.index_of_owner(door)
        lines.append(f'  open_{n} [label="", shape=point];')
        lines.append(f'  room_{owner} -> open_{n} [style=dashed, label="{door.direction.value}"];')

    lines.append('}')
    return '\n'.join(lines)


def export_layout_json(layout: Layout, seed: int,
                       categories: Optional[Dict[str, str]] = None,
                       stats: Optional[Dict[str, Any]] = None) -> str:
    """Export a layout as JSON with metadata.

    Args:
        layout: Finished layout
        seed: The seed used for generation
        categories: Optional template id -> category map
        stats: Optional search statistics to embed

    Returns:
        JSON string with layout and debug metadata
    """
    categories = categories or {}
    template_counts: Dict[str, int] = {}
    for room in layout.placed:
        template_counts[room.template_id] = template_counts.get(room.template_id, 0) + 1

    bounds = layout.bounds()
    output = {
        'metadata': {
            'seed': seed,
            'version': '1.0',
            'generator': 'roomgrid',
        },
        'statistics': {
            'room_count': len(layout),
            'connection_count': len(layout.connections),
            'open_door_count': len(layout.open_doors()),
            'template_counts': template_counts,
            'bounds': [bounds[0].as_tuple(), bounds[1].as_tuple()] if bounds else None,
            'search': stats or {},
        },
        'nodes': [
            {
                'id': index,
                'template': room.template_id,
                'category': categories.get(room.template_id),
                'cell': [room.cell.x, room.cell.y],
            }
            for index, room in enumerate(layout.placed)
        ],
        'edges': [
            {
                'from': conn.parent_index,
                'to': conn.child_index,
                'direction': conn.parent_door.direction.value,
            }
            for conn in layout.connections
        ],
    }
    return json.dumps(output, indent=2)
