"""
Built-in room templates.
"""

from .halls import HALL_TEMPLATES, CROSSROADS
from .rooms import ROOM_TEMPLATES, ENTRANCE


def register_builtin_templates(catalog):
    """Register all built-in templates with the catalog."""
    for template in ROOM_TEMPLATES + HALL_TEMPLATES:
        catalog.register(template)


__all__ = [
    'HALL_TEMPLATES',
    'ROOM_TEMPLATES',
    'CROSSROADS',
    'ENTRANCE',
    'register_builtin_templates',
]
