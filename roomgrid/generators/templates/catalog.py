"""
Room catalog: registry of available room templates and doorway lookup.

The placement search asks the catalog for templates that can plug a doorway
facing a given direction. Lookups go through a per-direction index that is
rebuilt lazily after the catalog changes, and candidates are drawn by random
index over the matching subset instead of shuffling the whole catalog.
"""

from __future__ import annotations

import logging
import random
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, TYPE_CHECKING

from ..errors import CatalogError
from ..layout.grid_types import Direction, ORIGIN
from .base import DoorSpec, RoomTemplate

if TYPE_CHECKING:
    from ..instantiation import RoomInstantiator

logger = logging.getLogger(__name__)


class RoomCatalog:
    """Registry mapping template ids to room templates.

    Door layouts are read statically where the template declares them and
    probed once through a ``RoomInstantiator`` otherwise; probed layouts are
    cached per template id for the life of the catalog.
    """

    def __init__(self, templates: Optional[Iterable[RoomTemplate]] = None, name: str = "catalog"):
        self.name = name
        self._templates: Dict[str, RoomTemplate] = {}
        self._probed: Dict[str, Tuple[DoorSpec, ...]] = {}
        self._by_direction: Optional[Dict[Direction, List[RoomTemplate]]] = None
        for template in templates or ():
            self.register(template)

    # -- registry --

    def register(self, template: RoomTemplate, replace: bool = False) -> None:
        """Register a template in the catalog.

        Args:
            template: Template to add
            replace: Allow overwriting an existing template with the same id

        Raises:
            CatalogError: If the id is already registered and replace is False
        """
        if template.template_id in self._templates and not replace:
            raise CatalogError(f"Duplicate template id '{template.template_id}' in {self.name}")
        self._templates[template.template_id] = template
        self._probed.pop(template.template_id, None)
        self._by_direction = None

    def unregister(self, template_id: str) -> Optional[RoomTemplate]:
        template = self._templates.pop(template_id, None)
        if template is not None:
            self._probed.pop(template_id, None)
            self._by_direction = None
        return template

    def get_template(self, template_id: str) -> Optional[RoomTemplate]:
        return self._templates.get(template_id)

    def require_template(self, template_id: str) -> RoomTemplate:
        """Get a template by id, raising CatalogError if it is unknown."""
        template = self._templates.get(template_id)
        if template is None:
            raise CatalogError(f"Unknown template '{template_id}' in {self.name}")
        return template

    def list_templates(self, category: Optional[str] = None) -> List[str]:
        """
        List all template ids, optionally filtered by category.

        Args:
            category: Optional category filter (case-insensitive)

        Returns:
            Sorted list of template ids
        """
        if category is None:
            return sorted(self._templates.keys())
        return sorted(
            tid for tid, template in self._templates.items()
            if template.category.lower() == category.lower()
        )

    def list_categories(self) -> List[str]:
        return sorted({t.category for t in self._templates.values()})

    def start_templates(self) -> List[RoomTemplate]:
        return [self._templates[tid] for tid in sorted(self._templates) if self._templates[tid].is_start]

    def resolve_start(self, start_template: Optional[str] = None) -> RoomTemplate:
        """Pick the start template: the named one, else the first 'start' category entry.

        Raises:
            CatalogError: If the catalog is empty or has no start-capable template
        """
        if not self._templates:
            raise CatalogError(f"Catalog {self.name} is empty")
        if start_template is not None:
            return self.require_template(start_template)
        starts = self.start_templates()
        if not starts:
            raise CatalogError(
                f"Catalog {self.name} has no start template; name one explicitly "
                f"or register a template with category 'start'"
            )
        return starts[0]

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[RoomTemplate]:
        return iter(self._templates[tid] for tid in sorted(self._templates))

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates

    # -- door discovery --

    def door_specs(self, template: RoomTemplate,
                   instantiator: Optional['RoomInstantiator'] = None) -> Tuple[DoorSpec, ...]:
        """Relative doorway layout of ``template``.

        Static layouts are returned directly. Otherwise the template is
        instantiated once at the origin, its doors are read, and the probe
        instance is destroyed before returning (even if reading fails).

        Raises:
            CatalogError: If probing is needed but no instantiator was given
        """
        if template.has_static_doors:
            return template.door_specs
        cached = self._probed.get(template.template_id)
        if cached is not None:
            return cached
        if instantiator is None:
            raise CatalogError(
                f"Template '{template.template_id}' needs probing but no instantiator was provided"
            )

        handle, doors = instantiator.instantiate(template, ORIGIN)
        try:
            specs = tuple(DoorSpec.from_door(door, ORIGIN) for door in doors)
        finally:
            instantiator.destroy(handle)

        logger.debug("Probed template %s: %d door(s)", template.template_id, len(specs))
        self._probed[template.template_id] = specs
        return specs

    def probed_ids(self) -> List[str]:
        return sorted(self._probed)

    # -- matching lookup --

    def _build_index(self, instantiator: Optional['RoomInstantiator']) -> Dict[Direction, List[RoomTemplate]]:
        index: Dict[Direction, List[RoomTemplate]] = {d: [] for d in Direction}
        for template in self:
            facing = {spec.direction for spec in self.door_specs(template, instantiator)}
            for direction in facing:
                index[direction].append(template)
        return index

    def find_matching(self, direction: Direction,
                      instantiator: Optional['RoomInstantiator'] = None,
                      include_start: bool = False) -> List[RoomTemplate]:
        """Templates with at least one doorway facing ``direction``.

        Args:
            direction: Facing the new room must present
            instantiator: Used to probe templates without a static layout
            include_start: Whether 'start' category templates are candidates

        Returns:
            Matching templates in id order (empty if none match)
        """
        if self._by_direction is None:
            self._by_direction = self._build_index(instantiator)
        matches = self._by_direction[direction]
        if include_start:
            return list(matches)
        return [t for t in matches if not t.is_start]

    def draw_candidates(self, direction: Direction, rng: random.Random,
                        limit: Optional[int] = None,
                        instantiator: Optional['RoomInstantiator'] = None,
                        include_start: bool = False) -> Iterator[RoomTemplate]:
        """Yield matching templates in uniform-random order without replacement.

        Each draw picks a random index into the remaining pool and swaps the
        last entry into its slot, so only the matching subset is touched.

        Args:
            direction: Facing the new room must present
            rng: Seeded random source
            limit: Maximum number of candidates to yield (None = all)
        """
        pool = self.find_matching(direction, instantiator, include_start)
        remaining = len(pool) if limit is None else min(limit, len(pool))
        while remaining > 0:
            idx = rng.randrange(len(pool))
            candidate = pool[idx]
            pool[idx] = pool[-1]
            pool.pop()
            remaining -= 1
            yield candidate

    def pick_random(self, direction: Direction, rng: random.Random,
                    instantiator: Optional['RoomInstantiator'] = None,
                    include_start: bool = False) -> Optional[RoomTemplate]:
        """Single uniform-random match, or None when nothing faces ``direction``."""
        return next(self.draw_candidates(direction, rng, 1, instantiator, include_start), None)


def build_default_catalog() -> RoomCatalog:
    """Fresh catalog holding the built-in entrance, chamber and hall templates."""
    from .builtin import register_builtin_templates
    catalog = RoomCatalog(name="builtin")
    register_builtin_templates(catalog)
    return catalog
