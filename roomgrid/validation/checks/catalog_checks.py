"""
Catalog validation checks.

- CAT-001: Catalog is empty
- CAT-002: No start template
- CAT-003: A door facing that no template can plug
"""

from typing import Optional, Set, TYPE_CHECKING

from ...generators.errors import CatalogError
from ...generators.layout.grid_types import Direction
from ...generators.templates.catalog import RoomCatalog
from ..core import ValidationResult
from ..rules import CAT_001, CAT_002, CAT_003

if TYPE_CHECKING:
    from ...generators.instantiation import RoomInstantiator


def check_not_empty(catalog: RoomCatalog) -> ValidationResult:
    result = ValidationResult()
    if len(catalog) == 0:
        result.add_issue(CAT_001.issue(catalog=catalog.name))
    return result


def check_start_template(catalog: RoomCatalog, start_template: Optional[str] = None) -> ValidationResult:
    result = ValidationResult()
    try:
        catalog.resolve_start(start_template)
    except CatalogError as e:
        result.add_issue(CAT_002.issue(template=start_template, catalog=catalog.name, details=e))
    return result


def check_door_coverage(catalog: RoomCatalog,
                        instantiator: Optional['RoomInstantiator'] = None) -> ValidationResult:
    """Every facing some template presents must be pluggable by a non-start template.

    Templates whose doors are only known after instantiation are skipped when
    no instantiator is given and they have not been probed yet.
    """
    result = ValidationResult()
    probed = set(catalog.probed_ids())
    facings: Set[Direction] = set()
    pluggable: Set[Direction] = set()
    for template in catalog:
        if not template.has_static_doors and instantiator is None and template.template_id not in probed:
            continue
        directions = {spec.direction for spec in catalog.door_specs(template, instantiator)}
        facings.update(directions)
        if not template.is_start:
            pluggable.update(directions)

    for facing in sorted(facings, key=lambda d: d.value):
        required = facing.opposite()
        if required not in pluggable:
            result.add_issue(CAT_003.issue(required=required.value, facing=facing.value))
    return result


def validate_catalog(catalog: RoomCatalog, start_template: Optional[str] = None,
                     instantiator: Optional['RoomInstantiator'] = None) -> ValidationResult:
    """Run all catalog checks. An empty catalog stops after CAT-001."""
    result = check_not_empty(catalog)
    if result.failed:
        return result
    result.merge(check_start_template(catalog, start_template))
    result.merge(check_door_coverage(catalog, instantiator))
    return result
