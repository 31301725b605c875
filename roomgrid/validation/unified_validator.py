"""
Unified validator orchestrator.

Central class that runs catalog checks before a search and layout checks
after one. Provides the main validation API for the generation pipeline.
"""

import logging
from typing import List, Optional, TYPE_CHECKING

from .core import ValidationResult, ValidationStage, Severity
from .checks.catalog_checks import validate_catalog
from .checks.layout_checks import validate_layout

if TYPE_CHECKING:
    from ..generators.instantiation import RoomInstantiator
    from ..generators.layout.layout_types import Layout
    from ..generators.templates.catalog import RoomCatalog

logger = logging.getLogger(__name__)


class LayoutValidator:
    """Central orchestrator for catalog and layout validation.

    Validation stages:
    - CATALOG: Before the placement search runs
    - PLACEMENT: On the layout a search produced

    Attributes:
        strict_mode: If True, treat WARN as FAIL
        enabled: If False, skip all validation (returns empty results)
    """

    def __init__(self, strict_mode: bool = False, enabled: bool = True):
        self.strict_mode = strict_mode
        self.enabled = enabled
        self._validation_history: List[ValidationResult] = []

    def validate_catalog(
        self,
        catalog: 'RoomCatalog',
        start_template: Optional[str] = None,
        instantiator: Optional['RoomInstantiator'] = None,
    ) -> ValidationResult:
        """Validate a template catalog.

        Stage: CATALOG

        Checks:
        - CAT-001: Catalog is not empty
        - CAT-002: A start template can be resolved
        - CAT-003: Every door facing can be plugged

        Args:
            catalog: Catalog the search will draw from
            start_template: Explicit start template id (None = first 'start' entry)
            instantiator: Used to probe templates without static door specs

        Returns:
            ValidationResult with catalog issues
        """
        if not self.enabled:
            return ValidationResult(stage=ValidationStage.CATALOG)

        result = validate_catalog(catalog, start_template, instantiator)
        result.stage = ValidationStage.CATALOG

        self._apply_strict_mode(result)
        self._record_result(result)
        return result

    def validate_layout(
        self,
        layout: 'Layout',
        expected_rooms: Optional[int] = None,
    ) -> ValidationResult:
        """Validate a finished layout.

        Stage: PLACEMENT

        Checks:
        - LAYOUT-*: Overlap, room count, occupancy bookkeeping
        - DOOR-*: Door matching, adjacency, open doors

        Args:
            layout: Layout produced by a placement search
            expected_rooms: Requested room count (None = don't check)

        Returns:
            ValidationResult with placement issues
        """
        if not self.enabled:
            return ValidationResult(stage=ValidationStage.PLACEMENT)

        result = validate_layout(layout, expected_rooms)
        result.stage = ValidationStage.PLACEMENT

        self._apply_strict_mode(result)
        self._record_result(result)

        if result.failed:
            logger.warning("Layout validation failed: %s", ", ".join(i.code for i in result.errors))
        return result

    def get_history(self) -> List[ValidationResult]:
        return self._validation_history.copy()

    def clear_history(self) -> None:
        self._validation_history.clear()

    def _apply_strict_mode(self, result: ValidationResult) -> None:
        """Apply strict mode to a result (promote WARN to FAIL)."""
        if self.strict_mode:
            for issue in result.issues:
                if issue.severity == Severity.WARN:
                    issue.severity = Severity.FAIL

    def _record_result(self, result: ValidationResult) -> None:
        self._validation_history.append(result)


# =============================================================================
# SINGLETON ACCESSOR
# =============================================================================

_default_validator: Optional[LayoutValidator] = None


def get_validator(
    strict_mode: Optional[bool] = None,
    enabled: Optional[bool] = None
) -> LayoutValidator:
    """Get the default validator instance.

    Creates a singleton instance on first call. Subsequent calls return the
    same instance (with any given settings applied) until reset_validator().
    """
    global _default_validator

    if _default_validator is None:
        _default_validator = LayoutValidator(
            strict_mode=strict_mode or False,
            enabled=enabled if enabled is not None else True,
        )
    else:
        if strict_mode is not None:
            _default_validator.strict_mode = strict_mode
        if enabled is not None:
            _default_validator.enabled = enabled

    return _default_validator


def reset_validator() -> None:
    """Reset the default validator instance."""
    global _default_validator
    _default_validator = None
