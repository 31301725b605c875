"""
Validation rule definitions.

Each rule has:
- Code: Unique identifier (e.g., "LAYOUT-001")
- Severity: FAIL, WARN, or INFO
- Rule reference: The property being checked
- Message template: Human-readable description
- Remediation: Suggested fix

Rules are organized by category:
- LAYOUT: Placed rooms and occupied cells
- DOOR: Doorway connections
- CAT: Template catalogs
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .core import Severity, ValidationIssue


@dataclass(frozen=True)
class ValidationRule:
    """Definition of a validation rule."""
    code: str
    severity: Severity
    rule_reference: str
    message_template: str
    remediation_template: Optional[str] = None

    def format_message(self, **kwargs) -> str:
        return self.message_template.format(**kwargs)

    def format_remediation(self, **kwargs) -> Optional[str]:
        if self.remediation_template:
            return self.remediation_template.format(**kwargs)
        return None

    def issue(self, template: Optional[str] = None, cell: Any = None,
              message: Optional[str] = None, **kwargs) -> ValidationIssue:
        """Build an issue for this rule.

        Keyword arguments (and ``template``/``cell``) fill both the message
        and remediation templates. ``message`` replaces the formatted message
        outright.
        """
        values = dict(kwargs, template=template, cell=cell)
        return ValidationIssue(
            severity=self.severity,
            code=self.code,
            message=message if message is not None else self.format_message(**values),
            rule_reference=self.rule_reference,
            remediation=self.format_remediation(**values),
            template=template,
            cell=str(cell) if cell is not None else None,
        )


# =============================================================================
# LAYOUT RULES
# =============================================================================

LAYOUT_001 = ValidationRule(
    code="LAYOUT-001",
    severity=Severity.FAIL,
    rule_reference="Rooms never share a grid cell",
    message_template="Cell {cell} holds {count} rooms: {templates}",
    remediation_template="Regenerate; the layout was assembled outside the placement search",
)

LAYOUT_002 = ValidationRule(
    code="LAYOUT-002",
    severity=Severity.FAIL,
    rule_reference="A successful layout has exactly the requested room count",
    message_template="Layout has {actual} rooms, expected {expected}",
    remediation_template="Retry with a new seed or lower the room count",
)

LAYOUT_003 = ValidationRule(
    code="LAYOUT-003",
    severity=Severity.FAIL,
    rule_reference="Occupied cells are exactly the cells of placed rooms",
    message_template="Occupied set out of sync: {details}",
    remediation_template="Only mutate a Layout through add()/pop_last()",
)

# =============================================================================
# DOOR RULES
# =============================================================================

DOOR_001 = ValidationRule(
    code="DOOR-001",
    severity=Severity.FAIL,
    rule_reference="A placed room presents a door matching the door it plugs",
    message_template="Door {child_door} does not match parent door {parent_door}",
    remediation_template="Check the template's door specs for '{template}'",
)

DOOR_002 = ValidationRule(
    code="DOOR-002",
    severity=Severity.WARN,
    rule_reference="Connected rooms are grid neighbours",
    message_template="Rooms {parent} and {child} are connected but not adjacent",
    remediation_template="Keep door offsets at the room's own cell",
)

DOOR_003 = ValidationRule(
    code="DOOR-003",
    severity=Severity.INFO,
    rule_reference="Open doors may remain once the room count is reached",
    message_template="{count} open door(s) remain unplugged",
)

# =============================================================================
# CATALOG RULES
# =============================================================================

CAT_001 = ValidationRule(
    code="CAT-001",
    severity=Severity.FAIL,
    rule_reference="A catalog holds at least one template",
    message_template="Catalog '{catalog}' is empty",
    remediation_template="Register templates or load a catalog file",
)

CAT_002 = ValidationRule(
    code="CAT-002",
    severity=Severity.FAIL,
    rule_reference="A catalog offers a start-capable template",
    message_template="Catalog '{catalog}' has no start template ({details})",
    remediation_template="Add a template with category 'start' or name one explicitly",
)

CAT_003 = ValidationRule(
    code="CAT-003",
    severity=Severity.WARN,
    rule_reference="Every door facing used by the catalog can be plugged",
    message_template="No template faces {required}, so doors facing {facing} can never be plugged",
    remediation_template="Add a template with a {required} door",
)


RULES: Dict[str, ValidationRule] = {
    rule.code: rule
    for rule in (LAYOUT_001, LAYOUT_002, LAYOUT_003,
                 DOOR_001, DOOR_002, DOOR_003,
                 CAT_001, CAT_002, CAT_003)
}


def get_rule(code: str) -> Optional[ValidationRule]:
    return RULES.get(code)
