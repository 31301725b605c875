"""
Core data structures for the validation system.

Defines the fundamental types used throughout the validation package:
- Severity: Issue severity levels (INFO, WARN, FAIL)
- ValidationStage: Where in generation a check runs
- ValidationIssue: Individual validation finding
- ValidationResult: Collection of issues with pass/fail status
- ValidationError: Exception raised when validation fails
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional


class Severity(Enum):
    """Validation issue severity levels.

    - INFO: Informational, logged but doesn't affect pass/fail
    - WARN: Warning, reported but doesn't fail the layout
    - FAIL: Error, the layout (or catalog) must not be used
    """
    INFO = auto()
    WARN = auto()
    FAIL = auto()

    def __str__(self) -> str:
        return self.name


class ValidationStage(Enum):
    """Generation stages where validation occurs.

    - CATALOG: Before a search, on the template catalog
    - PLACEMENT: After a search, on the finished layout
    """
    CATALOG = "catalog"
    PLACEMENT = "placement"

    def __str__(self) -> str:
        return self.value


@dataclass
class ValidationIssue:
    """Represents a single validation finding.

    Attributes:
        severity: Issue severity (INFO, WARN, FAIL)
        code: Rule code (e.g., "LAYOUT-001")
        message: Human-readable description
        rule_reference: Short statement of the rule that was checked
        remediation: Optional suggested fix
        template: Optional template id involved
        cell: Optional grid cell involved, formatted "(x, y)"
    """
    severity: Severity
    code: str
    message: str
    rule_reference: str
    remediation: Optional[str] = None
    template: Optional[str] = None
    cell: Optional[str] = None

    def format(self) -> str:
        """Format issue for display.

        Returns:
            [SEVERITY] RULE_ID template=T cell=C :: message :: fix=FIX
        """
        return (
            f"[{self.severity}] {self.code} "
            f"template={self.template or '-'} cell={self.cell or '-'} :: "
            f"{self.message} :: fix={self.remediation or 'N/A'}"
        )

    def __str__(self) -> str:
        return self.format()


@dataclass
class ValidationResult:
    """Collection of validation issues with pass/fail determination."""
    issues: List[ValidationIssue] = field(default_factory=list)
    stage: Optional[ValidationStage] = None

    @property
    def passed(self) -> bool:
        """Check if validation passed (no FAIL issues)."""
        return not self.failed

    @property
    def failed(self) -> bool:
        return any(i.severity == Severity.FAIL for i in self.issues)

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.WARN]

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.FAIL]

    @property
    def infos(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.INFO]

    def codes(self) -> List[str]:
        return [i.code for i in self.issues]

    def add_issue(self, issue: ValidationIssue) -> None:
        self.issues.append(issue)

    def merge(self, other: 'ValidationResult') -> 'ValidationResult':
        """Merge another result into this one; returns self for chaining."""
        self.issues.extend(other.issues)
        return self

    def report(self) -> str:
        """Multi-line report of all issues, grouped by severity."""
        if not self.issues:
            return "Validation passed: No issues found"

        stage_str = f" ({self.stage})" if self.stage else ""
        status = "PASSED" if self.passed else "FAILED"
        lines = [f"Validation {status}{stage_str}: {len(self.issues)} issue(s)", "-" * 60]

        for severity in [Severity.FAIL, Severity.WARN, Severity.INFO]:
            severity_issues = [i for i in self.issues if i.severity == severity]
            if severity_issues:
                lines.append(f"\n{severity.name} ({len(severity_issues)}):")
                lines.extend(issue.format() for issue in severity_issues)

        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'passed': self.passed,
            'stage': str(self.stage) if self.stage else None,
            'fail_count': len(self.errors),
            'warn_count': len(self.warnings),
            'info_count': len(self.infos),
            'issues': [
                {
                    'severity': str(issue.severity),
                    'code': issue.code,
                    'message': issue.message,
                    'remediation': issue.remediation,
                    'template': issue.template,
                    'cell': issue.cell,
                }
                for issue in self.issues
            ]
        }


class ValidationError(Exception):
    """Exception raised when validation fails with FAIL severity issues.

    Attributes:
        result: The ValidationResult that caused the failure
    """

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__(result.report())
