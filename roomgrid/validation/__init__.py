"""
Validation package for room grid layouts.

Public API:
    - ValidationResult, ValidationIssue, Severity: Core result types
    - ValidationStage: Stage enumeration (catalog, placement)
    - LayoutValidator: Runs catalog and layout checks
    - get_validator(): Get configured validator instance
    - ValidationError: Exception carrying a failed ValidationResult
"""

from .core import (
    Severity,
    ValidationStage,
    ValidationIssue,
    ValidationResult,
    ValidationError,
)
from .rules import ValidationRule, RULES, get_rule
from .unified_validator import LayoutValidator, get_validator, reset_validator

__all__ = [
    # Core types
    'Severity',
    'ValidationStage',
    'ValidationIssue',
    'ValidationResult',
    'ValidationError',
    # Rules
    'ValidationRule',
    'RULES',
    'get_rule',
    # Validator
    'LayoutValidator',
    'get_validator',
    'reset_validator',
]
