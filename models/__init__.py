"""
Models Package
Perimeter

Pydantic models for contracts, constraints and validation results.
"""

from models.contract import (
    NUMERIC_CONSTRAINTS,
    STRING_CONSTRAINTS,
    Constraint,
    Contract,
    ContractField,
    FieldKind,
    FieldType,
    Format,
    ListOf,
    Max,
    MaxLength,
    Min,
    MinLength,
    OneOf,
    ValidationResult,
    Violation,
)

__all__ = [
    # Types
    "FieldKind",
    "FieldType",
    "ListOf",

    # Constraints
    "Constraint",
    "Format",
    "MinLength",
    "MaxLength",
    "Min",
    "Max",
    "OneOf",
    "STRING_CONSTRAINTS",
    "NUMERIC_CONSTRAINTS",

    # Contracts
    "ContractField",
    "Contract",

    # Results
    "Violation",
    "ValidationResult",
]
