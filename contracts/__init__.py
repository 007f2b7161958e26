"""
Contracts Module
Perimeter

Declarative contracts for data crossing a boundary, and the engine that
validates data against them.
"""

from .builder import defcontract, list_of, optional, required
from .constraints import check_constraint, check_constraints
from .loader import ContractDefinitionError, load_contracts
from .registry import (
    ContractNotFound,
    ContractRegistry,
    get_registry,
    lookup_contract,
    register,
    with_contracts,
)
from .report import ContractValidationError, format_report, format_violation
from .types import check_type
from .validator import CONTRACT_FIELD, ROOT_FIELD, validate, validate_fields

__all__ = [
    # Engine
    "validate",
    "validate_fields",
    "check_type",
    "check_constraint",
    "check_constraints",
    "CONTRACT_FIELD",
    "ROOT_FIELD",

    # Reporting
    "format_report",
    "format_violation",
    "ContractValidationError",

    # Authoring
    "defcontract",
    "required",
    "optional",
    "list_of",
    "load_contracts",
    "ContractDefinitionError",

    # Lookup
    "ContractRegistry",
    "ContractNotFound",
    "lookup_contract",
    "get_registry",
    "register",
    "with_contracts",
]
