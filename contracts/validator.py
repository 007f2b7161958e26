"""
Contract Validator
Perimeter

Validation engine: walks a contract's fields against a data mapping and
collects every violation, not just the first.

    result = validate(registry, "create_user", {"email": "invalid", "age": -1})
    result.valid        # False
    result.violations   # (Violation(field='email', error='does not match format', path=()),
                        #  Violation(field='age', error='must be >= 0 (minimum value)', path=()))

Ordering is deterministic: fields are visited in declaration order, and
within a field the type violation comes first, otherwise every failing
constraint in declared order, otherwise nested violations in traversal order.
A type mismatch stops further checks for that field only.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from contracts.constraints import check_constraints
from contracts.registry import lookup_contract
from contracts.types import check_type, type_name, value_type_name
from models.contract import ContractField, FieldKind, ListOf, ValidationResult, Violation

logger = logging.getLogger(__name__)

# Pseudo field names for failures that are not about a declared field
CONTRACT_FIELD = "_contract"
ROOT_FIELD = "_root"


def validate(contract_source: Any, contract_name: str, data: Any) -> ValidationResult:
    """
    Validate ``data`` against the contract ``contract_name`` held by ``contract_source``.

    Args:
        contract_source: Registry, class, module or mapping holding contracts
        contract_name: Name of the contract to validate against
        data: Value to validate; expected to be a mapping

    Returns:
        ValidationResult.ok(data) with the very same object, or
        ValidationResult.error(violations) with at least one violation.
        An unknown contract name yields a single ``_contract`` violation and
        non-mapping data a single ``_root`` violation.
    """
    contract = lookup_contract(contract_source, contract_name)
    if contract is None:
        return ValidationResult.error([
            Violation(field=CONTRACT_FIELD, error=f"contract {contract_name} not found")
        ])

    if not isinstance(data, Mapping):
        return ValidationResult.error([
            Violation(field=ROOT_FIELD, error=f"expected map, got {value_type_name(data)}")
        ])

    violations = validate_fields(contract.fields, data)

    if violations:
        logger.debug(
            f"Contract {contract_name} rejected data with {len(violations)} violation(s)"
        )
        return ValidationResult.error(violations)

    return ValidationResult.ok(data)


def validate_fields(
    fields: Iterable[ContractField],
    data: Mapping,
    path: tuple[str, ...] = (),
) -> list[Violation]:
    """Validate one level of fields; nested violations are already path-qualified."""
    violations: list[Violation] = []
    for contract_field in fields:
        violations.extend(validate_field(contract_field, data, path))
    return violations


def validate_field(
    contract_field: ContractField,
    data: Mapping,
    path: tuple[str, ...] = (),
) -> list[Violation]:
    """Validate a single field of ``data``."""
    name = contract_field.name

    if name not in data:
        if contract_field.required:
            return [Violation(field=name, error="is required", path=path)]
        return []

    value = data[name]

    if not check_type(contract_field.type, value):
        expected = type_name(contract_field.type)
        actual = value_type_name(value)
        return [Violation(field=name, error=f"expected {expected}, got {actual}", path=path)]

    messages = check_constraints(contract_field.constraints, value)
    if messages:
        return [Violation(field=name, error=message, path=path) for message in messages]

    return _validate_nested(contract_field, value, path)


def _validate_nested(
    contract_field: ContractField,
    value: Any,
    path: tuple[str, ...],
) -> list[Violation]:
    """Recurse into map fields; check item types of typed lists."""
    field_type = contract_field.type

    if field_type == FieldKind.MAP and contract_field.nested_fields is not None:
        return validate_fields(contract_field.nested_fields, value, (*path, contract_field.name))

    if isinstance(field_type, ListOf):
        # Item types only; per-item constraints and shapes are not supported
        expected = type_name(field_type.item)
        return [
            Violation(
                field=contract_field.name,
                error=f"invalid list item: expected {expected}, got {value_type_name(item)}",
                path=path,
            )
            for item in value
            if not check_type(field_type.item, item)
        ]

    return []
