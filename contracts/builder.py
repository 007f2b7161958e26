"""
Contract Builder
Perimeter

Plain-function API for declaring contracts in code.

    CREATE_USER = defcontract(
        "create_user",
        required("email", "string", format=r"@"),
        required("password", "string", min_length=12),
        optional("name", "string", max_length=100),
        optional("address", "map", fields=[
            required("city", "string"),
            required("zip", "string", format=r"^\\d{5}$"),
        ]),
        optional("tags", list_of("string")),
    )

Constraint keywords are applied in the order they are written, which is
also the order their violations are reported in.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any

from contracts.registry import ContractRegistry
from contracts.types import type_name
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
)

logger = logging.getLogger(__name__)

CONSTRAINT_BUILDERS: dict[str, Callable[[Any], Constraint]] = {
    "format": lambda v: Format(pattern=v),
    "min_length": lambda v: MinLength(value=v),
    "max_length": lambda v: MaxLength(value=v),
    "min": lambda v: Min(value=v),
    "max": lambda v: Max(value=v),
    "one_of": lambda v: OneOf(values=tuple(v)),
}

# ``in`` is a keyword in Python
CONSTRAINT_ALIASES = {"in_": "one_of"}


def field_type_from(declared: Any) -> FieldType:
    """
    Normalize a declared field type.

    Accepts a FieldKind, its string value (``"string"``), a ListOf, or a
    ``("list", item)`` pair.
    """
    if isinstance(declared, (FieldKind, ListOf)):
        return declared
    if isinstance(declared, str):
        try:
            return FieldKind(declared)
        except ValueError:
            raise ValueError(f"unknown field type: {declared!r}") from None
    if isinstance(declared, tuple) and len(declared) == 2 and declared[0] == FieldKind.LIST:
        return ListOf(item=field_type_from(declared[1]))
    raise TypeError(f"unsupported field type: {declared!r}")


def list_of(item: Any) -> ListOf:
    """Typed list, e.g. ``list_of("string")`` or ``list_of(list_of("integer"))``."""
    return ListOf(item=field_type_from(item))


def build_constraint(keyword: str, value: Any) -> Constraint:
    """Build one constraint from its keyword form."""
    keyword = CONSTRAINT_ALIASES.get(keyword, keyword)
    builder = CONSTRAINT_BUILDERS.get(keyword)
    if builder is None:
        raise TypeError(f"unknown constraint: {keyword}")
    return builder(value)


def inapplicable_constraints(field_type: FieldType, constraints: Iterable[Constraint]) -> list[str]:
    """Kinds of the constraints that can never act on values of ``field_type``."""
    inapplicable = []
    for constraint in constraints:
        if constraint.kind in STRING_CONSTRAINTS and field_type != FieldKind.STRING:
            inapplicable.append(constraint.kind)
        elif constraint.kind in NUMERIC_CONSTRAINTS and field_type not in (
            FieldKind.INTEGER,
            FieldKind.FLOAT,
        ):
            inapplicable.append(constraint.kind)
    return inapplicable


def warn_inapplicable(contract_field: ContractField) -> None:
    """
    Log a warning for constraints that will silently pass at validation time.

    Such constraints are kept (validation treats them as a pass), but they
    usually point at a mistake in the contract.
    """
    for kind in inapplicable_constraints(contract_field.type, contract_field.constraints):
        logger.warning(
            f"constraint {kind} has no effect on {type_name(contract_field.type)} "
            f"field {contract_field.name}"
        )


def _build_field(
    name: str,
    field_type: Any,
    is_required: bool,
    fields: Iterable[ContractField] | None,
    constraints: dict[str, Any],
) -> ContractField:
    resolved = field_type_from(field_type)

    if fields is not None and resolved != FieldKind.MAP:
        raise ValueError(
            f"field '{name}' of type {type_name(resolved)} cannot declare nested fields"
        )

    contract_field = ContractField(
        name=name,
        type=resolved,
        required=is_required,
        constraints=tuple(build_constraint(k, v) for k, v in constraints.items()),
        nested_fields=tuple(fields) if fields is not None else None,
    )
    warn_inapplicable(contract_field)
    return contract_field


def required(
    name: str,
    field_type: Any,
    *,
    fields: Iterable[ContractField] | None = None,
    **constraints: Any,
) -> ContractField:
    """Declare a field that must be present."""
    return _build_field(name, field_type, True, fields, constraints)


def optional(
    name: str,
    field_type: Any,
    *,
    fields: Iterable[ContractField] | None = None,
    **constraints: Any,
) -> ContractField:
    """Declare a field that may be absent; when present it is fully checked."""
    return _build_field(name, field_type, False, fields, constraints)


def defcontract(
    name: str,
    *fields: ContractField,
    registry: ContractRegistry | None = None,
) -> Contract:
    """Build a contract, optionally registering it."""
    contract = Contract(name=name, fields=fields)
    if registry is not None:
        registry.register(contract)
    return contract
