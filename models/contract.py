"""
Contract Models
Perimeter

Pydantic models describing contracts, their fields and constraints, and the
results produced when data is validated against them.

Every model here is frozen: contracts are built once and read for the
lifetime of the process.
"""

import re
from collections.abc import Iterable
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# =============================================================================
# FIELD TYPES
# =============================================================================

class FieldKind(StrEnum):
    """Scalar and container kinds a contract field can declare."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    ATOM = "atom"
    MAP = "map"
    LIST = "list"


class ListOf(BaseModel):
    """A list whose items must all be of ``item`` type."""

    model_config = ConfigDict(frozen=True)

    item: "FieldKind | ListOf"

    def __str__(self) -> str:
        return f"list of {self.item}"


FieldType = FieldKind | ListOf


# =============================================================================
# CONSTRAINTS
# =============================================================================

class Format(BaseModel):
    """String must contain a match for ``pattern``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["format"] = "format"
    pattern: re.Pattern


class MinLength(BaseModel):
    """String must be at least ``value`` characters long."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["min_length"] = "min_length"
    value: int = Field(..., ge=0)


class MaxLength(BaseModel):
    """String must be at most ``value`` characters long."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["max_length"] = "max_length"
    value: int = Field(..., ge=0)


class Min(BaseModel):
    """Number must be greater than or equal to ``value``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["min"] = "min"
    value: int | float


class Max(BaseModel):
    """Number must be less than or equal to ``value``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["max"] = "max"
    value: int | float


class OneOf(BaseModel):
    """Value must equal one of ``values``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["one_of"] = "one_of"
    values: tuple[Any, ...]


Constraint = Annotated[
    Format | MinLength | MaxLength | Min | Max | OneOf,
    Field(discriminator="kind"),
]

# Constraint kinds that only ever act on strings / numbers
STRING_CONSTRAINTS = frozenset({"format", "min_length", "max_length"})
NUMERIC_CONSTRAINTS = frozenset({"min", "max"})


# =============================================================================
# FIELDS AND CONTRACTS
# =============================================================================

def _ensure_unique_names(fields: Iterable["ContractField"]) -> None:
    seen: set[str] = set()
    for contract_field in fields:
        if contract_field.name in seen:
            raise ValueError(f"duplicate field name: {contract_field.name}")
        seen.add(contract_field.name)


class ContractField(BaseModel):
    """One named entry in a contract (or in a nested map's field list)."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    type: FieldType
    required: bool = False
    constraints: tuple[Constraint, ...] = ()
    nested_fields: tuple["ContractField", ...] | None = Field(
        default=None, description="Shape of a map field; None for every other type"
    )

    @field_validator("nested_fields")
    @classmethod
    def unique_nested_names(cls, v):
        if v is not None:
            _ensure_unique_names(v)
        return v

    @model_validator(mode="after")
    def nested_fields_only_on_maps(self):
        if self.nested_fields is not None and self.type != FieldKind.MAP:
            raise ValueError(
                f"field '{self.name}' of type {self.type} cannot declare nested fields"
            )
        return self


class Contract(BaseModel):
    """A named, ordered list of fields."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    fields: tuple[ContractField, ...] = ()

    @field_validator("fields")
    @classmethod
    def unique_field_names(cls, v):
        _ensure_unique_names(v)
        return v

    def field_names(self) -> list[str]:
        """Top-level field names in declaration order."""
        return [f.name for f in self.fields]


# =============================================================================
# VALIDATION RESULTS
# =============================================================================

class Violation(BaseModel):
    """One way in which data failed to satisfy a contract."""

    model_config = ConfigDict(frozen=True)

    field: str
    error: str
    path: tuple[str, ...] = ()

    @property
    def qualified_name(self) -> str:
        """Dot-joined path ending in the field name, e.g. ``address.zip``."""
        return ".".join((*self.path, self.field))

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


class ValidationResult(BaseModel):
    """
    Outcome of validating one value against one contract.

    Either ``valid`` with ``data`` being the exact object that was validated,
    or not valid with a non-empty, ordered tuple of violations.
    """

    model_config = ConfigDict(frozen=True)

    valid: bool
    data: Any = None
    violations: tuple[Violation, ...] = ()

    @model_validator(mode="after")
    def violations_match_outcome(self):
        if self.valid and self.violations:
            raise ValueError("a valid result cannot carry violations")
        if not self.valid and not self.violations:
            raise ValueError("an error result needs at least one violation")
        return self

    @classmethod
    def ok(cls, data: Any) -> "ValidationResult":
        return cls(valid=True, data=data)

    @classmethod
    def error(cls, violations: Iterable[Violation]) -> "ValidationResult":
        return cls(valid=False, violations=tuple(violations))
