"""
Type Checking
Perimeter

Predicates deciding whether a runtime value is of a declared field type,
plus the type names used in violation messages. No coercion is ever done:
``"18"`` is a string, never an integer.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from models.contract import FieldKind, FieldType, ListOf


def _is_integer(value: Any) -> bool:
    # bool is a subclass of int but is its own type here
    return isinstance(value, int) and not isinstance(value, bool)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


_KIND_CHECKS = {
    FieldKind.STRING: lambda v: isinstance(v, str),
    FieldKind.INTEGER: _is_integer,
    FieldKind.FLOAT: lambda v: isinstance(v, float),
    FieldKind.BOOLEAN: lambda v: isinstance(v, bool),
    FieldKind.ATOM: lambda v: isinstance(v, Enum),
    FieldKind.MAP: lambda v: isinstance(v, Mapping),
    FieldKind.LIST: _is_sequence,
}


def check_type(field_type: FieldType, value: Any) -> bool:
    """
    Check whether ``value`` is of ``field_type``.

    For ``ListOf`` only the container is checked; item types are the
    engine's concern.
    """
    if isinstance(field_type, ListOf):
        return _is_sequence(value)

    check = _KIND_CHECKS.get(field_type) if isinstance(field_type, str) else None
    if check is None:
        return False
    return check(value)


def is_numeric(value: Any) -> bool:
    """True for ints and floats, False for bools."""
    return _is_integer(value) or isinstance(value, float)


def type_name(field_type: FieldType) -> str:
    """Name of a declared type, e.g. ``string`` or ``list of integer``."""
    if isinstance(field_type, ListOf):
        return f"list of {type_name(field_type.item)}"
    return str(field_type)


def value_type_name(value: Any) -> str:
    """Name of the runtime type of ``value`` in contract vocabulary."""
    # Order matters: bool before int, Enum before str (StrEnum members are strs)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, Enum):
        return "atom"
    if isinstance(value, str):
        return "string"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, Mapping):
        return "map"
    if _is_sequence(value):
        return "list"
    return "unknown"
