"""
Constraint Checking
Perimeter

Checks a single value against the constraints declared on a field.

Each constraint kind has one checker, registered in a dispatch table with
``@checks``. A checker returns ``None`` when the value passes and the
violation message when it does not. Constraints that do not apply to the
value's runtime type (``min_length`` on an integer, ``min`` on a string)
pass without being evaluated.
"""

from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any

import regex

from contracts.types import is_numeric
from models.contract import Constraint, Format, Max, MaxLength, Min, MinLength, OneOf

Checker = Callable[[Any, Any], str | None]

_CHECKERS: dict[type, Checker] = {}

GRAPHEME = regex.compile(r"\X")


def checks(constraint_type: type) -> Callable[[Checker], Checker]:
    """Register the decorated function as the checker for ``constraint_type``."""
    def decorator(func: Checker) -> Checker:
        _CHECKERS[constraint_type] = func
        return func
    return decorator


def _char_length(value: str) -> int:
    # Grapheme clusters: a flag or a ZWJ emoji sequence is one character
    return len(GRAPHEME.findall(value))


def format_value(value: Any) -> str:
    """Render a configured value for a message, e.g. ``'active'`` or ``Role.ADMIN``."""
    if isinstance(value, Enum):
        return f"{type(value).__name__}.{value.name}"
    return repr(value)


# =============================================================================
# STRING CONSTRAINTS
# =============================================================================

@checks(Format)
def _check_format(constraint: Format, value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    if constraint.pattern.search(value):
        return None
    return "does not match format"


@checks(MinLength)
def _check_min_length(constraint: MinLength, value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    if _char_length(value) >= constraint.value:
        return None
    return f"must be at least {constraint.value} characters (minimum length)"


@checks(MaxLength)
def _check_max_length(constraint: MaxLength, value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    if _char_length(value) <= constraint.value:
        return None
    return f"must be at most {constraint.value} characters (maximum length)"


# =============================================================================
# NUMERIC CONSTRAINTS
# =============================================================================

@checks(Min)
def _check_min(constraint: Min, value: Any) -> str | None:
    if not is_numeric(value):
        return None
    if value >= constraint.value:
        return None
    return f"must be >= {constraint.value} (minimum value)"


@checks(Max)
def _check_max(constraint: Max, value: Any) -> str | None:
    if not is_numeric(value):
        return None
    if value <= constraint.value:
        return None
    return f"must be <= {constraint.value} (maximum value)"


# =============================================================================
# ENUMERATION
# =============================================================================

@checks(OneOf)
def _check_one_of(constraint: OneOf, value: Any) -> str | None:
    # Matching is type-strict: True never equals 1, 1.0 never equals 1
    if any(type(v) is type(value) and v == value for v in constraint.values):
        return None
    allowed = ", ".join(format_value(v) for v in constraint.values)
    return f"must be one of: {allowed}"


# =============================================================================
# DISPATCH
# =============================================================================

def check_constraint(constraint: Constraint, value: Any) -> str | None:
    """Return the violation message for ``value``, or ``None`` if it passes."""
    checker = _CHECKERS.get(type(constraint))
    if checker is None:
        return None
    return checker(constraint, value)


def check_constraints(constraints: Iterable[Constraint], value: Any) -> list[str]:
    """Evaluate every constraint independently; messages come back in declared order."""
    messages = []
    for constraint in constraints:
        message = check_constraint(constraint, value)
        if message is not None:
            messages.append(message)
    return messages
