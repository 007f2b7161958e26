"""
Violation Reporting
Perimeter

Turns violation lists into a human-readable report, and the exception that
boundary code raises when a contract rejects its input.
"""

from collections.abc import Iterable, Sequence

from models.contract import Violation


def format_violation(violation: Violation) -> str:
    """One report line: ``address.zip: does not match format``."""
    if violation.path:
        return f"{'.'.join(violation.path)}.{violation.field}: {violation.error}"
    return f"{violation.field}: {violation.error}"


def format_report(violations: Sequence[Violation]) -> str:
    """
    Build the multi-line report for a violation list.

    Example:
        Validation failed at perimeter with 2 violation(s):
          - email: does not match format
          - age: must be >= 0 (minimum value)
    """
    lines = [f"Validation failed at perimeter with {len(violations)} violation(s):"]
    lines.extend(f"  - {format_violation(v)}" for v in violations)
    return "\n".join(lines)


class ContractValidationError(Exception):
    """Raised at a guarded boundary when data fails its contract."""

    def __init__(self, violations: Iterable[Violation], contract: str = None):
        self.violations = list(violations)
        self.contract = contract
        self.message = format_report(self.violations)
        super().__init__(self.message)

    @property
    def fields(self) -> list[str]:
        """Qualified names of the offending fields, in report order."""
        return [v.qualified_name for v in self.violations]

    def to_dict(self) -> dict:
        return {
            "contract": self.contract,
            "message": self.message,
            "violations": [v.to_dict() for v in self.violations],
        }
