"""
Contract Policy
Perimeter

Decides what happens at a boundary when data fails its contract.

- strict: raise ContractValidationError; the guarded call never runs
- lenient: log a warning with the full report and let the data through

Every decision is counted in ``perimeter_guard_checks_total``.
"""

import logging
from typing import Any

from prometheus_client import Counter

from common.config import get_settings
from common.structured_logging import log_with_fields
from contracts.registry import get_registry
from contracts.report import ContractValidationError, format_report
from contracts.validator import validate

logger = logging.getLogger(__name__)

GUARD_CHECKS_TOTAL = Counter(
    "perimeter_guard_checks_total",
    "Contract checks at guarded boundaries by contract and outcome",
    ["contract", "outcome"],
)


class ContractPolicy:
    """
    Contract enforcement for one boundary.

    Args:
        strict: Raise on violations; defaults to the ``guard_strict`` setting
        source: Where contracts are looked up; defaults to the process-wide registry
    """

    def __init__(self, strict: bool | None = None, source: Any = None):
        self.strict = get_settings().guard_strict if strict is None else strict
        self.source = source

    def enforce(self, contract_name: str, data: Any, target: str | None = None) -> Any:
        """
        Validate ``data`` and apply the policy.

        Returns the data to proceed with (always the object passed in).
        Raises ContractValidationError in strict mode when validation fails.
        """
        source = self.source if self.source is not None else get_registry()
        result = validate(source, contract_name, data)

        if result.valid:
            GUARD_CHECKS_TOTAL.labels(contract=contract_name, outcome="passed").inc()
            return result.data

        if self.strict:
            GUARD_CHECKS_TOTAL.labels(contract=contract_name, outcome="rejected").inc()
            log_with_fields(
                logger, logging.INFO,
                f"Contract {contract_name} rejected input",
                contract=contract_name,
                target=target,
                violations=len(result.violations),
            )
            raise ContractValidationError(result.violations, contract=contract_name)

        GUARD_CHECKS_TOTAL.labels(contract=contract_name, outcome="warned").inc()
        log_with_fields(
            logger, logging.WARNING,
            f"Contract {contract_name} violated (not enforced)\n"
            f"{format_report(result.violations)}",
            contract=contract_name,
            target=target,
            violations=len(result.violations),
        )
        return data
