"""
Middleware Package
Perimeter

Boundary enforcement: the @guard decorator and the policy behind it.
"""

from middleware.guard import OWNER, guard, guarded_contract
from middleware.policy import GUARD_CHECKS_TOTAL, ContractPolicy

__all__ = [
    "guard",
    "guarded_contract",
    "OWNER",
    "ContractPolicy",
    "GUARD_CHECKS_TOTAL",
]
