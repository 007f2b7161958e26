"""
Contract Registry
Perimeter

Holds named contracts and resolves a contract name against an owner.

An owner is anything contracts can be attached to:
- a ContractRegistry
- a class or module with a ``__contracts__`` attribute (registry or mapping)
- a plain mapping of name -> Contract
"""

import logging
import threading
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any, TypeVar

from models.contract import Contract

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ContractNotFound(KeyError):
    """Raised when a contract name does not resolve against its owner."""

    def __init__(self, name: str, owner: Any = None):
        self.name = name
        self.owner = owner
        super().__init__(name)

    def __str__(self) -> str:
        return f"contract {self.name} not found"


class ContractRegistry:
    """
    Name -> Contract store, iterated in registration order.

    Registration normally happens once at import or configuration time;
    lookups afterwards are plain dict reads.
    """

    def __init__(self, contracts: Iterable[Contract] = ()):
        self._contracts: dict[str, Contract] = {}
        self._lock = threading.Lock()
        for contract in contracts:
            self.register(contract)

    def register(self, contract: Contract, replace: bool = False) -> Contract:
        """Add a contract. Re-registering a name requires ``replace=True``."""
        if not isinstance(contract, Contract):
            raise TypeError(f"expected Contract, got {type(contract).__name__}")

        with self._lock:
            if contract.name in self._contracts and not replace:
                raise ValueError(f"contract {contract.name} is already registered")
            self._contracts[contract.name] = contract

        logger.debug(f"Registered contract {contract.name} ({len(contract.fields)} fields)")
        return contract

    def extend(self, contracts: Iterable[Contract], replace: bool = False) -> None:
        """Register several contracts."""
        for contract in contracts:
            self.register(contract, replace=replace)

    def get(self, name: str) -> Contract | None:
        """Look up a contract, returning None when unknown."""
        return self._contracts.get(name)

    def require(self, name: str) -> Contract:
        """Look up a contract, raising ContractNotFound when unknown."""
        contract = self._contracts.get(name)
        if contract is None:
            raise ContractNotFound(name, owner=self)
        return contract

    def names(self) -> list[str]:
        return list(self._contracts)

    def clear(self) -> None:
        with self._lock:
            self._contracts.clear()

    def __getitem__(self, name: str) -> Contract:
        return self.require(name)

    def __contains__(self, name: object) -> bool:
        return name in self._contracts

    def __iter__(self) -> Iterator[Contract]:
        return iter(list(self._contracts.values()))

    def __len__(self) -> int:
        return len(self._contracts)

    def __repr__(self) -> str:
        return f"ContractRegistry({self.names()!r})"


def lookup_contract(owner: Any, name: str) -> Contract | None:
    """
    Resolve ``name`` against ``owner``.

    Returns None for unknown names and for owners that hold no contracts;
    it never raises.
    """
    if not isinstance(name, str):
        return None

    if isinstance(owner, ContractRegistry):
        return owner.get(name)

    contracts = getattr(owner, "__contracts__", None)
    if contracts is None and isinstance(owner, Mapping):
        contracts = owner

    if isinstance(contracts, ContractRegistry):
        return contracts.get(name)

    if isinstance(contracts, Mapping):
        contract = contracts.get(name)
        return contract if isinstance(contract, Contract) else None

    return None


def with_contracts(*contracts: Contract) -> Callable[[T], T]:
    """
    Class decorator attaching contracts to the class as ``__contracts__``.

    Subclasses get their own registry seeded with the inherited contracts,
    so decorating a subclass never changes its parent.

    Usage:
        @with_contracts(CREATE_USER, UPDATE_USER)
        class Accounts:
            ...
    """
    def decorator(owner: T) -> T:
        own = vars(owner).get("__contracts__")
        if not isinstance(own, ContractRegistry):
            inherited = getattr(owner, "__contracts__", None)
            own = ContractRegistry(inherited if isinstance(inherited, ContractRegistry) else ())
            owner.__contracts__ = own
        own.extend(contracts)
        return owner
    return decorator


# Global registry instance
_registry: ContractRegistry | None = None


def get_registry() -> ContractRegistry:
    """Get the process-wide registry."""
    global _registry
    if _registry is None:
        _registry = ContractRegistry()
    return _registry


def register(contract: Contract, replace: bool = False) -> Contract:
    """Register a contract in the process-wide registry."""
    return get_registry().register(contract, replace=replace)
