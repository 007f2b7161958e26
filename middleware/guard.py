"""
Guard Decorator
Perimeter

Validates a function's input against a contract before the function runs.

    @guard("create_user")
    def create_user(params: dict) -> dict:
        ...  # params already satisfied the contract

Works on plain functions, methods and coroutine functions. By default the
first parameter other than ``self``/``cls`` is validated and contracts are
looked up in the process-wide registry.
"""

import functools
import inspect
import logging
import sys
from collections.abc import Callable
from typing import Any, TypeVar

from middleware.policy import ContractPolicy

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Look contracts up on the guarded function's owner: the bound instance or
# class for methods, the defining module for plain functions
OWNER = object()

_RECEIVER_NAMES = ("self", "cls")

_ARGUMENT_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY,
)


def _default_argument(signature: inspect.Signature, func: Callable) -> str:
    for name, parameter in signature.parameters.items():
        if name in _RECEIVER_NAMES:
            continue
        if parameter.kind in _ARGUMENT_KINDS:
            return name
    raise TypeError(f"{func.__qualname__} has no parameter to guard")


def _resolve_owner(func: Callable, arguments: dict) -> Any:
    for name in _RECEIVER_NAMES:
        if name in arguments:
            return arguments[name]
    return sys.modules.get(func.__module__)


def guard(
    contract_name: str,
    *,
    source: Any = None,
    arg: str | None = None,
    strict: bool | None = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Enforce ``contract_name`` on one argument of the decorated function.

    Args:
        contract_name: Contract the argument must satisfy
        source: Contract source (registry, class, module, mapping), OWNER,
            or None for the process-wide registry
        arg: Name of the parameter to validate
        strict: Raise on violations (default from settings); when False,
            violations are logged and the call proceeds

    Raises:
        TypeError: At decoration time, if ``arg`` is not a parameter
        ContractValidationError: At call time, in strict mode, on violations
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        signature = inspect.signature(func)
        param = arg or _default_argument(signature, func)

        if param not in signature.parameters:
            raise TypeError(f"{func.__qualname__} has no parameter named '{param}'")

        target = f"{func.__module__}.{func.__qualname__}"

        def check(args: tuple, kwargs: dict) -> tuple[tuple, dict]:
            bound = signature.bind(*args, **kwargs)
            bound.apply_defaults()

            contract_source = source
            if source is OWNER:
                contract_source = _resolve_owner(func, bound.arguments)

            policy = ContractPolicy(strict=strict, source=contract_source)
            bound.arguments[param] = policy.enforce(
                contract_name, bound.arguments[param], target=target
            )
            return bound.args, bound.kwargs

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                args, kwargs = check(args, kwargs)
                return await func(*args, **kwargs)

            wrapper = async_wrapper
        else:
            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                args, kwargs = check(args, kwargs)
                return func(*args, **kwargs)

        wrapper.__guard_contract__ = contract_name
        logger.debug(f"Guarding {target} with contract {contract_name}")
        return wrapper

    return decorator


def guarded_contract(func: Callable) -> str | None:
    """Contract name enforced on ``func`` by @guard, or None if unguarded."""
    return getattr(func, "__guard_contract__", None)
