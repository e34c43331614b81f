"""
Core TypeDef representation for tern.

Provides the TypeDef dataclass, its constructors, and the error context
protocol every combinator uses to build nested messages.
"""

from __future__ import annotations

import inspect
import json
import logging
from dataclasses import dataclass
from pprint import pformat
from typing import Any, Iterable

from .types import PredicateFn, Verifier

logger = logging.getLogger(__name__)


class TypeCheckError(ValueError):
    """Raised by check() when a value does not conform to a TypeDef."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True, slots=True)
class TypeDef:
    """
    Immutable type definition.

    Pairs a human readable name with a verification function. The verifier
    returns None when the value conforms, or an error message otherwise.
    """

    name: str
    verify: Verifier

    def __post_init__(self) -> None:
        if not isinstance(self.name, str):
            raise TypeError(
                f"TypeDef name must be a string, got {type(self.name).__name__}"
            )
        if not self.name:
            raise ValueError("TypeDef name must not be empty")
        if not callable(self.verify):
            raise TypeError(f"Verifier for type '{self.name}' is not callable")
        if not accepts_one_argument(self.verify):
            raise TypeError(
                f"Verifier for type '{self.name}' must accept exactly one argument"
            )

    def check(self, value: Any) -> Any:
        """
        Verify a value, raising on failure.

        Returns:
            The value unchanged if it conforms

        Raises:
            TypeCheckError: carrying the message verify() returned
        """
        error = self.verify(value)
        if error is None:
            return value
        logger.debug("Type check failed for '%s'", self.name)
        raise TypeCheckError(error)

    def is_valid(self, value: Any) -> bool:
        return self.verify(value) is None


def accepts_one_argument(fn: Any) -> bool:
    """Check whether fn can be called with a single positional argument."""
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        # Some builtins expose no signature
        return True
    try:
        signature.bind(None)
    except TypeError:
        return False
    return True


def typedef(name: str, verify: Verifier) -> TypeDef:
    """
    Declare a type from a verifier returning None or an error message.

    Usage:
        Positive = typedef("positive", lambda v: None if v > 0 else "not positive")
    """
    return TypeDef(name=name, verify=verify)


def from_predicate(name: str, predicate: PredicateFn) -> TypeDef:
    """
    Declare a type from a boolean predicate.

    A failing predicate produces the generic type mismatch message.

    Usage:
        Even = from_predicate("even", lambda v: isinstance(v, int) and v % 2 == 0)
    """
    if not callable(predicate):
        raise TypeError(f"Predicate for type '{name}' is not callable")

    def verify(value: Any) -> str | None:
        return None if predicate(value) else type_error(name, value)

    return TypeDef(name=name, verify=verify)


def is_typedef(value: Any) -> bool:
    """Check whether a value is a well-formed TypeDef."""
    return isinstance(value, TypeDef)


def require_typedef(value: Any, what: str) -> TypeDef:
    """Return value if it is a TypeDef, else raise a construction-time TypeError."""
    if not is_typedef(value):
        raise TypeError(f"{what} must be a TypeDef, got {type(value).__name__}")
    return value


def type_of(value: Any) -> str:
    return type(value).__name__


def pretty(value: Any) -> str:
    """Render a value for an error message. Never raises."""
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    try:
        return pformat(value, sort_dicts=False)
    except Exception:
        return object.__repr__(value)


def type_error(name: str, value: Any) -> str:
    return (
        f"Expected type '{name}' but value '{pretty(value)}' "
        f"is of type '{type_of(value)}'"
    )


def add_error_context(context: str, error: str | None) -> str | None:
    """Prefix an error with a context segment, passing None through."""
    if error is None:
        return None
    return f"{context}: {error}"


def first_error(verify: Verifier, values: Iterable[Any]) -> str | None:
    """
    Return the first error verify() produces over values, or None.

    The success path only tests each value. Messages are looked up in a
    second pass once a failure is known to exist.
    """
    values = list(values)
    if all(verify(v) is None for v in values):
        return None
    for v in values:
        error = verify(v)
        if error is not None:
            return error
    return None
