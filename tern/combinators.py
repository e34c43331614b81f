"""
Polymorphic types for tern.

Provides factory functions that build compound TypeDefs from existing ones.
Each layer prepends one context segment to the errors of its children.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from .core import (
    TypeDef,
    add_error_context,
    first_error,
    pretty,
    require_typedef,
    type_error,
)
from .primitives import Attrs
from .primitives import List as ListType


def Option(t: TypeDef) -> TypeDef:
    """
    Accept None, otherwise verify against t.

    Usage:
        Option(String)      # None or a string
    """
    require_typedef(t, "Option() argument")
    name = f"option<{t.name}>"
    context = f"in {name}"
    verify = t.verify

    def check(value: Any) -> str | None:
        if value is None:
            return None
        return add_error_context(context, verify(value))

    return TypeDef(name=name, verify=check)


def ListOf(t: TypeDef) -> TypeDef:
    """
    A list (or tuple) whose every element conforms to t.

    The first failing element, in sequence order, is reported.

    Usage:
        ListOf(Int)
        ListOf(ListOf(String))
    """
    require_typedef(t, "ListOf() argument")
    name = f"listOf<{t.name}>"
    context = f"in {name} element"
    verify = t.verify

    def check(value: Any) -> str | None:
        if not ListType.is_valid(value):
            return type_error(name, value)
        return add_error_context(context, first_error(verify, value))

    return TypeDef(name=name, verify=check)


def AttrsOf(t: TypeDef) -> TypeDef:
    """
    A mapping whose every value conforms to t. Keys are not checked.

    Usage:
        AttrsOf(Number)     # {"cpu": 2, "mem": 0.5}
    """
    require_typedef(t, "AttrsOf() argument")
    name = f"attrsOf<{t.name}>"
    context = f"in {name} value"
    verify = t.verify

    def check(value: Any) -> str | None:
        if not Attrs.is_valid(value):
            return type_error(name, value)
        return add_error_context(context, first_error(verify, value.values()))

    return TypeDef(name=name, verify=check)


def Union(types: Sequence[TypeDef]) -> TypeDef:
    """
    Accept a value matching any of types.

    Members are tried in order and the first match wins. Member errors are
    not reported, only that none matched. An empty union accepts nothing.

    Usage:
        Union([Int, String])
    """
    if not isinstance(types, (list, tuple)):
        raise TypeError(
            f"Union() expects a list of TypeDefs, got {type(types).__name__}"
        )
    for i, t in enumerate(types):
        require_typedef(t, f"Union() member {i}")

    name = f"union<{','.join(t.name for t in types)}>"
    verifiers = tuple(t.verify for t in types)

    def check(value: Any) -> str | None:
        if any(verify(value) is None for verify in verifiers):
            return None
        return type_error(name, value)

    return TypeDef(name=name, verify=check)


def _same_member(a: Any, b: Any) -> bool:
    # True and 1 are different members
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    return a == b


@dataclass(frozen=True, slots=True)
class EnumDef(TypeDef):
    """TypeDef accepting only the listed literal values."""

    elems: tuple[Any, ...] = ()


def Enum(name: str, elems: Sequence[Any] | set | frozenset) -> EnumDef:
    """
    Accept only values equal to one of elems.

    Usage:
        Enum("color", ["red", "green", "blue"])
    """
    if not isinstance(elems, (list, tuple, set, frozenset)):
        raise TypeError(
            f"Enum() expects a list of members, got {type(elems).__name__}"
        )
    if len(elems) == 0:
        raise ValueError(f"Enum '{name}' must have at least one member")
    members = tuple(elems)

    def check(value: Any) -> str | None:
        if any(_same_member(value, e) for e in members):
            return None
        return f"'{pretty(value)}' is not a member of enum '{name}'"

    return EnumDef(name=name, verify=check, elems=members)
