"""
Struct types for tern.

A struct is a mapping with a fixed set of declared members, each with its own
TypeDef, plus policy knobs that can be overridden after construction:

- total: every declared member must be present (default True)
- unknown: undeclared keys are allowed (default True)
- extra: custom invariant over the whole value, run last (default None)

Usage:
    Point = Struct("point", {"x": Int, "y": Int})
    Point.verify({"x": 1, "y": 2})                      # None

    Partial = Point.override(total=False)
    Partial.verify({"x": 1})                             # None

    Strict = Point.override(unknown=False)
    Strict.verify({"x": 1, "y": 2, "z": 3})
    # "in struct 'point': keys ['z'] are unrecognized, expected keys are ['x', 'y']"
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable, Optional

from pydantic import BaseModel, ConfigDict, StrictBool, field_validator

from .core import (
    TypeDef,
    accepts_one_argument,
    add_error_context,
    first_error,
    require_typedef,
    type_error,
)
from .primitives import Attrs

logger = logging.getLogger(__name__)


class StructPolicy(BaseModel):
    """Overridable verification policy of a struct."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    total: StrictBool = True
    unknown: StrictBool = True
    extra: Optional[Callable[[Any], Optional[str]]] = None

    @field_validator("extra")
    @classmethod
    def check_extra_signature(cls, v: Any) -> Any:
        if v is not None and not accepts_one_argument(v):
            raise ValueError("extra must accept exactly one argument")
        return v


@dataclass(frozen=True, slots=True)
class StructDef(TypeDef):
    """TypeDef for a struct, carrying its members and policy."""

    members: Mapping[str, TypeDef] = field(compare=False)
    policy: StructPolicy = field(compare=False)

    def override(self, **knobs: Any) -> StructDef:
        """
        Return a copy of this struct with some policy knobs replaced.

        Knobs not given keep their current value. This struct is unchanged.

        Raises:
            pydantic.ValidationError: on an unknown knob or a badly typed value
        """
        policy = StructPolicy.model_validate({**dict(self.policy), **knobs})
        logger.debug(
            "Overriding struct '%s' policy: total=%s unknown=%s extra=%s",
            self.name,
            policy.total,
            policy.unknown,
            policy.extra is not None,
        )
        return _build_struct(self.name, self.members, policy)


def Struct(
    name: str,
    members: Mapping[str, TypeDef],
    *,
    total: bool = True,
    unknown: bool = True,
    extra: Callable[[Any], str | None] | None = None,
) -> StructDef:
    """
    Declare a struct type from a mapping of member name to TypeDef.

    Members are checked in declaration order.

    Args:
        name: Name of the struct type
        members: Member name to TypeDef
        total: Require every member to be present
        unknown: Allow keys that are not declared members
        extra: Custom invariant returning None or an error message

    Raises:
        TypeError: if members is not a mapping of str to TypeDef
        pydantic.ValidationError: if a policy knob is badly typed
    """
    if not isinstance(members, Mapping):
        raise TypeError(
            f"Struct '{name}' members must be a mapping, got {type(members).__name__}"
        )
    for key, t in members.items():
        if not isinstance(key, str):
            raise TypeError(
                f"Struct '{name}' member names must be strings, got {key!r}"
            )
        require_typedef(t, f"Struct '{name}' member '{key}'")

    policy = StructPolicy(total=total, unknown=unknown, extra=extra)
    logger.debug("Declaring struct '%s' with %d members", name, len(members))
    return _build_struct(name, MappingProxyType(dict(members)), policy)


def _join_keys(keys: Iterable[Any]) -> str:
    return ", ".join(repr(k) for k in keys)


def _build_struct(
    name: str, members: Mapping[str, TypeDef], policy: StructPolicy
) -> StructDef:
    names = tuple(members)
    verifiers = {key: t.verify for key, t in members.items()}
    context = f"in struct '{name}'"
    expected = _join_keys(names)
    total = policy.total

    def check_members(value: Mapping) -> str | None:
        def check_member(key: str) -> str | None:
            if key in value:
                return add_error_context(
                    f"in member '{key}'", verifiers[key](value[key])
                )
            if total:
                return f"missing member '{key}'"
            return None

        return first_error(check_member, names)

    def check_unknown(value: Mapping) -> str | None:
        unrecognized = [key for key in value if key not in verifiers]
        if not unrecognized:
            return None
        return (
            f"keys [{_join_keys(unrecognized)}] are unrecognized, "
            f"expected keys are [{expected}]"
        )

    steps: list[Callable[[Any], str | None]] = [check_members]
    if not policy.unknown:
        steps.append(check_unknown)
    if policy.extra is not None:
        steps.append(policy.extra)

    def check(value: Any) -> str | None:
        if not Attrs.is_valid(value):
            return add_error_context(context, type_error(name, value))
        for step in steps:
            error = step(value)
            if error is not None:
                return add_error_context(context, error)
        return None

    return StructDef(name=name, verify=check, members=members, policy=policy)
