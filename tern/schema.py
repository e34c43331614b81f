"""
Schema operations for tern.

Provides check() and validate() free functions, and to_pydantic() to compile
a struct type into a Pydantic model.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import AfterValidator, ConfigDict, create_model, model_validator

from .core import TypeDef, require_typedef
from .struct import StructDef


def check(t: TypeDef, value: Any) -> Any:
    """
    Verify value against t and return it unchanged.

    Raises:
        TypeCheckError: if the value does not conform

    Usage:
        port = check(Int, config["port"])
    """
    return require_typedef(t, "check() type").check(value)


def validate(t: TypeDef, value: Any) -> str | None:
    """
    Verify value against t.

    Returns:
        None if the value conforms, otherwise an error message
    """
    return require_typedef(t, "validate() type").verify(value)


def to_pydantic(struct: StructDef, model_name: str | None = None) -> type:
    """
    Compile a struct type to a Pydantic model.

    Each member is checked by its TypeDef. Members are required when the
    struct is total and default to None otherwise. Unknown keys are kept
    unless the struct forbids them. The extra invariant runs once every field
    has passed, on the fields that were given.

    Args:
        struct: Struct type to compile
        model_name: Name of the generated model class, defaults to the struct name

    Returns:
        A Pydantic BaseModel subclass

    Usage:
        Server = Struct("Server", {"host": String, "port": Int})
        ServerModel = to_pydantic(Server)
        ServerModel(host="localhost", port=8080)
    """
    if not isinstance(struct, StructDef):
        raise TypeError(
            f"to_pydantic() expects a struct type, got {type(struct).__name__}"
        )
    policy = struct.policy

    fields: dict[str, Any] = {}
    for key, member in struct.members.items():
        field_type = Annotated[Any, AfterValidator(member.check)]
        fields[key] = (field_type, ... if policy.total else None)

    validators: dict[str, Any] = {}
    if policy.extra is not None:
        invariant = policy.extra

        def check_extra(self: Any) -> Any:
            error = invariant(self.model_dump(exclude_unset=True))
            if error is not None:
                raise ValueError(error)
            return self

        validators["check_extra"] = model_validator(mode="after")(check_extra)

    return create_model(
        model_name or struct.name,
        __config__=ConfigDict(extra="allow" if policy.unknown else "forbid"),
        __validators__=validators,
        **fields,
    )
