"""
tern - a small composable runtime type checker for configuration-like data.

Usage:
    from tern import Struct, ListOf, Option, String, Int, check

    Server = Struct("server", {
        "host": String,
        "port": Int,
        "aliases": Option(ListOf(String)),
    })

    error = Server.verify({"host": "localhost", "port": "80", "aliases": None})
    # "in struct 'server': in member 'port': Expected type 'int' but value
    #  '"80"' is of type 'str'"

    config = check(Server, {"host": "localhost", "port": 80, "aliases": None})
"""

from .combinators import AttrsOf, Enum, EnumDef, ListOf, Option, Union
from .core import (
    TypeCheckError,
    TypeDef,
    add_error_context,
    from_predicate,
    is_typedef,
    pretty,
    type_error,
    typedef,
)
from .primitives import (
    Any,
    Attrs,
    Bool,
    Float,
    Function,
    Int,
    List,
    Number,
    Str,
    String,
)
from .schema import check, to_pydantic, validate
from .struct import Struct, StructDef, StructPolicy

__all__ = [
    # Core
    "TypeDef",
    "TypeCheckError",
    "typedef",
    "from_predicate",
    "is_typedef",
    "add_error_context",
    "type_error",
    "pretty",
    # Primitive types
    "String",
    "Str",
    "Int",
    "Float",
    "Number",
    "Bool",
    "Attrs",
    "List",
    "Function",
    "Any",
    # Polymorphic types
    "Option",
    "ListOf",
    "AttrsOf",
    "Union",
    "Enum",
    "EnumDef",
    # Structs
    "Struct",
    "StructDef",
    "StructPolicy",
    # Schema
    "check",
    "validate",
    "to_pydantic",
]
