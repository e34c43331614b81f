"""
Primitive types for tern.

Leaf TypeDefs wrapping Python type predicates. They add no error context.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any as AnyValue

from .core import from_predicate, typedef


def _is_int(x: AnyValue) -> bool:
    # bool is a subclass of int but not an int for our purposes
    return isinstance(x, int) and not isinstance(x, bool)


def _is_float(x: AnyValue) -> bool:
    return isinstance(x, float)


String = from_predicate("string", lambda x: isinstance(x, str))

# Alias for String
Str = String

Int = from_predicate("int", _is_int)

Float = from_predicate("float", _is_float)

# Either an int or a float
Number = from_predicate("number", lambda x: _is_int(x) or _is_float(x))

Bool = from_predicate("bool", lambda x: isinstance(x, bool))

# Mapping with unchecked value types
Attrs = from_predicate("attrs", lambda x: isinstance(x, Mapping))

# Sequence with unchecked element types
List = from_predicate("list", lambda x: isinstance(x, (list, tuple)))

Function = from_predicate("function", callable)

Any = typedef("any", lambda _: None)
