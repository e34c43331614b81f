"""
Type aliases for tern.

A verifier returns None when a value conforms and an error message otherwise.
"""

from __future__ import annotations

from typing import Any, Callable

# Type aliases
Verifier = Callable[[Any], "str | None"]
PredicateFn = Callable[[Any], bool]
