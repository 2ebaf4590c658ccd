
from __future__ import annotations

from typing import Any, Hashable, Optional, TypeVar

__all__ = [
    "Arg",
    "Ret",
    "DispatchValue",
    "DispatchMiss",
    "ConstructionError",
    "WiringError",
]


# --------- Type variables / aliases ---------
Arg = TypeVar("Arg")
Ret = TypeVar("Ret")
DispatchValue = TypeVar("DispatchValue", bound=Hashable)


# --------- Errors ---------
class DispatchMiss(LookupError):
    """No method is registered for the computed dispatch value."""

    def __init__(self, dispatch_value: Any, name: Optional[str] = None):
        self.dispatch_value = dispatch_value
        self.name = name
        msg = f"No method found for dispatch value: {dispatch_value!r}"
        if name:
            msg = f"{name}: {msg}"
        super().__init__(msg)


class ConstructionError(TypeError):
    """defmulti() was given no dispatch function, or a non-callable one."""


class WiringError(ValueError):
    """A YAML dispatch table could not be turned into multimethods."""
