# src/valuedispatch/core/multimethod.py
from __future__ import annotations

import functools
from typing import Any, Callable, Dict, Generic, Optional

from valuedispatch.core import log
from valuedispatch.core.contracts import (
    Arg,
    ConstructionError,
    DispatchMiss,
    DispatchValue,
    Ret,
)
from valuedispatch.core.metrics import gauge_set, inc

__all__ = ["MultiMethod", "defmulti", "defmethod"]


class MultiMethod(Generic[Arg, Ret, DispatchValue]):
    """
    A function whose implementation is picked per call by the value
    ``dispatch_fn(arg)`` returns.

    Methods are keyed by exact dispatch value (dict semantics). Calling the
    multimethod with a value nobody registered raises DispatchMiss; there is
    no default method.
    """

    def __init__(self, dispatch_fn: Callable[[Arg], DispatchValue], *, name: Optional[str] = None):
        if dispatch_fn is None:
            raise ConstructionError("defmulti() requires a dispatch function")
        if not callable(dispatch_fn):
            raise ConstructionError(f"dispatch function must be callable, got {type(dispatch_fn).__name__}")

        self._dispatch_fn = dispatch_fn
        self._methods: Dict[DispatchValue, Callable[[Arg], Ret]] = {}  # exact match

        # name and doc only; the dispatch fn's __dict__ must not reach our state
        functools.update_wrapper(self, dispatch_fn, updated=())
        fn_name = "" if isinstance(dispatch_fn, MultiMethod) else getattr(dispatch_fn, "__name__", "")
        if not name and (not fn_name or fn_name == "<lambda>"):
            # metric labels and logger names must not collide between registries
            name = f"multimethod-{id(self):x}"
        self.name = name or fn_name
        self.l = log.get(f"valuedispatch.{self.name}")

    @property
    def dispatch_fn(self) -> Callable[[Arg], DispatchValue]:
        return self._dispatch_fn

    def register(self, dispatch_value: DispatchValue, fn: Optional[Callable[[Arg], Ret]] = None):
        """
        Add (or replace) the method for ``dispatch_value``.

        With ``fn`` omitted this returns a decorator:

            @greet.register("foo")
            def _(p): ...
        """
        if fn is None:
            def decorator(f: Callable[[Arg], Ret]) -> Callable[[Arg], Ret]:
                self.register(dispatch_value, f)
                return f
            return decorator

        if not callable(fn):
            raise TypeError(f"method for {dispatch_value!r} must be callable, got {type(fn).__name__}")

        replaced = dispatch_value in self._methods
        self._methods[dispatch_value] = fn
        self.l.debug("%s method value=%r fn=%s", "replace" if replaced else "add",
                     dispatch_value, getattr(fn, "__name__", str(fn)))
        gauge_set("multimethod_methods", float(len(self._methods)), multimethod=self.name)
        return None

    def get_method(self, dispatch_value: DispatchValue) -> Callable[[Arg], Ret]:
        """Return the method registered for ``dispatch_value`` or raise DispatchMiss."""
        try:
            return self._methods[dispatch_value]
        except KeyError:
            raise DispatchMiss(dispatch_value, self.name) from None

    def __contains__(self, dispatch_value: Any) -> bool:
        return dispatch_value in self._methods

    def invoke(self, arg: Arg) -> Ret:
        value = self._dispatch_fn(arg)
        try:
            method = self._methods[value]
        except KeyError:
            inc("dispatch_total", 1, multimethod=self.name, outcome="miss")
            self.l.debug("no method for value=%r", value,
                         extra={"multimethod": self.name, "dispatch_value": value})
            raise DispatchMiss(value, self.name) from None
        inc("dispatch_total", 1, multimethod=self.name, outcome="hit")
        return method(arg)

    def __call__(self, arg: Arg) -> Ret:
        return self.invoke(arg)

    def __repr__(self) -> str:
        return f"<MultiMethod {self.name} methods={len(self._methods)}>"


def defmulti(dispatch_fn: Callable[[Arg], DispatchValue] | None = None, *, name: Optional[str] = None) -> MultiMethod:
    """
    Create a multimethod dispatching on ``dispatch_fn(arg)``.

    Works as a call, ``greet = defmulti(lambda p: p["kind"])``, or as a
    decorator on the dispatch function:

        @defmulti
        def greet(p):
            return p["kind"]
    """
    return MultiMethod(dispatch_fn, name=name)


def defmethod(multi: MultiMethod, dispatch_value: Any, fn: Callable[[Any], Any] | None = None):
    """Register ``fn`` on ``multi`` for ``dispatch_value``; last registration wins."""
    if not isinstance(multi, MultiMethod):
        raise TypeError(f"defmethod() expects a MultiMethod, got {type(multi).__name__}")
    return multi.register(dispatch_value, fn)
