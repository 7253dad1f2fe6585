"""Controller member introspection (source of truth).

Turns a controller class into the plain ``Member``/``Parameter`` records the
deriver works on. Nothing here knows about verbs or URLs.

Enumeration rules
-----------------
``members_of(cls)``

- Walks ``cls.__mro__`` from the class outward (``object`` excluded); the first
  definition of a name wins, so overrides shadow base implementations.
- Accepts plain functions, ``staticmethod`` and ``classmethod`` objects found in
  each class ``__dict__``. Properties and data attributes are ignored.
- Names starting with ``_`` are ``non-public``.
- The bound receiver (``self``/``cls``) is never reported as a parameter.

Parameter classification
------------------------
- ``has_declared_type`` is true when the parameter carries any annotation,
  string annotations included. ``*args``/``**kwargs`` are always typed.
- When a signature cannot be read the member reports no parameters at all.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Tuple

__all__ = ["Member", "Parameter", "PUBLIC", "NON_PUBLIC", "has_declared_type", "members_of"]

PUBLIC = "public"
NON_PUBLIC = "non-public"

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True)
class Parameter:
    """A single declared parameter of a controller method."""

    name: str
    has_declared_type: bool = False
    has_default_value: bool = False


@dataclass(frozen=True)
class Member:
    """A named, introspectable method of a controller."""

    name: str
    parameters: Tuple[Parameter, ...] = ()
    visibility: str = PUBLIC

    @property
    def is_public(self) -> bool:
        return self.visibility == PUBLIC


def has_declared_type(param: inspect.Parameter) -> bool:
    if param.kind in _VARIADIC:
        return True
    return param.annotation is not inspect.Parameter.empty


def members_of(cls: type) -> Tuple[Member, ...]:
    """Return the methods of ``cls`` as ``Member`` records."""
    if not isinstance(cls, type):
        raise TypeError(f"members_of() requires a class, got {type(cls).__name__}")
    return tuple(
        Member(
            name=name,
            parameters=_parameters_of(func, skip_receiver),
            visibility=NON_PUBLIC if name.startswith("_") else PUBLIC,
        )
        for name, func, skip_receiver in _iter_methods(cls)
    )


def _iter_methods(cls: type) -> Iterator[Tuple[str, Callable, bool]]:
    seen: set[str] = set()
    for base in cls.__mro__:
        if base is object:
            continue
        for attr_name, value in vars(base).items():
            if attr_name in seen:
                continue
            func, skip_receiver = _unwrap(value)
            if func is None:
                continue
            seen.add(attr_name)
            yield attr_name, func, skip_receiver


def _unwrap(value: Any) -> Tuple[Optional[Callable], bool]:
    if isinstance(value, staticmethod):
        return value.__func__, False
    if isinstance(value, classmethod):
        return value.__func__, True
    if inspect.isfunction(value):
        return value, True
    return None, False


def _parameters_of(func: Callable, skip_receiver: bool) -> Tuple[Parameter, ...]:
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return ()
    params = list(sig.parameters.values())
    if skip_receiver and params and params[0].kind not in _VARIADIC:
        params = params[1:]
    return tuple(
        Parameter(
            name=param.name,
            has_declared_type=has_declared_type(param),
            has_default_value=param.default is not inspect.Parameter.empty,
        )
        for param in params
    )
