"""Controller resolution: class objects or import strings to classes.

Accepted inputs
---------------
- a class: returned as-is, named after ``cls.__name__``
- ``"pkg.module:ClassName"`` or ``"pkg.module.ClassName"``: imported
- a bare ``"ClassName"``: looked up in the default controller namespace
  (a module path such as ``"app.http.controllers"``)

The name reported back is the string the caller passed, so route targets read
exactly like the registration call. Failures raise
``ControllerResolutionError``; they are configuration errors and are never
recovered here.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Optional, Tuple

__all__ = ["ControllerResolutionError", "resolve_controller"]


class ControllerResolutionError(LookupError):
    """The requested controller type cannot be found."""


def resolve_controller(controller: Any, namespace: Optional[str] = None) -> Tuple[str, type]:
    """Return ``(type_name, cls)`` for a controller class or import string."""
    if isinstance(controller, type):
        return controller.__name__, controller
    if not isinstance(controller, str):
        raise TypeError(
            f"Controller must be a class or import string, got {type(controller).__name__}"
        )
    spec = controller.strip()
    if not spec:
        raise ControllerResolutionError("Controller name cannot be empty")

    attempts = []
    if ":" in spec:
        attempts.append(tuple(spec.split(":", 1)))
    elif "." in spec:
        attempts.append(tuple(spec.rsplit(".", 1)))
    if namespace and ":" not in spec:
        module_path, _, attr = f"{namespace}.{spec}".rpartition(".")
        attempts.append((module_path, attr))

    for module_path, attr in attempts:
        cls = _load(module_path, attr)
        if cls is not None:
            return spec, cls
    where = f" (namespace {namespace!r})" if namespace else ""
    raise ControllerResolutionError(f"Controller {spec!r} cannot be resolved{where}")


def _load(module_path: str, attr: str) -> Optional[type]:
    if not module_path or not attr:
        return None
    try:
        module = import_module(module_path)
    except ModuleNotFoundError as exc:
        # Only a missing target module means "not here"; broken imports propagate.
        if exc.name and not (module_path == exc.name or module_path.startswith(exc.name + ".")):
            raise
        return None
    node: Any = module
    for part in attr.split("."):
        node = getattr(node, part, None)
        if node is None:
            return None
    if not isinstance(node, type):
        raise TypeError(f"{module_path}.{attr} is not a class")
    return node
