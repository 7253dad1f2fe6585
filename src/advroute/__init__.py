"""advroute public API surface (source of truth).

Recreate the module with these rules:
- Public exports: ``Registrar``, ``BaseRegistrar``, ``RouteTable``,
  ``RouteEntry``, ``HttpVerb``, ``ControllerResolutionError`` and the pure
  derivation helpers ``derive``/``derive_many``/``members_of``.
- Plugin registration: import built-in plugins (``logging``, ``emit``) for
  their side effect of calling ``Registrar.register_plugin(<class>)``.
  Imports are done lazily via ``import_module`` to avoid cycles.

Constraints
-----------
- Import must stay lightweight: no registrar instantiation or heavy work beyond
  plugin registration.
- Version string lives here as ``__version__`` and must remain available for
  packaging tools.
"""

from importlib import import_module

__version__ = "0.3.0"

from .core import (
    BaseRegistrar,
    ControllerResolutionError,
    HttpVerb,
    Registrar,
    RouteEntry,
    RouteTable,
    derive,
    derive_many,
    members_of,
)

# Import plugins to trigger auto-registration (lazy to avoid cycles)
for _plugin in ("logging", "emit"):
    import_module(f"{__name__}.plugins.{_plugin}")
del _plugin

__all__ = [
    "BaseRegistrar",
    "ControllerResolutionError",
    "HttpVerb",
    "Registrar",
    "RouteEntry",
    "RouteTable",
    "derive",
    "derive_many",
    "members_of",
]
