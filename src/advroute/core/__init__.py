"""Core runtime aggregator (source of truth).

Purpose: expose the runtime building blocks from a single module. No extra
logic beyond imports/exports.

Guarantees
----------
- Importing this module performs only imports; it does not register plugins or
  instantiate registrars.
- Public API mirrors underlying modules 1:1:
  * ``members`` -> ``Member``, ``Parameter``, ``members_of``
  * ``deriver`` -> ``HttpVerb``, ``RouteCandidate``, ``RouteTarget``,
    ``derive``, ``derive_many``
  * ``table`` -> ``RouteEntry``, ``RouteRegistrar``, ``RouteTable``,
    ``VerbDispatcher``, ``check_placeholders``, ``join_path``
  * ``resolver`` -> ``ControllerResolutionError``, ``resolve_controller``
  * ``base_registrar`` -> ``BaseRegistrar`` (plugin-free engine)
  * ``registrar`` -> ``Registrar`` (plugin-enabled)
"""

from .base_registrar import BaseRegistrar
from .deriver import HttpVerb, RouteCandidate, RouteTarget, derive, derive_many
from .members import Member, Parameter, members_of
from .registrar import Registrar
from .resolver import ControllerResolutionError, resolve_controller
from .table import (
    RouteEntry,
    RouteRegistrar,
    RouteTable,
    VerbDispatcher,
    check_placeholders,
    join_path,
)

__all__ = [
    "BaseRegistrar",
    "ControllerResolutionError",
    "HttpVerb",
    "Member",
    "Parameter",
    "Registrar",
    "RouteCandidate",
    "RouteEntry",
    "RouteRegistrar",
    "RouteTable",
    "RouteTarget",
    "VerbDispatcher",
    "check_placeholders",
    "derive",
    "derive_many",
    "join_path",
    "members_of",
    "resolve_controller",
]
