"""Plugin-free registrar runtime (source of truth).

If this file vanished, rebuild it verbatim from this description. The module
exposes a single class, :class:`BaseRegistrar`, which turns controller classes
into routes on a host route table. Subclasses add plugins but must preserve
these semantics.

Constructor and slots
---------------------
Constructor signature::

    BaseRegistrar(table=None, *, namespace=None, **defaults)

- ``table`` is the host collaborator. ``None`` creates a fresh ``RouteTable``.
  A ``RouteTable`` or any object with ``register_route`` is used directly;
  objects exposing one method per verb are wrapped in ``VerbDispatcher``;
  anything else raises ``TypeError``.
- ``namespace`` is the default module searched for bare controller names.
- ``**defaults`` become ``SmartOptions`` defaults merged into the options of
  every ``register_controller`` call.
- Slots: ``table`` (the collaborator as passed in), ``_sink`` (what receives
  ``register_route``), ``_routes`` (every emitted ``RouteEntry``),
  ``_controllers`` (type name -> ``{"prefix", "routes"}``), ``_defaults``.

Registration
------------
``register_controller(path, controller, **options)`` (alias ``controller``)

- Resolves ``controller`` with ``resolve_controller``; resolution errors
  propagate and nothing is registered for that controller.
- Introspects the class (``members_of``), derives candidates (``derive``),
  joins each slug onto ``path`` (``join_path``) and calls
  ``register_route(verb, path, target)`` in derived order.
- Invokes ``_after_route_registered`` per route and
  ``_after_controller_registered`` once per controller.
- Returns the list of entries it registered.
- Every derived path is checked for repeated placeholder names before the
  host sees any of them (``ValueError``, nothing registered).

``register_controllers(mapping, **options)`` (alias ``controllers``) applies
``register_controller`` to each ``{path: controller}`` pair in insertion order.

Introspection
-------------
- ``routes``: tuple of all entries registered by this registrar.
- ``controller_routes(name)`` / ``controller_prefix(name)``: entries and latest
  prefix of one controller; ``KeyError`` if the
  controller was never registered.
- ``members()``: ``{"controllers": {name: {...}}, "plugin_info": {...}}``;
  empty dict when nothing was registered.

Invariants
----------
- Registration is append-only; a controller registered twice appends twice.
- ``routes``, ``controller_routes`` and ``members()`` always agree: an entry is
  recorded everywhere right after the host accepts it, so a host failure
  midway leaves the accepted prefix of routes visible and nothing else.
- The registrar never mutates entries after handing them to the table.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from smartseeds import SmartOptions
from smartseeds.typeutils import safe_is_instance

from .deriver import derive
from .members import members_of
from .resolver import resolve_controller
from .table import (
    RouteEntry,
    RouteRegistrar,
    RouteTable,
    VerbDispatcher,
    check_placeholders,
    join_path,
)

__all__ = ["BaseRegistrar"]

logger = logging.getLogger("advroute")


class BaseRegistrar:
    """Plugin-free convention-based controller registrar.

    Responsibilities:
    - resolve controllers given as classes or import strings
    - derive verb + slug routes from public methods
    - hand routes to the host table in precedence order
    - expose what was registered for introspection
    """

    __slots__ = (
        "table",
        "_sink",
        "_routes",
        "_controllers",
        "_defaults",
    )

    def __init__(
        self,
        table: Any = None,
        *,
        namespace: Optional[str] = None,
        **defaults: Any,
    ) -> None:
        if table is None:
            table = RouteTable()
        self.table = table
        self._sink = self._bind_table(table)
        self._routes: List[RouteEntry] = []
        self._controllers: Dict[str, Dict[str, Any]] = {}
        merged: Dict[str, Any] = dict(defaults)
        if namespace is not None:
            merged.setdefault("namespace", namespace)
        self._defaults: Dict[str, Any] = merged

    @staticmethod
    def _bind_table(table: Any) -> RouteRegistrar:
        if safe_is_instance(table, "advroute.core.table.RouteTable"):
            return table
        if callable(getattr(table, "register_route", None)):
            return table
        if VerbDispatcher.supports(table):
            return VerbDispatcher(table)
        raise TypeError(
            f"{type(table).__name__} is not a route table: expected register_route() "
            "or one method per HTTP verb"
        )

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register_controller(self, path: str, controller: Any, **options: Any) -> List[RouteEntry]:
        """Register every conventional route of ``controller`` under ``path``.

        Args:
            path: URL prefix, e.g. ``"/users"``.
            controller: Controller class or import string.
            options: Per-call overrides of the registrar defaults (``namespace``).

        Returns:
            The entries registered, in registration order.

        Raises:
            ControllerResolutionError: when ``controller`` cannot be found.
            TypeError: when ``controller`` is neither a class nor a string.
            ValueError: when a derived path repeats a placeholder name; nothing
                is registered for that controller.
        """
        opts = SmartOptions(options, defaults=self._defaults)
        namespace = getattr(opts, "namespace", None)
        type_name, cls = resolve_controller(controller, namespace)

        candidates = derive(type_name, members_of(cls))
        entries = [
            RouteEntry(
                verb=candidate.verb,
                path=join_path(path, candidate.slug),
                target=candidate.target.identifier,
            )
            for candidate in candidates
        ]
        for entry in entries:
            check_placeholders(entry.path)

        record = self._controllers.setdefault(type_name, {"prefix": path, "routes": []})
        record["prefix"] = path
        registered: List[RouteEntry] = []
        for entry in entries:
            self._sink.register_route(entry.verb, entry.path, entry.target)
            # The host accepted the route: every record sees it from here on.
            self._routes.append(entry)
            record["routes"].append(entry)
            registered.append(entry)
            self._after_route_registered(type_name, entry)

        logger.debug("%s registered under %r: %d routes", type_name, path, len(registered))
        self._after_controller_registered(type_name, registered)
        return registered

    controller = register_controller

    def register_controllers(
        self, mapping: Mapping[str, Any], **options: Any
    ) -> Dict[str, List[RouteEntry]]:
        """Register several ``{path: controller}`` pairs in insertion order."""
        result: Dict[str, List[RouteEntry]] = {}
        for path, controller in mapping.items():
            result[path] = self.register_controller(path, controller, **options)
        return result

    controllers = register_controllers

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def routes(self) -> Tuple[RouteEntry, ...]:
        return tuple(self._routes)

    def controller_routes(self, name: str) -> Tuple[RouteEntry, ...]:
        return tuple(self._controllers[name]["routes"])

    def controller_prefix(self, name: str) -> str:
        return self._controllers[name]["prefix"]

    def members(self) -> Dict[str, Any]:
        """Return a tree of registered controllers and their routes."""
        if not self._controllers:
            return {}
        return {
            "controllers": {
                name: {
                    "name": name,
                    "prefix": record["prefix"],
                    "routes": [
                        {"verb": entry.verb.value, "path": entry.path, "target": entry.target}
                        for entry in record["routes"]
                    ],
                    **self._describe_controller_extra(name),
                }
                for name, record in self._controllers.items()
            },
            "plugin_info": self._get_plugin_info(),
        }

    def _get_plugin_info(self) -> Dict[str, Any]:
        info_source = getattr(self, "_plugin_info", {}) or {}
        return {
            pname: {
                key: {
                    "config": dict(slot.get("config", {})),
                    "locals": dict(slot.get("locals", {})),
                }
                for key, slot in pdata.items()
            }
            for pname, pdata in info_source.items()
        }

    # ------------------------------------------------------------------
    # Plugin hooks (no-op for BaseRegistrar)
    # ------------------------------------------------------------------
    def iter_plugins(self) -> List[Any]:  # pragma: no cover - base registrar has no plugins
        return []

    def _after_route_registered(
        self, controller: str, entry: RouteEntry
    ) -> None:  # pragma: no cover - hook for subclasses
        return None

    def _after_controller_registered(
        self, controller: str, entries: Sequence[RouteEntry]
    ) -> None:  # pragma: no cover - hook for subclasses
        return None

    def _describe_controller_extra(
        self, controller: str
    ) -> Dict[str, Any]:  # pragma: no cover - overridden when plugins present
        return {}
