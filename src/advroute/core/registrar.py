"""Registrar with plugin pipeline (source of truth).

If this module disappeared, rebuild it exactly as described. ``Registrar``
extends ``BaseRegistrar`` with a global plugin registry, per-registrar plugin
instances, and plugin state stored on the registrar instance.

Internal state
--------------
- ``_plugins``: instantiated plugins in the order they were attached.
- ``_plugins_by_name``: name -> plugin instance.
- ``_plugin_info``: per-plugin state store on the registrar.

Global registry
---------------
``Registrar.register_plugin(plugin_class, name=None)`` validates that
``plugin_class`` is a ``BasePlugin`` subclass with a ``plugin_code``.
Re-registering an existing code with a different class raises ``ValueError``
unless ``name`` is given explicitly. ``available_plugins`` returns a shallow copy.

Attaching plugins
-----------------
``plug(plugin_name, **config)`` looks up the class by name (``ValueError`` with
the available names if missing), instantiates it, appends it to ``_plugins``
and returns ``self``. ``__getattr__`` exposes attached plugins by name or raises
``AttributeError``. Plugins only see routes registered after they are plugged.

Diagnostics flag
----------------
``emit_routes`` (default: ``ADVROUTE_EMIT_ROUTES`` environment variable,
truthy values ``1/true/yes/on``) plugs the ``emit`` plugin at construction,
forwarding ``emit_directory`` when given.

Hook fan-out
------------
``_after_route_registered`` and ``_after_controller_registered`` call
``on_route`` / ``on_controller`` on every attached plugin, in attachment order,
skipping plugins disabled for that controller (``is_plugin_enabled``).
"""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional, Sequence, Type

from advroute.core.base_registrar import BaseRegistrar
from advroute.core.table import RouteEntry
from advroute.plugins._base_plugin import BASE_BUCKET, BasePlugin

__all__ = ["Registrar", "EMIT_ROUTES_ENV"]

EMIT_ROUTES_ENV = "ADVROUTE_EMIT_ROUTES"
_TRUTHY = {"1", "true", "yes", "on"}

_PLUGIN_REGISTRY: Dict[str, Type[BasePlugin]] = {}


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


class Registrar(BaseRegistrar):
    """Registrar with plugin registry/pipeline support."""

    __slots__ = BaseRegistrar.__slots__ + (
        "_plugins",
        "_plugins_by_name",
        "_plugin_info",
    )

    def __init__(
        self,
        table: Any = None,
        *,
        emit_routes: Optional[bool] = None,
        emit_directory: Optional[str] = None,
        **kwargs: Any,
    ):
        self._plugins: List[BasePlugin] = []
        self._plugins_by_name: Dict[str, BasePlugin] = {}
        self._plugin_info: Dict[str, Dict[str, Any]] = {}
        super().__init__(table, **kwargs)
        if emit_routes is None:
            emit_routes = _env_flag(EMIT_ROUTES_ENV)
        if emit_routes:
            emit_config: Dict[str, Any] = {}
            if emit_directory is not None:
                emit_config["directory"] = emit_directory
            self.plug("emit", **emit_config)

    # ------------------------------------------------------------------
    # Plugin registration
    # ------------------------------------------------------------------
    @classmethod
    def register_plugin(cls, plugin_class: Type[BasePlugin], name: Optional[str] = None) -> None:
        """Register a plugin class globally.

        Args:
            plugin_class: A BasePlugin subclass with plugin_code defined
            name: Optional override name. If provided, overwrites any existing
                  registration. If not provided, uses plugin_code and raises
                  if already registered with another class.
        """
        if not isinstance(plugin_class, type) or not issubclass(plugin_class, BasePlugin):
            raise TypeError("plugin_class must be a BasePlugin subclass")
        if not getattr(plugin_class, "plugin_code", None):
            raise ValueError(
                f"Plugin {plugin_class.__name__} not following standards: missing plugin_code"
            )
        code = name or plugin_class.plugin_code
        if name is None:
            existing = _PLUGIN_REGISTRY.get(code)
            if existing is not None and existing is not plugin_class:
                raise ValueError(f"Plugin '{code}' already registered")
        _PLUGIN_REGISTRY[code] = plugin_class

    @classmethod
    def available_plugins(cls) -> Dict[str, Type[BasePlugin]]:
        return dict(_PLUGIN_REGISTRY)

    def plug(self, plugin: str, **config: Any) -> "Registrar":
        """Attach a plugin by name (previously registered globally)."""
        if not isinstance(plugin, str):
            raise TypeError(
                f"Plugin must be referenced by name string, got {type(plugin).__name__}"
            )
        plugin_class = _PLUGIN_REGISTRY.get(plugin)
        if plugin_class is None:
            available = ", ".join(sorted(_PLUGIN_REGISTRY)) or "none"
            raise ValueError(
                f"Unknown plugin '{plugin}'. Register it first. Available plugins: {available}"
            )
        if plugin_class.plugin_code in self._plugins_by_name:
            raise ValueError(f"Plugin '{plugin}' already attached")
        instance = plugin_class(self, **config)
        self._plugins.append(instance)
        self._plugins_by_name[instance.name] = instance
        return self

    def iter_plugins(self) -> List[BasePlugin]:  # type: ignore[override]
        """Return attached plugin instances in application order."""
        return list(self._plugins)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        plugin = self._plugins_by_name.get(name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{name}' attached to registrar")
        return plugin

    # ------------------------------------------------------------------
    # Runtime helpers (state stored on plugin_info)
    # ------------------------------------------------------------------
    def _get_plugin_bucket(self, plugin_name: str) -> Dict[str, Any]:
        bucket = self._plugin_info.get(plugin_name)
        if bucket is None:
            raise AttributeError(f"No plugin named '{plugin_name}' attached to registrar")
        return bucket

    def set_plugin_enabled(self, controller: str, plugin_name: str, enabled: bool = True) -> None:
        bucket = self._get_plugin_bucket(plugin_name)
        entry = bucket.setdefault(controller, {"config": {}, "locals": {}})
        entry.setdefault("locals", {})["enabled"] = bool(enabled)

    def is_plugin_enabled(self, controller: str, plugin_name: str) -> bool:
        bucket = self._get_plugin_bucket(plugin_name)
        entry_locals = bucket.get(controller, {}).get("locals", {})
        if "enabled" in entry_locals:
            return bool(entry_locals["enabled"])
        base_locals = bucket.get(BASE_BUCKET, {}).get("locals", {})
        return bool(base_locals.get("enabled", True))

    # ------------------------------------------------------------------
    # Overrides/hooks
    # ------------------------------------------------------------------
    def _active_plugins(self, controller: str) -> List[BasePlugin]:
        return [
            plugin
            for plugin in self._plugins
            if self.is_plugin_enabled(controller, plugin.name)
            and plugin.configuration(controller).get("enabled", True)
        ]

    def _after_route_registered(self, controller: str, entry: RouteEntry) -> None:  # type: ignore[override]
        for plugin in self._active_plugins(controller):
            plugin.on_route(self, controller, entry)

    def _after_controller_registered(  # type: ignore[override]
        self, controller: str, entries: Sequence[RouteEntry]
    ) -> None:
        for plugin in self._active_plugins(controller):
            plugin.on_controller(self, controller, entries)

    def _describe_controller_extra(self, controller: str) -> Dict[str, Any]:  # type: ignore[override]
        plugins_info: Dict[str, Dict[str, Any]] = {}
        for plugin in self._plugins:
            config = plugin.configuration(controller)
            if config:
                plugins_info[plugin.name] = {"config": config}
        if plugins_info:
            return {"plugins": plugins_info}
        return {}
