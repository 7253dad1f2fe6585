"""Plugin contract definitions used by the Registrar runtime.

Source of truth
---------------
If this module were wiped except for this docstring, the implementation must be
reconstructed exactly as described below.

``BasePlugin``
    Base class every plugin *must* subclass. Responsibilities:

    - offer config helpers that delegate to the owning registrar's
      ``_plugin_info`` store (no hidden per-plugin globals)
    - provide optional hooks ``on_route(registrar, controller, entry)`` and
      ``on_controller(registrar, controller, entries)`` run by the Registrar
      pipeline after each route and after each controller

    Required class attributes:

    - ``plugin_code`` – unique identifier used for registration (e.g. "emit")
    - ``plugin_description`` – human-readable description of the plugin

    Constructor signature:

    ``BasePlugin(registrar, **config)``

    - ``registrar`` is required – the Registrar instance owning this plugin
    - ``**config`` is passed to ``configure()`` which is validated by Pydantic

    ``configure(**config)``
        Define accepted configuration parameters via method signature.
        The method is automatically wrapped by ``__init_subclass__`` to:
        - Extract and parse ``flags`` (e.g. "enabled,summary:off") into booleans
        - Extract ``_target`` to determine where to write config:
          - ``"--base--"`` (default): registrar-level config
          - ``"UsersController"``: per-controller config
          - ``"A,B"``: multiple controllers (calls recursively)
        - Apply Pydantic's ``validate_call`` for parameter validation
        - Write validated config to the store

    ``configuration(controller=None)``
        returns merged configuration dict from the registrar's store
        (registrar-level + optional per-controller override).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Sequence

from pydantic import validate_call

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from advroute.core.table import RouteEntry

__all__ = ["BasePlugin", "BASE_BUCKET"]

BASE_BUCKET = "--base--"


def _wrap_configure(original_configure: Callable) -> Callable:
    """Wrap a plugin's configure() method to handle flags, _target, validation, and storage."""
    validated = validate_call(original_configure)

    def wrapper(
        self: "BasePlugin", *, _target: str = BASE_BUCKET, flags: Optional[str] = None, **kwargs: Any
    ) -> None:
        if flags:
            kwargs.update(self._parse_flags(flags))

        if "," in _target:
            for target in [t.strip() for t in _target.split(",") if t.strip()]:
                wrapper(self, _target=target, **kwargs)
            return

        validated(self, **kwargs)
        self._write_config(_target, kwargs)

    wrapper.__doc__ = original_configure.__doc__
    return wrapper


class BasePlugin:
    """Hook interface + configuration helpers for registrar plugins."""

    __slots__ = ("name", "_registrar")

    plugin_code: str = ""
    plugin_description: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "configure" in cls.__dict__:
            cls.configure = _wrap_configure(cls.__dict__["configure"])

    def __init__(self, registrar: Any, **config: Any):
        self.name = self.plugin_code
        self._registrar = registrar
        self._init_store()
        self.configure(**config)

    def _init_store(self) -> None:
        store = self._get_store()
        store.setdefault(self.name, {}).setdefault(
            BASE_BUCKET, {"config": {"enabled": True}, "locals": {}}
        )

    def configure(self, *, _target: str = BASE_BUCKET, flags: Optional[str] = None) -> None:
        """Override in subclasses to define accepted configuration parameters."""
        if flags:
            self._write_config(_target, self._parse_flags(flags))

    def _write_config(self, target: str, config: Dict[str, Any]) -> None:
        if not config:
            return
        store = self._get_store()
        plugin_bucket = store.setdefault(self.name, {})
        bucket = plugin_bucket.setdefault(target, {"config": {}, "locals": {}})
        bucket["config"].update(config)

    def configuration(self, controller: Optional[str] = None) -> Dict[str, Any]:
        """Read merged configuration (base + optional per-controller override)."""
        plugin_bucket = self._get_store().get(self.name)
        if not plugin_bucket:
            return {}
        merged = dict(plugin_bucket.get(BASE_BUCKET, {}).get("config", {}))
        if controller:
            merged.update(plugin_bucket.get(controller, {}).get("config", {}))
        return merged

    def _parse_flags(self, flags: str) -> Dict[str, bool]:
        mapping: Dict[str, bool] = {}
        for chunk in flags.split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            if ":" in chunk:
                name, value = chunk.split(":", 1)
                mapping[name.strip()] = value.strip().lower() != "off"
            else:
                mapping[chunk] = True
        return mapping

    def on_route(
        self, registrar: Any, controller: str, entry: "RouteEntry"
    ) -> None:  # pragma: no cover - default no-op
        """Hook run after a single route reached the route table."""

    def on_controller(
        self, registrar: Any, controller: str, entries: Sequence["RouteEntry"]
    ) -> None:  # pragma: no cover - default no-op
        """Hook run once every route of a controller has been registered."""

    def _get_store(self) -> Dict[str, Any]:
        return getattr(self._registrar, "_plugin_info")
