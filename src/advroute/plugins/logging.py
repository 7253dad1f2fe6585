"""Logging plugin (source of truth).

Rebuild behaviour exactly as described; no hidden defaults beyond this text.

Responsibilities
----------------
- Report registrations as they happen:
  * ``routes`` (default True): ``"<verb> <path> -> <target>"`` per route
  * ``summary`` (default True): ``"<controller>: <n> routes under <prefix>"``
    once per controller
- Sinks:
  * when ``print`` is true -> always ``print(message)``;
  * else when ``log`` is true -> ``logger.info(message)`` if the logger reports
    handlers via ``hasHandlers()``, otherwise ``print(message)`` to avoid drops;
  * else -> no output.
- ``enabled`` gates the plugin entirely (default True).
- Use a provided ``logging.Logger`` (default ``logging.getLogger("advroute")``).

Configuration
-------------
Accepted keys (registrar-level or per-controller): ``enabled``, ``routes``,
``summary``, ``log``, ``print``; also as ``flags`` strings such as
``"routes:off,print:on"``.

Registration
------------
At module import, the plugin registers itself globally as ``"logging"``.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from advroute.core.registrar import Registrar
from advroute.core.table import RouteEntry
from advroute.plugins._base_plugin import BasePlugin


class LoggingPlugin(BasePlugin):
    """Logs every route handed to the route table."""

    plugin_code = "logging"
    plugin_description = "Logs registered routes and per-controller summaries"

    __slots__ = ("_logger",)

    def __init__(self, registrar, *, logger: Optional[logging.Logger] = None, **cfg):
        self._logger = logger or logging.getLogger("advroute")
        super().__init__(registrar, **cfg)

    def configure(
        self,
        enabled: bool = True,
        routes: bool = True,
        summary: bool = True,
        log: bool = True,
        print: bool = False,  # noqa: A002 - shadowing builtin intentionally
    ):
        """Configure logging plugin options.

        The wrapper added by __init_subclass__ handles writing to store.
        """
        pass  # Storage is handled by the wrapper

    def _emit(self, message: str, *, cfg: dict) -> None:
        if cfg.get("print"):
            print(message)
            return
        if cfg.get("log"):
            logger = self._logger
            has_handlers = getattr(logger, "hasHandlers", None) or getattr(
                logger, "has_handlers", None
            )
            if callable(has_handlers) and has_handlers():
                logger.info(message)
            else:
                print(message)

    def on_route(self, registrar, controller: str, entry: RouteEntry) -> None:
        cfg = self._effective_config(controller)
        if cfg["enabled"] and cfg["routes"]:
            self._emit(f"{entry.verb.value} {entry.path} -> {entry.target}", cfg=cfg)

    def on_controller(self, registrar, controller: str, entries: Sequence[RouteEntry]) -> None:
        cfg = self._effective_config(controller)
        if not (cfg["enabled"] and cfg["summary"]):
            return
        prefix = registrar.controller_prefix(controller)
        self._emit(f"{controller}: {len(entries)} routes under {prefix!r}", cfg=cfg)

    def _effective_config(self, controller: str) -> dict:
        defaults = {"enabled": True, "routes": True, "summary": True, "log": True, "print": False}
        cfg = defaults | self.configuration(controller)

        def to_bool(key: str) -> bool:
            val = cfg.get(key)
            return defaults[key] if val is None else bool(val)

        return {key: to_bool(key) for key in defaults}


Registrar.register_plugin(LoggingPlugin)
