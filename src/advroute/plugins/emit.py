"""Route statement export plugin.

When attached (explicitly, or through the registrar's ``emit_routes`` flag) it
writes one file per controller listing the routes that were registered, as
statements that could replace the convention-based registration call::

    # UsersController "Controller" Routes
    Route.get ('/users',              'UsersController@getIndex');
    Route.any ('/users/profile/{id}', 'UsersController@anyProfile');

The verb column is padded to four characters and the target column is aligned
across the file. The output is advisory; nothing reads it back.

Options: ``enabled`` (default True), ``directory`` (default
``/tmp/controllerRoutes``, created when missing).
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Sequence, Union

from advroute.core.registrar import Registrar
from advroute.core.table import RouteEntry
from advroute.plugins._base_plugin import BasePlugin

__all__ = ["DEFAULT_DIRECTORY", "EmitPlugin", "render_routes"]

DEFAULT_DIRECTORY = "/tmp/controllerRoutes"
_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w.-]+")

logger = logging.getLogger("advroute")


def render_routes(controller: str, entries: Sequence[RouteEntry]) -> str:
    """Render ``entries`` as aligned ``Route.<verb>('<path>', '<target>');`` lines."""
    prefixes = [f"Route.{entry.verb.value:<4}('{entry.path}'," for entry in entries]
    width = max((len(prefix) for prefix in prefixes), default=0)
    lines = [f'# {controller} "Controller" Routes']
    for prefix, entry in zip(prefixes, entries):
        lines.append(f"{prefix:<{width}} '{entry.target}');")
    return "\n".join(lines) + "\n"


class EmitPlugin(BasePlugin):
    """Writes registered routes to one statement file per controller."""

    plugin_code = "emit"
    plugin_description = "Exports registered routes as route statements"

    def configure(self, enabled: bool = True, directory: Union[str, Path] = DEFAULT_DIRECTORY):
        """Configure emit plugin options."""
        pass  # Storage is handled by the wrapper

    def output_path(self, controller: str) -> Path:
        directory = Path(self.configuration(controller).get("directory", DEFAULT_DIRECTORY))
        filename = _UNSAFE_FILENAME_CHARS.sub("_", controller)
        return directory / f"{filename}.py"

    def on_controller(self, registrar, controller: str, entries: Sequence[RouteEntry]) -> None:
        target = self.output_path(controller)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(render_routes(controller, entries), encoding="utf-8")
        logger.debug("%s routes written to %s", controller, target)


Registrar.register_plugin(EmitPlugin)
