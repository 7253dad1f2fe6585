"""Plugin package initialiser (source of truth).

Rebuild rules:
- Keep this file lightweight; do not import concrete plugins here so imports of
  ``advroute.plugins`` remain side-effect free.
- Concrete plugin modules (``logging``, ``emit``) self-register when
  imported elsewhere (see ``advroute.__init__`` for eager imports).
"""

__all__: list[str] = []
