"""Host route-table contract and the in-memory reference table.

The registrar never dispatches requests; it only hands ``(verb, path, target)``
triples to whatever implements ``RouteRegistrar``. ``RouteTable`` is the
bundled implementation: append-only, rebuilt per registrar, never persisted.
Its ``match`` helper answers "which route would a first-match-wins dispatcher
pick", which is what route ordering exists to get right.

``VerbDispatcher`` adapts facades exposing one method per verb
(``facade.get(path, target)``, ``facade.post(...)``) through an explicit
verb -> method-name table.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Optional,
    Pattern,
    Protocol,
    Set,
    Tuple,
    runtime_checkable,
)

from .deriver import HttpVerb

__all__ = [
    "RouteEntry",
    "RouteRegistrar",
    "RouteTable",
    "VerbDispatcher",
    "check_placeholders",
    "join_path",
]

_DUPLICATE_SEPARATORS = re.compile(r"/{2,}")
_PLACEHOLDER = re.compile(r"\{(\w+)(\?)?\}")


def join_path(prefix: str, slug: str) -> str:
    """Join ``prefix + "/" + slug`` collapsing duplicate separators.

    A trailing separator is dropped unless the result is the root path.
    """
    path = _DUPLICATE_SEPARATORS.sub("/", f"{prefix}/{slug}")
    if len(path) > 1:
        path = path.rstrip("/")
    return path or "/"


@dataclass(frozen=True)
class RouteEntry:
    """One registered route."""

    verb: HttpVerb
    path: str
    target: str


@runtime_checkable
class RouteRegistrar(Protocol):
    def register_route(self, verb: HttpVerb, path: str, target: str) -> None: ...


class RouteTable:
    """Append-only in-memory route table."""

    __slots__ = ("_routes", "_patterns")

    def __init__(self) -> None:
        self._routes: List[RouteEntry] = []
        self._patterns: List[Pattern[str]] = []

    def register_route(self, verb: HttpVerb, path: str, target: str) -> None:
        pattern = _compile_path(path)
        self._routes.append(RouteEntry(HttpVerb(verb), path, target))
        self._patterns.append(pattern)

    @property
    def routes(self) -> Tuple[RouteEntry, ...]:
        return tuple(self._routes)

    def __iter__(self) -> Iterator[RouteEntry]:
        return iter(tuple(self._routes))

    def __len__(self) -> int:
        return len(self._routes)

    def match(self, method: str, path: str) -> Optional[Tuple[RouteEntry, Dict[str, Optional[str]]]]:
        """Return the first route matching ``method`` + ``path`` and its parameters."""
        wanted = method.lower()
        for entry, pattern in zip(self._routes, self._patterns):
            if entry.verb is not HttpVerb.ANY and entry.verb.value != wanted:
                continue
            found = pattern.match(path)
            if found is not None:
                return entry, found.groupdict()
        return None


def check_placeholders(path: str) -> None:
    """Raise ``ValueError`` when a placeholder name repeats inside ``path``."""
    seen: Set[str] = set()
    for placeholder in _PLACEHOLDER.finditer(path):
        name = placeholder.group(1)
        if name in seen:
            raise ValueError(f"Route path {path!r} repeats placeholder {{{name}}}")
        seen.add(name)


def _compile_path(path: str) -> Pattern[str]:
    check_placeholders(path)
    regex = ""
    cursor = 0
    for placeholder in _PLACEHOLDER.finditer(path):
        start = placeholder.start()
        name, optional = placeholder.group(1), placeholder.group(2)
        literal = path[cursor:start]
        if optional and literal.endswith("/"):
            regex += re.escape(literal[:-1]) + f"(?:/(?P<{name}>[^/]+))?"
        else:
            regex += re.escape(literal) + f"(?P<{name}>[^/]+)"
        cursor = placeholder.end()
    regex += re.escape(path[cursor:])
    return re.compile(f"^{regex}/?$")


class VerbDispatcher:
    """``RouteRegistrar`` adapter over a facade with one method per verb."""

    __slots__ = ("facade", "_calls")

    VERB_METHODS: Dict[HttpVerb, str] = {
        HttpVerb.ANY: "any",
        HttpVerb.GET: "get",
        HttpVerb.POST: "post",
        HttpVerb.PUT: "put",
        HttpVerb.PATCH: "patch",
        HttpVerb.DELETE: "delete",
    }

    def __init__(self, facade: Any) -> None:
        calls: Dict[HttpVerb, Callable[[str, str], Any]] = {}
        for verb, method_name in self.VERB_METHODS.items():
            method = getattr(facade, method_name, None)
            if not callable(method):
                raise TypeError(
                    f"{type(facade).__name__} cannot register routes: missing '{method_name}()'"
                )
            calls[verb] = method
        self.facade = facade
        self._calls = calls

    @classmethod
    def supports(cls, facade: Any) -> bool:
        return all(callable(getattr(facade, name, None)) for name in cls.VERB_METHODS.values())

    def register_route(self, verb: HttpVerb, path: str, target: str) -> None:
        self._calls[HttpVerb(verb)](path, target)
