"""Route derivation from controller members (source of truth).

If this module vanished, rebuild it from the description below. It is pure
computation: no registrar calls, no I/O, no state beyond module constants.

Verb extraction
---------------
- ``VERB_KEYWORDS`` is the closed, ordered verb list ``any, get, post, put,
  patch, delete``. The first keyword that is a case-sensitive prefix of the
  member name wins. Matching is anchored to the start of the name; a keyword
  found elsewhere (``companyNameGet``) never counts.
- Members matching no keyword are skipped. The catch-all member
  (``missingMethod``) is deferred and emitted last as ``any`` + ``{_missing}``.
- The framework hook ``getMiddleware`` is never a route.

Slug pipeline
-------------
``slug_for(member)``

1. strip the anchored verb prefix from the name
2. split camel case into lowercase words (``CreateAccount`` -> ``create account``)
3. slugify with ``-`` (``create-account``); ``index`` becomes ``""``
4. append ``/{name}`` for each untyped parameter (``/{name?}`` when defaulted)
5. drop a single leading ``/``

Ordering
--------
Literal slugs first, placeholder slugs second, lexicographic within each group.
``sorted`` is stable so equal slugs keep member order.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Mapping, Optional, Tuple

from .members import Member

__all__ = [
    "CATCH_ALL_MEMBERS",
    "CATCH_ALL_SLUG",
    "HOOK_MEMBERS",
    "VERB_KEYWORDS",
    "HttpVerb",
    "RouteCandidate",
    "RouteTarget",
    "derive",
    "derive_many",
    "slug_for",
    "slugify",
    "snake_words",
    "verb_for",
]

logger = logging.getLogger("advroute")


class HttpVerb(str, Enum):
    ANY = "any"
    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"

    def __str__(self) -> str:
        return self.value


VERB_KEYWORDS: Tuple[HttpVerb, ...] = tuple(HttpVerb)
HOOK_MEMBERS = frozenset({"getMiddleware", "get_middleware"})
CATCH_ALL_MEMBERS = frozenset({"missingMethod", "missing_method"})
CATCH_ALL_SLUG = "{_missing}"

_VERB_AT_START = re.compile("^(" + "|".join(verb.value for verb in VERB_KEYWORDS) + ")")
_WORD_BOUNDARY = re.compile(r"(.)(?=[A-Z])")
_NON_SLUG_CHARS = re.compile(r"[^-\w\s]+")
_SLUG_SEPARATORS = re.compile(r"[-\s]+")


@dataclass(frozen=True)
class RouteTarget:
    """Controller type + method a route dispatches to."""

    type_name: str
    member_name: str

    @property
    def identifier(self) -> str:
        return f"{self.type_name}@{self.member_name}"

    def __str__(self) -> str:
        return self.identifier


@dataclass(frozen=True)
class RouteCandidate:
    """A route derived from one member, before the path prefix is applied."""

    verb: HttpVerb
    slug: str
    target: RouteTarget
    catch_all: bool = False

    @property
    def has_placeholder(self) -> bool:
        return "{" in self.slug


# ----------------------------------------------------------------------
# String helpers
# ----------------------------------------------------------------------
def snake_words(value: str, delimiter: str = " ") -> str:
    """Split a camel/mixed-case identifier into lowercase words."""
    return _WORD_BOUNDARY.sub(r"\1" + delimiter, value).lower()


def slugify(value: str, separator: str = "-") -> str:
    folded = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    folded = folded.replace("_", separator).replace("@", f"{separator}at{separator}")
    folded = _NON_SLUG_CHARS.sub("", folded.lower())
    folded = _SLUG_SEPARATORS.sub(separator, folded)
    return folded.strip(separator)


def verb_for(name: str) -> Optional[HttpVerb]:
    """Return the verb whose keyword starts ``name``, if any."""
    match = _VERB_AT_START.match(name)
    if match is None:
        return None
    return HttpVerb(match.group(1))


def slug_for(member: Member) -> str:
    cleaned = _VERB_AT_START.sub("", member.name, count=1)
    slug = slugify(snake_words(cleaned))
    if slug == "index":
        slug = ""
    for param in member.parameters:
        if param.has_declared_type:
            continue
        optional = "?" if param.has_default_value else ""
        slug += f"/{{{param.name.lower()}{optional}}}"
    if slug.startswith("/"):
        slug = slug[1:]
    return slug


# ----------------------------------------------------------------------
# Derivation
# ----------------------------------------------------------------------
def _sort_key(candidate: RouteCandidate) -> Tuple[bool, str]:
    return candidate.has_placeholder, candidate.slug


def derive(type_name: str, members: Iterable[Member]) -> List[RouteCandidate]:
    """Derive ordered route candidates for one controller.

    Args:
        type_name: Name used on the left side of target identifiers.
        members: Controller members, usually from ``members_of``.

    Returns:
        Candidates in registration order; the catch-all, when present, is last.
    """
    candidates: List[RouteCandidate] = []
    catch_all: Optional[RouteCandidate] = None
    for member in members:
        if member.name in HOOK_MEMBERS or not member.is_public:
            continue
        if member.name in CATCH_ALL_MEMBERS:
            catch_all = RouteCandidate(
                verb=HttpVerb.ANY,
                slug=CATCH_ALL_SLUG,
                target=RouteTarget(type_name, member.name),
                catch_all=True,
            )
            continue
        verb = verb_for(member.name)
        if verb is None:
            logger.debug("%s.%s matches no verb keyword, skipped", type_name, member.name)
            continue
        candidates.append(
            RouteCandidate(verb=verb, slug=slug_for(member), target=RouteTarget(type_name, member.name))
        )
    ordered = sorted(candidates, key=_sort_key)
    if catch_all is not None:
        ordered.append(catch_all)
    return ordered


def derive_many(
    controllers: Mapping[str, Tuple[str, Iterable[Member]]],
) -> List[Tuple[str, RouteCandidate]]:
    """Apply ``derive`` to ``{prefix: (type_name, members)}`` in insertion order."""
    result: List[Tuple[str, RouteCandidate]] = []
    for prefix, (type_name, members) in controllers.items():
        result.extend((prefix, candidate) for candidate in derive(type_name, members))
    return result
