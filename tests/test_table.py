"""Tests for the in-memory route table and verb dispatch adapter."""

import pytest

from advroute.core.deriver import HttpVerb
from advroute.core.table import (
    RouteEntry,
    RouteRegistrar,
    RouteTable,
    VerbDispatcher,
    check_placeholders,
    join_path,
)


def test_join_path():
    assert join_path("/users", "") == "/users"
    assert join_path("/users", "about") == "/users/about"
    assert join_path("/users/", "{_missing}") == "/users/{_missing}"
    assert join_path("/users", "profile/{id}") == "/users/profile/{id}"
    assert join_path("", "") == "/"
    assert join_path("/", "") == "/"
    assert join_path("/", "about") == "/about"


def build_table():
    table = RouteTable()
    table.register_route(HttpVerb.GET, "/users", "Users@getIndex")
    table.register_route(HttpVerb.GET, "/users/about", "Users@getAbout")
    table.register_route(HttpVerb.POST, "/users/create-account/{name?}", "Users@postCreateAccount")
    table.register_route(HttpVerb.ANY, "/users/profile/{id}", "Users@anyProfile")
    table.register_route(HttpVerb.ANY, "/users/{_missing}", "Users@missingMethod")
    return table


def test_table_is_append_only_sequence():
    table = build_table()
    assert len(table) == 5
    assert table.routes[0] == RouteEntry(HttpVerb.GET, "/users", "Users@getIndex")
    assert [entry.target for entry in table][-1] == "Users@missingMethod"
    assert isinstance(table, RouteRegistrar)


def test_table_accepts_plain_verb_strings():
    table = RouteTable()
    table.register_route("delete", "/users/{id}", "Users@deleteIndex")
    assert table.routes[0].verb is HttpVerb.DELETE


def test_match_first_wins():
    table = build_table()
    entry, params = table.match("GET", "/users/about")
    assert entry.target == "Users@getAbout"
    assert params == {}

    entry, params = table.match("GET", "/users/")
    assert entry.target == "Users@getIndex"


def test_match_verb_filter_and_any():
    table = build_table()
    entry, params = table.match("POST", "/users/about")
    assert entry.target == "Users@missingMethod"
    assert params == {"_missing": "about"}

    entry, params = table.match("DELETE", "/users/profile/7")
    assert entry.target == "Users@anyProfile"
    assert params == {"id": "7"}


def test_match_optional_placeholder():
    table = build_table()
    entry, params = table.match("POST", "/users/create-account")
    assert entry.target == "Users@postCreateAccount"
    assert params == {"name": None}

    entry, params = table.match("post", "/users/create-account/bob")
    assert params == {"name": "bob"}


def test_match_nothing():
    assert build_table().match("GET", "/news") is None
    assert RouteTable().match("GET", "/") is None


def test_placeholder_registered_first_shadows_literal():
    table = RouteTable()
    table.register_route(HttpVerb.ANY, "/users/{_missing}", "Users@missingMethod")
    table.register_route(HttpVerb.GET, "/users/about", "Users@getAbout")
    entry, _ = table.match("GET", "/users/about")
    assert entry.target == "Users@missingMethod"


class Facade:
    def __init__(self):
        self.calls = []

    def _record(self, verb):
        def register(path, target):
            self.calls.append((verb, path, target))

        return register

    def __getattr__(self, name):
        if name in {"any", "get", "post", "put", "patch", "delete"}:
            return self._record(name)
        raise AttributeError(name)


def test_verb_dispatcher_calls_matching_method():
    facade = Facade()
    dispatcher = VerbDispatcher(facade)
    dispatcher.register_route(HttpVerb.PATCH, "/users/{id}", "Users@patchIndex")
    dispatcher.register_route(HttpVerb.ANY, "/users/{_missing}", "Users@missingMethod")
    assert facade.calls == [
        ("patch", "/users/{id}", "Users@patchIndex"),
        ("any", "/users/{_missing}", "Users@missingMethod"),
    ]
    assert VerbDispatcher.supports(facade)


def test_verb_dispatcher_rejects_incomplete_facade():
    class GetOnly:
        def get(self, path, target):
            return None

    assert not VerbDispatcher.supports(GetOnly())
    with pytest.raises(TypeError, match="missing 'any\\(\\)'"):
        VerbDispatcher(GetOnly())


def test_repeated_placeholder_is_rejected():
    check_placeholders("/teams/{id}/profile/{member}")
    table = RouteTable()
    with pytest.raises(ValueError, match=r"'/teams/\{id\}/profile/\{id\}' repeats placeholder \{id\}"):
        table.register_route(HttpVerb.ANY, "/teams/{id}/profile/{id}", "Teams@anyProfile")
    with pytest.raises(ValueError, match=r"repeats placeholder \{id\}"):
        check_placeholders("/teams/{id}/{id?}")
    assert len(table) == 0
    assert table.match("GET", "/teams/1/profile/2") is None
