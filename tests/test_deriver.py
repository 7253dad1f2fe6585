"""Tests for verb extraction, slug derivation and route ordering."""

from advroute.core.deriver import (
    CATCH_ALL_SLUG,
    HttpVerb,
    RouteTarget,
    derive,
    derive_many,
    slug_for,
    slugify,
    snake_words,
    verb_for,
)
from advroute.core.members import NON_PUBLIC, Member, Parameter


def member(name, *params, visibility="public"):
    return Member(name=name, parameters=tuple(params), visibility=visibility)


def slugs(candidates):
    return [candidate.slug for candidate in candidates]


def test_verb_is_first_matching_prefix():
    assert verb_for("anyIndex") is HttpVerb.ANY
    assert verb_for("getAbout") is HttpVerb.GET
    assert verb_for("postCreate") is HttpVerb.POST
    assert verb_for("putItem") is HttpVerb.PUT
    assert verb_for("patchItem") is HttpVerb.PATCH
    assert verb_for("deleteItem") is HttpVerb.DELETE


def test_verb_requires_case_sensitive_prefix():
    assert verb_for("companyNameGet") is None
    assert verb_for("GetAbout") is None
    assert verb_for("show") is None


def test_snake_words_and_slugify():
    assert snake_words("CreateAccount") == "create account"
    assert snake_words("about") == "about"
    assert slugify("create account") == "create-account"
    assert slugify("_user_list") == "user-list"
    assert slugify("Crème brûlée") == "creme-brulee"
    assert slugify("mail@home") == "mail-at-home"


def test_index_becomes_empty_slug():
    assert slug_for(member("getIndex")) == ""
    assert slug_for(member("anyIndex")) == ""
    assert slug_for(member("get")) == ""


def test_verb_removed_only_at_start():
    assert slug_for(member("getCompanyName")) == "company-name"
    assert slug_for(member("getCompanyname")) == "companyname"


def test_snake_case_method_names():
    assert slug_for(member("get_user_list")) == "user-list"
    assert slug_for(member("get_index")) == ""


def test_parameter_placeholders():
    account = member(
        "postCreateAccount",
        Parameter("request", has_declared_type=True),
        Parameter("name", has_default_value=True),
    )
    assert slug_for(account) == "create-account/{name?}"
    assert slug_for(member("anyProfile", Parameter("id"))) == "profile/{id}"
    assert slug_for(member("getShow", Parameter("ItemID"))) == "show/{itemid}"


def test_index_with_parameter_has_no_leading_separator():
    assert slug_for(member("getIndex", Parameter("id"))) == "{id}"
    assert slug_for(member("getIndex", Parameter("id"), Parameter("page", has_default_value=True))) == (
        "{id}/{page?}"
    )


def test_end_to_end_order():
    members = [
        member("getIndex"),
        member("getAbout"),
        member("anyProfile", Parameter("id")),
        member("missingMethod"),
    ]
    result = derive("UsersController", members)
    assert [(c.verb, c.slug) for c in result] == [
        (HttpVerb.GET, ""),
        (HttpVerb.GET, "about"),
        (HttpVerb.ANY, "profile/{id}"),
        (HttpVerb.ANY, CATCH_ALL_SLUG),
    ]
    assert result[0].target == RouteTarget("UsersController", "getIndex")
    assert result[-1].target.identifier == "UsersController@missingMethod"
    assert result[-1].catch_all is True


def test_catch_all_is_last_wherever_declared():
    members = [
        member("missingMethod"),
        member("postZulu", Parameter("id")),
        member("getAlpha"),
    ]
    result = derive("C", members)
    assert slugs(result) == ["alpha", "zulu/{id}", "{_missing}"]
    assert result[-1].verb is HttpVerb.ANY


def test_snake_case_catch_all_is_last():
    result = derive("C", [member("missing_method"), member("get_about"), member("getIndex")])
    assert [(c.verb, c.slug) for c in result] == [
        (HttpVerb.GET, ""),
        (HttpVerb.GET, "about"),
        (HttpVerb.ANY, CATCH_ALL_SLUG),
    ]
    assert CATCH_ALL_SLUG == "{_missing}"
    assert result[-1].catch_all is True
    assert result[-1].target.identifier == "C@missing_method"


def test_literal_slugs_precede_placeholders():
    members = [
        member("anyIndex", Parameter("page")),
        member("getZebra"),
        member("getAlpha", Parameter("id")),
        member("getAbout"),
    ]
    result = derive("C", members)
    assert slugs(result) == ["about", "zebra", "alpha/{id}", "{page}"]
    seen_placeholder = False
    for candidate in result:
        if candidate.has_placeholder:
            seen_placeholder = True
        else:
            assert not seen_placeholder


def test_equal_slugs_keep_member_order():
    result = derive("C", [member("postAbout"), member("getAbout")])
    assert [c.verb for c in result] == [HttpVerb.POST, HttpVerb.GET]


def test_filtered_members_produce_no_routes():
    members = [
        member("getMiddleware"),
        member("get_middleware"),
        member("getSecret", visibility=NON_PUBLIC),
        member("companyNameGet"),
        member("show"),
        member("getAbout"),
    ]
    result = derive("C", members)
    assert [c.target.member_name for c in result] == ["getAbout"]


def test_derive_is_idempotent():
    members = [member("getB"), member("getA", Parameter("x")), member("missingMethod"), member("anyC")]
    assert derive("C", members) == derive("C", members)


def test_derive_many_keeps_insertion_order():
    result = derive_many(
        {
            "/users": ("UsersController", [member("getIndex")]),
            "/news": ("NewsController", [member("getLatest"), member("getIndex")]),
        }
    )
    assert [(prefix, c.target.identifier) for prefix, c in result] == [
        ("/users", "UsersController@getIndex"),
        ("/news", "NewsController@getIndex"),
        ("/news", "NewsController@getLatest"),
    ]
