"""Tests for restcli.hooks.matchers."""

from __future__ import annotations

import pytest

from restcli.hooks.matchers import (
    ExceptMatcher,
    match_all,
    match_custom,
    match_glob,
    match_regex,
    match_string,
)

ISSUES = "/repos/{owner}/{repo}/issues"


class TestSimpleMatchers:
    def test_all(self) -> None:
        assert match_all().matches("/foo")
        assert match_all().matches("")

    def test_string(self) -> None:
        assert match_string("/foo").matches("/foo")
        assert not match_string("/foo").matches("/bar")
        assert not match_string("/foo").matches("/foo/")

    def test_regex_must_match_whole_path(self) -> None:
        assert match_regex("/repos/[^/]+/[^/]+/issues").matches(ISSUES)
        assert not match_regex("/repos").matches(ISSUES)

    def test_custom(self) -> None:
        assert match_custom(lambda path: path.startswith("/repos/")).matches(ISSUES)
        assert not match_custom(lambda path: len(path) == 42).matches(ISSUES)

    def test_excluding(self) -> None:
        matcher = match_all().excluding(match_string("/login"))
        assert isinstance(matcher, ExceptMatcher)
        assert not matcher.matches("/login")
        assert matcher.matches("/logout")

    def test_excluding_chains(self) -> None:
        matcher = (
            match_glob("/repos/**")
            .excluding(match_string("/repos/{owner}/secret"))
            .excluding(match_regex(".*/issues"))
        )
        assert matcher.matches("/repos/{owner}/{repo}")
        assert not matcher.matches("/repos/{owner}/secret")
        assert not matcher.matches(ISSUES)

    def test_matchers_are_immutable(self) -> None:
        matcher = match_string("/foo")
        with pytest.raises(AttributeError):
            matcher.value = "/bar"  # type: ignore[misc]


class TestGlob:
    @pytest.mark.parametrize(
        "pattern, path, expected",
        [
            ("/repos/**", ISSUES, True),
            ("/repos/**", "/repos", False),
            ("/repos/*/*/issues", ISSUES, True),
            ("/repos/*/issues", ISSUES, False),
            ("/items/?", "/items/1", True),
            ("/items/?", "/items/12", False),
            ("/items/[0-9]", "/items/7", True),
            ("/items/[!0-9]", "/items/7", False),
            ("/items/[!0-9]", "/items/x", True),
            ("/items/*", "/items/{id}", True),
            ("/items/*", "/items", False),
            ("/items/*", "/items/{id}/tags", True),
            ("issues", ISSUES, True),
            ("/issues", ISSUES, False),
            ("/{owner}", "/{owner}", True),
            ("/a\\*b", "/a*b", True),
            ("/a\\*b", "/axb", False),
            ("/a.b", "/axb", False),
        ],
    )
    def test_glob_semantics(self, pattern: str, path: str, expected: bool) -> None:
        assert match_glob(pattern).matches(path) is expected

    def test_braces_are_literal(self) -> None:
        assert not match_glob("/{users,orgs}/*").matches("/users/{id}")

    def test_trailing_escape_rejected(self) -> None:
        with pytest.raises(ValueError):
            match_glob("/items\\")
