"""Tests for restcli.auth."""

from __future__ import annotations

import pytest

from restcli.auth import (
    NO_AUTHORIZATION,
    HeaderCredential,
    NoAuthorization,
    UriUserInfo,
    parse_user_info,
)
from restcli.exceptions import ConfigError


class TestAuthorizationVariants:
    def test_no_authorization_singleton_equal(self) -> None:
        assert NO_AUTHORIZATION == NoAuthorization()

    def test_secrets_masked_in_repr(self) -> None:
        assert "abc123" not in repr(HeaderCredential("Bearer abc123"))
        text = repr(UriUserInfo("alice", "s3cret"))
        assert "alice" in text
        assert "s3cret" not in text

    def test_immutable(self) -> None:
        credential = HeaderCredential("x")
        with pytest.raises(AttributeError):
            credential.value = "y"  # type: ignore[misc]


class TestParseUserInfo:
    def test_user_and_password(self) -> None:
        assert parse_user_info("alice:s3cret") == UriUserInfo("alice", "s3cret")

    def test_password_may_contain_colons(self) -> None:
        assert parse_user_info("alice:a:b").password == "a:b"

    def test_empty_password_allowed(self) -> None:
        assert parse_user_info("alice:") == UriUserInfo("alice", "")

    @pytest.mark.parametrize("value", ["alice", ":s3cret", ""])
    def test_rejects_malformed(self, value: str) -> None:
        with pytest.raises(ConfigError, match="USER:PASSWORD"):
            parse_user_info(value)
