"""Tests for restcli.hooks.registry."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from restcli.hooks import HeaderAppender, HookRegistry, OptionAppender, match_all
from restcli.hooks.registry import ENTRY_POINT_GROUP


class _Provider:
    def __init__(self, tag: str) -> None:
        self.tag = tag

    def option_appenders(self) -> list[OptionAppender]:
        return [OptionAppender(match_all(), frozenset({"get"}), lambda o: o.append(self.tag))]

    def header_appenders(self) -> list[HeaderAppender]:
        return [
            HeaderAppender(
                match_all(), frozenset({"get"}), lambda h: h.append(("X-Tag", self.tag))
            )
        ]


class _FakeEntryPoint:
    def __init__(self, name: str, factory: Any) -> None:
        self.name = name
        self._factory = factory

    def load(self) -> Any:
        if isinstance(self._factory, Exception):
            raise self._factory
        return self._factory


class _FakeEntryPoints:
    def __init__(self, eps: list[_FakeEntryPoint]) -> None:
        self._eps = eps
        self.groups: list[str] = []

    def select(self, group: str) -> list[_FakeEntryPoint]:
        self.groups.append(group)
        return self._eps


def _patch_entry_points(monkeypatch: pytest.MonkeyPatch, eps: list[_FakeEntryPoint]) -> _FakeEntryPoints:
    fake = _FakeEntryPoints(eps)
    monkeypatch.setattr("restcli.hooks.registry.importlib.metadata.entry_points", lambda: fake)
    return fake


class TestHookRegistry:
    def test_empty(self) -> None:
        registry = HookRegistry()
        assert registry.names() == []
        assert registry.option_appenders() == []
        assert registry.header_appenders() == []

    def test_register_collects_in_order(self) -> None:
        registry = HookRegistry()
        registry.register("first", _Provider("1"))
        registry.register("second", _Provider("2"))

        assert registry.names() == ["first", "second"]
        produced = [a.get_options("/x", "get") for a in registry.option_appenders()]
        assert produced == [["1"], ["2"]]
        assert len(registry.header_appenders()) == 2

    def test_discover(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = _patch_entry_points(
            monkeypatch, [_FakeEntryPoint("tagged", lambda: _Provider("t"))]
        )

        registry = HookRegistry()
        assert registry.discover() == ["tagged"]
        assert fake.groups == [ENTRY_POINT_GROUP]
        assert registry.header_appenders()[0].get_headers("/x", "get") == [("X-Tag", "t")]

    def test_discover_skips_broken_provider(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        _patch_entry_points(
            monkeypatch,
            [
                _FakeEntryPoint("broken", ImportError("no module named nowhere")),
                _FakeEntryPoint("good", lambda: _Provider("g")),
            ],
        )

        registry = HookRegistry()
        with caplog.at_level(logging.WARNING, logger="restcli.hooks.registry"):
            assert registry.discover() == ["good"]
        assert "broken" in caplog.text

    def test_discover_keeps_registered_provider(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _patch_entry_points(monkeypatch, [_FakeEntryPoint("dup", lambda: _Provider("ep"))])

        registry = HookRegistry()
        manual = _Provider("manual")
        registry.register("dup", manual)

        assert registry.discover() == []
        assert registry.option_appenders()[0].get_options("/x", "get") == ["manual"]
