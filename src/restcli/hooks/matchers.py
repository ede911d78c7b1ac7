"""Predicates over path patterns, used to scope appenders.

A matcher is tested against the *path pattern* of a command, placeholders
included (``/repos/{owner}/{repo}/issues``), never against a resolved URL.

The variants are:

- :class:`AllMatcher` -- every path.
- :class:`StringMatcher` -- exact string equality.
- :class:`GlobMatcher` -- gitignore-style glob (see below).
- :class:`RegexMatcher` -- the regular expression must match the whole path.
- :class:`ExceptMatcher` -- ``include`` matches and ``exclude`` does not.
- :class:`CustomMatcher` -- an arbitrary ``str -> bool`` callable.

Every matcher is immutable and has :meth:`~AllMatcher.excluding`, so
``match_all().excluding(match_string("/login"))`` matches every path but
``/login``.

**Glob syntax.** Globs follow gitignore wildmatch rules as implemented by
:mod:`pathspec`. ``*`` matches any run of characters within one segment,
``?`` exactly one character within a segment, ``**`` any number of whole
segments. ``[abc]``, ``[a-z]`` and ``[!abc]`` are character classes and
``\\`` escapes the next character. A leading ``/`` anchors the pattern at the
root; without it a single-segment pattern matches at any depth. A pattern
also matches everything below the paths it matches. So ``/repos/**`` matches
``/repos/{owner}/{repo}/issues`` but not ``/repos``, and ``/items/*``
matches both ``/items/{id}`` and ``/items/{id}/tags``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Union

import pathspec


class _Excludable:
    def excluding(self, other: PathMatcher) -> ExceptMatcher:
        """Return a matcher accepting what this one accepts and *other* rejects."""
        return ExceptMatcher(self, other)  # type: ignore[arg-type]


@dataclass(frozen=True)
class AllMatcher(_Excludable):
    def matches(self, path: str) -> bool:
        return True


@dataclass(frozen=True)
class StringMatcher(_Excludable):
    value: str

    def matches(self, path: str) -> bool:
        return path == self.value


@dataclass(frozen=True)
class GlobMatcher(_Excludable):
    pattern: str
    _spec: pathspec.PathSpec = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_spec", pathspec.GitIgnoreSpec.from_lines([self.pattern]))

    def matches(self, path: str) -> bool:
        return self._spec.match_file(path)


@dataclass(frozen=True)
class RegexMatcher(_Excludable):
    pattern: str
    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_regex", re.compile(self.pattern))

    def matches(self, path: str) -> bool:
        return self._regex.fullmatch(path) is not None


@dataclass(frozen=True)
class ExceptMatcher(_Excludable):
    include: PathMatcher
    exclude: PathMatcher

    def matches(self, path: str) -> bool:
        return self.include.matches(path) and not self.exclude.matches(path)


@dataclass(frozen=True)
class CustomMatcher(_Excludable):
    predicate: Callable[[str], bool]

    def matches(self, path: str) -> bool:
        return bool(self.predicate(path))


PathMatcher = Union[
    AllMatcher, StringMatcher, GlobMatcher, RegexMatcher, ExceptMatcher, CustomMatcher
]


def match_all() -> AllMatcher:
    return AllMatcher()


def match_string(value: str) -> StringMatcher:
    return StringMatcher(value)


def match_glob(pattern: str) -> GlobMatcher:
    """Return a matcher for the glob *pattern*.

    Raises:
        ValueError: If the pattern is malformed, such as ending in a lone
            ``\\``.
    """
    return GlobMatcher(pattern)


def match_regex(pattern: str) -> RegexMatcher:
    return RegexMatcher(pattern)


def match_custom(predicate: Callable[[str], bool]) -> CustomMatcher:
    return CustomMatcher(predicate)

