"""Policy hooks -- path matchers, appenders and their discovery.

Sub-modules:

* :mod:`~restcli.hooks.matchers` -- Predicates over path patterns.
* :mod:`~restcli.hooks.appenders` -- :class:`OptionAppender` and
  :class:`HeaderAppender`.
* :mod:`~restcli.hooks.registry` -- Entry-point discovery of appenders.
"""

from restcli.hooks.appenders import HeaderAppender, OptionAppender
from restcli.hooks.matchers import (
    AllMatcher,
    CustomMatcher,
    ExceptMatcher,
    GlobMatcher,
    PathMatcher,
    RegexMatcher,
    StringMatcher,
    match_all,
    match_custom,
    match_glob,
    match_regex,
    match_string,
)
from restcli.hooks.registry import HookRegistry

__all__ = [
    "AllMatcher",
    "CustomMatcher",
    "ExceptMatcher",
    "GlobMatcher",
    "HeaderAppender",
    "HookRegistry",
    "OptionAppender",
    "PathMatcher",
    "RegexMatcher",
    "StringMatcher",
    "match_all",
    "match_custom",
    "match_glob",
    "match_regex",
    "match_string",
]
