"""Exception hierarchy for restcli.

All exceptions inherit from :class:`RestCliError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`restcli.exit_codes`.
:meth:`restcli.runner.RestCli.execute` catches ``RestCliError``, prints the
message to stderr and returns the exit code instead of raising.

Subclass hierarchy::

    RestCliError (exit 1)
    +-- ConfigurationError   (exit 1)
    +-- SpecParseError       (exit 1)
    +-- InvocationError      (exit 1)
    +-- PathParameterError   (exit 1)
    +-- TransportError       (exit 1)
    +-- ConfigError          (exit 1)
"""

from __future__ import annotations

from restcli.exit_codes import EXIT_GENERIC_FAILURE


class RestCliError(Exception):
    """Base exception for all restcli errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigurationError(RestCliError):
    """Raised when the API document cannot be turned into a usable command.

    Covers unsupported parameter value kinds and option-name collisions
    found while building the command tree, and a document without any
    server entry found while resolving a request.
    """


class SpecParseError(RestCliError):
    """Raised when the OpenAPI document cannot be read, parsed or validated."""


class InvocationError(RestCliError):
    """Raised when the command line selects no path or no method."""


class PathParameterError(RestCliError):
    """Raised when a path placeholder has no value at resolution time.

    The command tree marks every path parameter as required, so reaching
    this error means the parse result did not honour the tree. No request
    is built.

    Args:
        path: The path pattern being resolved.
        missing: Placeholder names that had no value.
    """

    def __init__(self, path: str, missing: list[str]):
        self.path = path
        self.missing = list(missing)
        super().__init__(
            f"Not provided path parameters for {path}: {', '.join(self.missing)}"
        )


class TransportError(RestCliError):
    """Raised when an HTTP exchange fails (connection, timeout, decoding, redirects)."""


class ConfigError(RestCliError):
    """Raised for unreadable or invalid settings files and environment values."""
