"""Numeric process exit codes returned by generated commands.

Each constant maps to an error category and is referenced by the
corresponding :class:`~restcli.exceptions.RestCliError` subclass.
Shell scripts driving a generated command can branch on the exit code
without parsing stderr.

Example::

    $ restcli api.yaml --assert-http-status-code=201 /items post
    $ echo $?
    1   # the server answered with something other than 201
"""

EXIT_SUCCESS = 0
"""The request was sent and, if asserted, returned the expected status."""

EXIT_GENERIC_FAILURE = 1
"""Any failure after argument parsing: no path or method selected, unresolved
path placeholder, I/O or transport failure, status assertion mismatch."""

EXIT_INVALID_USAGE = 2
"""The arguments were rejected by the argument parser (unknown option,
missing required option, mutually exclusive options combined)."""

EXIT_INTERRUPTED = 130
"""The process was interrupted with Ctrl-C."""
