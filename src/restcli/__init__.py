"""restcli -- Turn an OpenAPI 3.x document into a runnable command-line client.

Every documented path becomes a sub-command, every operation on that path a
sub-sub-command, and every parameter a command-line option. Invoking the
generated command performs the HTTP request and writes the response body to
stdout (or a file).

Typical usage::

    restcli openapi.yaml /items/{id} get --id 42 --limit 10

or programmatically::

    from restcli.runner import RestCli, load_rest_cli_spec

    spec = load_rest_cli_spec("openapi.yaml", "items")
    exit_code = RestCli(spec).execute("/items/{id}", "get", "--id", "42")

Modules:
    app: Typer host entry point.
    runner: Execution facade tying the pipeline together.
    models: Document, command-tree and invocation models.
    config: XDG-aware settings with precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: stderr diagnostics with Rich support.
"""

__version__ = "0.1.0"
