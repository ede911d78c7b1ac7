"""Translate a :class:`~restcli.models.CommandNode` tree into Click commands.

The root node becomes a :class:`click.Group`, each path node a nested
:class:`click.Group`, and each method node a :class:`MethodCommand`. Click
then does all argument lexing, help, usage and version rendering.

Option names coming from an API document are arbitrary strings (``--id``,
``--X-Request-ID``, ``--key-in-path``), so every option is registered under a
synthetic identifier (``p0``, ``p1``, ...) and mapped back to its real name
when the callback runs.

Invoking the method command builds an :class:`~restcli.models.Invocation`
and hands it to the *dispatch* callable, whose integer return value becomes
the return value of ``main(..., standalone_mode=False)``.

A method command stops parsing at its first positional argument. Whatever
follows is another selection, either a method of the same path or a new
path, and is run in turn::

    items /items/{id} get --id 1 /items/{id} get --id 2

Every selection is recorded and the last one is dispatched, with its own
options only.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence, cast

import click
from click.core import ParameterSource
from click.shell_completion import BashComplete

from restcli.exceptions import InvocationError, RestCliError
from restcli.exit_codes import EXIT_SUCCESS
from restcli.output import info
from restcli.generator.command_tree import (
    ASSERT_STATUS_OPTION,
    COMPLETION_OPTION,
    HELP_OPTION_NAMES,
    INPUT_FILE_OPTION,
    OUTPUT_FILE_OPTION,
    REQUEST_BODY_OPTION,
    STDIN_OPTION,
    VERSION_OPTION_NAMES,
)
from restcli.models import CliValueKind, CommandNode, GlobalOptions, Invocation, OptionSpec

if TYPE_CHECKING:
    from restcli.hooks.appenders import OptionAppender

logger = logging.getLogger(__name__)

Dispatch = Callable[[Invocation], Optional[int]]

_CONTEXT_SETTINGS = {"help_option_names": list(HELP_OPTION_NAMES)}
_METHOD_CONTEXT_SETTINGS = {
    **_CONTEXT_SETTINGS,
    "allow_extra_args": True,
    "allow_interspersed_args": False,
}

_SELECTION_KEY = "restcli.selection"


class _Selection:
    """Paths selected so far, and the methods selected under the last one."""

    def __init__(self) -> None:
        self.paths: list[str] = []
        self.methods: list[str] = []


def _selection(ctx: click.Context) -> _Selection:
    return ctx.meta.setdefault(_SELECTION_KEY, _Selection())


class _OrderedGroup(click.Group):
    """A group listing its sub-commands in registration order, not sorted."""

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(self.commands)


class MethodCommand(click.Command):
    """Leaf command for one ``path`` + ``method`` pair.

    Before parsing, the arguments produced by every matching
    :class:`~restcli.hooks.appenders.OptionAppender` are appended to this
    command's own arguments, ahead of any further selection.
    """

    def __init__(
        self,
        *args: Any,
        path: str,
        option_appenders: Sequence[OptionAppender] = (),
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.path = path
        self.option_appenders = tuple(option_appenders)

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        extra: list[str] = []
        for appender in self.option_appenders:
            produced = appender.get_options(self.path, self.name or "")
            if produced is None:
                continue
            logger.debug(
                "Option appender fired for %s %s: %d argument(s)",
                self.name,
                self.path,
                len(produced),
            )
            extra.extend(produced)
        if extra:
            _, rest, _ = self.make_parser(ctx).parse_args(args=list(args))
            own = args[: len(args) - len(rest)]
            args = [*own, *extra, *rest]
        return super().parse_args(ctx, args)


def to_click_command(
    node: CommandNode,
    dispatch: Dispatch,
    option_appenders: Sequence[OptionAppender] = (),
) -> click.Group:
    """Build the Click group for the root *node* and everything below it.

    Args:
        node: The root node from
            :func:`~restcli.generator.command_tree.build_command_tree`.
        dispatch: Called with the :class:`~restcli.models.Invocation` of a
            fully parsed command line. Its return value is the exit code.
        option_appenders: Appenders consulted by every method command.

    Returns:
        A :class:`click.Group`, ready for ``main(args, standalone_mode=False)``.
    """
    params, names = _build_params(node.options)
    ident_of = {name: ident for ident, name in names.items()}

    def callback(**values: Any) -> None:
        ctx = click.get_current_context()
        by_name = {names[ident]: value for ident, value in values.items()}

        completion = by_name.get(COMPLETION_OPTION)
        if completion is not None:
            _emit_completion_script(ctx, completion)
            ctx.exit(EXIT_SUCCESS)

        for group in node.exclusive_groups:
            given = [name for name in group if _is_given(by_name.get(name))]
            if len(given) > 1:
                raise click.UsageError(
                    f"Options {', '.join(given)} are mutually exclusive.", ctx=ctx
                )

        assert_status = None
        source = ctx.get_parameter_source(ident_of[ASSERT_STATUS_OPTION])
        if source == ParameterSource.COMMANDLINE:
            assert_status = by_name[ASSERT_STATUS_OPTION]

        ctx.obj = GlobalOptions(
            request_body=by_name.get(REQUEST_BODY_OPTION),
            stdin=bool(by_name.get(STDIN_OPTION)),
            input_file=by_name.get(INPUT_FILE_OPTION),
            output_file=by_name.get(OUTPUT_FILE_OPTION),
            assert_status=assert_status,
        )

        if ctx.invoked_subcommand is None:
            raise InvocationError("No path specified.")

    root = _OrderedGroup(
        name=node.name,
        params=params,
        callback=callback,
        help=node.description,
        invoke_without_command=True,
        no_args_is_help=False,
        context_settings=_CONTEXT_SETTINGS,
    )
    if node.version is not None:
        click.version_option(
            node.version, *VERSION_OPTION_NAMES, message="%(version)s"
        )(root)

    for child in node.children.values():
        root.add_command(_build_path_group(child, dispatch, option_appenders))

    return root


def _build_path_group(
    node: CommandNode,
    dispatch: Dispatch,
    option_appenders: Sequence[OptionAppender],
) -> click.Group:
    def callback() -> None:
        ctx = click.get_current_context()
        selection = _selection(ctx)
        selection.paths.append(node.name)
        selection.methods.clear()
        if ctx.invoked_subcommand is None:
            raise InvocationError("No method specified.")

    group = _OrderedGroup(
        name=node.name,
        callback=callback,
        help=node.description,
        invoke_without_command=True,
        no_args_is_help=False,
        context_settings=_CONTEXT_SETTINGS,
    )
    for child in node.children.values():
        group.add_command(_build_method_command(node.name, child, dispatch, option_appenders))
    return group


def _build_method_command(
    path: str,
    node: CommandNode,
    dispatch: Dispatch,
    option_appenders: Sequence[OptionAppender],
) -> MethodCommand:
    params, names = _build_params(node.options)
    method = node.name

    def callback(**values: Any) -> Optional[int]:
        ctx = click.get_current_context()
        selection = _selection(ctx)
        selection.methods.append(method)
        if ctx.args:
            return _run_next_selection(ctx)

        matched = {
            names[ident]: value
            for ident, value in values.items()
            if value is not None and value != ()
        }
        global_options = ctx.find_object(GlobalOptions) or GlobalOptions()
        invocation = Invocation(
            paths=tuple(selection.paths),
            methods=tuple(selection.methods),
            options=MappingProxyType(matched),
            global_options=global_options,
        )
        return dispatch(invocation)

    return MethodCommand(
        name=method,
        params=params,
        callback=callback,
        help=node.description,
        context_settings=_METHOD_CONTEXT_SETTINGS,
        path=path,
        option_appenders=option_appenders,
    )


def _run_next_selection(ctx: click.Context) -> Optional[int]:
    """Run the selection following the method command of *ctx*.

    A leading method name of the current path selects another method on
    it; anything else must be a path of the root group.

    Raises:
        click.UsageError: If the leftover arguments name no path or method.
    """
    args = list(ctx.args)
    target = ctx.find_root()
    path_ctx = ctx.parent
    if path_ctx is not None and args[0] in cast(click.Group, path_ctx.command).commands:
        target = path_ctx

    group = cast(click.Group, target.command)
    name, command, rest = group.resolve_command(target, args)
    if command is None or name is None:
        raise click.UsageError(f"No such command '{args[0]}'.", ctx=target)
    with command.make_context(name, rest, parent=target) as sub_ctx:
        return command.invoke(sub_ctx)


def _build_params(
    specs: Sequence[OptionSpec],
) -> tuple[list[click.Parameter], dict[str, str]]:
    """Return the Click options for *specs* and an ``identifier -> name`` map."""
    params: list[click.Parameter] = []
    names: dict[str, str] = {}
    for idx, spec in enumerate(specs):
        ident = f"p{idx}"
        names[ident] = spec.name
        params.append(_to_click_option(spec, ident))
    return params, names


def _to_click_option(spec: OptionSpec, ident: str) -> click.Option:
    """Map one :class:`~restcli.models.OptionSpec` onto a :class:`click.Option`.

    ============  ==========================================================
    value kind    Click option
    ============  ==========================================================
    STRING        ``type=click.STRING``
    INTEGER       ``type=click.INT``
    BOOLEAN       ``type=click.BOOL``; ``--opt`` alone means ``true``
    STRING_LIST   ``type=click.STRING, multiple=True`` (repeat the option)
    FLAG          ``is_flag=True``
    ============  ==========================================================
    """
    decls = [spec.name, ident]
    kwargs: dict[str, Any] = {
        "help": spec.description,
        "required": spec.required,
        "metavar": spec.param_label,
    }

    if spec.value_kind == CliValueKind.FLAG:
        return click.Option(decls, is_flag=True, default=bool(spec.default), **kwargs)

    flag_value = spec.flag_value
    if spec.value_kind == CliValueKind.BOOLEAN:
        kwargs["type"] = click.BOOL
        if flag_value is None:
            flag_value = True
    elif spec.value_kind == CliValueKind.INTEGER:
        kwargs["type"] = click.INT
    elif spec.value_kind == CliValueKind.STRING_LIST:
        kwargs["type"] = click.STRING
        kwargs["multiple"] = True
    else:
        kwargs["type"] = click.STRING

    if flag_value is not None:
        kwargs["is_flag"] = False
        kwargs["flag_value"] = flag_value

    if spec.default is not None:
        kwargs["default"] = spec.default
        kwargs["show_default"] = True

    return click.Option(decls, **kwargs)


def _is_given(value: Any) -> bool:
    return value is not None and value is not False and value != ()


def _emit_completion_script(ctx: click.Context, target: str) -> None:
    """Print the bash completion script, or write it to the new file *target*.

    Raises:
        RestCliError: If *target* already exists or cannot be written.
    """
    root = ctx.find_root()
    prog_name = root.info_name or root.command.name or "restcli"
    complete_var = f"_{prog_name}_COMPLETE".replace("-", "_").upper()
    # Rendered from the template directly; source() checks the local bash version.
    complete = BashComplete(root.command, {}, prog_name, complete_var)
    script = complete.source_template % complete.source_vars()

    if not target:
        click.echo(script)
        return

    try:
        with open(target, "x", encoding="utf-8") as fh:
            fh.write(script)
            fh.write("\n")
    except OSError as exc:
        raise RestCliError(
            f"Cannot write completion script to {target}: {exc}"
        ) from exc
    info(f"Completion script written to {target}")
