"""CLI generator -- derive the command tree from an API document.

Typical usage::

    from restcli.generator import build_command_tree, to_click_command

    root = build_command_tree(document, "items")
    cli = to_click_command(root, dispatch=my_dispatch)
    cli.main(["/items/{id}", "get", "--id", "42"], standalone_mode=False)

Sub-modules:

* :mod:`~restcli.generator.merge` -- Combine path-item and operation
  parameters keyed by ``(name, location)``.
* :mod:`~restcli.generator.naming` -- Option names (plain or
  location-suffixed) and value kinds.
* :mod:`~restcli.generator.command_tree` -- Build the read-only
  root/path/method :class:`~restcli.models.CommandNode` tree.
* :mod:`~restcli.generator.click_command` -- Translate that tree into
  Click groups and commands.
"""

from restcli.generator.click_command import to_click_command
from restcli.generator.command_tree import build_command_tree
from restcli.generator.merge import merge_parameters
from restcli.generator.naming import option_name, option_value_kind

__all__ = [
    "build_command_tree",
    "merge_parameters",
    "option_name",
    "option_value_kind",
    "to_click_command",
]
