"""Subcommand modules for todoctl.

Provides register_commands() which uses deferred imports to keep
``todoctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    5 groups (have subcommands) + 4 standalone views.
    """
    # --- Groups ---
    from todoctl.commands.project import project
    from todoctl.commands.recur import recur
    from todoctl.commands.remind import remind
    from todoctl.commands.tag import tag
    from todoctl.commands.task import task

    cli.add_command(task)
    cli.add_command(project)
    cli.add_command(tag)
    cli.add_command(recur)
    cli.add_command(remind)

    # --- Standalone commands ---
    from todoctl.commands.views import inbox, search, today, upcoming

    cli.add_command(inbox)
    cli.add_command(today)
    cli.add_command(upcoming)
    cli.add_command(search)
