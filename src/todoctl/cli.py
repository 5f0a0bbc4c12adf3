"""``todoctl`` entry point: global flags, settings, and the command tree."""

from __future__ import annotations

from typing import Any

import click

from todoctl import __version__
from todoctl.commands import register_commands
from todoctl.commands._context import AppContext
from todoctl.config.settings import TodoSettings


def _overrides(workspace: str | None, flags: dict[str, bool]) -> dict[str, Any]:
    """Settings overrides for the flags actually given.

    Flags left off are omitted so ``TODOCTL_VERBOSE=1`` and friends still
    apply; ``--workspace`` only replaces ``workspace_id`` in its section.
    """
    overrides: dict[str, Any] = {name: True for name, on in flags.items() if on}
    if workspace:
        overrides["workspace"] = {"workspace_id": workspace}
    return overrides


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog="Config: todoctl.toml in this or a parent directory, or --config PATH.",
)
@click.version_option(version=__version__, prog_name="todoctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Print ids only.")
@click.option("-v", "--verbose", is_flag=True, help="More detail, debug logging.")
@click.option("--log-json", is_flag=True, help="JSON log lines on stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Use this todoctl.toml.")
@click.option("-w", "--workspace", default=None, help="Act in this workspace id.")
@click.option("--sync", is_flag=True, help="Dispatch plugin hooks before exiting.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    workspace: str | None,
    sync: bool,
) -> None:
    """todoctl: tasks, projects, recurrence, and reminders from the command line."""
    flags = {
        "json_output": json_output,
        "quiet": quiet,
        "verbose": verbose,
        "log_json": log_json,
        "sync": sync,
    }
    settings = TodoSettings.from_cli(config_path=config_path, **_overrides(workspace, flags))
    ctx.obj = AppContext(settings)
    ctx.call_on_close(ctx.obj.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
