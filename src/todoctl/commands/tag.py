"""Command group: tags (add, list, edit, delete, tasks)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from todoctl.commands._base import TodoGroup

if TYPE_CHECKING:
    from todoctl.commands._context import AppContext

_TAG_EXAMPLES = """\
  todoctl tag add urgent --color red
  todoctl tag list
  todoctl tag tasks tag_8d1f0a3c6e2b
  todoctl tag edit tag_8d1f0a3c6e2b --name asap
  todoctl tag delete tag_8d1f0a3c6e2b"""


@click.group(cls=TodoGroup, examples=_TAG_EXAMPLES)
def tag() -> None:
    """Label tasks with workspace-wide tags."""


@tag.command(examples="  todoctl tag add urgent\n  todoctl tag add errand --color green")
@click.argument("name")
@click.option("--color", default=None, help="Display color label.")
@click.pass_obj
def add(app: AppContext, name: str, color: str | None) -> None:
    """Create a tag. Names are unique within the workspace."""
    from todoctl.services.commands import CreateTagCommand
    from todoctl.services.tags import TagService

    app.emit(TagService(app.store).create(CreateTagCommand(name=name, color=color), app.request))


@tag.command(name="list", examples="  todoctl tag list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List tags alphabetically."""
    from todoctl.services.tags import TagService

    app.emit(TagService(app.store).list_tags(app.request))


@tag.command(examples="  todoctl tag edit tag_8d1f0a3c6e2b --name asap --color orange")
@click.argument("tag_id")
@click.option("--name", default=None, help="New name.")
@click.option("--color", default=None, help="New color label.")
@click.option("--no-color", is_flag=True, help="Clear the color.")
@click.pass_obj
def edit(
    app: AppContext, tag_id: str, name: str | None, color: str | None, no_color: bool
) -> None:
    """Rename or recolor a tag."""
    from todoctl.domain.types import UNSET
    from todoctl.services.commands import UpdateTagCommand
    from todoctl.services.tags import TagService

    if color is not None and no_color:
        raise click.UsageError("--color and --no-color are mutually exclusive.")
    if name is None and color is None and not no_color:
        click.echo("No changes specified. Use --help for options.", err=True)
        raise SystemExit(1)

    cmd = UpdateTagCommand(
        tag_id=tag_id,  # type: ignore[arg-type]
        name=name if name is not None else UNSET,
        color=None if no_color else (color if color is not None else UNSET),
    )
    app.emit(TagService(app.store).update(cmd, app.request))


@tag.command(examples="  todoctl tag delete tag_8d1f0a3c6e2b")
@click.argument("tag_id")
@click.pass_obj
def delete(app: AppContext, tag_id: str) -> None:
    """Delete a tag and remove it from every task."""
    from todoctl.services.commands import DeleteTagCommand
    from todoctl.services.tags import TagService

    cmd = DeleteTagCommand(tag_id=tag_id)  # type: ignore[arg-type]
    app.emit(TagService(app.store).delete(cmd, app.request))


@tag.command(
    examples="""\
  todoctl tag tasks tag_8d1f0a3c6e2b
  todoctl -q tag tasks tag_8d1f0a3c6e2b"""
)
@click.argument("tag_id")
@click.pass_obj
def tasks(app: AppContext, tag_id: str) -> None:
    """Tasks carrying a tag, in any status."""
    from todoctl.services.query import QueryService

    app.emit(QueryService(app.store).tasks_by_tag(tag_id, app.request))
