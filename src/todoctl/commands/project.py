"""Command group: projects (add, list, show, edit, archive, unarchive, delete)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from todoctl.commands._base import TodoGroup

if TYPE_CHECKING:
    from todoctl.commands._context import AppContext

_PROJECT_EXAMPLES = """\
  todoctl project add "Home renovation" --color teal
  todoctl project list --all
  todoctl project show proj_5c0e2d9a4b7f
  todoctl project archive proj_5c0e2d9a4b7f
  todoctl project delete proj_5c0e2d9a4b7f"""


@click.group(cls=TodoGroup, examples=_PROJECT_EXAMPLES)
def project() -> None:
    """Group tasks into projects; archive finished ones."""


@project.command(
    examples="""\
  todoctl project add "Garden"
  todoctl project add "Work" --color blue"""
)
@click.argument("name")
@click.option("--color", default=None, help="Display color label.")
@click.pass_obj
def add(app: AppContext, name: str, color: str | None) -> None:
    """Create a project."""
    from todoctl.services.commands import CreateProjectCommand
    from todoctl.services.projects import ProjectService

    cmd = CreateProjectCommand(name=name, color=color)
    app.emit(ProjectService(app.store).create(cmd, app.request))


@project.command(name="list", examples="  todoctl project list\n  todoctl project list --all")
@click.option("--all", "include_archived", is_flag=True, help="Include archived projects.")
@click.pass_obj
def list_cmd(app: AppContext, include_archived: bool) -> None:
    """List projects, newest first."""
    from todoctl.services.projects import ProjectService

    service = ProjectService(app.store)
    app.emit(service.list_projects(app.request, include_archived=include_archived))


@project.command(examples="  todoctl project show proj_5c0e2d9a4b7f")
@click.argument("project_id")
@click.pass_obj
def show(app: AppContext, project_id: str) -> None:
    """Show a project and its tasks."""
    from todoctl.services.projects import ProjectService

    app.emit(ProjectService(app.store).get(project_id, app.request))


@project.command(
    examples="""\
  todoctl project edit proj_5c0e2d9a4b7f --name "Garden 2025"
  todoctl project edit proj_5c0e2d9a4b7f --no-color"""
)
@click.argument("project_id")
@click.option("--name", default=None, help="New name.")
@click.option("--color", default=None, help="New color label.")
@click.option("--no-color", is_flag=True, help="Clear the color.")
@click.pass_obj
def edit(
    app: AppContext, project_id: str, name: str | None, color: str | None, no_color: bool
) -> None:
    """Rename or recolor a project."""
    from todoctl.domain.types import UNSET
    from todoctl.services.commands import UpdateProjectCommand
    from todoctl.services.projects import ProjectService

    if color is not None and no_color:
        raise click.UsageError("--color and --no-color are mutually exclusive.")
    if name is None and color is None and not no_color:
        click.echo("No changes specified. Use --help for options.", err=True)
        raise SystemExit(1)

    cmd = UpdateProjectCommand(
        project_id=project_id,  # type: ignore[arg-type]
        name=name if name is not None else UNSET,
        color=None if no_color else (color if color is not None else UNSET),
    )
    app.emit(ProjectService(app.store).update(cmd, app.request))


@project.command(examples="  todoctl project archive proj_5c0e2d9a4b7f")
@click.argument("project_id")
@click.pass_obj
def archive(app: AppContext, project_id: str) -> None:
    """Hide a project from the default listing."""
    from todoctl.services.commands import ArchiveProjectCommand
    from todoctl.services.projects import ProjectService

    cmd = ArchiveProjectCommand(project_id=project_id)  # type: ignore[arg-type]
    app.emit(ProjectService(app.store).archive(cmd, app.request))


@project.command(examples="  todoctl project unarchive proj_5c0e2d9a4b7f")
@click.argument("project_id")
@click.pass_obj
def unarchive(app: AppContext, project_id: str) -> None:
    """Restore an archived project."""
    from todoctl.services.commands import UnarchiveProjectCommand
    from todoctl.services.projects import ProjectService

    cmd = UnarchiveProjectCommand(project_id=project_id)  # type: ignore[arg-type]
    app.emit(ProjectService(app.store).unarchive(cmd, app.request))


@project.command(examples="  todoctl project delete proj_5c0e2d9a4b7f")
@click.argument("project_id")
@click.pass_obj
def delete(app: AppContext, project_id: str) -> None:
    """Delete a project. Its tasks move back to the inbox."""
    from todoctl.services.commands import DeleteProjectCommand
    from todoctl.services.projects import ProjectService

    cmd = DeleteProjectCommand(project_id=project_id)  # type: ignore[arg-type]
    app.emit(ProjectService(app.store).delete(cmd, app.request))
