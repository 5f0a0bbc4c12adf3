"""ProjectService: project CRUD, archiving, and the project task list.

Deleting a project is a hard delete. Its tasks are not deleted with it;
they lose their ``project_id`` and fall back into the inbox.
"""

from __future__ import annotations

from todoctl.domain.errors import NotFoundError
from todoctl.domain.events import (
    ProjectArchived,
    ProjectCreated,
    ProjectDeleted,
    ProjectUnarchived,
    ProjectUpdated,
)
from todoctl.domain.project import (
    Project,
    archive_project,
    create_project,
    unarchive_project,
    update_project,
)
from todoctl.domain.result import Err
from todoctl.domain.task import TaskChanges, update_task
from todoctl.services._helpers import named_fields_changed, project_to_dict, task_to_dict
from todoctl.services.base import BaseService
from todoctl.services.commands import (
    ArchiveProjectCommand,
    CreateProjectCommand,
    DeleteProjectCommand,
    RequestContext,
    UnarchiveProjectCommand,
    UpdateProjectCommand,
)
from todoctl.services.contracts import (
    ProjectDeletedData,
    ProjectDetailData,
    ProjectListData,
    ProjectPayload,
    dump_validated,
)
from todoctl.services.result import ServiceResult


class ProjectService(BaseService):
    """Project use cases."""

    def _project_result(self, op: str, project: Project, warnings: list[str]) -> ServiceResult:
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(ProjectPayload, project_to_dict(project)),
            warnings=warnings,
        )

    def create(self, cmd: CreateProjectCommand, ctx: RequestContext) -> ServiceResult:
        op = "create_project"
        warnings: list[str] = []
        now = self._store.clock.now()

        created = create_project(
            cmd.name,
            now,
            ctx.workspace_id,
            project_id=self._store.ids.project_id(),
            color=cmd.color,
        )
        if isinstance(created, Err):
            return ServiceResult.failure(op, created.error)

        project = created.value
        self._store.projects.save(project)
        self._dispatch_event(
            ProjectCreated(
                project_id=project.id,
                name=project.name,
                workspace_id=project.workspace_id,
                occurred_at=now,
            ),
            warnings,
        )
        return self._project_result(op, project, warnings)

    def get(self, project_id: str, ctx: RequestContext) -> ServiceResult:
        """The project with every live task filed under it, any status."""
        op = "get_project"
        project = self._load_project(project_id, ctx)
        if isinstance(project, NotFoundError):
            return ServiceResult.failure(op, project)

        now = self._store.clock.now()
        tasks = [
            task_to_dict(t, now)
            for t in self._store.tasks.find_by_project(project.id)
            if t.workspace_id == ctx.workspace_id
        ]
        data = {**project_to_dict(project), "tasks": tasks}
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(ProjectDetailData, data),
            meta={"task_count": len(tasks)},
        )

    def list_projects(
        self, ctx: RequestContext, *, include_archived: bool = False
    ) -> ServiceResult:
        op = "list_projects"
        projects = self._store.projects.find_by_workspace(
            ctx.workspace_id, include_archived=include_archived
        )
        items = [project_to_dict(p) for p in projects]
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(ProjectListData, {"count": len(items), "items": items}),
        )

    def update(self, cmd: UpdateProjectCommand, ctx: RequestContext) -> ServiceResult:
        op = "update_project"
        warnings: list[str] = []

        existing = self._load_project(cmd.project_id, ctx)
        if isinstance(existing, NotFoundError):
            return ServiceResult.failure(op, existing)

        now = self._store.clock.now()
        updated = update_project(existing, cmd.changes(), now)
        if isinstance(updated, Err):
            return ServiceResult.failure(op, updated.error)

        project = updated.value
        self._store.projects.save(project)
        self._dispatch_event(
            ProjectUpdated(
                project_id=project.id,
                fields_changed=named_fields_changed(existing, project),
                occurred_at=now,
            ),
            warnings,
        )
        return self._project_result(op, project, warnings)

    def archive(self, cmd: ArchiveProjectCommand, ctx: RequestContext) -> ServiceResult:
        op = "archive_project"
        warnings: list[str] = []

        existing = self._load_project(cmd.project_id, ctx)
        if isinstance(existing, NotFoundError):
            return ServiceResult.failure(op, existing)

        now = self._store.clock.now()
        archived = archive_project(existing, now)
        if isinstance(archived, Err):
            return ServiceResult.failure(op, archived.error)

        self._store.projects.save(archived.value)
        self._dispatch_event(ProjectArchived(project_id=existing.id, occurred_at=now), warnings)
        return self._project_result(op, archived.value, warnings)

    def unarchive(self, cmd: UnarchiveProjectCommand, ctx: RequestContext) -> ServiceResult:
        op = "unarchive_project"
        warnings: list[str] = []

        existing = self._load_project(cmd.project_id, ctx)
        if isinstance(existing, NotFoundError):
            return ServiceResult.failure(op, existing)

        now = self._store.clock.now()
        restored = unarchive_project(existing, now)
        if isinstance(restored, Err):
            return ServiceResult.failure(op, restored.error)

        self._store.projects.save(restored.value)
        self._dispatch_event(ProjectUnarchived(project_id=existing.id, occurred_at=now), warnings)
        return self._project_result(op, restored.value, warnings)

    def delete(self, cmd: DeleteProjectCommand, ctx: RequestContext) -> ServiceResult:
        """Remove the project; its tasks move back to the inbox."""
        op = "delete_project"
        warnings: list[str] = []

        # ── GATHER ───────────────────────────────────────────
        existing = self._load_project(cmd.project_id, ctx)
        if isinstance(existing, NotFoundError):
            return ServiceResult.failure(op, existing)
        filed = self._store.tasks.find_by_project(existing.id)

        # ── DECIDE ───────────────────────────────────────────
        now = self._store.clock.now()
        detach = TaskChanges(project_id=None)
        detached = []
        for task in filed:
            result = update_task(task, detach, now)
            if isinstance(result, Err):
                return ServiceResult.failure(op, result.error)
            detached.append(result.value)

        # ── ACT ──────────────────────────────────────────────
        if detached:
            self._store.tasks.save_all(detached)
        self._store.projects.delete(existing.id)

        detached_ids = [t.id for t in detached]
        self._dispatch_event(
            ProjectDeleted(
                project_id=existing.id, detached_task_ids=detached_ids, occurred_at=now
            ),
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                ProjectDeletedData, {"id": existing.id, "detached_task_ids": detached_ids}
            ),
            warnings=warnings,
        )
