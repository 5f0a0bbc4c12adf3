"""TagService: tag CRUD with per-workspace unique names.

Uniqueness is checked here, before any write, and reported as a
``ConflictError``. Deleting a tag removes it from every task carrying it.
"""

from __future__ import annotations

from todoctl.domain.errors import ConflictError, NotFoundError
from todoctl.domain.events import TagCreated, TagDeleted, TagUpdated
from todoctl.domain.ids import TagId, WorkspaceId
from todoctl.domain.result import Err
from todoctl.domain.tag import Tag, create_tag, update_tag
from todoctl.domain.task import TaskChanges, update_task
from todoctl.domain.types import EntityKind
from todoctl.services._helpers import named_fields_changed, tag_to_dict
from todoctl.services.base import BaseService
from todoctl.services.commands import (
    CreateTagCommand,
    DeleteTagCommand,
    RequestContext,
    UpdateTagCommand,
)
from todoctl.services.contracts import TagDeletedData, TagListData, TagPayload, dump_validated
from todoctl.services.result import ServiceResult


class TagService(BaseService):
    """Tag use cases."""

    def _tag_result(self, op: str, tag: Tag, warnings: list[str]) -> ServiceResult:
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(TagPayload, tag_to_dict(tag)),
            warnings=warnings,
        )

    def _name_conflict(
        self, workspace_id: WorkspaceId, name: str, tag_id: TagId
    ) -> ConflictError | None:
        clash = self._store.tags.find_by_name(workspace_id, name)
        if clash is None or clash.id == tag_id:
            return None
        return ConflictError(entity=EntityKind.TAG, message=f'A tag named "{name}" already exists')

    def create(self, cmd: CreateTagCommand, ctx: RequestContext) -> ServiceResult:
        op = "create_tag"
        warnings: list[str] = []
        now = self._store.clock.now()

        created = create_tag(
            cmd.name, now, ctx.workspace_id, tag_id=self._store.ids.tag_id(), color=cmd.color
        )
        if isinstance(created, Err):
            return ServiceResult.failure(op, created.error)

        tag = created.value
        conflict = self._name_conflict(ctx.workspace_id, tag.name, tag.id)
        if conflict is not None:
            return ServiceResult.failure(op, conflict)

        self._store.tags.save(tag)
        self._dispatch_event(
            TagCreated(
                tag_id=tag.id, name=tag.name, workspace_id=tag.workspace_id, occurred_at=now
            ),
            warnings,
        )
        return self._tag_result(op, tag, warnings)

    def list_tags(self, ctx: RequestContext) -> ServiceResult:
        op = "list_tags"
        items = [tag_to_dict(t) for t in self._store.tags.find_by_workspace(ctx.workspace_id)]
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(TagListData, {"count": len(items), "items": items}),
        )

    def update(self, cmd: UpdateTagCommand, ctx: RequestContext) -> ServiceResult:
        op = "update_tag"
        warnings: list[str] = []

        existing = self._load_tag(cmd.tag_id, ctx)
        if isinstance(existing, NotFoundError):
            return ServiceResult.failure(op, existing)

        now = self._store.clock.now()
        updated = update_tag(existing, cmd.changes(), now)
        if isinstance(updated, Err):
            return ServiceResult.failure(op, updated.error)

        tag = updated.value
        if tag.name != existing.name:
            conflict = self._name_conflict(ctx.workspace_id, tag.name, tag.id)
            if conflict is not None:
                return ServiceResult.failure(op, conflict)

        self._store.tags.save(tag)
        self._dispatch_event(
            TagUpdated(
                tag_id=tag.id, fields_changed=named_fields_changed(existing, tag), occurred_at=now
            ),
            warnings,
        )
        return self._tag_result(op, tag, warnings)

    def delete(self, cmd: DeleteTagCommand, ctx: RequestContext) -> ServiceResult:
        op = "delete_tag"
        warnings: list[str] = []

        existing = self._load_tag(cmd.tag_id, ctx)
        if isinstance(existing, NotFoundError):
            return ServiceResult.failure(op, existing)

        now = self._store.clock.now()
        untagged = []
        for task in self._store.tasks.find_by_tag(existing.id, ctx.workspace_id):
            remaining = tuple(t for t in task.tag_ids if t != existing.id)
            result = update_task(task, TaskChanges(tag_ids=remaining), now)
            if isinstance(result, Err):
                return ServiceResult.failure(op, result.error)
            untagged.append(result.value)

        if untagged:
            self._store.tasks.save_all(untagged)
        self._store.tags.delete(existing.id)

        untagged_ids = [t.id for t in untagged]
        self._dispatch_event(
            TagDeleted(tag_id=existing.id, untagged_task_ids=untagged_ids, occurred_at=now),
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                TagDeletedData, {"id": existing.id, "untagged_task_ids": untagged_ids}
            ),
            warnings=warnings,
        )
