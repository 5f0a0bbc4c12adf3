"""Human-readable output: one Rich renderer per service operation.

:func:`render_result` looks the renderer up by ``result.op``; anything not
listed in ``_OP_RENDERERS`` gets the key-value fallback. Tasks always
render through :func:`_task_table`, so every view shows the same columns.
:func:`render_quiet` reduces any result to the ids it mentions.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from todoctl.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from todoctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Styled text for *result*; plain when stdout is not a terminal."""
    console = create_console()
    if not result.ok:
        _render_error(result, console, verbose=verbose)
    else:
        _OP_RENDERERS.get(result.op, _render_generic)(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Ids only, one per line, for ``--quiet`` and shell pipelines."""
    if not result.ok:
        message = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {message}"

    ids = [i for i in map(_extract_id, _quiet_items(result.data)) if i]
    if ids:
        return "\n".join(ids)
    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _quiet_items(data: dict[str, Any]) -> list[Any]:
    if isinstance(data.get("items"), list):
        return data["items"]
    if "due_today" in data:
        return [*data.get("overdue", []), *data.get("due_today", [])]
    if "groups" in data:
        return [task for group in data["groups"] for task in group.get("tasks", [])]
    return []


def _extract_id(item: Any) -> str:
    if not isinstance(item, dict):
        return ""
    found = item.get("id") or item.get("reminder_id")
    return str(found) if found else ""


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "todo.ok"), (f"  {result.op}", "todo.op")))


_NAME_STYLES = {"title": "todo.title", "name": "todo.title"}


def _field_style(key: str, value: Any) -> str:
    if key == "id" or key.endswith("_id"):
        return "todo.id"
    if key == "status":
        return style_for_status(str(value))
    if key.endswith("_at"):
        return "todo.date"
    return _NAME_STYLES.get(key, "")


def _field(console: Console, key: str, value: Any) -> None:
    """One indented ``key: value`` line, styled by the key."""
    label = (f"  {key}: ", "todo.key")
    console.print(Text.assemble(label, (str(value), _field_style(key, value))))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Verbose-only ``meta`` block."""
    if not result.meta:
        return
    console.print(Text("\n  meta:", style="dim"))
    for key, value in result.meta.items():
        console.print(f"    {key}: {value}")


def _short_date(value: str | None) -> str:
    """``2025-03-14T09:00:00+00:00`` → ``2025-03-14 09:00``."""
    if not value:
        return ""
    return value[:16].replace("T", " ")


def _task_table(items: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    """Build a Rich Table for a list of task payloads."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="todo.id", no_wrap=True)
    table.add_column("Title", style="todo.title")
    table.add_column("Status")
    table.add_column("Due", style="todo.date")
    if verbose:
        table.add_column("Project")
        table.add_column("Tags")

    for item in items:
        status = str(item.get("status", ""))
        due = Text(
            _short_date(item.get("due_at")),
            style="todo.overdue" if item.get("overdue") else "todo.date",
        )
        row: list[Any] = [
            str(item.get("id", "")),
            str(item.get("title", "")),
            Text(status, style=style_for_status(status)),
            due,
        ]
        if verbose:
            row.append(str(item.get("project_id") or ""))
            row.append(", ".join(item.get("tag_ids", [])))
        table.add_row(*row)

    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="todo.error")
    op = Text(f"  {result.op}", style="todo.op")
    code = Text(f" [{err.code}] " if err else " ", style="dim")
    console.print(label, op, code, Text(msg), sep="")
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Task renderers ────────────────────────────────────────────────────


def _render_task_mutation(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render create/update/reopen/cancel/delete task results."""
    _status_line(console, result)
    keys = ("id", "title", "status", "due_at", "completed_at", "deleted_at")
    for key in keys:
        if result.data.get(key) is not None:
            _field(console, key, result.data[key])
    if verbose:
        for key in ("project_id", "recurrence_rule_id"):
            if result.data.get(key) is not None:
                _field(console, key, result.data[key])
        _render_meta(console, result)


def _render_task_completion(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    _render_task_mutation(result, console, verbose=verbose)
    nxt = result.data.get("next_task")
    if nxt:
        console.print()
        console.print(Text("  next occurrence:", style="dim"))
        _field(console, "id", nxt["id"])
        _field(console, "due_at", nxt.get("due_at"))


def _render_task_detail(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render get_task as a panel with metadata."""
    d = result.data
    lines: list[str] = []
    for key in ("status", "due_at", "project_id", "completed_at", "recurrence_rule_id"):
        val = d.get(key)
        if val is not None:
            lines.append(f"{key}: {val}")
    if d.get("overdue"):
        lines.append("[todo.overdue]overdue[/todo.overdue]")

    tags = d.get("tag_ids", [])
    if tags:
        lines.append(f"tags: {', '.join(tags)}")

    if verbose:
        lines.append(f"created_at: {d.get('created_at')}")
        lines.append(f"updated_at: {d.get('updated_at')}")

    content = "\n".join(lines)
    notes = d.get("notes")
    if notes:
        content += f"\n\n{notes.strip()}"

    title = f"{d.get('id', '?')}: {d.get('title', 'Untitled')}"
    style = style_for_status(str(d.get("status", "")))
    console.print(Panel(content, title=title, border_style=style or "dim", expand=False))


def _render_task_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render inbox as a table."""
    items = result.data.get("items", [])
    console.print(_task_table(items, verbose=verbose))
    console.print(f"\n{result.data.get('count', len(items))} tasks")


def _render_today(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    console.print(Text(f"Today ({d.get('date')})", style="todo.title"))
    overdue = d.get("overdue", [])
    due_today = d.get("due_today", [])
    if overdue:
        console.print()
        console.print(Text(f"Overdue ({len(overdue)})", style="todo.overdue"))
        console.print(_task_table(overdue, verbose=verbose))
    if due_today:
        console.print()
        console.print(Text(f"Due today ({len(due_today)})", style="todo.ok"))
        console.print(_task_table(due_today, verbose=verbose))
    if not overdue and not due_today:
        console.print("  Nothing due.")


def _render_upcoming(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    groups = d.get("groups", [])
    console.print(Text(f"Upcoming ({d.get('days')} days)", style="todo.title"))
    if not groups:
        console.print("  Nothing scheduled.")
        return
    for group in groups:
        console.print()
        console.print(Text(str(group["date"]), style="todo.date"))
        console.print(_task_table(group.get("tasks", []), verbose=verbose))


# ── Recurrence renderers ──────────────────────────────────────────────


def _describe_rule(rule: dict[str, Any]) -> str:
    """One-line human description, e.g. ``every 2 weeks on [1, 3] (fixedSchedule)``."""
    unit = {"daily": "day", "weekly": "week", "monthly": "month"}.get(rule["frequency"], "")
    interval = rule.get("interval", 1)
    text = f"every {unit}" if interval == 1 else f"every {interval} {unit}s"
    if rule.get("days_of_week"):
        text += f" on {rule['days_of_week']}"
    if rule.get("day_of_month") is not None:
        text += f" on day {rule['day_of_month']}"
    return f"{text} ({rule.get('mode')})"


def _render_recurrence(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "task_id", d.get("task_id"))
    rule = d.get("rule")
    if rule is None:
        console.print("  no recurrence rule")
        return
    _field(console, "rule_id", rule["id"])
    _field(console, "repeats", _describe_rule(rule))
    if d.get("next_due_at"):
        _field(console, "next_due_at", d["next_due_at"])
    if verbose:
        _render_meta(console, result)


def _render_recurrence_removed(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    _field(console, "task_id", result.data.get("task_id"))
    removed = result.data.get("removed_rule_id")
    if removed:
        _field(console, "removed_rule_id", removed)
    else:
        console.print("  no recurrence rule to remove")


# ── Reminder renderers ────────────────────────────────────────────────


def _render_reminder_mutation(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    for key in ("id", "task_id", "remind_at", "status"):
        if result.data.get(key) is not None:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


def _render_reminder_list(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="todo.id", no_wrap=True)
    table.add_column("Remind at", style="todo.date")
    table.add_column("Status")
    if verbose:
        table.add_column("Updated", style="dim")
    for item in items:
        status = str(item.get("status", ""))
        row: list[Any] = [
            str(item.get("id", "")),
            _short_date(item.get("remind_at")),
            Text(status, style=style_for_status(status)),
        ]
        if verbose:
            row.append(_short_date(item.get("updated_at")))
        table.add_row(*row)
    console.print(table)
    count = result.data.get("count", len(items))
    console.print(f"\n{count} reminders for {result.data.get('task_id')}")


def _render_process_due(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a due-reminder scan: counts, then per-item outcomes when verbose."""
    _status_line(console, result)
    d = result.data
    for key in ("processed", "sent", "dismissed", "skipped", "failed"):
        _field(console, key, d.get(key, 0))

    outcome_styles = {
        "send": "todo.ok",
        "dismiss": "dim",
        "skip": "todo.warning",
        "failed": "todo.error",
    }
    items = d.get("items", [])
    if verbose and items:
        console.print()
        for item in items:
            outcome = item["outcome"]
            line = Text(f"  {outcome:<8}", style=outcome_styles.get(outcome, ""))
            line.append(f"{item['reminder_id']} ({item['task_id']})")
            if item.get("reason"):
                line.append(f"  {item['reason']}", style="dim")
            console.print(line)


# ── Project and tag renderers ─────────────────────────────────────────


def _render_named_mutation(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render create/update/archive results for projects and tags."""
    _status_line(console, result)
    for key in ("id", "name", "color", "archived"):
        if result.data.get(key) is not None:
            _field(console, key, result.data[key])
    if verbose:
        _field(console, "updated_at", result.data.get("updated_at"))
        _render_meta(console, result)


def _render_project_detail(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    lines = [f"color: {d['color']}"] if d.get("color") else []
    if d.get("archived"):
        lines.append("[dim]archived[/dim]")
    tasks = d.get("tasks", [])
    lines.append(f"{len(tasks)} tasks")
    title = f"{d.get('id', '?')}: {d.get('name', 'Untitled')}"
    console.print(Panel("\n".join(lines), title=title, border_style="dim", expand=False))
    if tasks:
        console.print(_task_table(tasks, verbose=verbose))


def _render_named_list(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render list_projects / list_tags as a table."""
    items = result.data.get("items", [])
    is_projects = result.op == "list_projects"
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="todo.id", no_wrap=True)
    table.add_column("Name", style="todo.title")
    table.add_column("Color")
    if is_projects:
        table.add_column("Archived")
    if verbose:
        table.add_column("Created", style="dim")
    for item in items:
        row: list[Any] = [str(item["id"]), str(item["name"]), str(item.get("color") or "")]
        if is_projects:
            row.append("yes" if item.get("archived") else "")
        if verbose:
            row.append(_short_date(item.get("created_at")))
        table.add_row(*row)
    console.print(table)
    noun = "projects" if is_projects else "tags"
    console.print(f"\n{result.data.get('count', len(items))} {noun}")


def _render_named_deleted(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "id", d.get("id"))
    affected = d.get("detached_task_ids", d.get("untagged_task_ids", []))
    label = "detached_tasks" if "detached_task_ids" in d else "untagged_tasks"
    _field(console, label, len(affected))
    if verbose and affected:
        for task_id in affected:
            console.print(Text(f"    {task_id}", style="todo.id"))


def _render_tagged_tasks(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    tag = result.data.get("tag", {})
    items = result.data.get("items", [])
    heading = f"Tagged '{tag.get('name', '?')}' ({tag.get('id', '')})"
    console.print(Text(heading, style="todo.title"))
    console.print(_task_table(items, verbose=verbose))
    console.print(f"\n{result.data.get('count', len(items))} tasks")


def _render_search(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    console.print(Text(f"Search: {result.data.get('query', '')}", style="todo.title"))
    if not items:
        console.print("  No matching tasks.")
        return
    console.print(_task_table(items, verbose=verbose))
    console.print(f"\n{result.data.get('count', len(items))} tasks")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Tasks
    "create_task": _render_task_mutation,
    "update_task": _render_task_mutation,
    "complete_task": _render_task_completion,
    "uncomplete_task": _render_task_mutation,
    "cancel_task": _render_task_mutation,
    "delete_task": _render_task_mutation,
    "get_task": _render_task_detail,
    # Recurrence
    "set_recurrence_rule": _render_recurrence,
    "get_recurrence_rule": _render_recurrence,
    "remove_recurrence_rule": _render_recurrence_removed,
    # Reminders
    "create_reminder": _render_reminder_mutation,
    "update_reminder": _render_reminder_mutation,
    "dismiss_reminder": _render_reminder_mutation,
    "delete_reminder": _render_reminder_mutation,
    "list_reminders": _render_reminder_list,
    "process_due_reminders": _render_process_due,
    # Views
    "inbox": _render_task_list,
    "today": _render_today,
    "upcoming": _render_upcoming,
    "search_tasks": _render_search,
    "tasks_by_tag": _render_tagged_tasks,
    # Projects
    "create_project": _render_named_mutation,
    "update_project": _render_named_mutation,
    "archive_project": _render_named_mutation,
    "unarchive_project": _render_named_mutation,
    "get_project": _render_project_detail,
    "list_projects": _render_named_list,
    "delete_project": _render_named_deleted,
    # Tags
    "create_tag": _render_named_mutation,
    "update_tag": _render_named_mutation,
    "list_tags": _render_named_list,
    "delete_tag": _render_named_deleted,
}
