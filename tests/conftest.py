"""Shared pytest fixtures and test helpers for todoctl tests."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from todoctl.domain.reminder import Reminder
from todoctl.domain.task import Task
from todoctl.infrastructure.clock import FixedClock
from todoctl.infrastructure.database.engine import init_database
from todoctl.infrastructure.ids import SequentialIdGenerator
from todoctl.infrastructure.store import Store
from todoctl.services.commands import CreateTaskCommand, RequestContext

# Friday, 14 March 2025, 09:00 UTC
NOW = datetime(2025, 3, 14, 9, 0, tzinfo=UTC)


class RecordingChannel:
    """Notification channel that records deliveries; can be told to fail."""

    def __init__(self) -> None:
        self.sent: list[tuple[Reminder, Task]] = []
        self.fail_for: set[str] = set()

    def send(self, reminder: Reminder, task: Task) -> None:
        if reminder.id in self.fail_for:
            raise ConnectionError("channel unavailable")
        self.sent.append((reminder, task))


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def ids() -> SequentialIdGenerator:
    return SequentialIdGenerator()


@pytest.fixture
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def ctx() -> RequestContext:
    return RequestContext(user_id="user_1", workspace_id="ws_1")  # type: ignore[arg-type]


@pytest.fixture
def store(clock: FixedClock, ids: SequentialIdGenerator, channel: RecordingChannel) -> Store:
    """In-memory store with a fixed clock and deterministic ids."""
    return Store.in_memory(clock=clock, ids=ids, notifier=channel)


@pytest.fixture
def db_engine(tmp_path: Path) -> Engine:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path / "todoctl.db")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sql_store(
    db_engine: Engine,
    clock: FixedClock,
    ids: SequentialIdGenerator,
    channel: RecordingChannel,
) -> Store:
    """SQLite-backed store without an event bus."""
    return Store.sqlite(db_engine, clock=clock, ids=ids, notifier=channel)


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes.
    """
    monkeypatch.delenv("TODOCTL_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def create_task(store: Store, ctx: RequestContext, title: str, **kwargs: Any) -> dict[str, Any]:
    """Create a task via TaskService, asserting success."""
    from todoctl.services.tasks import TaskService

    result = TaskService(store).create(CreateTaskCommand(title=title, **kwargs), ctx)
    assert result.ok, result.error
    return result.data


def create_project(
    store: Store, ctx: RequestContext, name: str, **kwargs: Any
) -> dict[str, Any]:
    """Create a project via ProjectService, asserting success."""
    from todoctl.services.commands import CreateProjectCommand
    from todoctl.services.projects import ProjectService

    result = ProjectService(store).create(CreateProjectCommand(name=name, **kwargs), ctx)
    assert result.ok, result.error
    return result.data


def create_tag(store: Store, ctx: RequestContext, name: str, **kwargs: Any) -> dict[str, Any]:
    """Create a tag via TagService, asserting success."""
    from todoctl.services.commands import CreateTagCommand
    from todoctl.services.tags import TagService

    result = TagService(store).create(CreateTagCommand(name=name, **kwargs), ctx)
    assert result.ok, result.error
    return result.data
