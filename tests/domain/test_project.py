"""Tests for project rules: naming, editing, archiving."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from todoctl.domain.errors import InvalidStateTransitionError, ValidationError
from todoctl.domain.project import (
    Project,
    ProjectChanges,
    archive_project,
    create_project,
    unarchive_project,
    update_project,
)
from todoctl.domain.result import Err, Ok

NOW = datetime(2025, 3, 14, 9, 0, tzinfo=UTC)
LATER = NOW + timedelta(hours=1)


def _project(**kwargs: object) -> Project:
    result = create_project(
        "Home",
        NOW,
        "ws_1",  # type: ignore[arg-type]
        project_id="proj_000000000001",  # type: ignore[arg-type]
        **kwargs,  # type: ignore[arg-type]
    )
    assert isinstance(result, Ok)
    return result.value


class TestCreateProject:
    def test_defaults(self) -> None:
        project = _project(color="  teal ")
        assert project.name == "Home"
        assert project.color == "teal"
        assert project.archived is False
        assert project.created_at == project.updated_at == NOW

    def test_blank_color_is_none(self) -> None:
        assert _project(color="   ").color is None

    @pytest.mark.parametrize(
        ("name", "message"),
        [
            ("   ", "Project name must not be empty"),
            ("x" * 101, "Project name must not exceed 100 characters"),
        ],
    )
    def test_name_bounds(self, name: str, message: str) -> None:
        result = create_project(name, NOW, "ws_1", project_id="proj_1")  # type: ignore[arg-type]
        assert isinstance(result, Err)
        assert isinstance(result.error, ValidationError)
        assert result.error.field == "name"
        assert result.error.message == message

    def test_name_trimmed_and_max_length_accepted(self) -> None:
        result = create_project(
            f"  {'x' * 100}  ", NOW, "ws_1", project_id="proj_1"  # type: ignore[arg-type]
        )
        assert isinstance(result, Ok)
        assert result.value.name == "x" * 100


class TestUpdateProject:
    def test_rename_keeps_color(self) -> None:
        result = update_project(_project(color="red"), ProjectChanges(name=" Garden "), LATER)
        assert isinstance(result, Ok)
        assert result.value.name == "Garden"
        assert result.value.color == "red"
        assert result.value.updated_at == LATER

    def test_clear_color(self) -> None:
        result = update_project(_project(color="red"), ProjectChanges(color=None), LATER)
        assert isinstance(result, Ok)
        assert result.value.color is None

    def test_invalid_name(self) -> None:
        result = update_project(_project(), ProjectChanges(name=""), LATER)
        assert isinstance(result, Err)
        assert result.error.message == "Project name must not be empty"

    def test_changes_empty(self) -> None:
        assert ProjectChanges().is_empty
        assert not ProjectChanges(color=None).is_empty


class TestArchive:
    def test_archive_then_unarchive(self) -> None:
        archived = archive_project(_project(), LATER)
        assert isinstance(archived, Ok)
        assert archived.value.archived is True
        assert archived.value.updated_at == LATER

        restored = unarchive_project(archived.value, LATER + timedelta(hours=1))
        assert isinstance(restored, Ok)
        assert restored.value.archived is False

    def test_archive_twice(self) -> None:
        result = archive_project(_project().model_copy(update={"archived": True}), LATER)
        assert isinstance(result, Err)
        assert isinstance(result.error, InvalidStateTransitionError)
        assert result.error.entity == "Project"
        assert result.error.from_status == result.error.to_status == "archived"
        assert result.error.message == "Project is already archived"

    def test_unarchive_active(self) -> None:
        result = unarchive_project(_project(), LATER)
        assert isinstance(result, Err)
        assert result.error.from_status == "active"
        assert result.error.message == "Project is not archived"
