"""Tests for id formatting and validation."""

from __future__ import annotations

import pytest

from todoctl.domain.ids import ID_PATTERNS, TYPE_PREFIXES, format_id, validate_id


class TestFormatId:
    @pytest.mark.parametrize(
        ("entity", "expected"),
        [
            ("task", "task_0123456789ab"),
            ("reminder", "rem_0123456789ab"),
            ("recurrence_rule", "rule_0123456789ab"),
            ("project", "proj_0123456789ab"),
            ("tag", "tag_0123456789ab"),
        ],
    )
    def test_prefixes(self, entity: str, expected: str) -> None:
        assert format_id(entity, "0123456789ABCDEF") == expected

    def test_unknown_entity(self) -> None:
        with pytest.raises(KeyError):
            format_id("workspace", "0123456789ab")

    def test_every_prefix_has_pattern(self) -> None:
        assert set(TYPE_PREFIXES) == set(ID_PATTERNS)


class TestValidateId:
    def test_valid(self) -> None:
        assert validate_id("task_0123456789ab", "task")
        assert validate_id("rem_000000000001", "reminder")

    @pytest.mark.parametrize(
        ("value", "entity"),
        [
            ("task_0123456789AB", "task"),
            ("task_0123", "task"),
            ("rem_0123456789ab", "task"),
            ("task_0123456789ab", "project"),
        ],
    )
    def test_invalid(self, value: str, entity: str) -> None:
        assert not validate_id(value, entity)
