"""Tests for project discovery and config-relative path resolution."""

from pathlib import Path

import click
import pytest

from todoctl.config.discovery import ProjectLocation, find_project, locate_project


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TODOCTL_CONFIG", raising=False)


class TestFindProject:
    def test_finds_config_in_start_dir(self, tmp_path: Path) -> None:
        config = tmp_path / "todoctl.toml"
        config.write_text("")
        found = find_project(tmp_path)
        assert found == ProjectLocation(root=tmp_path.resolve(), config_path=config.resolve())

    def test_walks_up(self, tmp_path: Path) -> None:
        (tmp_path / "todoctl.toml").write_text("")
        nested = tmp_path / "x" / "y"
        nested.mkdir(parents=True)
        found = find_project(nested)
        assert found is not None
        assert found.root == tmp_path.resolve()

    def test_data_dir_is_a_marker(self, tmp_path: Path) -> None:
        (tmp_path / ".todoctl").mkdir()
        nested = tmp_path / "x"
        nested.mkdir()
        found = find_project(nested)
        assert found == ProjectLocation(root=tmp_path.resolve())

    def test_nearest_marker_wins(self, tmp_path: Path) -> None:
        (tmp_path / "todoctl.toml").write_text("")
        inner = tmp_path / "inner"
        (inner / ".todoctl").mkdir(parents=True)
        found = find_project(inner)
        assert found is not None
        assert found.root == inner.resolve()
        assert found.config_path is None

    def test_config_beats_data_dir_in_same_dir(self, tmp_path: Path) -> None:
        (tmp_path / ".todoctl").mkdir()
        (tmp_path / "todoctl.toml").write_text("")
        found = find_project(tmp_path)
        assert found is not None
        assert found.config_path == (tmp_path / "todoctl.toml").resolve()


class TestLocateProject:
    def test_env_var_wins_over_walk(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "todoctl.toml").write_text("")
        other = tmp_path / "conf" / "elsewhere.toml"
        other.parent.mkdir()
        other.write_text("")
        monkeypatch.setenv("TODOCTL_CONFIG", str(other))
        location = locate_project(start=tmp_path)
        assert location.config_path == other.resolve()
        assert location.root == other.parent.resolve()

    def test_flag_wins_over_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        flag = tmp_path / "flag.toml"
        flag.write_text("")
        monkeypatch.setenv("TODOCTL_CONFIG", str(tmp_path / "env.toml"))
        assert locate_project(config_path=str(flag)).config_path == flag.resolve()

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TODOCTL_CONFIG", str(tmp_path / "nope.toml"))
        with pytest.raises(click.ClickException, match="TODOCTL_CONFIG"):
            locate_project(start=tmp_path)

    def test_fresh_directory_becomes_root(self, tmp_path: Path) -> None:
        location = locate_project(start=tmp_path)
        assert location == ProjectLocation(root=tmp_path.resolve())


class TestProjectLocation:
    def test_relative_path_resolves_against_root(self, tmp_path: Path) -> None:
        location = ProjectLocation(root=tmp_path)
        assert location.resolve("data/tasks.db") == tmp_path / "data" / "tasks.db"

    def test_absolute_path_kept(self, tmp_path: Path) -> None:
        target = tmp_path / "abs.db"
        assert ProjectLocation(root=Path("/elsewhere")).resolve(str(target)) == target

    def test_home_expands(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        assert ProjectLocation(root=Path("/x")).resolve("~/t.db") == tmp_path / "t.db"

    def test_read_config_without_file(self, tmp_path: Path) -> None:
        assert ProjectLocation(root=tmp_path).read_config() == {}

    def test_read_config_sparse(self, tmp_path: Path) -> None:
        path = tmp_path / "todoctl.toml"
        path.write_text('[reminders]\nchannel = "plugin"\n')
        data = ProjectLocation(root=tmp_path, config_path=path).read_config()
        assert data == {"reminders": {"channel": "plugin"}}

    def test_read_config_invalid(self, tmp_path: Path) -> None:
        path = tmp_path / "todoctl.toml"
        path.write_text("[store\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            ProjectLocation(root=tmp_path, config_path=path).read_config()
