"""Locating the todoctl project a command runs in.

The project root is the nearest directory, walking up from the working
directory, that holds either ``todoctl.toml`` or a ``.todoctl/`` data
directory. The config file is optional: a ``.todoctl/`` left by an earlier
run pins the root just as well, so the same database is found from any
subdirectory. Within one directory the config file wins.

An explicit config (``--config`` or ``TODOCTL_CONFIG``) skips the walk;
its parent directory becomes the root. A missing explicit file is an
error rather than a silent fallback to defaults.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click

CONFIG_FILENAME = "todoctl.toml"
DATA_DIRNAME = ".todoctl"
CONFIG_ENV_VAR = "TODOCTL_CONFIG"


@dataclass(frozen=True)
class ProjectLocation:
    """Where the project lives and which config file (if any) applies."""

    root: Path
    config_path: Path | None = None

    def resolve(self, configured: str) -> Path:
        """Resolve a path from config: ``~`` and ``$VARS`` expand, relative
        paths are taken from :attr:`root` rather than the working directory."""
        path = Path(os.path.expandvars(configured)).expanduser()
        return path if path.is_absolute() else self.root / path

    def read_config(self) -> dict[str, Any]:
        """Parsed TOML tables, or ``{}`` when the project has no config file."""
        if self.config_path is None:
            return {}
        try:
            return tomllib.loads(self.config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as exc:
            raise click.ClickException(f"Invalid TOML in {self.config_path}: {exc}") from exc


def _explicit(path: str | os.PathLike[str], source: str) -> ProjectLocation:
    config = Path(path).expanduser()
    if not config.is_file():
        raise click.ClickException(f"Config file not found ({source}): {config}")
    config = config.resolve()
    return ProjectLocation(root=config.parent, config_path=config)


def find_project(start: Path | None = None) -> ProjectLocation | None:
    """Walk up from *start* (default: cwd); ``None`` when no marker is found."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        config = directory / CONFIG_FILENAME
        if config.is_file():
            return ProjectLocation(root=directory, config_path=config)
        if (directory / DATA_DIRNAME).is_dir():
            return ProjectLocation(root=directory)
    return None


def locate_project(
    *, config_path: str | None = None, start: Path | None = None
) -> ProjectLocation:
    """Resolve the project for a CLI invocation.

    Priority: *config_path* (``--config``), then ``TODOCTL_CONFIG``, then
    the walk-up from *start*. Without any marker the working directory
    (or *start*) becomes a fresh project root.
    """
    if config_path:
        return _explicit(config_path, "--config")
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return _explicit(env_path, CONFIG_ENV_VAR)
    found = find_project(start)
    if found is not None:
        return found
    return ProjectLocation(root=(start or Path.cwd()).resolve())
