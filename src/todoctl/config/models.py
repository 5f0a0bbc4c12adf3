"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, todoctl.toml only contains
overrides. An empty (or missing) file gives a working SQLite setup in
``.todoctl/`` under the project root.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# --- todoctl.toml sections ---


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    backend: Literal["sqlite", "memory"] = "sqlite"
    path: str = ".todoctl/todoctl.db"


class RemindersConfig(BaseModel):
    """[reminders] section."""

    model_config = {"frozen": True}

    interval_seconds: float = Field(default=60.0, gt=0)
    channel: Literal["log", "plugin"] = "log"


class EventsConfig(BaseModel):
    """[events] section."""

    model_config = {"frozen": True}

    max_retries: int = Field(default=3, ge=1)
    max_workers: int = Field(default=2, ge=1)


class WorkspaceConfig(BaseModel):
    """[workspace] section: the request context used by the CLI."""

    model_config = {"frozen": True}

    user_id: str = "local"
    workspace_id: str = "local"


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str | None = ".todoctl/plugins"

