"""TodoSettings: the merged configuration for one CLI invocation.

Sources, highest priority first:

1. keyword arguments (the global CLI flags)
2. ``TODOCTL_*`` environment variables, ``__`` between section and key
   (``TODOCTL_REMINDERS__INTERVAL_SECONDS=30``)
3. the project's ``todoctl.toml`` (see :mod:`todoctl.config.discovery`)
4. the defaults in :mod:`todoctl.config.models`

Every file-system path in the config is resolved against the project
root, so ``[store] path`` means the same file from any subdirectory.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from todoctl.config.discovery import ProjectLocation, locate_project
from todoctl.config.models import (
    EventsConfig,
    PluginsConfig,
    RemindersConfig,
    StoreConfig,
    WorkspaceConfig,
)

logger = logging.getLogger(__name__)

# The location being loaded; set only while ``from_cli`` builds settings.
_loading: ContextVar[ProjectLocation | None] = ContextVar("todoctl_loading", default=None)


class ProjectTomlSource(PydanticBaseSettingsSource):
    """``todoctl.toml`` tables, limited to the known sections.

    Unknown tables are dropped with a warning, so a misspelt ``[reminder]``
    is reported instead of silently ignored or failing validation.
    """

    def __init__(self, settings_cls: type[BaseSettings], location: ProjectLocation | None) -> None:
        super().__init__(settings_cls)
        raw = location.read_config() if location is not None else {}
        sections = TodoSettings.config_sections()
        unknown = sorted(set(raw) - sections)
        if unknown:
            logger.warning(
                "Ignoring unknown section(s) in %s: %s",
                location.config_path if location else "config",
                ", ".join(unknown),
            )
        self._data: dict[str, Any] = {k: v for k, v in raw.items() if k in sections}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


class TodoSettings(BaseSettings):
    """Unified settings for the todoctl CLI.

    Attributes:
        root: Project root (see :class:`~todoctl.config.discovery.ProjectLocation`).
        config_path: The ``todoctl.toml`` that was loaded, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "TODOCTL_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # global CLI flags
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    sync: bool = False

    # todoctl.toml sections
    store: StoreConfig = Field(default_factory=StoreConfig)
    reminders: RemindersConfig = Field(default_factory=RemindersConfig)
    events: EventsConfig = Field(default_factory=EventsConfig)
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def config_sections(cls) -> set[str]:
        """Field names that may appear as tables in ``todoctl.toml``."""
        return {"store", "reminders", "events", "workspace", "plugins"}

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, ProjectTomlSource(settings_cls, _loading.get()))

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **overrides: Any,
    ) -> TodoSettings:
        """Locate the project from *start* (default: cwd) and merge *overrides*."""
        location = locate_project(config_path=config_path, start=start)
        token = _loading.set(location)
        try:
            return cls(root=location.root, config_path=location.config_path, **overrides)
        finally:
            _loading.reset(token)

    @property
    def location(self) -> ProjectLocation:
        return ProjectLocation(root=self.root, config_path=self.config_path)

    @property
    def db_path(self) -> Path:
        return self.location.resolve(self.store.path)

    @property
    def plugins_dir(self) -> Path | None:
        if not self.plugins.local_dir:
            return None
        return self.location.resolve(self.plugins.local_dir)
