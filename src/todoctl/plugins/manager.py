"""Plugin loading for todoctl.

Plugins are registered from three places, in this order:

1. ``todoctl.plugins`` entry points of installed distributions
2. single-file plugins in the project's plugin directory
   (``.todoctl/plugins/`` by default)
3. built-ins registered by the store (the activity log)

A plugin implements any of the ``post_*`` event hooks and/or
``notify_reminder``. A local file may define its hooks as methods on a
class (one instance per class is registered) or as module-level functions
(the module itself is registered). A file that fails to import or
instantiate is logged, recorded in :attr:`PluginManager.load_errors`, and
skipped.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType

import pluggy

from todoctl.plugins.hookspecs import TodoctlHookSpec

PROJECT_NAME = "todoctl"
ENTRY_POINT_GROUP = "todoctl.plugins"
LOCAL_MODULE_PREFIX = "todoctl_local_plugin_"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PluginLoadError:
    source: str
    reason: str


def _is_hookimpl(obj: object) -> bool:
    return callable(obj) and getattr(obj, f"{PROJECT_NAME}_impl", None) is not None


def _class_has_hooks(cls: type) -> bool:
    return any(
        _is_hookimpl(getattr(cls, name, None)) for name in dir(cls) if not name.startswith("_")
    )


class PluginManager:
    """Thin wrapper over :class:`pluggy.PluginManager` with todoctl's loading rules."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(TodoctlHookSpec)
        self.load_errors: list[PluginLoadError] = []

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point plugins, then *local_dir*. Returns all plugin names."""
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._instantiate_entry_point_classes()
        if local_dir is not None and local_dir.is_dir():
            for py_file in sorted(local_dir.glob("*.py")):
                if not py_file.name.startswith("_"):
                    self._load_local_file(py_file)
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def delivery_plugins(self) -> list[str]:
        """Names of the plugins that implement ``notify_reminder``."""
        return [impl.plugin_name for impl in self._pm.hook.notify_reminder.get_hookimpls()]

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _record_failure(self, source: str, reason: str, *, exc_info: bool = True) -> None:
        logger.warning("Skipping plugin %s: %s", source, reason, exc_info=exc_info)
        self.load_errors.append(PluginLoadError(source=source, reason=reason))

    def _instantiate_entry_point_classes(self) -> None:
        # An entry point may name a class; hooks bound to the class get no ``self``.
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin) or not _class_has_hooks(plugin):
                continue
            name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception as exc:
                self._record_failure(name, f"cannot instantiate ({exc})")
                continue
            self._pm.register(instance, name=name)

    def _import_local(self, py_file: Path) -> ModuleType | None:
        module_name = f"{LOCAL_MODULE_PREFIX}{py_file.stem}"
        spec = importlib.util.spec_from_file_location(module_name, py_file)
        if spec is None or spec.loader is None:
            self._record_failure(str(py_file), "not an importable module", exc_info=False)
            return None
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            sys.modules.pop(module_name, None)
            self._record_failure(str(py_file), f"import failed ({exc.__class__.__name__})")
            return None
        return module

    def _load_local_file(self, py_file: Path) -> None:
        module = self._import_local(py_file)
        if module is None:
            return
        label = f"local:{py_file.stem}"

        if any(_is_hookimpl(obj) for _, obj in inspect.getmembers(module, inspect.isfunction)):
            self.register_plugin(module, name=label)
            return

        for _, cls in inspect.getmembers(module, inspect.isclass):
            if cls.__module__ != module.__name__ or not _class_has_hooks(cls):
                continue
            try:
                instance = cls()
            except Exception as exc:
                self._record_failure(f"{py_file}:{cls.__name__}", f"cannot instantiate ({exc})")
                continue
            self.register_plugin(instance, name=f"{label}.{cls.__name__}")
