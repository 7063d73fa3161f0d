"""Plugin registry for gitok's lifecycle hooks.

Two discovery sources, both optional:

* the ``gitok.plugins`` entry-point group of installed distributions;
* single-file plugins in ``[plugins] local_dir``.

Any class found there with ``@hookimpl`` methods is instantiated once and
registered. Broken plugins are logged and skipped; they never stop a command.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from types import ModuleType

import pluggy

from gitok.plugins.hookspecs import GitokHookSpec

PROJECT_NAME = "gitok"
ENTRY_POINT_GROUP = "gitok.plugins"
LOCAL_MODULE_PREFIX = "gitok_local_plugin_"

logger = logging.getLogger(__name__)


def _implements_hooks(cls: type) -> bool:
    """Whether any public attribute of *cls* carries a gitok hookimpl marker."""
    marker = f"{PROJECT_NAME}_impl"
    return any(
        getattr(getattr(cls, name, None), marker, None) is not None
        for name in dir(cls)
        if not name.startswith("_")
    )


def _import_file(path: Path) -> ModuleType | None:
    """Import a standalone ``.py`` file under a private module name."""
    module_name = f"{LOCAL_MODULE_PREFIX}{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        logger.warning("Cannot import local plugin %s", path)
        return None
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        logger.warning("Local plugin %s failed to import", path, exc_info=True)
        return None
    return module


class PluginManager:
    """Thin layer over :class:`pluggy.PluginManager` with gitok's discovery rules."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(GitokHookSpec)
        self._loaded = False

    @property
    def hook(self) -> pluggy.HookRelay:
        """Relay used to fire hooks, e.g. ``pm.hook.post_unlock(...)``."""
        return self._pm.hook

    @property
    def is_loaded(self) -> bool:
        """Whether external discovery has run."""
        return self._loaded

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        name = name or type(plugin).__name__
        self._pm.register(plugin, name=name)
        logger.debug("Registered plugin %s", name)

    def plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or type(p).__name__ for p in self._pm.get_plugins()]

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point plugins, then *local_dir* plugins; return all names."""
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._instantiate_registered_classes()
        if local_dir is not None and local_dir.is_dir():
            for path in sorted(local_dir.glob("*.py")):
                if not path.name.startswith("_"):
                    self._load_local(path)
        self._loaded = True
        return self.list_plugin_names()

    def _load_local(self, path: Path) -> None:
        module = _import_file(path)
        if module is None:
            return
        for _, cls in inspect.getmembers(module, inspect.isclass):
            if cls.__module__ != module.__name__ or not _implements_hooks(cls):
                continue
            try:
                instance = cls()
            except Exception:
                logger.warning("Cannot instantiate %s from %s", cls.__name__, path, exc_info=True)
                continue
            self.register_plugin(instance, name=module.__name__)

    def _instantiate_registered_classes(self) -> None:
        """Entry points may name a class; swap it for an instance so hooks get ``self``."""
        for plugin in self.plugins():
            if not inspect.isclass(plugin) or not _implements_hooks(plugin):
                continue
            name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                self._pm.register(plugin(), name=name)
            except Exception:
                logger.warning("Cannot instantiate entry-point plugin %s", name, exc_info=True)
