"""Keystore — the single dependency injected into every service.

Owns the store index, the token store, the git client, and the plugin
manager, all configured from :class:`~gitok.config.settings.GitokSettings`.
Collaborators can be swapped at construction time (tests pass a fake git
client).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from gitok.infrastructure.crypto import EncryptionGateway
from gitok.infrastructure.git import GitClient
from gitok.infrastructure.index import StoreIndex
from gitok.infrastructure.store import TokenStore
from gitok.plugins.manager import PluginManager

if TYPE_CHECKING:
    from gitok.config.settings import GitokSettings

logger = logging.getLogger(__name__)


class Keystore:
    """Composition root for the on-disk token store and its collaborators."""

    def __init__(
        self,
        settings: GitokSettings,
        *,
        git: GitClient | None = None,
        gateway: EncryptionGateway | None = None,
        cwd: Path | None = None,
    ) -> None:
        self._settings = settings
        self._root = settings.store_root
        self._cwd = cwd
        self.git = git or GitClient()
        self.gateway = gateway or EncryptionGateway(iterations=settings.crypto.kdf_iterations)
        self.index = StoreIndex(self._root)
        self.store = TokenStore(self._root, self.gateway)
        self.plugin_manager: PluginManager | None = None

    @property
    def settings(self) -> GitokSettings:
        return self._settings

    @property
    def root(self) -> Path:
        return self._root

    @property
    def cwd(self) -> Path:
        """Directory used for worktree lookups (defaults to the process cwd)."""
        return self._cwd or Path.cwd()

    def init_plugins(self) -> PluginManager:
        """Register built-in plugins and discover external ones."""
        from gitok.plugins.builtins.advisories import AdvisoryPlugin

        pm = PluginManager()
        pm.register_plugin(AdvisoryPlugin(self.git, self._settings.advisories), name="advisories")
        if self._settings.plugins.enabled:
            local_dir = self._settings.plugins.local_dir
            names = pm.discover_and_load(local_dir=local_dir.expanduser() if local_dir else None)
            logger.debug("Plugins loaded: %s", names)
        self.plugin_manager = pm
        return pm
