"""GitokSettings: one frozen object built from flags, environment and TOML.

Precedence, strongest first: command-line flags, ``GITOK_*`` environment
variables (``__`` separates nested keys, e.g. ``GITOK_CACHE__TIMEOUT``), the
discovered ``gitok.toml``, then the section defaults.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from gitok.config.discovery import find_config
from gitok.config.models import (
    AdvisoriesConfig,
    CacheConfig,
    CryptoConfig,
    PluginsConfig,
    StoreConfig,
)

# File chosen by from_cli(); read while the settings class collects its sources.
_config_file: ContextVar[Path | None] = ContextVar("gitok_config_file", default=None)


def load_toml(path: Path | None) -> dict[str, Any]:
    """Parse *path* into a dict; a missing file is empty, bad syntax is a usage error."""
    if path is None or not path.is_file():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by a parsed ``gitok.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], data: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._data = data

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


class GitokSettings(BaseSettings):
    """Everything a command needs to know about its environment.

    Attributes:
        config_path: The TOML file that was read, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "GITOK_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    no_interact: bool = False

    store: StoreConfig = Field(default_factory=StoreConfig)
    crypto: CryptoConfig = Field(default_factory=CryptoConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    advisories: AdvisoriesConfig = Field(default_factory=AdvisoriesConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml = TomlSettingsSource(settings_cls, load_toml(_config_file.get()))
        return init_settings, env_settings, toml

    @property
    def store_root(self) -> Path:
        return self.store.root.expanduser()

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        store_dir: str | None = None,
        cwd: Path | None = None,
        **cli_flags: Any,
    ) -> GitokSettings:
        """Build settings for one invocation.

        An explicit *config_path* that does not exist means "no file" rather
        than falling back to discovery. *store_dir* beats every other source
        for ``[store] root``.
        """
        if config_path:
            explicit = Path(config_path)
            path = explicit if explicit.is_file() else None
        else:
            path = find_config(cwd)

        token = _config_file.set(path)
        try:
            settings = cls(config_path=path, **cli_flags)
        finally:
            _config_file.reset(token)

        if store_dir:
            store = settings.store.model_copy(update={"root": Path(store_dir)})
            settings = settings.model_copy(update={"store": store})
        return settings
