"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, gitok.toml only contains overrides.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

STORE_DIRNAME = ".gitok"


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    root: Path = Field(default_factory=lambda: Path.home() / STORE_DIRNAME)
    default_domain: str = "github.com"


class CryptoConfig(BaseModel):
    """[crypto] section."""

    model_config = {"frozen": True}

    kdf_iterations: int = Field(default=480_000, ge=1)


class CacheConfig(BaseModel):
    """[cache] section."""

    model_config = {"frozen": True}

    timeout: int = Field(default=3600, ge=1)


class AdvisoriesConfig(BaseModel):
    """[advisories] section."""

    model_config = {"frozen": True}

    author_mismatch: bool = True
    cache_helper: bool = True


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: Path | None = None
