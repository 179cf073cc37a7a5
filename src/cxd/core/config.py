"""cxd configuration: Pydantic model, load, and store-file resolution."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from cxd.core.constants import (
    CACHE_FILENAME,
    CONFIG_DIR_NAME,
    CONFIG_FILENAME,
    ENV_CACHE_DIR,
    ENV_CONFIG,
    ENV_LOG_LEVEL,
    ENV_ON_AMBIGUOUS,
)
from cxd.core.exceptions import CachePathError, ConfigError

# ---------------------------------------------------------------------------
# Sub-models
# ---------------------------------------------------------------------------


class StoreConfig(BaseModel):
    path: str = ""  # empty → use default cache location
    scoped_names: bool = False  # UNIQUE(name, dir) instead of UNIQUE(name); fixed at creation


class LoggingConfig(BaseModel):
    level: str = "WARNING"

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()


class ResolveConfig(BaseModel):
    # What to do when a name matches several commands and no scope narrows it
    on_ambiguous: Literal["prompt", "fail", "first"] = "prompt"

    @field_validator("on_ambiguous", mode="before")
    @classmethod
    def normalise(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v


# ---------------------------------------------------------------------------
# Root config
# ---------------------------------------------------------------------------


class CxdConfig(BaseModel):
    """Root cxd configuration model."""

    store: StoreConfig = Field(default_factory=StoreConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    resolve: ResolveConfig = Field(default_factory=ResolveConfig)


# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------


def _env(name: str) -> str | None:
    """Return an environment variable, treating the empty string as unset."""
    value = os.environ.get(name)
    return value or None


def config_file_path() -> Path:
    if env_path := _env(ENV_CONFIG):
        return Path(env_path)
    if xdg := _env("XDG_CONFIG_HOME"):
        return Path(xdg) / CONFIG_DIR_NAME / CONFIG_FILENAME
    return Path.home() / ".config" / CONFIG_DIR_NAME / CONFIG_FILENAME


def load_config(path: Path | None = None) -> CxdConfig:
    """
    Load CxdConfig from a TOML file, overlaid with environment variables.

    A missing file is not an error: defaults apply.

    Priority (highest to lowest):
      1. Environment variables (CXD_*)
      2. Config file ($CXD_CONFIG or ~/.config/cxd/config.toml)
    """
    import tomllib

    cfg_path = path or config_file_path()

    data: dict[str, Any] = {}
    if cfg_path.exists():
        try:
            with open(cfg_path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigError(f"Cannot read config file {cfg_path}: {exc}") from exc

    _apply_env_overrides(data)

    try:
        return CxdConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid config at {cfg_path}: {exc}") from exc


def _apply_env_overrides(data: dict[str, Any]) -> None:
    """Overlay CXD_* environment variables onto the parsed TOML data."""
    if level := _env(ENV_LOG_LEVEL):
        data.setdefault("logging", {})["level"] = level
    if policy := _env(ENV_ON_AMBIGUOUS):
        data.setdefault("resolve", {})["on_ambiguous"] = policy


# ---------------------------------------------------------------------------
# Store file location
# ---------------------------------------------------------------------------


def store_path(config: CxdConfig, override: str | None = None) -> Path:
    """
    Pick the backing store file.

    First of: ``override`` (``--file``), ``[store] path``,
    ``$CXD_CACHE_DIR/cxd.cache``, ``$XDG_CACHE_HOME/cxd.cache``,
    ``$HOME/.cache/cxd.cache``. Empty values are skipped.

    Raises:
        CachePathError: if none of them is available.
    """
    if override:
        return Path(override).expanduser()
    if config.store.path:
        return Path(config.store.path).expanduser()
    if cache_dir := _env(ENV_CACHE_DIR):
        return Path(cache_dir) / CACHE_FILENAME
    if xdg := _env("XDG_CACHE_HOME"):
        return Path(xdg) / CACHE_FILENAME
    if home := _env("HOME"):
        return Path(home) / ".cache" / CACHE_FILENAME
    raise CachePathError()
