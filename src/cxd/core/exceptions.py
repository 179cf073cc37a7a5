"""cxd exception hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cxd.core.command import Command


class CxdError(Exception):
    """Base exception for all cxd errors."""


class ConfigError(CxdError):
    """Raised when the configuration is invalid or cannot be read."""


class CachePathError(ConfigError):
    """Raised when no suitable path can be found for the store file."""

    def __init__(self) -> None:
        super().__init__("no suitable path found for cache file")


class StoreError(CxdError):
    """Raised when the backing SQLite engine reports a failure."""


class StoreOpenError(StoreError):
    """Raised when the store file cannot be opened or initialised."""


class RowDecodeError(StoreError):
    """Raised when a persisted record does not have the expected shape."""


class CommandExistsError(CxdError):
    """Raised when a command with the same name already exists."""

    def __init__(self, name: str) -> None:
        super().__init__(f'command already exists: "{name}"')
        self.name = name


class CommandNotFoundError(CxdError):
    """Raised when no stored command matches a name."""

    def __init__(self, name: str) -> None:
        super().__init__(f'command not found: "{name}"')
        self.name = name


class AmbiguousCommandError(CxdError):
    """Raised when a name matches several commands and none could be chosen."""

    def __init__(self, name: str, candidates: list[Command]) -> None:
        ids = ", ".join(str(c.id) for c in candidates)
        super().__init__(f'"{name}" matches {len(candidates)} commands (ids: {ids})')
        self.name = name
        self.candidates = candidates


class LaunchError(CxdError):
    """Raised when a stored command cannot be executed."""

    def __init__(self, name: str, error: OSError) -> None:
        super().__init__(f"exec {name}: {error}")
        self.name = name
        self.error = error


class WorkingDirectoryError(CxdError):
    """Raised when the process working directory no longer exists."""

    def __init__(self, error: OSError) -> None:
        super().__init__(f"current directory is unavailable: {error}")
        self.error = error
