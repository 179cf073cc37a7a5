"""
Name resolver — pick the single stored command a bare name refers to.

Policy, most specific first:

    strict scope (global, --dir, --cwd)  → exact (name, dir) match or nothing
    no preference                        → (name, cwd) match if present,
                                           else the sole command with that name,
                                           else Ambiguous with every candidate

Directory-local commands shadow same-named commands elsewhere, while a
name that exists only once still works from any directory. The resolver
never chooses between several candidates; the caller decides how.

Usage::

    outcome = resolve(store, "build", Scope.any())
    if isinstance(outcome, Found):
        outcome.command.launch()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Protocol

from cxd.core.command import Command
from cxd.core.exceptions import WorkingDirectoryError

logger = logging.getLogger(__name__)


class CommandSource(Protocol):
    """The lookups the resolver needs; CommandStore provides both."""

    def find(self, name: str, directory: Path | None) -> Command | None: ...

    def find_by_name(self, name: str) -> list[Command]: ...


# ---------------------------------------------------------------------------
# Scope
# ---------------------------------------------------------------------------


class ScopeKind(StrEnum):
    GLOBAL = "global"
    DIRECTORY = "directory"
    CWD = "cwd"
    ANY = "any"


@dataclass(frozen=True)
class Scope:
    kind: ScopeKind
    directory: Path | None = None

    @classmethod
    def global_(cls) -> Scope:
        return cls(ScopeKind.GLOBAL)

    @classmethod
    def in_dir(cls, directory: Path | str) -> Scope:
        return cls(ScopeKind.DIRECTORY, Path(directory))

    @classmethod
    def cwd(cls) -> Scope:
        return cls(ScopeKind.CWD)

    @classmethod
    def any(cls) -> Scope:
        return cls(ScopeKind.ANY)

    @property
    def strict(self) -> bool:
        return self.kind is not ScopeKind.ANY


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Found:
    command: Command


@dataclass(frozen=True)
class NotFound:
    name: str


@dataclass(frozen=True)
class Ambiguous:
    name: str
    candidates: list[Command] = field(default_factory=list)


Resolution = Found | NotFound | Ambiguous


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def current_directory() -> Path:
    """The process cwd.

    Raises:
        WorkingDirectoryError: if the directory has been removed.
    """
    try:
        return Path.cwd()
    except OSError as exc:
        raise WorkingDirectoryError(exc) from exc


def scope_directory(scope: Scope, cwd: Path | None = None) -> Path | None:
    """The ``dir`` value a scope matches against (``None`` for global)."""
    if scope.kind is ScopeKind.GLOBAL:
        return None
    if scope.kind is ScopeKind.DIRECTORY:
        return scope.directory
    return cwd if cwd is not None else current_directory()


def resolve(
    source: CommandSource, name: str, scope: Scope, cwd: Path | None = None
) -> Resolution:
    """Resolve ``name`` under ``scope``. ``cwd`` defaults to the process cwd."""
    if scope.strict:
        directory = scope_directory(scope, cwd)
        best = source.find(name, directory)
        logger.debug("Strict %s lookup for %r in %s: %s", scope.kind, name, directory, best)
        return Found(best) if best is not None else NotFound(name)

    try:
        directory = scope_directory(scope, cwd)
    except WorkingDirectoryError as exc:
        logger.debug("Skipping current-directory match for %r: %s", name, exc)
    else:
        best = source.find(name, directory)
        if best is not None:
            return Found(best)

    matches = source.find_by_name(name)
    if not matches:
        return NotFound(name)
    if len(matches) == 1:
        logger.debug("Sole match for %r: id %d", name, matches[0].id)
        return Found(matches[0])
    logger.debug("%r is ambiguous: %d candidates", name, len(matches))
    return Ambiguous(name, matches)
