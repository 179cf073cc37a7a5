"""Turn scope flags into a Scope, and a Resolution into one Command."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console

from cxd.core.command import Command
from cxd.core.exceptions import AmbiguousCommandError, CommandNotFoundError
from cxd.core.resolver import (
    Ambiguous,
    Found,
    Resolution,
    Scope,
    current_directory,
    scope_directory,
)


def scope_from_flags(use_global: bool, use_cwd: bool, directory: str | None) -> Scope:
    """Build a Scope from the -g/-c/-d flags; no flag means no preference."""
    if sum((use_global, use_cwd, directory is not None)) > 1:
        raise click.UsageError("Options --global, --cwd and --dir are incompatible")
    if use_global:
        return Scope.global_()
    if use_cwd:
        return Scope.cwd()
    if directory is not None:
        path = Path(directory).expanduser()
        if not path.is_absolute():
            path = current_directory() / path
        return Scope.in_dir(path.resolve())
    return Scope.any()


def add_directory(use_global: bool, use_cwd: bool, directory: str | None) -> Path | None:
    """Directory a new command is saved for. Defaults to the current directory."""
    return scope_directory(scope_from_flags(use_global, use_cwd, directory))


def choose(
    outcome: Resolution,
    on_ambiguous: str,
    console: Console,
    interactive: bool | None = None,
) -> Command:
    """
    Reduce a resolution to one command according to the ambiguity policy.

    ``on_ambiguous`` is ``prompt``, ``fail`` or ``first``. Prompting needs an
    interactive stdin; without one it behaves like ``fail``.

    Raises:
        CommandNotFoundError: nothing matched, or the chosen id is not a candidate.
        AmbiguousCommandError: several matched and the policy did not pick one.
    """
    if isinstance(outcome, Found):
        return outcome.command
    if not isinstance(outcome, Ambiguous):
        raise CommandNotFoundError(outcome.name)

    candidates = {c.id: c for c in outcome.candidates}
    if on_ambiguous == "first":
        return candidates[min(candidates)]

    if interactive is None:
        interactive = sys.stdin.isatty()
    if on_ambiguous != "prompt" or not interactive:
        raise AmbiguousCommandError(outcome.name, outcome.candidates)

    for cmd in outcome.candidates:
        console.print(cmd.describe(show_id=True), highlight=False, markup=False)
    chosen = click.prompt("\nCommand id", type=int)
    if chosen not in candidates:
        raise CommandNotFoundError(f"{outcome.name} (id {chosen})")
    return candidates[chosen]
