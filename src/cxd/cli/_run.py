"""cxd run — resolve a name and replace this process with the command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console

from cxd.cli._select import choose, scope_from_flags
from cxd.cli._store import load
from cxd.core.resolver import resolve

if TYPE_CHECKING:
    from cxd.cli.main import CliState


def cmd_run(
    state: CliState,
    name: str,
    use_global: bool,
    use_cwd: bool,
    directory: str | None,
    console: Console,
) -> None:
    scope = scope_from_flags(use_global, use_cwd, directory)
    config, store = load(state)
    with store:
        outcome = resolve(store, name, scope)
        cmd = choose(outcome, config.resolve.on_ambiguous, console)
    # Store is closed before exec replaces the process image
    cmd.launch()
