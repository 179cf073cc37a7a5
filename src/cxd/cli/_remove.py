"""cxd rm — remove a saved command by name or id."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
from rich.console import Console

from cxd.cli._select import choose, scope_from_flags
from cxd.cli._store import load
from cxd.core.resolver import resolve

if TYPE_CHECKING:
    from cxd.cli.main import CliState


def cmd_remove(
    state: CliState,
    name: str | None,
    cmd_id: int | None,
    use_global: bool,
    use_cwd: bool,
    directory: str | None,
    console: Console,
) -> None:
    scope = scope_from_flags(use_global, use_cwd, directory)
    config, store = load(state)
    with store:
        if cmd_id is not None:
            cmd = store.get_by_id(cmd_id)
        elif name is not None:
            cmd = choose(resolve(store, name, scope), config.resolve.on_ambiguous, console)
        else:
            raise click.UsageError("Give exactly one of NAME or --id")

        if cmd is not None and store.delete_by_id(cmd.id):
            console.print(f"Deleted {cmd}", highlight=False, markup=False)
        else:
            console.print("No matching command found, nothing was deleted")
