"""cxd ls — list saved commands."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click
from rich.console import Console

from cxd.cli._store import load

if TYPE_CHECKING:
    from cxd.cli.main import CliState


def cmd_list(
    state: CliState, show_id: bool, short: bool, as_json: bool, console: Console
) -> None:
    _, store = load(state)
    with store:
        commands = store.fetch_all()

    if as_json:
        rows = [
            {
                "id": c.id,
                "name": c.name,
                "command": c.command,
                "args": c.args,
                "env": dict(c.envs),
                "dir": None if c.dir is None else str(c.dir),
            }
            for c in commands
        ]
        click.echo(json.dumps(rows, indent=2))
        return

    for cmd in commands:
        if short:
            line = f"{cmd.id}\t{cmd.name}" if show_id else cmd.name
            console.print(line, highlight=False, markup=False)
        else:
            console.print(cmd.describe(show_id=show_id), highlight=False, markup=False)
