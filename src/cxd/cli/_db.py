"""cxd clear | info — store management."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click
from rich.console import Console

from cxd.cli._store import load

if TYPE_CHECKING:
    from cxd.cli.main import CliState


def cmd_clear(state: CliState, yes: bool, console: Console) -> None:
    _, store = load(state)
    if not yes and not click.confirm(
        "This will remove all saved commands from the store. Continue?", default=False
    ):
        console.print("Nothing was removed.")
        return
    with store:
        removed = store.clear()
    console.print(
        f"Removed {removed} command(s) from {store.path}", highlight=False, markup=False
    )


def cmd_info(state: CliState, as_json: bool, console: Console) -> None:
    _, store = load(state)
    with store:
        counts = store.counts()
        scoped = store.scoped_names

    size_kb = store.path.stat().st_size / 1024 if store.path.exists() else 0.0

    if as_json:
        click.echo(
            json.dumps(
                {
                    "path": str(store.path),
                    "scoped_names": scoped,
                    "size_kb": round(size_kb, 1),
                    "tables": counts,
                },
                indent=2,
            )
        )
        return

    console.print(f"[bold]Store[/bold]: {store.path}")
    console.print(f"Names unique per: {'directory' if scoped else 'store'}")
    console.print(f"Size: {size_kb:.1f} KB")
    console.print("\nTable row counts:")
    for table, count in counts.items():
        console.print(f"  {table:<16} {count}")
