"""cxd add — save a command under a name."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console

from cxd.cli._select import add_directory
from cxd.cli._store import load
from cxd.core.command import Command
from cxd.core.exceptions import CommandExistsError

if TYPE_CHECKING:
    from cxd.cli.main import CliState


def cmd_add(
    state: CliState,
    name: str,
    command: str,
    args: list[str],
    envs: list[tuple[str, str]],
    use_global: bool,
    use_cwd: bool,
    directory: str | None,
    console: Console,
) -> None:
    cmd = Command(
        name=name,
        command=command,
        dir=add_directory(use_global, use_cwd, directory),
        args=args,
        envs=envs,
    )
    _, store = load(state)
    with store:
        new_id = store.insert(cmd)
    if new_id is None:
        raise CommandExistsError(name)
    cmd.id = new_id
    console.print(f"Created {cmd}", highlight=False, markup=False)
