"""
cxd CLI entry point.

Commands:
  cxd add [SCOPE] [-e K=V]... NAME CMD [ARG]...  — save a command
  cxd run [SCOPE] NAME                           — run a saved command
  cxd rm  [SCOPE] NAME | --id ID                 — remove a saved command
  cxd ls  [--id] [--short] [--json]              — list saved commands
  cxd clear [--yes]                              — remove every saved command
  cxd info [--json]                              — show store path and row counts

SCOPE is one of -g/--global, -c/--cwd, -d/--dir DIR.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, TypeVar

import click
from rich.console import Console
from rich.markup import escape

from cxd import __version__
from cxd.core.constants import ExitCode
from cxd.core.exceptions import (
    AmbiguousCommandError,
    CommandExistsError,
    CommandNotFoundError,
    ConfigError,
    CxdError,
    LaunchError,
    StoreError,
)

F = TypeVar("F", bound=Callable[..., Any])

console = Console()
err_console = Console(stderr=True)

_EXIT_CODES: list[tuple[type[CxdError], ExitCode]] = [
    (ConfigError, ExitCode.CONFIG_ERROR),
    (StoreError, ExitCode.STORE_ERROR),
    (CommandNotFoundError, ExitCode.NOT_FOUND),
    (AmbiguousCommandError, ExitCode.AMBIGUOUS),
    (CommandExistsError, ExitCode.EXISTS),
    (LaunchError, ExitCode.LAUNCH_ERROR),
]


@dataclass
class CliState:
    """Options shared by every subcommand."""

    file: str | None = None
    verbose: bool = False


@contextmanager
def _reported() -> Iterator[None]:
    """Print cxd errors on stderr and exit with the matching code."""
    try:
        yield
    except CxdError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}", highlight=False)
        code = next((c for kind, c in _EXIT_CODES if isinstance(exc, kind)), ExitCode.ERROR)
        sys.exit(int(code))


def _scope_options(fn: F) -> F:
    fn = click.option(
        "--dir", "-d", "directory", default=None, type=click.Path(file_okay=False),
        help="Match commands saved for DIR",
    )(fn)
    fn = click.option(
        "--cwd", "-c", "use_cwd", is_flag=True, default=False,
        help="Match commands saved for the current directory",
    )(fn)
    fn = click.option(
        "--global", "-g", "use_global", is_flag=True, default=False,
        help="Match global commands",
    )(fn)
    return fn


def _parse_env(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for raw in values:
        key, sep, value = raw.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VAL, got {raw!r}")
        pairs.append((key, value))
    return pairs


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "--version", "-V", message="cxd %(version)s")
@click.option(
    "--file", "-f", "file", default=None, metavar="FILE",
    help="File to use as the backing command cache",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, file: str | None, verbose: bool) -> None:
    """cxd — save shell commands under a short name and run them by name."""
    ctx.obj = CliState(file=file, verbose=verbose)


# ---------------------------------------------------------------------------
# add
# ---------------------------------------------------------------------------


@cli.command(context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False})
@_scope_options
@click.option(
    "--env", "-e", "envs", multiple=True, metavar="KEY=VAL", callback=_parse_env,
    help="Save an environment variable with the command",
)
@click.argument("name")
@click.argument("command")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def add(
    state: CliState,
    use_global: bool,
    use_cwd: bool,
    directory: str | None,
    envs: list[tuple[str, str]],
    name: str,
    command: str,
    args: tuple[str, ...],
) -> None:
    """Save COMMAND with ARGS under NAME (scoped to the current directory by default)."""
    from cxd.cli._add import cmd_add

    with _reported():
        cmd_add(
            state,
            name=name,
            command=command,
            args=list(args),
            envs=envs,
            use_global=use_global,
            use_cwd=use_cwd,
            directory=directory,
            console=console,
        )


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@cli.command()
@_scope_options
@click.argument("name")
@click.pass_obj
def run(
    state: CliState, use_global: bool, use_cwd: bool, directory: str | None, name: str
) -> None:
    """Run the saved command called NAME."""
    from cxd.cli._run import cmd_run

    with _reported():
        cmd_run(
            state,
            name=name,
            use_global=use_global,
            use_cwd=use_cwd,
            directory=directory,
            console=console,
        )


# ---------------------------------------------------------------------------
# rm
# ---------------------------------------------------------------------------


@cli.command("rm")
@_scope_options
@click.option("--id", "-i", "cmd_id", type=int, default=None, help="Remove by internal id")
@click.argument("name", required=False)
@click.pass_obj
def remove(
    state: CliState,
    use_global: bool,
    use_cwd: bool,
    directory: str | None,
    cmd_id: int | None,
    name: str | None,
) -> None:
    """Remove a saved command by NAME or by --id."""
    from cxd.cli._remove import cmd_remove

    if (name is None) == (cmd_id is None):
        raise click.UsageError("Give exactly one of NAME or --id")
    with _reported():
        cmd_remove(
            state,
            name=name,
            cmd_id=cmd_id,
            use_global=use_global,
            use_cwd=use_cwd,
            directory=directory,
            console=console,
        )


# ---------------------------------------------------------------------------
# ls
# ---------------------------------------------------------------------------


@cli.command("ls")
@click.option("--id", "-i", "show_id", is_flag=True, default=False, help="Show internal ids")
@click.option("--short", "-s", is_flag=True, default=False, help="Names only")
@click.option("--json", "as_json", is_flag=True, default=False)
@click.pass_obj
def list_commands(state: CliState, show_id: bool, short: bool, as_json: bool) -> None:
    """List saved commands."""
    from cxd.cli._list import cmd_list

    with _reported():
        cmd_list(state, show_id=show_id, short=short, as_json=as_json, console=console)


# ---------------------------------------------------------------------------
# clear / info
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--yes", "-y", is_flag=True, default=False, help="Do not ask for confirmation")
@click.pass_obj
def clear(state: CliState, yes: bool) -> None:
    """Remove every saved command from the store."""
    from cxd.cli._db import cmd_clear

    with _reported():
        cmd_clear(state, yes=yes, console=console)


@cli.command()
@click.option("--json", "as_json", is_flag=True, default=False)
@click.pass_obj
def info(state: CliState, as_json: bool) -> None:
    """Show the store path, uniqueness mode and row counts."""
    from cxd.cli._db import cmd_info

    with _reported():
        cmd_info(state, as_json=as_json, console=console)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
