"""
Row schemas for the three cxd relations.

Each row class owns its ``CREATE TABLE`` statement and the mapping from a
``sqlite3.Row`` produced by the store's own queries to a typed value.

Tables::

    cxd_cmd  (id, name, cmd, dir)
    cxd_arg  (id, cmd_id -> cxd_cmd.id, data)
    cxd_env  (id, cmd_id -> cxd_cmd.id, key, value)

Global commands are stored with ``dir = ''``: SQLite treats NULLs as
distinct, so an optional column cannot take part in a UNIQUE constraint.
Only this module converts between ``''`` and ``None``.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cxd.core.command import Command
from cxd.core.constants import ARGUMENT_TABLE, COMMAND_TABLE, ENVIRONMENT_TABLE, GLOBAL_DIR
from cxd.core.exceptions import RowDecodeError


def _field(record: sqlite3.Row, name: str, kind: type) -> Any:
    try:
        value = record[name]
    except (IndexError, KeyError) as exc:
        raise RowDecodeError(f"record is missing column {name!r}") from exc
    # bool is an int subclass; no column here is boolean
    if not isinstance(value, kind) or isinstance(value, bool):
        raise RowDecodeError(
            f"column {name!r}: expected {kind.__name__}, got {type(value).__name__}"
        )
    return value


# ---------------------------------------------------------------------------
# cxd_cmd
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CommandRow:
    id: int
    name: str
    cmd: str
    dir: str

    @staticmethod
    def init(conn: sqlite3.Connection, scoped_names: bool = False) -> None:
        """Create the command table if it does not exist yet.

        With ``scoped_names`` the UNIQUE constraint covers ``(name, dir)``
        instead of ``name`` alone. An existing table is left untouched.
        """
        unique = "UNIQUE(name, dir)" if scoped_names else "UNIQUE(name)"
        conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {COMMAND_TABLE} (
                id      INTEGER PRIMARY KEY AUTOINCREMENT,
                name    TEXT NOT NULL,
                cmd     TEXT NOT NULL,
                dir     TEXT NOT NULL,
                {unique}
            )
            """
        )

    @classmethod
    def from_record(cls, record: sqlite3.Row) -> CommandRow:
        return cls(
            id=_field(record, "id", int),
            name=_field(record, "name", str),
            cmd=_field(record, "cmd", str),
            dir=_field(record, "dir", str),
        )

    @classmethod
    def from_command(cls, command: Command) -> CommandRow:
        return cls(
            id=command.id,
            name=command.name,
            cmd=command.command,
            dir=to_stored_dir(command.dir),
        )

    @property
    def directory(self) -> Path | None:
        return from_stored_dir(self.dir)


# ---------------------------------------------------------------------------
# cxd_arg
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ArgumentRow:
    id: int
    cmd_id: int
    data: str

    @staticmethod
    def init(conn: sqlite3.Connection) -> None:
        conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {ARGUMENT_TABLE} (
                id      INTEGER PRIMARY KEY AUTOINCREMENT,
                cmd_id  INTEGER NOT NULL,
                data    TEXT NOT NULL,
                FOREIGN KEY(cmd_id) REFERENCES {COMMAND_TABLE}(id)
                ON DELETE CASCADE ON UPDATE CASCADE
            )
            """
        )

    @classmethod
    def from_record(cls, record: sqlite3.Row) -> ArgumentRow:
        return cls(
            id=_field(record, "id", int),
            cmd_id=_field(record, "cmd_id", int),
            data=_field(record, "data", str),
        )


# ---------------------------------------------------------------------------
# cxd_env
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EnvironmentRow:
    id: int
    cmd_id: int
    key: str
    value: str

    @staticmethod
    def init(conn: sqlite3.Connection) -> None:
        conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {ENVIRONMENT_TABLE} (
                id      INTEGER PRIMARY KEY AUTOINCREMENT,
                cmd_id  INTEGER NOT NULL,
                key     TEXT NOT NULL,
                value   TEXT NOT NULL,
                FOREIGN KEY(cmd_id) REFERENCES {COMMAND_TABLE}(id)
                ON DELETE CASCADE ON UPDATE CASCADE
            )
            """
        )

    @classmethod
    def from_record(cls, record: sqlite3.Row) -> EnvironmentRow:
        return cls(
            id=_field(record, "id", int),
            cmd_id=_field(record, "cmd_id", int),
            key=_field(record, "key", str),
            value=_field(record, "value", str),
        )


# ---------------------------------------------------------------------------
# Persistence-boundary helpers
# ---------------------------------------------------------------------------


def to_stored_dir(directory: Path | None) -> str:
    return GLOBAL_DIR if directory is None else str(directory)


def from_stored_dir(stored: str) -> Path | None:
    return None if stored == GLOBAL_DIR else Path(stored)


def assemble(
    cmd_row: CommandRow, arg_rows: list[ArgumentRow], env_rows: list[EnvironmentRow]
) -> Command:
    """Combine a command row and its dependents into a Command."""
    return Command(
        id=cmd_row.id,
        name=cmd_row.name,
        command=cmd_row.cmd,
        dir=cmd_row.directory,
        args=[a.data for a in arg_rows],
        envs=[(e.key, e.value) for e in env_rows],
    )
