"""
SQLite-backed command store.

CommandStore is the only component that touches the cxd tables. Callers
work with assembled :class:`~cxd.core.command.Command` objects and never
see raw rows.

Usage::

    with CommandStore.open(path) as store:
        new_id = store.insert(Command(name="build", command="make"))
        if new_id is None:
            ...  # name already taken
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from types import TracebackType

from cxd.core.command import Command
from cxd.core.constants import ARGUMENT_TABLE, COMMAND_TABLE, ENVIRONMENT_TABLE
from cxd.core.exceptions import StoreError, StoreOpenError
from cxd.core.store.rows import (
    ArgumentRow,
    CommandRow,
    EnvironmentRow,
    assemble,
    to_stored_dir,
)

logger = logging.getLogger(__name__)


@contextmanager
def _engine_errors(action: str) -> Iterator[None]:
    """Re-raise sqlite3 failures, and text sqlite3 cannot encode, as StoreError."""
    try:
        yield
    except (sqlite3.Error, UnicodeEncodeError) as exc:
        raise StoreError(f"{action}: {exc}") from exc


def _is_duplicate(exc: sqlite3.IntegrityError) -> bool:
    return getattr(exc, "sqlite_errorcode", None) == sqlite3.SQLITE_CONSTRAINT_UNIQUE


def _encodable(text: str) -> bool:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _detect_scoped_names(conn: sqlite3.Connection) -> bool:
    """Read the uniqueness mode back from the command table's UNIQUE index."""
    for index in conn.execute(f"PRAGMA index_list({COMMAND_TABLE})").fetchall():
        if not index["unique"] or index["origin"] != "u":
            continue
        columns = {
            row["name"] for row in conn.execute(f'PRAGMA index_info("{index["name"]}")')
        }
        if "name" in columns:
            return "dir" in columns
    return False


class CommandStore:
    """
    A connection to the backing database for operations on commands.

    Lifecycle::

        store = CommandStore(path)
        store.connect()     # or CommandStore.open(path)
        ...
        store.close()
    """

    def __init__(self, path: Path | str, scoped_names: bool = False) -> None:
        self._path = Path(path)
        self._requested_scoped = scoped_names
        self._scoped_names = scoped_names
        self._conn: sqlite3.Connection | None = None

    @classmethod
    def open(cls, path: Path | str, scoped_names: bool = False) -> CommandStore:
        store = cls(path, scoped_names=scoped_names)
        store.connect()
        return store

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def connect(self) -> None:
        """Open or create the backing file, enable foreign keys, and create tables.

        Raises:
            StoreOpenError: if the path is unusable or the file is not a database.
        """
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreOpenError(f"cannot create directory for {self._path}: {exc}") from exc

        conn: sqlite3.Connection | None = None
        try:
            conn = sqlite3.connect(str(self._path))
            conn.row_factory = sqlite3.Row
            # Off by default in SQLite; cascades depend on it
            conn.execute("PRAGMA foreign_keys = ON")
            CommandRow.init(conn, scoped_names=self._requested_scoped)
            ArgumentRow.init(conn)
            EnvironmentRow.init(conn)
            conn.commit()
            self._scoped_names = _detect_scoped_names(conn)
        except (sqlite3.Error, UnicodeEncodeError) as exc:
            if conn is not None:
                conn.close()
            raise StoreOpenError(f"cannot open store {self._path}: {exc}") from exc

        if self._scoped_names != self._requested_scoped:
            logger.warning(
                "Store %s was created with scoped_names=%s; ignoring requested %s",
                self._path,
                self._scoped_names,
                self._requested_scoped,
            )
        self._conn = conn
        logger.debug("Opened store %s (scoped_names=%s)", self._path, self._scoped_names)

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> CommandStore:
        if self._conn is None:
            self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def scoped_names(self) -> bool:
        """True when names only need to be unique within one directory."""
        return self._scoped_names

    @property
    def _db(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreError("store is not connected")
        return self._conn

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, cmd: Command) -> int | None:
        """
        Insert a command with its arguments and environment pairs.

        ``cmd.id`` is ignored. All three inserts run in one transaction, so a
        failure part-way leaves nothing behind.

        Returns:
            The new command id, or ``None`` if the uniqueness constraint
            rejected the name.

        Raises:
            StoreError: for any other engine failure.
        """
        row = CommandRow.from_command(cmd)
        try:
            with self._db:
                cursor = self._db.execute(
                    f"INSERT INTO {COMMAND_TABLE} (name, cmd, dir) VALUES (?, ?, ?)",
                    (row.name, row.cmd, row.dir),
                )
                new_id = cursor.lastrowid
                self._db.executemany(
                    f"INSERT INTO {ARGUMENT_TABLE} (cmd_id, data) VALUES (?, ?)",
                    [(new_id, arg) for arg in cmd.args],
                )
                self._db.executemany(
                    f"INSERT INTO {ENVIRONMENT_TABLE} (cmd_id, key, value) VALUES (?, ?, ?)",
                    [(new_id, key, value) for key, value in cmd.envs],
                )
        except sqlite3.IntegrityError as exc:
            if _is_duplicate(exc):
                logger.debug("Insert of %r rejected: already exists", cmd.name)
                return None
            raise StoreError(f"insert {cmd.name}: {exc}") from exc
        except (sqlite3.Error, UnicodeEncodeError) as exc:
            raise StoreError(f"insert {cmd.name}: {exc}") from exc

        logger.debug(
            "Inserted %r as id %s (%d args, %d envs)",
            cmd.name,
            new_id,
            len(cmd.args),
            len(cmd.envs),
        )
        return new_id

    def delete_by_name(self, name: str) -> bool:
        """Delete every command called ``name``. Returns whether anything was removed."""
        return self._delete("name = ?", (name,), f"name {name!r}")

    def delete_by_id(self, cmd_id: int) -> bool:
        """Delete the command with ``cmd_id``. Returns whether anything was removed."""
        return self._delete("id = ?", (cmd_id,), f"id {cmd_id}")

    def clear(self) -> int:
        """Delete every command and return how many were removed."""
        with _engine_errors("clear"), self._db:
            removed = self._db.execute(f"DELETE FROM {COMMAND_TABLE}").rowcount
        logger.debug("Cleared %d command(s)", removed)
        return removed

    def _delete(self, where: str, params: tuple[object, ...], label: str) -> bool:
        with _engine_errors(f"delete {label}"), self._db:
            removed = self._db.execute(f"DELETE FROM {COMMAND_TABLE} WHERE {where}", params)
        logger.debug("Delete %s removed %d row(s)", label, removed.rowcount)
        return removed.rowcount > 0

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_by_name(self, name: str) -> Command | None:
        """Exact lookup by name. With scoped names, the oldest match wins."""
        found = self._select("WHERE name = ? ORDER BY id LIMIT 1", (name,))
        return found[0] if found else None

    def get_by_id(self, cmd_id: int) -> Command | None:
        found = self._select("WHERE id = ?", (cmd_id,))
        return found[0] if found else None

    def find(self, name: str, directory: Path | None) -> Command | None:
        """Return the command matching both ``name`` and ``directory`` exactly."""
        stored = to_stored_dir(directory)
        if not _encodable(stored):
            # insert rejects such paths, so nothing can be stored under one
            return None
        found = self._select(
            "WHERE name = ? AND dir = ? ORDER BY id LIMIT 1", (name, stored)
        )
        return found[0] if found else None

    def find_by_name(self, name: str) -> list[Command]:
        """Return every command called ``name``, whatever its directory."""
        return self._select("WHERE name = ? ORDER BY id", (name,))

    def fetch_all(self) -> list[Command]:
        """Return every stored command. Order is not guaranteed."""
        return self._select("", ())

    def counts(self) -> dict[str, int]:
        """Row counts per table."""
        with _engine_errors("count rows"):
            return {
                table: self._db.execute(f"SELECT count(*) FROM {table}").fetchone()[0]
                for table in (COMMAND_TABLE, ARGUMENT_TABLE, ENVIRONMENT_TABLE)
            }

    def _select(self, clause: str, params: tuple[object, ...]) -> list[Command]:
        with _engine_errors("query commands"):
            records = self._db.execute(
                f"SELECT id, name, cmd, dir FROM {COMMAND_TABLE} {clause}", params
            ).fetchall()
            return [self._assemble(CommandRow.from_record(r)) for r in records]

    def _assemble(self, cmd_row: CommandRow) -> Command:
        """Fetch the dependents of ``cmd_row`` and build the Command."""
        args = [
            ArgumentRow.from_record(r)
            for r in self._db.execute(
                f"SELECT id, cmd_id, data FROM {ARGUMENT_TABLE} WHERE cmd_id = ? ORDER BY id",
                (cmd_row.id,),
            )
        ]
        envs = [
            EnvironmentRow.from_record(r)
            for r in self._db.execute(
                f"SELECT id, cmd_id, key, value FROM {ENVIRONMENT_TABLE} "
                "WHERE cmd_id = ? ORDER BY id",
                (cmd_row.id,),
            )
        ]
        return assemble(cmd_row, args, envs)
