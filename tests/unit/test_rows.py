"""Unit tests for cxd.core.store.rows — schema creation and record decoding."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from cxd.core.command import Command
from cxd.core.exceptions import RowDecodeError, StoreError
from cxd.core.store.rows import (
    ArgumentRow,
    CommandRow,
    EnvironmentRow,
    assemble,
    from_stored_dir,
    to_stored_dir,
)


@pytest.fixture
def conn() -> sqlite3.Connection:
    c = sqlite3.connect(":memory:")
    c.row_factory = sqlite3.Row
    c.execute("PRAGMA foreign_keys = ON")
    yield c
    c.close()


def _record(conn: sqlite3.Connection, sql: str) -> sqlite3.Row:
    return conn.execute(sql).fetchone()


class TestInit:
    def test_init_twice_is_safe(self, conn: sqlite3.Connection) -> None:
        for _ in range(2):
            CommandRow.init(conn)
            ArgumentRow.init(conn)
            EnvironmentRow.init(conn)
        tables = {
            r["name"] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
        assert {"cxd_cmd", "cxd_arg", "cxd_env"} <= tables

    def test_name_is_unique(self, conn: sqlite3.Connection) -> None:
        CommandRow.init(conn)
        conn.execute("INSERT INTO cxd_cmd (name, cmd, dir) VALUES ('a', 'ls', '')")
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute("INSERT INTO cxd_cmd (name, cmd, dir) VALUES ('a', 'ls', '/tmp')")

    def test_scoped_unique_allows_other_dir(self, conn: sqlite3.Connection) -> None:
        CommandRow.init(conn, scoped_names=True)
        conn.execute("INSERT INTO cxd_cmd (name, cmd, dir) VALUES ('a', 'ls', '')")
        conn.execute("INSERT INTO cxd_cmd (name, cmd, dir) VALUES ('a', 'ls', '/tmp')")
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute("INSERT INTO cxd_cmd (name, cmd, dir) VALUES ('a', 'ls', '')")

    def test_argument_requires_live_command(self, conn: sqlite3.Connection) -> None:
        CommandRow.init(conn)
        ArgumentRow.init(conn)
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute("INSERT INTO cxd_arg (cmd_id, data) VALUES (77, 'x')")

    def test_not_null_enforced(self, conn: sqlite3.Connection) -> None:
        CommandRow.init(conn)
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute("INSERT INTO cxd_cmd (name, cmd, dir) VALUES ('a', NULL, '')")


class TestFromRecord:
    def test_command_row(self, conn: sqlite3.Connection) -> None:
        rec = _record(conn, "SELECT 3 AS id, 'build' AS name, 'make' AS cmd, '' AS dir")
        row = CommandRow.from_record(rec)
        assert row == CommandRow(id=3, name="build", cmd="make", dir="")
        assert row.directory is None

    def test_argument_row(self, conn: sqlite3.Connection) -> None:
        rec = _record(conn, "SELECT 1 AS id, 3 AS cmd_id, '-j4' AS data")
        assert ArgumentRow.from_record(rec) == ArgumentRow(id=1, cmd_id=3, data="-j4")

    def test_environment_row(self, conn: sqlite3.Connection) -> None:
        rec = _record(conn, "SELECT 1 AS id, 3 AS cmd_id, 'CC' AS key, 'gcc' AS value")
        assert EnvironmentRow.from_record(rec) == EnvironmentRow(
            id=1, cmd_id=3, key="CC", value="gcc"
        )

    def test_missing_column(self, conn: sqlite3.Connection) -> None:
        rec = _record(conn, "SELECT 3 AS id, 'build' AS name, 'make' AS cmd")
        with pytest.raises(RowDecodeError, match="dir"):
            CommandRow.from_record(rec)

    def test_wrong_type(self, conn: sqlite3.Connection) -> None:
        rec = _record(conn, "SELECT 1 AS id, 'three' AS cmd_id, 'x' AS data")
        with pytest.raises(RowDecodeError, match="cmd_id"):
            ArgumentRow.from_record(rec)

    def test_null_value(self, conn: sqlite3.Connection) -> None:
        rec = _record(conn, "SELECT 1 AS id, 3 AS cmd_id, 'K' AS key, NULL AS value")
        with pytest.raises(RowDecodeError):
            EnvironmentRow.from_record(rec)

    def test_decode_error_is_store_error(self) -> None:
        assert issubclass(RowDecodeError, StoreError)


class TestDirectoryBoundary:
    def test_none_is_empty_string(self) -> None:
        assert to_stored_dir(None) == ""
        assert from_stored_dir("") is None

    def test_path_round_trips(self) -> None:
        assert from_stored_dir(to_stored_dir(Path("/srv/app"))) == Path("/srv/app")

    def test_from_command(self) -> None:
        row = CommandRow.from_command(Command(name="a", command="ls", dir=Path("/tmp")))
        assert row.dir == "/tmp"
        assert CommandRow.from_command(Command(name="a", command="ls")).dir == ""

    def test_assemble(self) -> None:
        cmd = assemble(
            CommandRow(id=5, name="a", cmd="ls", dir="/tmp"),
            [ArgumentRow(1, 5, "-l"), ArgumentRow(2, 5, "-a")],
            [EnvironmentRow(1, 5, "LC_ALL", "C")],
        )
        assert cmd == Command(
            id=5,
            name="a",
            command="ls",
            dir=Path("/tmp"),
            args=["-l", "-a"],
            envs=[("LC_ALL", "C")],
        )
