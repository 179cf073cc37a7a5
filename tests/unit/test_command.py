"""Unit tests for cxd.core.command — display and launch."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from cxd.core.command import Command
from cxd.core.exceptions import LaunchError


class _ExecCalled(Exception):
    pass


@pytest.fixture
def exec_calls(monkeypatch) -> list[tuple[str, list[str], dict[str, str]]]:
    calls: list[tuple[str, list[str], dict[str, str]]] = []

    def fake_execvpe(file: str, argv: list[str], env: dict[str, str]) -> None:
        calls.append((file, argv, env))
        raise _ExecCalled()

    monkeypatch.setattr(os, "execvpe", fake_execvpe)
    return calls


class TestDescribe:
    def test_global(self) -> None:
        text = Command(name="hi", command="echo", args=["hello", "world"]).describe()
        assert "Command: hi" in text
        assert "exec: echo hello world" in text
        assert "scope: Global" in text
        assert "id:" not in text

    def test_scoped_with_id_and_env(self) -> None:
        cmd = Command(id=7, name="b", command="make", dir=Path("/srv"), envs=[("CC", "gcc")])
        text = cmd.describe(show_id=True)
        assert "id: 7" in text
        assert "scope: /srv" in text
        assert "env: CC=gcc" in text

    def test_str_matches_describe(self) -> None:
        cmd = Command(name="x", command="true")
        assert str(cmd) == cmd.describe()

    def test_is_global(self) -> None:
        assert Command(name="x", command="true").is_global
        assert not Command(name="x", command="true", dir=Path("/tmp")).is_global


class TestLaunch:
    def test_argv_includes_program_name(self, exec_calls) -> None:
        with pytest.raises(_ExecCalled):
            Command(name="ls", command="ls", args=["-l", "-a"]).launch()
        file, argv, _ = exec_calls[0]
        assert file == "ls"
        assert argv == ["ls", "-l", "-a"]

    def test_envs_overlay_environment(self, exec_calls, monkeypatch) -> None:
        monkeypatch.setenv("KEEP_ME", "1")
        monkeypatch.setenv("CC", "gcc")
        with pytest.raises(_ExecCalled):
            Command(name="b", command="make", envs=[("CC", "clang")]).launch()
        env = exec_calls[0][2]
        assert env["KEEP_ME"] == "1"
        assert env["CC"] == "clang"

    def test_changes_directory(self, exec_calls, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path.parent)
        with pytest.raises(_ExecCalled):
            Command(name="b", command="make", dir=tmp_path).launch()
        assert Path.cwd() == tmp_path.resolve()

    def test_global_keeps_directory(self, exec_calls, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        with pytest.raises(_ExecCalled):
            Command(name="b", command="make").launch()
        assert Path.cwd() == tmp_path.resolve()

    def test_missing_executable(self, monkeypatch) -> None:
        def fail(file: str, argv: list[str], env: dict[str, str]) -> None:
            raise FileNotFoundError(2, "No such file or directory")

        monkeypatch.setattr(os, "execvpe", fail)
        with pytest.raises(LaunchError) as info:
            Command(name="ghost", command="definitely-not-here").launch()
        assert info.value.name == "ghost"
        assert isinstance(info.value.error, FileNotFoundError)
        assert "ghost" in str(info.value)

    def test_missing_directory(self, exec_calls, tmp_path: Path) -> None:
        with pytest.raises(LaunchError):
            Command(name="b", command="make", dir=tmp_path / "gone").launch()
        assert exec_calls == []
