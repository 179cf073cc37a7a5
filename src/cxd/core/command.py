"""The Command aggregate: a named, storable process invocation."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import NoReturn

from cxd.core.exceptions import LaunchError

logger = logging.getLogger(__name__)


@dataclass
class Command:
    """
    A saved command plus its ordered arguments and environment pairs.

    ``id`` is assigned by the store; leave it at 0 for commands that have
    not been inserted yet. ``dir`` of ``None`` marks a global command.
    """

    name: str
    command: str
    dir: Path | None = None
    args: list[str] = field(default_factory=list)
    envs: list[tuple[str, str]] = field(default_factory=list)
    id: int = 0

    @property
    def is_global(self) -> bool:
        return self.dir is None

    @property
    def scope(self) -> str:
        return "Global" if self.dir is None else str(self.dir)

    @property
    def exec_line(self) -> str:
        return " ".join([self.command, *self.args])

    def describe(self, show_id: bool = False) -> str:
        """Return a multi-line, human-readable summary."""
        lines = [f"Command: {self.name}"]
        if show_id:
            lines.append(f"\tid: {self.id}")
        lines.append(f"\texec: {self.exec_line}")
        lines.append(f"\tscope: {self.scope}")
        if self.envs:
            lines.append("\tenv: " + " ".join(f"{k}={v}" for k, v in self.envs))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.describe()

    def launch(self) -> NoReturn:
        """
        Replace the current process with this command.

        Changes into ``dir`` first when set, and applies ``envs`` on top of
        the current environment. Never returns on success.

        Raises:
            LaunchError: if the directory change or exec fails.
        """
        env = dict(os.environ)
        env.update(self.envs)
        argv = [self.command, *self.args]
        logger.debug("Launching %s: %s (dir=%s)", self.name, argv, self.scope)
        try:
            if self.dir is not None:
                os.chdir(self.dir)
            os.execvpe(self.command, argv, env)
        except OSError as exc:
            raise LaunchError(self.name, exc) from exc
        # execvpe only returns by raising
        raise LaunchError(self.name, OSError("exec returned unexpectedly"))
