"""Persistent command store: SQLite row schemas and the CommandStore."""

from cxd.core.store.database import CommandStore

__all__ = ["CommandStore"]
