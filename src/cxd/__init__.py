"""
cxd — save shell commands under a short name and run them again by name.

A saved command carries its executable, arguments, environment and an
optional working directory. Commands scoped to a directory shadow
same-named commands elsewhere when run from that directory.

Package layout (src/cxd/):
  core/        — command aggregate, resolver, config, errors, logging
  core/store/  — SQLite row schemas and the command store
  cli/         — Click CLI entry point
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
