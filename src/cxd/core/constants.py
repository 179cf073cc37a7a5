"""cxd constants: filesystem layout, table names, and exit codes."""

from __future__ import annotations

from enum import IntEnum

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class ExitCode(IntEnum):
    SUCCESS = 0
    ERROR = 1
    CONFIG_ERROR = 2
    STORE_ERROR = 3
    NOT_FOUND = 4
    AMBIGUOUS = 5
    EXISTS = 6
    LAUNCH_ERROR = 127


# ---------------------------------------------------------------------------
# Filesystem layout
# ---------------------------------------------------------------------------

CACHE_FILENAME = "cxd.cache"
CONFIG_DIR_NAME = "cxd"
CONFIG_FILENAME = "config.toml"

ENV_CONFIG = "CXD_CONFIG"
ENV_CACHE_DIR = "CXD_CACHE_DIR"
ENV_LOG_LEVEL = "CXD_LOG_LEVEL"
ENV_ON_AMBIGUOUS = "CXD_ON_AMBIGUOUS"

# ---------------------------------------------------------------------------
# Store layout
# ---------------------------------------------------------------------------

COMMAND_TABLE = "cxd_cmd"
ARGUMENT_TABLE = "cxd_arg"
ENVIRONMENT_TABLE = "cxd_env"

# Sentinel stored in cxd_cmd.dir for global commands (SQLite treats NULLs as distinct)
GLOBAL_DIR = ""
