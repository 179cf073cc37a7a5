"""Shared CLI plumbing: load config, set up logging, open the store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cxd.core.config import CxdConfig, load_config, store_path
from cxd.core.log import configure_logging
from cxd.core.store import CommandStore

if TYPE_CHECKING:
    from cxd.cli.main import CliState

logger = logging.getLogger(__name__)


def load(state: CliState) -> tuple[CxdConfig, CommandStore]:
    """Load configuration and return it with an unopened store for the resolved path."""
    config = load_config()
    configure_logging("DEBUG" if state.verbose else config.logging.level)
    path = store_path(config, override=state.file)
    logger.debug("Using store file %s", path)
    return config, CommandStore(path, scoped_names=config.store.scoped_names)
