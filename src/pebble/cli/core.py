"""Helpers shared by CLI commands for locating the pebble directory."""

import logging
from pathlib import Path

from pebble.core.context import PebbleContext
from pebble.core.errors import PebbleDirNotFoundError
from pebble.core.ids import derive_prefix
from pebble.core.types import PebbleConfig
from pebble.gateway.event_log.abc import PEBBLE_DIR_NAME

logger = logging.getLogger(__name__)

LOG_FORMAT_VERSION = "0.1.0"


def require_pebble_dir(ctx: PebbleContext) -> Path:
    """Return the discovered pebble directory or raise."""
    if ctx.pebble_dir is None:
        raise PebbleDirNotFoundError(ctx.cwd)
    return ctx.pebble_dir


def ensure_pebble_dir(ctx: PebbleContext) -> Path:
    """Return the discovered pebble directory, initializing one in cwd if missing.

    The prefix of a new directory is derived from the cwd folder name.
    """
    if ctx.pebble_dir is not None:
        return ctx.pebble_dir
    pebble_dir = ctx.cwd / PEBBLE_DIR_NAME
    config = PebbleConfig(prefix=derive_prefix(ctx.cwd.name), version=LOG_FORMAT_VERSION)
    ctx.event_log.initialize(pebble_dir, config)
    logger.debug("Auto-initialized %s", pebble_dir)
    return pebble_dir


def split_ids(ids: tuple[str, ...]) -> list[str]:
    """Flatten space- and comma-separated id arguments ("A,B" "C" -> [A, B, C])."""
    return [part.strip() for raw in ids for part in raw.split(",") if part.strip()]
