"""Initialize a .pebble directory."""

import click

from pebble.cli.core import LOG_FORMAT_VERSION
from pebble.cli.output import user_output
from pebble.core.context import PebbleContext
from pebble.core.errors import ValidationError
from pebble.core.ids import derive_prefix
from pebble.core.types import PebbleConfig
from pebble.gateway.event_log.abc import PEBBLE_DIR_NAME


@click.command("init")
@click.option(
    "--prefix", type=str, default=None, help="4-letter id prefix (default: from folder name)"
)
@click.pass_obj
def init_cmd(ctx: PebbleContext, prefix: str | None) -> None:
    """Create .pebble/ with an empty event log in the current directory."""
    pebble_dir = ctx.cwd / PEBBLE_DIR_NAME
    if ctx.pebble_dir == pebble_dir:
        user_output(f"Already initialized: {pebble_dir}")
        return

    resolved_prefix = prefix.upper() if prefix is not None else derive_prefix(ctx.cwd.name)
    if len(resolved_prefix) != 4 or not resolved_prefix.isalnum():
        raise ValidationError(f"Prefix must be 4 alphanumeric characters, got: {resolved_prefix}")

    ctx.event_log.initialize(
        pebble_dir, PebbleConfig(prefix=resolved_prefix, version=LOG_FORMAT_VERSION)
    )
    user_output(
        click.style("✓ ", fg="green") + f"Initialized {pebble_dir} (prefix {resolved_prefix})"
    )
