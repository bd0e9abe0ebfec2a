import logging

import click

from pebble.cli.commands.close_cmd import close_cmd, reopen_cmd
from pebble.cli.commands.comments_cmd import comments_group
from pebble.cli.commands.create_cmd import create_cmd
from pebble.cli.commands.dep import dep_group
from pebble.cli.commands.graph_cmd import graph_cmd
from pebble.cli.commands.history_cmd import history_cmd
from pebble.cli.commands.import_cmd import import_cmd
from pebble.cli.commands.init_cmd import init_cmd
from pebble.cli.commands.list_cmd import blocked_cmd, list_cmd, ready_cmd, search_cmd
from pebble.cli.commands.merge_cmd import merge_cmd
from pebble.cli.commands.show_cmd import show_cmd
from pebble.cli.commands.summary_cmd import summary_cmd
from pebble.cli.commands.update_cmd import claim_cmd, update_cmd
from pebble.cli.commands.verifications_cmd import verifications_cmd
from pebble.cli.output import user_output
from pebble.core.context import create_context
from pebble.core.errors import PebbleError

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

logger = logging.getLogger(__name__)


class PebbleCommandGroup(click.Group):
    """Root group that turns PebbleError into a red error line and exit code 1."""

    def invoke(self, ctx: click.Context) -> object:
        try:
            return super().invoke(ctx)
        except PebbleError as e:
            logger.debug("Command failed", exc_info=True)
            user_output(click.style("Error: ", fg="red") + str(e))
            raise SystemExit(1) from e


@click.group(cls=PebbleCommandGroup, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="pebble")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Track issues in an append-only event log under .pebble/."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context()


# Mutations
cli.add_command(init_cmd)
cli.add_command(create_cmd)
cli.add_command(update_cmd)
cli.add_command(claim_cmd)
cli.add_command(close_cmd)
cli.add_command(reopen_cmd)
cli.add_command(comments_group)
cli.add_command(dep_group)
cli.add_command(import_cmd)

# Queries
cli.add_command(show_cmd)
cli.add_command(list_cmd)
cli.add_command(ready_cmd)
cli.add_command(blocked_cmd)
cli.add_command(search_cmd)
cli.add_command(history_cmd)
cli.add_command(verifications_cmd)
cli.add_command(summary_cmd)
cli.add_command(graph_cmd)
cli.add_command(merge_cmd)


def main() -> None:
    """CLI entry point used by the `pb` console script."""
    cli()
