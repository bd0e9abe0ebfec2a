"""Remove a blocking dependency."""

import click

from pebble.cli.core import require_pebble_dir
from pebble.cli.output import user_output
from pebble.core.context import PebbleContext


@click.command("remove")
@click.argument("issue_ref", type=str)
@click.argument("blocker_ref", type=str)
@click.pass_obj
def remove_dep(ctx: PebbleContext, issue_ref: str, blocker_ref: str) -> None:
    """Stop ISSUE_REF from waiting on BLOCKER_REF."""
    service = ctx.issue_service(require_pebble_dir(ctx))
    blocker_id = service.get_issue(blocker_ref).id
    issue = service.remove_dependency(issue_ref, blocker_ref)
    user_output(
        click.style("✓ ", fg="green") + f"{issue.id} is no longer blocked by {blocker_id}"
    )
