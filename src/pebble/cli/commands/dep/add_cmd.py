"""Add a blocking dependency."""

import click

from pebble.cli.core import require_pebble_dir
from pebble.cli.output import user_output
from pebble.core.context import PebbleContext
from pebble.core.errors import ValidationError


@click.command("add")
@click.argument("issue_ref", type=str)
@click.argument("blocker_ref", type=str, required=False)
@click.option("--needs", type=str, default=None, help="Same as BLOCKER_REF")
@click.option("--blocks", type=str, default=None, help="Issue that ISSUE_REF blocks")
@click.pass_obj
def add_dep(
    ctx: PebbleContext,
    issue_ref: str,
    blocker_ref: str | None,
    needs: str | None,
    blocks: str | None,
) -> None:
    """Record that ISSUE_REF is blocked by BLOCKER_REF.

    \b
    Examples:
      pb dep add PEBL-abc123 PEBL-def456          # abc123 waits on def456
      pb dep add PEBL-abc123 --needs PEBL-def456  # same
      pb dep add PEBL-abc123 --blocks PEBL-def456 # def456 waits on abc123
    """
    provided = [value for value in (blocker_ref, needs, blocks) if value is not None]
    if len(provided) != 1:
        raise ValidationError("Specify exactly one of BLOCKER_REF, --needs, or --blocks")

    service = ctx.issue_service(require_pebble_dir(ctx))
    if blocks is not None:
        issue = service.add_dependency(blocks, issue_ref)
        blocker_id = service.get_issue(issue_ref).id
    else:
        issue = service.add_dependency(issue_ref, provided[0])
        blocker_id = issue.blocked_by[-1]
    user_output(click.style("✓ ", fg="green") + f"{issue.id} is now blocked by {blocker_id}")
