"""Update and claim issues."""

from typing import cast

import click

from pebble.cli.commands.batch import report_batch, run_batch
from pebble.cli.core import require_pebble_dir
from pebble.core.context import PebbleContext
from pebble.core.events import IssueUpdate
from pebble.core.types import STATUSES, Status


@click.command("update")
@click.argument("ids", nargs=-1, required=True)
@click.option("--status", type=click.Choice(STATUSES), default=None, help="New status")
@click.option("--priority", type=int, default=None, help="New priority (0-4)")
@click.option("--title", type=str, default=None, help="New title")
@click.option("--description", type=str, default=None, help="New description")
@click.option("--json-output", "json_mode", is_flag=True, default=False, help="Output JSON")
@click.pass_obj
def update_cmd(
    ctx: PebbleContext,
    ids: tuple[str, ...],
    status: str | None,
    priority: int | None,
    title: str | None,
    description: str | None,
    *,
    json_mode: bool,
) -> None:
    """Update one or more issues. IDS may be space- or comma-separated."""
    service = ctx.issue_service(require_pebble_dir(ctx))
    changes = IssueUpdate(
        title=title,
        priority=priority,
        status=cast(Status | None, status),
        description=description,
    )
    results = run_batch(ids, lambda reference: service.update(reference, changes))
    report_batch(results, json_mode=json_mode)


@click.command("claim")
@click.argument("ids", nargs=-1, required=True)
@click.option("--json-output", "json_mode", is_flag=True, default=False, help="Output JSON")
@click.pass_obj
def claim_cmd(ctx: PebbleContext, ids: tuple[str, ...], *, json_mode: bool) -> None:
    """Set issues to in_progress."""
    service = ctx.issue_service(require_pebble_dir(ctx))
    results = run_batch(ids, service.claim)
    report_batch(results, json_mode=json_mode)
