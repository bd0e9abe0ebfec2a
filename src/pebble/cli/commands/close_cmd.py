"""Close and reopen issues."""

import click

from pebble.cli.core import require_pebble_dir, split_ids
from pebble.cli.output import echo_json, issue_summary, user_output
from pebble.core.context import PebbleContext
from pebble.core.errors import PebbleError, ValidationError
from pebble.core.issue_service import CloseResult


def _print_close_result(result: CloseResult) -> None:
    user_output(click.style("✓ ", fg="green") + f"Closed {result.issue.id}")
    if result.unblocked:
        user_output("Unblocked:")
        for issue in result.unblocked:
            user_output(f"  → {issue.id} - {issue.title}")


@click.command("close")
@click.argument("ids", nargs=-1, required=True)
@click.option("--reason", type=str, default=None, help="Reason for closing")
@click.option("--comment", type=str, default=None, help="Add a comment before closing")
@click.option("--json-output", "json_mode", is_flag=True, default=False, help="Output JSON")
@click.pass_obj
def close_cmd(
    ctx: PebbleContext,
    ids: tuple[str, ...],
    reason: str | None,
    comment: str | None,
    *,
    json_mode: bool,
) -> None:
    """Close one or more issues.

    Epics cannot be closed while any child is still open. Issues that become
    unblocked are listed.
    """
    service = ctx.issue_service(require_pebble_dir(ctx))
    references = split_ids(ids)
    if not references:
        raise ValidationError("No issue IDs provided")

    outcomes: list[dict[str, object]] = []
    failed = False
    for reference in references:
        try:
            result = service.close(reference, reason=reason, comment=comment)
        except PebbleError as e:
            if len(references) == 1:
                raise
            failed = True
            outcomes.append({"id": reference, "success": False, "error": str(e)})
            if not json_mode:
                user_output(click.style("✗ ", fg="red") + f"{reference}: {e}")
            continue
        outcome: dict[str, object] = {"id": result.issue.id, "success": True}
        if result.unblocked:
            outcome["unblocked"] = [issue_summary(i) for i in result.unblocked]
        outcomes.append(outcome)
        if not json_mode:
            _print_close_result(result)

    if json_mode:
        echo_json(outcomes[0] if len(references) == 1 else outcomes)
    if failed:
        raise SystemExit(1)


@click.command("reopen")
@click.argument("issue_ref", type=str)
@click.option("--reason", type=str, default=None, help="Reason for reopening")
@click.pass_obj
def reopen_cmd(ctx: PebbleContext, issue_ref: str, reason: str | None) -> None:
    """Reopen a closed issue."""
    issue = ctx.issue_service(require_pebble_dir(ctx)).reopen(issue_ref, reason=reason)
    user_output(click.style("✓ ", fg="green") + f"Reopened {issue.id}")
