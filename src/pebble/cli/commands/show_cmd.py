"""Show a single issue."""

import click

from pebble.cli.core import require_pebble_dir
from pebble.cli.output import echo_json, format_issue_detail, issue_summary, issue_to_dict
from pebble.core.context import PebbleContext
from pebble.core.dependency_graph import (
    get_blockers,
    get_blocking,
    get_children,
    get_verifications,
)
from pebble.core.ids import resolve_id


@click.command("show")
@click.argument("issue_ref", type=str)
@click.option("--json-output", "json_mode", is_flag=True, default=False, help="Output JSON")
@click.pass_obj
def show_cmd(ctx: PebbleContext, issue_ref: str, *, json_mode: bool) -> None:
    """Show full details for ISSUE_REF (exact id, prefix, or suffix)."""
    require_pebble_dir(ctx)
    state = ctx.load_state()
    issue_id = resolve_id(issue_ref, state)
    issue = state[issue_id]
    blockers = get_blockers(issue_id, state)
    blocking = get_blocking(issue_id, state)

    if json_mode:
        data = issue_to_dict(issue)
        data["blocking"] = [b.id for b in blocking]
        data["children"] = [issue_summary(c) for c in get_children(issue_id, state)]
        data["verifications"] = [issue_summary(v) for v in get_verifications(issue_id, state)]
        echo_json(data)
        return

    click.echo(format_issue_detail(issue, blockers=blockers, blocking=blocking))
