"""List verification issues for a target issue."""

import click

from pebble.cli.core import require_pebble_dir
from pebble.cli.output import echo_json, issue_to_dict, print_issue_table
from pebble.core.context import PebbleContext
from pebble.core.dependency_graph import get_verifications
from pebble.core.ids import resolve_id


@click.command("verifications")
@click.argument("issue_ref", type=str)
@click.option("--json-output", "json_mode", is_flag=True, default=False, help="Output JSON")
@click.pass_obj
def verifications_cmd(ctx: PebbleContext, issue_ref: str, *, json_mode: bool) -> None:
    """List issues whose `verifies` points at ISSUE_REF."""
    require_pebble_dir(ctx)
    state = ctx.load_state()
    issue_id = resolve_id(issue_ref, state)
    verifications = get_verifications(issue_id, state)
    if json_mode:
        echo_json([issue_to_dict(issue) for issue in verifications])
        return
    print_issue_table(verifications, empty_message=f"No verifications for {issue_id}")
