"""List the dependencies of one issue."""

import click

from pebble.cli.core import require_pebble_dir
from pebble.cli.output import echo_json, issue_summary, status_icon
from pebble.core.context import PebbleContext
from pebble.core.dependency_graph import get_blockers, get_blocking, get_related
from pebble.core.ids import resolve_id
from pebble.core.types import Issue


def _print_section(title: str, issues: list[Issue]) -> None:
    click.echo(f"{title}:")
    if not issues:
        click.echo("  (none)")
        return
    for issue in issues:
        click.echo(f"  {status_icon(issue.status)} {issue.id} - {issue.title}")


@click.command("list")
@click.argument("issue_ref", type=str)
@click.option("--json-output", "json_mode", is_flag=True, default=False, help="Output JSON")
@click.pass_obj
def list_deps(ctx: PebbleContext, issue_ref: str, *, json_mode: bool) -> None:
    """Show what ISSUE_REF waits on, what waits on it, and what it relates to."""
    require_pebble_dir(ctx)
    state = ctx.load_state()
    issue_id = resolve_id(issue_ref, state)
    blocked_by = get_blockers(issue_id, state)
    blocking = get_blocking(issue_id, state)
    related = get_related(issue_id, state)

    if json_mode:
        echo_json(
            {
                "issueId": issue_id,
                "blockedBy": [issue_summary(i) for i in blocked_by],
                "blocking": [issue_summary(i) for i in blocking],
                "related": [issue_summary(i) for i in related],
            }
        )
        return

    _print_section("Blocked by", blocked_by)
    _print_section("Blocking", blocking)
    _print_section("Related", related)
