"""List, filter and search issues."""

import click

from pebble.cli.core import require_pebble_dir
from pebble.cli.output import echo_json, issue_to_dict, print_issue_table
from pebble.core.context import PebbleContext
from pebble.core.dependency_graph import get_blocked, get_ready
from pebble.core.ids import resolve_id
from pebble.core.state import filter_issues
from pebble.core.types import ISSUE_TYPES, STATUSES, Issue


def _sort_for_display(issues: list[Issue]) -> list[Issue]:
    # Priority first, then oldest first
    return sorted(issues, key=lambda issue: (issue.priority, issue.created_at))


def _emit(issues: list[Issue], *, json_mode: bool, empty_message: str) -> None:
    if json_mode:
        echo_json([issue_to_dict(issue) for issue in issues])
        return
    print_issue_table(issues, empty_message=empty_message)


@click.command("list")
@click.option("--status", type=click.Choice(STATUSES), default=None, help="Filter by status")
@click.option(
    "-t",
    "--type",
    "issue_type",
    type=click.Choice(ISSUE_TYPES),
    default=None,
    help="Filter by type",
)
@click.option("-p", "--priority", type=int, default=None, help="Filter by priority")
@click.option("--parent", type=str, default=None, help="Filter by parent epic")
@click.option("--json-output", "json_mode", is_flag=True, default=False, help="Output JSON")
@click.pass_obj
def list_cmd(
    ctx: PebbleContext,
    status: str | None,
    issue_type: str | None,
    priority: int | None,
    parent: str | None,
    *,
    json_mode: bool,
) -> None:
    """List issues, optionally filtered."""
    require_pebble_dir(ctx)
    state = ctx.load_state()
    parent_id = resolve_id(parent, state) if parent is not None else None
    issues = filter_issues(
        state, status=status, issue_type=issue_type, priority=priority, parent=parent_id
    )
    _emit(_sort_for_display(issues), json_mode=json_mode, empty_message="No issues found")


@click.command("ready")
@click.option("--json-output", "json_mode", is_flag=True, default=False, help="Output JSON")
@click.pass_obj
def ready_cmd(ctx: PebbleContext, *, json_mode: bool) -> None:
    """List open issues with no open blockers."""
    require_pebble_dir(ctx)
    issues = get_ready(ctx.load_state())
    _emit(_sort_for_display(issues), json_mode=json_mode, empty_message="No ready issues")


@click.command("blocked")
@click.option("--json-output", "json_mode", is_flag=True, default=False, help="Output JSON")
@click.pass_obj
def blocked_cmd(ctx: PebbleContext, *, json_mode: bool) -> None:
    """List open issues waiting on at least one open blocker."""
    require_pebble_dir(ctx)
    issues = get_blocked(ctx.load_state())
    _emit(_sort_for_display(issues), json_mode=json_mode, empty_message="No blocked issues")


def search_issues(issues: list[Issue], query: str) -> list[Issue]:
    """Case-insensitive substring match over id, title, description and comments."""
    needle = query.lower()
    return [
        issue
        for issue in issues
        if needle in issue.id.lower()
        or needle in issue.title.lower()
        or (issue.description is not None and needle in issue.description.lower())
        or any(needle in comment.text.lower() for comment in issue.comments)
    ]


@click.command("search")
@click.argument("query", type=str)
@click.option("--status", type=click.Choice(STATUSES), default=None, help="Filter by status")
@click.option("--json-output", "json_mode", is_flag=True, default=False, help="Output JSON")
@click.pass_obj
def search_cmd(ctx: PebbleContext, query: str, status: str | None, *, json_mode: bool) -> None:
    """Search issues by text."""
    require_pebble_dir(ctx)
    matches = search_issues(filter_issues(ctx.load_state(), status=status), query)
    _emit(
        _sort_for_display(matches),
        json_mode=json_mode,
        empty_message=f"No issues matching '{query}'",
    )
