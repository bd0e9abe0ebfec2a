"""Create a new issue."""

from typing import cast

import click

from pebble.cli.core import ensure_pebble_dir
from pebble.cli.output import echo_json, issue_to_dict, user_output
from pebble.core.context import PebbleContext
from pebble.core.types import ISSUE_TYPES, IssueType


@click.command("create")
@click.argument("title", type=str)
@click.option(
    "-t",
    "--type",
    "issue_type",
    type=click.Choice(ISSUE_TYPES),
    default="task",
    show_default=True,
    help="Issue type",
)
@click.option("-p", "--priority", type=int, default=2, show_default=True, help="Priority (0-4)")
@click.option("-d", "--description", type=str, default=None, help="Description")
@click.option("--parent", type=str, default=None, help="Parent epic id")
@click.option("--verifies", type=str, default=None, help="Id of the issue this verifies")
@click.option("--json-output", "json_mode", is_flag=True, default=False, help="Output JSON")
@click.pass_obj
def create_cmd(
    ctx: PebbleContext,
    title: str,
    issue_type: str,
    priority: int,
    description: str | None,
    parent: str | None,
    verifies: str | None,
    *,
    json_mode: bool,
) -> None:
    """Create a new issue titled TITLE.

    \b
    Examples:
      pb create "Fix login redirect" -t bug -p 1
      pb create "Confirm redirect fix" --verifies PEBL-a1b2c3
    """
    pebble_dir = ensure_pebble_dir(ctx)
    issue = ctx.issue_service(pebble_dir).create(
        title=title,
        issue_type=cast(IssueType, issue_type),
        priority=priority,
        description=description,
        parent=parent,
        verifies=verifies,
    )

    if json_mode:
        echo_json(issue_to_dict(issue))
        return
    click.echo(issue.id)
    user_output(click.style("✓ ", fg="green") + f"Created {issue.id}: {issue.title}")
