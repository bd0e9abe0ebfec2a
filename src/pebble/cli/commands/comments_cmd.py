"""Comment commands."""

import click

from pebble.cli.core import require_pebble_dir
from pebble.cli.output import user_output
from pebble.core.context import PebbleContext


@click.group("comments")
def comments_group() -> None:
    """Manage comments."""
    pass


@comments_group.command("add")
@click.argument("issue_ref", type=str)
@click.argument("text", type=str)
@click.option("--author", type=str, default=None, help="Comment author")
@click.pass_obj
def add_comment(ctx: PebbleContext, issue_ref: str, text: str, author: str | None) -> None:
    """Add a comment to an issue."""
    issue = ctx.issue_service(require_pebble_dir(ctx)).add_comment(
        issue_ref, text=text, author=author
    )
    user_output(click.style("✓ ", fg="green") + f"Commented on {issue.id}")
