"""Render the parent/child hierarchy around an issue."""

import click

from pebble.cli.core import require_pebble_dir
from pebble.cli.output import echo_json, format_tree, tree_to_dict
from pebble.core.context import PebbleContext
from pebble.core.ids import resolve_id
from pebble.core.trees import build_dependency_tree, build_hierarchy_tree


@click.command("tree")
@click.argument("issue_ref", type=str)
@click.option(
    "--blockers",
    "show_blockers",
    is_flag=True,
    default=False,
    help="Show the transitive blocker tree instead of the epic hierarchy",
)
@click.option("--json-output", "json_mode", is_flag=True, default=False, help="Output JSON")
@click.pass_obj
def tree_deps(ctx: PebbleContext, issue_ref: str, *, show_blockers: bool, json_mode: bool) -> None:
    """Show ISSUE_REF within its epic hierarchy (◀ marks ISSUE_REF)."""
    require_pebble_dir(ctx)
    state = ctx.load_state()
    issue_id = resolve_id(issue_ref, state)
    if show_blockers:
        tree = build_dependency_tree(issue_id, state)
    else:
        tree = build_hierarchy_tree(issue_id, state)
    # resolve_id guarantees presence
    assert tree is not None

    if json_mode:
        echo_json(tree_to_dict(tree))
        return
    click.echo(format_tree(tree))
