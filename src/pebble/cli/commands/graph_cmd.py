"""Show the blocker graph grouped by level."""

import click

from pebble.cli.core import require_pebble_dir
from pebble.cli.output import echo_json, status_icon
from pebble.core.context import PebbleContext
from pebble.core.dependency_graph import compute_levels, group_by_level, neighborhood
from pebble.core.ids import resolve_id
from pebble.core.state import Snapshot


def format_graph(state: Snapshot) -> str:
    """Render issues level by level; level 0 has no blockers."""
    if not state:
        return "No issues found."

    levels = compute_levels(state)
    lines = ["Dependency Graph", "================", ""]
    for issues in group_by_level(state):
        lines.append(f"Level {levels[issues[0].id]}:")
        for issue in issues:
            blockers = f" ← [{', '.join(issue.blocked_by)}]" if issue.blocked_by else ""
            lines.append(f"  {status_icon(issue.status)} {issue.id} - {issue.title}{blockers}")
        lines.append("")
    return "\n".join(lines)


@click.command("graph")
@click.option(
    "--root", "root_ref", type=str, default=None, help="Limit to issues connected to ROOT"
)
@click.option("--json-output", "json_mode", is_flag=True, default=False, help="Output JSON")
@click.pass_obj
def graph_cmd(ctx: PebbleContext, root_ref: str | None, *, json_mode: bool) -> None:
    """Show the dependency graph.

    With --root, only the root's neighborhood is shown: everything it depends
    on (blockers and parents) and everything that depends on it.
    """
    require_pebble_dir(ctx)
    state = ctx.load_state()
    if root_ref is not None:
        root_id = resolve_id(root_ref, state)
        state = {issue.id: issue for issue in neighborhood(root_id, state)}

    if json_mode:
        levels = compute_levels(state)
        echo_json(
            {
                "nodes": [
                    {
                        "id": issue.id,
                        "title": issue.title,
                        "status": issue.status,
                        "blockedBy": list(issue.blocked_by),
                        "level": levels[issue.id],
                    }
                    for issue in state.values()
                ]
            }
        )
        return
    click.echo(format_graph(state))
