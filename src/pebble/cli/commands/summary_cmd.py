"""Show epics with child completion status."""

from datetime import datetime
from typing import Any, cast

import click

from pebble.cli.core import require_pebble_dir
from pebble.cli.output import echo_json
from pebble.core.context import PebbleContext
from pebble.core.epics import (
    EpicSummary,
    select_epics,
    select_recently_closed_epics,
    summarize_epic,
)
from pebble.core.timestamps import format_relative
from pebble.core.types import STATUS_LABELS, STATUSES, Status

DEFAULT_SUMMARY_LIMIT = 10


def epic_summary_to_dict(summary: EpicSummary) -> dict[str, Any]:
    epic = summary.epic
    children = summary.children
    data: dict[str, Any] = {
        "id": epic.id,
        "title": epic.title,
        "status": epic.status,
        "createdAt": epic.created_at,
        "updatedAt": epic.updated_at,
        "children": {
            "total": children.total,
            "done": children.done,
            "pending_verification": children.pending_verification,
            "in_progress": children.in_progress,
            "open": children.open,
            "blocked": children.blocked,
        },
        "verifications": {
            "total": summary.verifications_total,
            "done": summary.verifications_done,
        },
    }
    if epic.description is not None:
        data["description"] = epic.description
    if summary.parent is not None:
        data["parent"] = {"id": summary.parent.id, "title": summary.parent.title}
    return data


def format_summary_section(summaries: list[EpicSummary], header: str, now: datetime) -> str:
    if not summaries:
        return "No epics found."

    lines = [click.style(f"## {header} ({len(summaries)})", bold=True), ""]
    for summary in summaries:
        epic = summary.epic
        children = summary.children
        pending = (
            f" ({children.pending_verification} pending verification)"
            if children.pending_verification > 0
            else ""
        )
        lines.append(click.style(f"{epic.id}: ", dim=True) + click.style(epic.title, bold=True))
        lines.append(
            f"  Created: {format_relative(epic.created_at, now)}"
            f" | Updated: {format_relative(epic.updated_at, now)}"
        )
        lines.append(
            f"  Issues: {children.done}/{children.total} done{pending}"
            f" | Verifications: {summary.verifications_done}/{summary.verifications_total} done"
        )
        if summary.parent is not None:
            lines.append(f"  Parent: {summary.parent.id} ({summary.parent.title})")
        if epic.description:
            lines.extend(["", f"  {epic.description}"])
        lines.extend(["", f"  Run `pb list --parent {epic.id}` to see all issues.", ""])
    return "\n".join(lines)


@click.command("summary")
@click.option(
    "--status",
    type=click.Choice(STATUSES),
    default=None,
    help="Filter epics by status (default: all non-closed)",
)
@click.option(
    "--limit",
    type=int,
    default=DEFAULT_SUMMARY_LIMIT,
    show_default=True,
    help="Max epics per section (0 for all)",
)
@click.option(
    "--include-closed",
    is_flag=True,
    default=False,
    help="Add a section for epics closed in the last 72 hours",
)
@click.option("--json-output", "json_mode", is_flag=True, default=False, help="Output JSON")
@click.pass_obj
def summary_cmd(
    ctx: PebbleContext,
    status: str | None,
    limit: int,
    *,
    include_closed: bool,
    json_mode: bool,
) -> None:
    """Show epics with child completion counts."""
    require_pebble_dir(ctx)
    state = ctx.load_state()
    now = ctx.time.now()

    if include_closed:
        open_summaries = [
            summarize_epic(epic, state) for epic in select_epics(state, status=None, limit=limit)
        ]
        closed_summaries = [
            summarize_epic(epic, state)
            for epic in select_recently_closed_epics(state, now=now, limit=limit)
        ]
        if json_mode:
            echo_json(
                {
                    "open": [epic_summary_to_dict(s) for s in open_summaries],
                    "closed": [epic_summary_to_dict(s) for s in closed_summaries],
                }
            )
            return
        sections: list[str] = []
        if open_summaries:
            sections.append(format_summary_section(open_summaries, "Open Epics", now))
        if closed_summaries:
            sections.append(
                format_summary_section(
                    closed_summaries, "Recently Closed Epics (last 72h)", now
                )
            )
        click.echo("\n".join(sections) if sections else "No epics found.")
        return

    status_filter = cast(Status | None, status)
    header = f"{STATUS_LABELS[status_filter]} Epics" if status_filter is not None else "Open Epics"
    summaries = [
        summarize_epic(epic, state)
        for epic in select_epics(state, status=status_filter, limit=limit)
    ]
    if json_mode:
        echo_json([epic_summary_to_dict(s) for s in summaries])
        return
    click.echo(format_summary_section(summaries, header, now))
