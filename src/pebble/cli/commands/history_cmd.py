"""Show recent activity across the log, or the history of one issue."""

from typing import Any, assert_never

import click

from pebble.cli.core import require_pebble_dir
from pebble.cli.output import echo_json
from pebble.core.activity import (
    DEFAULT_HISTORY_LIMIT,
    ActivityEntry,
    build_activity,
    parse_event_types,
)
from pebble.core.context import PebbleContext
from pebble.core.errors import ValidationError
from pebble.core.events import (
    CloseEvent,
    CommentEvent,
    CreateEvent,
    IssueEvent,
    ReopenEvent,
    UpdateEvent,
    event_to_dict,
    event_type_of,
)
from pebble.core.ids import resolve_id
from pebble.core.state import compute_state, events_for_issue
from pebble.core.timestamps import format_relative, parse_duration


def describe_event(event: IssueEvent) -> str:
    """One-line human summary of an event."""
    if isinstance(event, CreateEvent):
        return f"created {event.issue_type} P{event.priority}: {event.title}"
    if isinstance(event, UpdateEvent):
        return "updated " + ", ".join(event_to_dict(event)["data"])
    if isinstance(event, CloseEvent):
        return "closed" + (f" ({event.reason})" if event.reason else "")
    if isinstance(event, ReopenEvent):
        return "reopened" + (f" ({event.reason})" if event.reason else "")
    if isinstance(event, CommentEvent):
        author = f" by {event.comment.author}" if event.comment.author else ""
        return f"comment{author}: {event.comment.text}"
    assert_never(event)


def activity_entry_to_dict(entry: ActivityEntry) -> dict[str, Any]:
    event = entry.event
    data: dict[str, Any] = {
        "timestamp": event.timestamp,
        "event": event_type_of(event),
        "issue": {
            "id": event.issue_id,
            "title": entry.issue.title if entry.issue is not None else "(unknown)",
            "type": entry.issue.type if entry.issue is not None else "task",
        },
    }
    if entry.parent is not None:
        data["parent"] = {"id": entry.parent.id, "title": entry.parent.title}
    if isinstance(event, CloseEvent) and event.reason:
        data["details"] = {"reason": event.reason}
    elif isinstance(event, CommentEvent):
        data["details"] = {"text": event.comment.text}
    return data


@click.command("history")
@click.argument("issue_ref", type=str, required=False)
@click.option(
    "--limit",
    type=int,
    default=DEFAULT_HISTORY_LIMIT,
    show_default=True,
    help="Max events to show (0 for all)",
)
@click.option(
    "--type",
    "type_filter",
    type=str,
    default=None,
    help="Event types, comma-separated (create,update,close,reopen,comment)",
)
@click.option("--since", type=str, default=None, help='Only events newer than e.g. "7d", "24h"')
@click.option("--json-output", "json_mode", is_flag=True, default=False, help="Output JSON")
@click.pass_obj
def history_cmd(
    ctx: PebbleContext,
    issue_ref: str | None,
    limit: int,
    type_filter: str | None,
    since: str | None,
    *,
    json_mode: bool,
) -> None:
    """Show recent activity, newest first.

    With ISSUE_REF, only events addressed to that issue are shown.
    """
    pebble_dir = require_pebble_dir(ctx)
    events = ctx.issue_service(pebble_dir).load_events()
    state = compute_state(events)

    types = parse_event_types(type_filter) if type_filter is not None else None
    now = ctx.time.now()
    cutoff = None
    if since is not None:
        try:
            cutoff = now - parse_duration(since)
        except ValueError as e:
            raise ValidationError(str(e)) from e

    if issue_ref is not None:
        events = events_for_issue(events, resolve_id(issue_ref, state))

    entries = build_activity(events, state, types=types, since=cutoff, limit=limit)

    if json_mode:
        echo_json([activity_entry_to_dict(entry) for entry in entries])
        return

    if not entries:
        click.echo("No events found.")
        return

    for entry in entries:
        when = click.style(f"{format_relative(entry.event.timestamp, now):>14}", dim=True)
        line = f"{when}  {entry.event.issue_id}  {describe_event(entry.event)}"
        if entry.parent is not None:
            line += click.style(f" (under {entry.parent.id})", dim=True)
        click.echo(line)
