"""Log-wide activity feed: recent events joined with the issues they touch."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import cast

from pebble.core.errors import ValidationError
from pebble.core.events import EVENT_TYPES, EventType, IssueEvent, event_type_of
from pebble.core.state import Snapshot
from pebble.core.timestamps import parse_timestamp
from pebble.core.types import Issue

DEFAULT_HISTORY_LIMIT = 20


@dataclass(frozen=True)
class ActivityEntry:
    """One event in the feed.

    Attributes:
        event: The recorded event
        issue: Current state of the addressed issue, None if it was never created
        parent: Current state of the issue's parent, if any
    """

    event: IssueEvent
    issue: Issue | None
    parent: Issue | None


def parse_event_types(raw: str) -> tuple[EventType, ...]:
    """Parse a comma-separated list of event types ("create,close").

    Raises:
        ValidationError: If any entry is not a known event type
    """
    types: list[EventType] = []
    for part in raw.split(","):
        name = part.strip()
        if name not in EVENT_TYPES:
            raise ValidationError(
                f"Invalid event type: {name}. Must be one of: {', '.join(EVENT_TYPES)}"
            )
        types.append(cast(EventType, name))
    return tuple(types)


def build_activity(
    events: Sequence[IssueEvent],
    state: Snapshot,
    *,
    types: tuple[EventType, ...] | None,
    since: datetime | None,
    limit: int,
) -> list[ActivityEntry]:
    """Select, order and annotate events for the feed.

    Args:
        events: Events in append order
        state: Snapshot computed from the full log
        types: Keep only these event types (None keeps all)
        since: Keep only events at or after this moment (None keeps all)
        limit: Maximum number of entries; 0 or less means no limit

    Returns:
        Entries newest first; events with equal timestamps keep log order
    """
    selected = list(events)
    if types is not None:
        selected = [event for event in selected if event_type_of(event) in types]
    if since is not None:
        selected = [event for event in selected if parse_timestamp(event.timestamp) >= since]

    selected = sorted(selected, key=lambda event: parse_timestamp(event.timestamp), reverse=True)
    if limit > 0:
        selected = selected[:limit]

    entries: list[ActivityEntry] = []
    for event in selected:
        issue = state.get(event.issue_id)
        parent = state.get(issue.parent) if issue is not None and issue.parent else None
        entries.append(ActivityEntry(event=event, issue=issue, parent=parent))
    return entries
