"""Event types for the append-only issue log.

Each line of `.pebble/issues.jsonl` holds one event:

    {"type": "create", "issueId": "PEBL-a1b2c3", "timestamp": "...", "data": {...}}

Events are modelled as a closed union of frozen dataclasses. Code that
dispatches on an event should end with `assert_never(event)` so that adding a
variant is caught by the type checker.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, assert_never, cast, get_args

from pebble.core.errors import MalformedLogError
from pebble.core.timestamps import parse_timestamp
from pebble.core.types import Comment, IssueType, Priority, Status

EventType = Literal["create", "update", "close", "reopen", "comment"]
EVENT_TYPES: tuple[EventType, ...] = get_args(EventType)


@dataclass(frozen=True)
class CreateEvent:
    """Creates an issue. Status always starts as open."""

    issue_id: str
    timestamp: str
    title: str
    issue_type: IssueType
    priority: Priority
    description: str | None = None
    parent: str | None = None
    verifies: str | None = None


@dataclass(frozen=True)
class IssueUpdate:
    """Partial update payload.

    All fields are optional - only provided (non-None) fields are applied.
    None means "leave unchanged"; there is no way to clear a field.
    """

    title: str | None = None
    issue_type: IssueType | None = None
    priority: Priority | None = None
    status: Status | None = None
    description: str | None = None
    parent: str | None = None
    blocked_by: tuple[str, ...] | None = None
    related_to: tuple[str, ...] | None = None

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.title,
                self.issue_type,
                self.priority,
                self.status,
                self.description,
                self.parent,
                self.blocked_by,
                self.related_to,
            )
        )


@dataclass(frozen=True)
class UpdateEvent:
    issue_id: str
    timestamp: str
    changes: IssueUpdate


@dataclass(frozen=True)
class CloseEvent:
    issue_id: str
    timestamp: str
    reason: str | None = None


@dataclass(frozen=True)
class ReopenEvent:
    issue_id: str
    timestamp: str
    reason: str | None = None


@dataclass(frozen=True)
class CommentEvent:
    issue_id: str
    timestamp: str
    comment: Comment


IssueEvent = CreateEvent | UpdateEvent | CloseEvent | ReopenEvent | CommentEvent


def event_type_of(event: IssueEvent) -> EventType:
    """Return the wire-format type tag for an event."""
    if isinstance(event, CreateEvent):
        return "create"
    if isinstance(event, UpdateEvent):
        return "update"
    if isinstance(event, CloseEvent):
        return "close"
    if isinstance(event, ReopenEvent):
        return "reopen"
    if isinstance(event, CommentEvent):
        return "comment"
    assert_never(event)


def _without_none(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def _payload_to_dict(event: IssueEvent) -> dict[str, Any]:
    if isinstance(event, CreateEvent):
        return _without_none(
            {
                "title": event.title,
                "type": event.issue_type,
                "priority": event.priority,
                "description": event.description,
                "parent": event.parent,
                "verifies": event.verifies,
            }
        )
    if isinstance(event, UpdateEvent):
        changes = event.changes
        return _without_none(
            {
                "title": changes.title,
                "type": changes.issue_type,
                "priority": changes.priority,
                "status": changes.status,
                "description": changes.description,
                "parent": changes.parent,
                "blockedBy": list(changes.blocked_by) if changes.blocked_by is not None else None,
                "relatedTo": list(changes.related_to) if changes.related_to is not None else None,
            }
        )
    if isinstance(event, CloseEvent | ReopenEvent):
        return _without_none({"reason": event.reason})
    if isinstance(event, CommentEvent):
        return _without_none(
            {
                "text": event.comment.text,
                "timestamp": event.comment.timestamp,
                "author": event.comment.author,
            }
        )
    assert_never(event)


def event_to_dict(event: IssueEvent) -> dict[str, Any]:
    """Convert an event to its JSON-compatible wire shape."""
    return {
        "type": event_type_of(event),
        "issueId": event.issue_id,
        "timestamp": event.timestamp,
        "data": _payload_to_dict(event),
    }


def encode_event(event: IssueEvent) -> str:
    """Serialize an event to a single JSONL line (without trailing newline)."""
    return json.dumps(event_to_dict(event), ensure_ascii=False)


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"field '{key}' must be a string")
    return value


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"field '{key}' must be a string")
    return value


def _optional_ids(data: dict[str, Any], key: str) -> tuple[str, ...] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"field '{key}' must be a list of strings")
    return tuple(value)


def _optional_int(data: dict[str, Any], key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field '{key}' must be an integer")
    return value


def event_from_dict(raw: object) -> IssueEvent:
    """Build an event from its decoded JSON object.

    Only the shape is checked here. Semantic rules (valid parents, acyclic
    dependencies) belong to the mutation path, not to decoding.

    Raises:
        ValueError: If the object does not have the shape of a known event
    """
    if not isinstance(raw, dict):
        raise ValueError("event must be a JSON object")
    record = cast(dict[str, Any], raw)
    event_type = record.get("type")
    issue_id = _require_str(record, "issueId")
    timestamp = _require_str(record, "timestamp")
    try:
        parse_timestamp(timestamp)
    except ValueError as e:
        raise ValueError(f"field 'timestamp' is not ISO-8601: {timestamp!r}") from e
    data = record.get("data", {})
    if not isinstance(data, dict):
        raise ValueError("field 'data' must be an object")

    if event_type == "create":
        priority = _optional_int(data, "priority")
        return CreateEvent(
            issue_id=issue_id,
            timestamp=timestamp,
            title=_require_str(data, "title"),
            issue_type=cast(IssueType, _require_str(data, "type")),
            priority=priority if priority is not None else 2,
            description=_optional_str(data, "description"),
            parent=_optional_str(data, "parent"),
            verifies=_optional_str(data, "verifies"),
        )
    if event_type == "update":
        return UpdateEvent(
            issue_id=issue_id,
            timestamp=timestamp,
            changes=IssueUpdate(
                title=_optional_str(data, "title"),
                issue_type=cast(IssueType | None, _optional_str(data, "type")),
                priority=_optional_int(data, "priority"),
                status=cast(Status | None, _optional_str(data, "status")),
                description=_optional_str(data, "description"),
                parent=_optional_str(data, "parent"),
                blocked_by=_optional_ids(data, "blockedBy"),
                related_to=_optional_ids(data, "relatedTo"),
            ),
        )
    if event_type == "close":
        return CloseEvent(
            issue_id=issue_id, timestamp=timestamp, reason=_optional_str(data, "reason")
        )
    if event_type == "reopen":
        return ReopenEvent(
            issue_id=issue_id, timestamp=timestamp, reason=_optional_str(data, "reason")
        )
    if event_type == "comment":
        return CommentEvent(
            issue_id=issue_id,
            timestamp=timestamp,
            comment=Comment(
                text=_require_str(data, "text"),
                timestamp=_optional_str(data, "timestamp") or timestamp,
                author=_optional_str(data, "author"),
            ),
        )
    raise ValueError(f"unknown event type: {event_type!r}")


def split_jsonl_lines(content: str) -> list[str]:
    """Split JSONL content into records on line feeds only.

    str.splitlines() also breaks on U+2028, U+2029 and U+0085, which json.dumps
    leaves unescaped inside strings when ensure_ascii is off.
    """
    return [line.removesuffix("\r") for line in content.split("\n")]


def decode_event_log(content: str, *, path: Path | None) -> list[IssueEvent]:
    """Parse JSONL content into events, preserving line order.

    Blank lines are skipped. Any other line that fails to parse aborts the
    whole read rather than being dropped.

    Args:
        content: Full text of the log
        path: Source path, used only for error messages

    Returns:
        Events in append order

    Raises:
        MalformedLogError: On the first line that is not a valid event
    """
    events: list[IssueEvent] = []
    for index, line in enumerate(split_jsonl_lines(content), start=1):
        if not line.strip():
            continue
        try:
            raw = json.loads(line)
        except json.JSONDecodeError as e:
            raise MalformedLogError(path, index, f"invalid JSON ({e.msg})") from e
        try:
            events.append(event_from_dict(raw))
        except ValueError as e:
            raise MalformedLogError(path, index, str(e)) from e
    return events
