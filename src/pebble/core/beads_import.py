"""Convert a Beads (bd) `issues.jsonl` export into pebble events.

Beads ids are replaced by fresh pebble ids. Parsing uses the same strict
policy as the pebble log: a malformed line aborts the import instead of being
skipped.
"""

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pebble.core.errors import MalformedLogError
from pebble.core.events import (
    CloseEvent,
    CreateEvent,
    IssueEvent,
    IssueUpdate,
    UpdateEvent,
    split_jsonl_lines,
)
from pebble.core.timestamps import parse_timestamp
from pebble.core.types import IssueType, Status


@dataclass(frozen=True)
class BeadsDependency:
    """Dependency edge from a Beads export.

    Attributes:
        issue_id: Issue that owns the edge
        depends_on_id: Issue it depends on
        type: "blocks", "parent-child", "related" or "discovered-from"
    """

    issue_id: str
    depends_on_id: str
    type: str


@dataclass(frozen=True)
class BeadsRecord:
    """One line of a Beads export.

    Maps to the bd JSONL export format (a superset of `bd list --json`).
    """

    id: str
    title: str
    description: str | None
    status: str
    priority: int
    issue_type: str
    created_at: str
    updated_at: str
    closed_at: str | None
    close_reason: str | None
    dependencies: tuple[BeadsDependency, ...]


@dataclass
class ImportStats:
    created: int = 0
    closed: int = 0
    dependencies: int = 0
    parent_child: int = 0


@dataclass(frozen=True)
class BeadsConversion:
    """Result of converting a Beads export.

    Attributes:
        events: Events to append, in order
        id_map: Beads id -> new pebble id, in export order
        stats: Counts for reporting
    """

    events: list[IssueEvent]
    id_map: dict[str, str]
    stats: ImportStats = field(default_factory=ImportStats)


def _record_from_dict(data: dict[str, Any]) -> BeadsRecord:
    for key in ("id", "title", "status", "created_at", "updated_at"):
        if not isinstance(data.get(key), str):
            raise ValueError(f"field '{key}' must be a string")
    for key in ("description", "closed_at", "close_reason"):
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise ValueError(f"field '{key}' must be a string")
    for key in ("created_at", "updated_at", "closed_at"):
        value = data.get(key)
        if value is not None:
            parse_timestamp(value)
    raw_dependencies = data.get("dependencies") or []
    if not isinstance(raw_dependencies, list) or not all(
        isinstance(dep, dict) for dep in raw_dependencies
    ):
        raise ValueError("field 'dependencies' must be a list of objects")
    dependencies = tuple(
        BeadsDependency(
            issue_id=str(dep.get("issue_id", data["id"])),
            depends_on_id=str(dep["depends_on_id"]),
            type=str(dep.get("type", "blocks")),
        )
        for dep in raw_dependencies
    )
    priority = data.get("priority", 2)
    return BeadsRecord(
        id=data["id"],
        title=data["title"],
        description=data.get("description"),
        status=data["status"],
        priority=priority if isinstance(priority, int) else 2,
        issue_type=str(data.get("issue_type", "task")),
        created_at=data["created_at"],
        updated_at=data["updated_at"],
        closed_at=data.get("closed_at"),
        close_reason=data.get("close_reason"),
        dependencies=dependencies,
    )


def parse_beads_export(content: str, *, path: Path | None) -> list[BeadsRecord]:
    """Parse a Beads JSONL export.

    Raises:
        MalformedLogError: On the first line that is not a valid Beads issue
    """
    records: list[BeadsRecord] = []
    for index, line in enumerate(split_jsonl_lines(content), start=1):
        if not line.strip():
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            raise MalformedLogError(path, index, f"invalid JSON ({e.msg})") from e
        if not isinstance(data, dict):
            raise MalformedLogError(path, index, "Beads issue must be a JSON object")
        try:
            records.append(_record_from_dict(data))
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedLogError(path, index, str(e)) from e
    return records


def _map_type(issue_type: str) -> IssueType:
    # feature, chore, etc. become tasks
    if issue_type == "bug":
        return "bug"
    if issue_type == "epic":
        return "epic"
    return "task"


def _map_status(status: str) -> Status:
    # deferred and anything unknown reopen as open
    if status == "in_progress":
        return "in_progress"
    if status == "blocked":
        return "blocked"
    if status == "closed":
        return "closed"
    return "open"


def convert_beads_records(
    records: list[BeadsRecord],
    *,
    id_factory: Callable[[], str],
) -> BeadsConversion:
    """Convert Beads records to pebble events.

    Args:
        records: Parsed Beads issues
        id_factory: Returns a fresh pebble id on each call

    Returns:
        BeadsConversion with events, id map and stats
    """
    id_map = {record.id: id_factory() for record in records}
    type_by_id = {record.id: record.issue_type for record in records}
    events: list[IssueEvent] = []
    stats = ImportStats()

    for record in records:
        pebble_id = id_map[record.id]
        parent: str | None = None
        blocked_by: list[str] = []

        for dep in record.dependencies:
            target = id_map.get(dep.depends_on_id)
            if target is None:
                continue
            if dep.type == "parent-child":
                # Beads stores parent-child on both sides; only the edge
                # pointing at an epic makes this issue a child.
                if type_by_id.get(dep.depends_on_id) == "epic":
                    parent = target
                    stats.parent_child += 1
            elif dep.type == "blocks" and dep.depends_on_id != record.id:
                blocked_by.append(target)
                stats.dependencies += 1

        events.append(
            CreateEvent(
                issue_id=pebble_id,
                timestamp=record.created_at,
                title=record.title,
                issue_type=_map_type(record.issue_type),
                priority=max(0, min(4, record.priority)),
                description=record.description,
                parent=parent,
            )
        )
        stats.created += 1

        if blocked_by:
            events.append(
                UpdateEvent(
                    issue_id=pebble_id,
                    timestamp=record.created_at,
                    changes=IssueUpdate(blocked_by=tuple(blocked_by)),
                )
            )

        status = _map_status(record.status)
        if status == "closed":
            events.append(
                CloseEvent(
                    issue_id=pebble_id,
                    timestamp=record.closed_at or record.updated_at,
                    reason=record.close_reason,
                )
            )
            stats.closed += 1
        elif status != "open":
            events.append(
                UpdateEvent(
                    issue_id=pebble_id,
                    timestamp=record.updated_at,
                    changes=IssueUpdate(status=status),
                )
            )

    return BeadsConversion(events=events, id_map=id_map, stats=stats)
