"""Core types for the pebble issue tracker.

Issues are never stored directly. They are derived snapshots produced by
folding the event log (see pebble.core.state).
"""

from dataclasses import dataclass
from typing import Literal, get_args

IssueType = Literal["task", "bug", "epic", "verification"]
Status = Literal["open", "in_progress", "blocked", "pending_verification", "closed"]
Priority = int  # 0 (critical) .. 4 (backlog)

ISSUE_TYPES: tuple[IssueType, ...] = get_args(IssueType)
STATUSES: tuple[Status, ...] = get_args(Status)
PRIORITIES: tuple[int, ...] = (0, 1, 2, 3, 4)

PRIORITY_LABELS: dict[int, str] = {
    0: "critical",
    1: "high",
    2: "medium",
    3: "low",
    4: "backlog",
}

STATUS_LABELS: dict[Status, str] = {
    "open": "Open",
    "in_progress": "In Progress",
    "blocked": "Blocked",
    "pending_verification": "Pending Verification",
    "closed": "Closed",
}


@dataclass(frozen=True)
class Comment:
    """A comment attached to an issue.

    Attributes:
        text: Comment body
        timestamp: ISO-8601 timestamp supplied by the writer
        author: Optional author name
    """

    text: str
    timestamp: str
    author: str | None = None


@dataclass(frozen=True)
class Issue:
    """Current state of an issue, derived from the event log.

    Fields:
        id: Immutable identifier in PREFIX-suffix form (e.g., "PEBL-a1b2c3")
        title: Issue title
        type: task, bug, epic or verification
        priority: 0 (critical) through 4 (backlog)
        status: Lifecycle status
        description: Optional body text
        parent: Id of the parent epic, if any
        blocked_by: Ids of blocking issues in insertion order (not deduplicated)
        related_to: Ids of related issues (non-blocking)
        verifies: Id of the issue a verification issue confirms
        comments: Comments in append order
        created_at: Timestamp of the create event
        updated_at: Timestamp of the latest event applied to this issue
    """

    id: str
    title: str
    type: IssueType
    priority: Priority
    status: Status
    description: str | None
    parent: str | None
    blocked_by: tuple[str, ...]
    related_to: tuple[str, ...]
    verifies: str | None
    comments: tuple[Comment, ...]
    created_at: str
    updated_at: str

    @property
    def is_closed(self) -> bool:
        return self.status == "closed"


@dataclass(frozen=True)
class PebbleConfig:
    """Contents of `.pebble/config.json`.

    Attributes:
        prefix: Four-letter uppercase id prefix (e.g., "PEBL")
        version: Version of the log format that created the directory
    """

    prefix: str
    version: str
