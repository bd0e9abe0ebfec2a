"""Validated mutation path for issues.

Every method reads the log, resolves references against the resulting
snapshot, validates, and only then appends events. Cycle and self-reference
checks always run before a blocking edge is written.

Read-validate-append is not atomic: a concurrent writer can append between
the read and the append.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from pebble.core.dependency_graph import detect_cycle, get_newly_unblocked, has_open_children
from pebble.core.errors import CycleDetectedError, InvalidStateError, ValidationError
from pebble.core.events import (
    CloseEvent,
    CommentEvent,
    CreateEvent,
    IssueEvent,
    IssueUpdate,
    ReopenEvent,
    UpdateEvent,
)
from pebble.core.ids import generate_id, resolve_id
from pebble.core.state import Snapshot, apply_event, compute_state
from pebble.core.timestamps import format_timestamp
from pebble.core.types import ISSUE_TYPES, PRIORITIES, STATUSES, Comment, Issue, IssueType
from pebble.gateway.event_log.abc import EventLog, issues_path
from pebble.gateway.time.abc import Time

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CloseResult:
    """Result from closing an issue.

    Attributes:
        issue: The issue after closing
        unblocked: Issues that became ready because this one closed
    """

    issue: Issue
    unblocked: list[Issue]


def validate_priority(priority: int) -> int:
    if priority not in PRIORITIES:
        raise ValidationError(f"Invalid priority: {priority}. Must be 0-4")
    return priority


class IssueService:
    """Service for appending validated issue events.

    Takes ABC gateways as constructor args (testable with fakes).
    Raises PebbleError subclasses; never prints or exits.
    """

    def __init__(self, *, event_log: EventLog, time: Time, pebble_dir: Path) -> None:
        """Initialize IssueService.

        Args:
            event_log: Gateway used to read and append events
            time: Clock used to stamp new events
            pebble_dir: The `.pebble` directory whose log is mutated
        """
        self._event_log = event_log
        self._time = time
        self._pebble_dir = pebble_dir

    @property
    def log_path(self) -> Path:
        return issues_path(self._pebble_dir)

    def load_events(self) -> list[IssueEvent]:
        return self._event_log.read_events(self.log_path)

    def load_state(self) -> Snapshot:
        return compute_state(self.load_events())

    def get_issue(self, reference: str) -> Issue:
        """Resolve a (partial) reference against the current log.

        Raises:
            IssueNotFoundError: If nothing matches
            AmbiguousIdError: If the reference is ambiguous
        """
        state = self.load_state()
        return state[resolve_id(reference, state)]

    def _now(self) -> str:
        return format_timestamp(self._time.now())

    def _append(self, state: Snapshot, event: IssueEvent) -> None:
        self._event_log.append_event(self.log_path, event)
        apply_event(state, event)
        logger.debug("Appended %s for %s", type(event).__name__, event.issue_id)

    def create(
        self,
        *,
        title: str,
        issue_type: IssueType,
        priority: int,
        description: str | None,
        parent: str | None,
        verifies: str | None,
    ) -> Issue:
        """Create a new issue.

        Passing `verifies` forces the type to verification; a verification
        issue without `verifies` is rejected. The parent must be an open epic.

        Raises:
            ValidationError: On invalid type, priority, or missing verifies
            InvalidStateError: If the parent is not an epic or is closed
            IssueNotFoundError: If parent or verifies does not resolve
        """
        if verifies is not None:
            issue_type = "verification"
        if issue_type not in ISSUE_TYPES:
            raise ValidationError(
                f"Invalid type: {issue_type}. Must be one of: {', '.join(ISSUE_TYPES)}"
            )
        if issue_type == "verification" and verifies is None:
            raise ValidationError(
                "Verification issues require --verifies <id> to specify the issue being verified"
            )
        validate_priority(priority)

        state = self.load_state()
        config = self._event_log.load_config(self._pebble_dir)

        parent_id: str | None = None
        if parent is not None:
            parent_id = resolve_id(parent, state)
            parent_issue = state[parent_id]
            if parent_issue.type != "epic":
                raise InvalidStateError(f"Parent must be an epic, got: {parent_issue.type}")
            if parent_issue.is_closed:
                raise InvalidStateError(f"Cannot add children to closed epic: {parent_id}")

        verifies_id = resolve_id(verifies, state) if verifies is not None else None

        issue_id = generate_id(config.prefix)
        event = CreateEvent(
            issue_id=issue_id,
            timestamp=self._now(),
            title=title,
            issue_type=issue_type,
            priority=priority,
            description=description,
            parent=parent_id,
            verifies=verifies_id,
        )
        self._append(state, event)
        return state[issue_id]

    def update(self, reference: str, changes: IssueUpdate) -> Issue:
        """Apply a partial update to an issue.

        Raises:
            ValidationError: If no change is given or a value is out of range
        """
        if changes.is_empty():
            raise ValidationError(
                "No changes specified. Use --status, --priority, --title, or --description"
            )
        if changes.status is not None and changes.status not in STATUSES:
            raise ValidationError(
                f"Invalid status: {changes.status}. Must be one of: {', '.join(STATUSES)}"
            )
        if changes.priority is not None:
            validate_priority(changes.priority)
        if changes.blocked_by is not None:
            raise ValidationError("Use add_dependency/remove_dependency to change blockers")

        state = self.load_state()
        issue_id = resolve_id(reference, state)
        self._append(state, UpdateEvent(issue_id=issue_id, timestamp=self._now(), changes=changes))
        return state[issue_id]

    def claim(self, reference: str) -> Issue:
        """Mark an issue as in progress. Claiming an in-progress issue is a no-op."""
        state = self.load_state()
        issue_id = resolve_id(reference, state)
        issue = state[issue_id]
        if issue.status == "in_progress":
            return issue
        if issue.is_closed:
            raise InvalidStateError(f"Cannot claim closed issue: {issue_id}")
        event = UpdateEvent(
            issue_id=issue_id, timestamp=self._now(), changes=IssueUpdate(status="in_progress")
        )
        self._append(state, event)
        return state[issue_id]

    def close(self, reference: str, *, reason: str | None, comment: str | None) -> CloseResult:
        """Close an issue, optionally commenting first.

        Raises:
            InvalidStateError: If already closed, or an epic with open children
        """
        state = self.load_state()
        issue_id = resolve_id(reference, state)
        issue = state[issue_id]
        if issue.is_closed:
            raise InvalidStateError(f"Issue is already closed: {issue_id}")
        if issue.type == "epic" and has_open_children(issue_id, state):
            raise InvalidStateError(f"Cannot close epic with open children: {issue_id}")

        timestamp = self._now()
        if comment is not None:
            comment_event = CommentEvent(
                issue_id=issue_id,
                timestamp=timestamp,
                comment=Comment(text=comment, timestamp=timestamp),
            )
            self._append(state, comment_event)
        self._append(state, CloseEvent(issue_id=issue_id, timestamp=timestamp, reason=reason))
        return CloseResult(issue=state[issue_id], unblocked=get_newly_unblocked(issue_id, state))

    def reopen(self, reference: str, *, reason: str | None) -> Issue:
        state = self.load_state()
        issue_id = resolve_id(reference, state)
        issue = state[issue_id]
        if not issue.is_closed:
            raise InvalidStateError(f"Issue is not closed: {issue_id} (status: {issue.status})")
        self._append(state, ReopenEvent(issue_id=issue_id, timestamp=self._now(), reason=reason))
        return state[issue_id]

    def add_comment(self, reference: str, *, text: str, author: str | None) -> Issue:
        state = self.load_state()
        issue_id = resolve_id(reference, state)
        timestamp = self._now()
        event = CommentEvent(
            issue_id=issue_id,
            timestamp=timestamp,
            comment=Comment(text=text, timestamp=timestamp, author=author),
        )
        self._append(state, event)
        return state[issue_id]

    def add_dependency(self, blocked_ref: str, blocker_ref: str) -> Issue:
        """Record that blocked_ref cannot start until blocker_ref is closed.

        Raises:
            CycleDetectedError: On self-reference or if the edge closes a cycle
            InvalidStateError: If the dependency already exists
        """
        state = self.load_state()
        blocked_id = resolve_id(blocked_ref, state)
        blocker_id = resolve_id(blocker_ref, state)
        issue = state[blocked_id]

        if blocked_id == blocker_id:
            raise CycleDetectedError(blocked_id, blocker_id)
        if blocker_id in issue.blocked_by:
            raise InvalidStateError(
                f"Dependency already exists: {blocked_id} is blocked by {blocker_id}"
            )
        if detect_cycle(blocked_id, blocker_id, state):
            raise CycleDetectedError(blocked_id, blocker_id)

        event = UpdateEvent(
            issue_id=blocked_id,
            timestamp=self._now(),
            changes=IssueUpdate(blocked_by=(*issue.blocked_by, blocker_id)),
        )
        self._append(state, event)
        return state[blocked_id]

    def remove_dependency(self, blocked_ref: str, blocker_ref: str) -> Issue:
        state = self.load_state()
        blocked_id = resolve_id(blocked_ref, state)
        blocker_id = resolve_id(blocker_ref, state)
        issue = state[blocked_id]
        if blocker_id not in issue.blocked_by:
            raise InvalidStateError(
                f"Dependency does not exist: {blocked_id} is not blocked by {blocker_id}"
            )
        remaining = tuple(b for b in issue.blocked_by if b != blocker_id)
        event = UpdateEvent(
            issue_id=blocked_id, timestamp=self._now(), changes=IssueUpdate(blocked_by=remaining)
        )
        self._append(state, event)
        return state[blocked_id]

    def relate(self, first_ref: str, second_ref: str) -> tuple[Issue, Issue]:
        """Link two issues in both directions with two update events."""
        state = self.load_state()
        first_id = resolve_id(first_ref, state)
        second_id = resolve_id(second_ref, state)
        if first_id == second_id:
            raise ValidationError("Cannot relate issue to itself")
        first, second = state[first_id], state[second_id]
        if second_id in first.related_to:
            raise InvalidStateError(f"Issues are already related: {first_id} <-> {second_id}")

        timestamp = self._now()
        self._append(
            state,
            UpdateEvent(
                issue_id=first_id,
                timestamp=timestamp,
                changes=IssueUpdate(related_to=(*first.related_to, second_id)),
            ),
        )
        self._append(
            state,
            UpdateEvent(
                issue_id=second_id,
                timestamp=timestamp,
                changes=IssueUpdate(related_to=(*second.related_to, first_id)),
            ),
        )
        return state[first_id], state[second_id]

    def unrelate(self, first_ref: str, second_ref: str) -> tuple[Issue, Issue]:
        state = self.load_state()
        first_id = resolve_id(first_ref, state)
        second_id = resolve_id(second_ref, state)
        first, second = state[first_id], state[second_id]
        if second_id not in first.related_to:
            raise InvalidStateError(f"Issues are not related: {first_id} <-> {second_id}")

        timestamp = self._now()
        self._append(
            state,
            UpdateEvent(
                issue_id=first_id,
                timestamp=timestamp,
                changes=IssueUpdate(
                    related_to=tuple(r for r in first.related_to if r != second_id)
                ),
            ),
        )
        self._append(
            state,
            UpdateEvent(
                issue_id=second_id,
                timestamp=timestamp,
                changes=IssueUpdate(
                    related_to=tuple(r for r in second.related_to if r != first_id)
                ),
            ),
        )
        return state[first_id], state[second_id]

    def append_imported(self, events: list[IssueEvent]) -> None:
        """Append pre-built events (from an importer) without re-validation."""
        for event in events:
            self._event_log.append_event(self.log_path, event)
        logger.debug("Appended %d imported events to %s", len(events), self.log_path)
