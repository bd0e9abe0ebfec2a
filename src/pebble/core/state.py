"""Fold the event log into issue snapshots.

compute_state() is the only way issue state is produced. It is pure and total:
it never raises for well-formed events and never validates semantics such as
cycles or epic parents - that is the job of the mutation path
(pebble.core.issue_service).
"""

from collections.abc import Iterable
from dataclasses import replace
from typing import assert_never

from pebble.core.events import (
    CloseEvent,
    CommentEvent,
    CreateEvent,
    IssueEvent,
    IssueUpdate,
    ReopenEvent,
    UpdateEvent,
)
from pebble.core.types import Issue

Snapshot = dict[str, Issue]


def _issue_from_create(event: CreateEvent) -> Issue:
    return Issue(
        id=event.issue_id,
        title=event.title,
        type=event.issue_type,
        priority=event.priority,
        status="open",
        description=event.description,
        parent=event.parent,
        blocked_by=(),
        related_to=(),
        verifies=event.verifies,
        comments=(),
        created_at=event.timestamp,
        updated_at=event.timestamp,
    )


def _apply_update(issue: Issue, changes: IssueUpdate, timestamp: str) -> Issue:
    return replace(
        issue,
        title=changes.title if changes.title is not None else issue.title,
        type=changes.issue_type if changes.issue_type is not None else issue.type,
        priority=changes.priority if changes.priority is not None else issue.priority,
        status=changes.status if changes.status is not None else issue.status,
        description=(
            changes.description if changes.description is not None else issue.description
        ),
        parent=changes.parent if changes.parent is not None else issue.parent,
        blocked_by=changes.blocked_by if changes.blocked_by is not None else issue.blocked_by,
        related_to=changes.related_to if changes.related_to is not None else issue.related_to,
        updated_at=timestamp,
    )


def apply_event(state: Snapshot, event: IssueEvent) -> None:
    """Apply one event to a snapshot in place.

    Events addressed to an id that has not been created yet are ignored.
    A second create for an existing id replaces the issue.
    """
    if isinstance(event, CreateEvent):
        state[event.issue_id] = _issue_from_create(event)
        return

    issue = state.get(event.issue_id)
    if issue is None:
        return

    if isinstance(event, UpdateEvent):
        state[event.issue_id] = _apply_update(issue, event.changes, event.timestamp)
    elif isinstance(event, CloseEvent):
        state[event.issue_id] = replace(issue, status="closed", updated_at=event.timestamp)
    elif isinstance(event, ReopenEvent):
        state[event.issue_id] = replace(issue, status="open", updated_at=event.timestamp)
    elif isinstance(event, CommentEvent):
        state[event.issue_id] = replace(
            issue,
            comments=(*issue.comments, event.comment),
            updated_at=event.timestamp,
        )
    else:
        assert_never(event)


def compute_state(events: Iterable[IssueEvent]) -> Snapshot:
    """Compute current issue state from events.

    Events are applied strictly in the order given (append order), never
    re-sorted by timestamp.

    Args:
        events: Events in append order

    Returns:
        Mapping of issue id to current Issue, in creation order
    """
    state: Snapshot = {}
    for event in events:
        apply_event(state, event)
    return state


def filter_issues(
    state: Snapshot,
    *,
    status: str | None = None,
    issue_type: str | None = None,
    priority: int | None = None,
    parent: str | None = None,
) -> list[Issue]:
    """Return issues matching every provided filter (None = no filter)."""
    issues = list(state.values())
    if status is not None:
        issues = [issue for issue in issues if issue.status == status]
    if issue_type is not None:
        issues = [issue for issue in issues if issue.type == issue_type]
    if priority is not None:
        issues = [issue for issue in issues if issue.priority == priority]
    if parent is not None:
        issues = [issue for issue in issues if issue.parent == parent]
    return issues


def events_for_issue(events: Iterable[IssueEvent], issue_id: str) -> list[IssueEvent]:
    """Return the events addressed to one issue, in append order."""
    return [event for event in events if event.issue_id == issue_id]
