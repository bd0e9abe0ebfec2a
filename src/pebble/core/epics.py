"""Per-epic progress rollups: child status counts and verification totals."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from pebble.core.dependency_graph import get_children, get_verifications
from pebble.core.state import Snapshot
from pebble.core.timestamps import parse_timestamp
from pebble.core.types import Issue, Status

RECENTLY_CLOSED_WINDOW = timedelta(hours=72)


@dataclass(frozen=True)
class ChildCounts:
    total: int
    done: int
    pending_verification: int
    in_progress: int
    open: int
    blocked: int


@dataclass(frozen=True)
class EpicSummary:
    """Progress of one epic.

    Attributes:
        epic: The epic itself
        parent: The epic's parent, if it has one in the snapshot
        children: Status counts over direct children
        verifications_total: Verification issues targeting any direct child
        verifications_done: How many of those are closed
    """

    epic: Issue
    parent: Issue | None
    children: ChildCounts
    verifications_total: int
    verifications_done: int


def summarize_epic(epic: Issue, state: Snapshot) -> EpicSummary:
    children = get_children(epic.id, state)

    def count(status: Status) -> int:
        return sum(1 for child in children if child.status == status)

    verifications = [v for child in children for v in get_verifications(child.id, state)]
    return EpicSummary(
        epic=epic,
        parent=state.get(epic.parent) if epic.parent is not None else None,
        children=ChildCounts(
            total=len(children),
            done=count("closed"),
            pending_verification=count("pending_verification"),
            in_progress=count("in_progress"),
            open=count("open"),
            blocked=count("blocked"),
        ),
        verifications_total=len(verifications),
        verifications_done=sum(1 for v in verifications if v.is_closed),
    )


def _newest_first(epics: list[Issue], limit: int) -> list[Issue]:
    ordered = sorted(epics, key=lambda epic: parse_timestamp(epic.created_at), reverse=True)
    return ordered[:limit] if limit > 0 else ordered


def select_epics(state: Snapshot, *, status: Status | None, limit: int) -> list[Issue]:
    """Epics with the given status (default: every non-closed epic), newest first."""
    epics = [issue for issue in state.values() if issue.type == "epic"]
    if status is not None:
        epics = [epic for epic in epics if epic.status == status]
    else:
        epics = [epic for epic in epics if not epic.is_closed]
    return _newest_first(epics, limit)


def select_recently_closed_epics(state: Snapshot, *, now: datetime, limit: int) -> list[Issue]:
    """Closed epics last updated within RECENTLY_CLOSED_WINDOW, newest first."""
    cutoff = now - RECENTLY_CLOSED_WINDOW
    epics = [
        issue
        for issue in state.values()
        if issue.type == "epic" and issue.is_closed and parse_timestamp(issue.updated_at) > cutoff
    ]
    return _newest_first(epics, limit)
