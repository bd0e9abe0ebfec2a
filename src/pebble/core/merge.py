"""Read-only merge of several event logs into one view.

Used when more than one `.pebble` log is active (for example, one per git
worktree). Nothing here writes a unified log back to any source.

Ordering and conflict resolution both rely on writer-supplied timestamps.
There is no logical clock, so clock skew between machines can misorder
events or pick the wrong "latest" issue.
"""

from dataclasses import dataclass

from pebble.core.events import IssueEvent
from pebble.core.state import compute_state
from pebble.core.timestamps import parse_timestamp
from pebble.core.types import Issue


@dataclass(frozen=True)
class EventSource:
    """Events read from one log.

    Attributes:
        name: Source identifier used for provenance (typically the file path)
        events: Events in append order
    """

    name: str
    events: list[IssueEvent]


@dataclass(frozen=True)
class MergedIssue:
    """Winning issue variant plus every source that contained its id.

    Attributes:
        issue: Variant with the greatest updated_at across sources
        sources: Source names in first-seen order
    """

    issue: Issue
    sources: tuple[str, ...]


def merge_events(sources: list[EventSource]) -> list[IssueEvent]:
    """Concatenate all sources' events and sort by timestamp ascending.

    The sort is stable: ties keep source order, then append order.
    """
    all_events = [event for source in sources for event in source.events]
    return sorted(all_events, key=lambda event: parse_timestamp(event.timestamp))


def merge_issues(sources: list[EventSource]) -> list[MergedIssue]:
    """Reduce each source independently and union the snapshots by id.

    When an id appears in several sources, the variant with the strictly
    greater updated_at wins (last-write-wins); on a tie the earlier source
    is kept.

    Returns:
        Merged issues in first-seen order
    """
    winners: dict[str, Issue] = {}
    provenance: dict[str, list[str]] = {}

    for source in sources:
        for issue_id, issue in compute_state(source.events).items():
            existing = winners.get(issue_id)
            if existing is None:
                winners[issue_id] = issue
                provenance[issue_id] = [source.name]
                continue
            if source.name not in provenance[issue_id]:
                provenance[issue_id].append(source.name)
            if parse_timestamp(issue.updated_at) > parse_timestamp(existing.updated_at):
                winners[issue_id] = issue

    return [
        MergedIssue(issue=issue, sources=tuple(provenance[issue_id]))
        for issue_id, issue in winners.items()
    ]
