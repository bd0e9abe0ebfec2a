"""Dependency graph queries over an issue snapshot.

Edges run blocker -> blocked. Every function recomputes from the snapshot it
is given; there is no cached graph state. All traversals carry a visited set
so they stay finite even over logs that bypassed cycle validation (for
example, merged or hand-edited logs).
"""

from pebble.core.state import Snapshot
from pebble.core.types import Issue

DependencyGraph = dict[str, list[str]]


def build_graph(state: Snapshot) -> DependencyGraph:
    """Build the blocker -> blocked adjacency list.

    Every issue in the snapshot gets an entry. Edges from blockers that are
    not in the snapshot are dropped.
    """
    graph: DependencyGraph = {issue_id: [] for issue_id in state}
    for issue_id, issue in state.items():
        for blocker_id in issue.blocked_by:
            edges = graph.get(blocker_id)
            if edges is not None:
                edges.append(issue_id)
    return graph


def detect_cycle(issue_id: str, proposed_blocker_id: str, state: Snapshot) -> bool:
    """Check whether making proposed_blocker_id block issue_id would close a cycle.

    Adds the hypothetical edge proposed_blocker_id -> issue_id and searches
    from issue_id. Reaching proposed_blocker_id means issue_id already
    (transitively) blocks it.

    Returns:
        True for a self-reference or a cycle, False otherwise
    """
    if issue_id == proposed_blocker_id:
        return True

    graph = build_graph(state)
    graph[proposed_blocker_id] = [*graph.get(proposed_blocker_id, []), issue_id]

    visited: set[str] = set()
    stack = [issue_id]
    while stack:
        current = stack.pop()
        if current == proposed_blocker_id:
            return True
        if current in visited:
            continue
        visited.add(current)
        for blocked_id in graph.get(current, []):
            if blocked_id not in visited:
                stack.append(blocked_id)
    return False


def _has_open_blocker(issue: Issue, state: Snapshot) -> bool:
    for blocker_id in issue.blocked_by:
        blocker = state.get(blocker_id)
        # Dangling references count as resolved
        if blocker is not None and not blocker.is_closed:
            return True
    return False


def get_ready(state: Snapshot) -> list[Issue]:
    """Non-closed issues with no open blockers."""
    return [
        issue
        for issue in state.values()
        if not issue.is_closed and not _has_open_blocker(issue, state)
    ]


def get_blocked(state: Snapshot) -> list[Issue]:
    """Non-closed issues with at least one open blocker."""
    return [
        issue for issue in state.values() if not issue.is_closed and _has_open_blocker(issue, state)
    ]


def _level(issue_id: str, state: Snapshot, levels: dict[str, int], visiting: set[str]) -> int:
    cached = levels.get(issue_id)
    if cached is not None:
        return cached
    if issue_id in visiting:
        return 0
    visiting.add(issue_id)

    issue = state.get(issue_id)
    blocked_by = issue.blocked_by if issue is not None else ()
    max_blocker_level = -1
    for blocker_id in blocked_by:
        max_blocker_level = max(max_blocker_level, _level(blocker_id, state, levels, visiting))

    result = max_blocker_level + 1
    levels[issue_id] = result
    return result


def level(issue_id: str, state: Snapshot) -> int:
    """Depth of an issue in the blocker DAG.

    0 when the issue has no blockers, otherwise 1 + the maximum level of its
    blockers. A revisit during the walk contributes 0.
    """
    return _level(issue_id, state, {}, set())


def compute_levels(state: Snapshot) -> dict[str, int]:
    """Levels for every issue in the snapshot, sharing memoization."""
    levels: dict[str, int] = {}
    visiting: set[str] = set()
    for issue_id in state:
        _level(issue_id, state, levels, visiting)
    return {issue_id: levels[issue_id] for issue_id in state}


def group_by_level(state: Snapshot) -> list[list[Issue]]:
    """Issues grouped by level, index = level. Empty levels are omitted."""
    levels = compute_levels(state)
    grouped: dict[int, list[Issue]] = {}
    for issue_id, issue in state.items():
        grouped.setdefault(levels[issue_id], []).append(issue)
    return [grouped[key] for key in sorted(grouped)]


def neighborhood(root_id: str, state: Snapshot) -> list[Issue]:
    """Issues connected to root_id, in snapshot order.

    Upstream: everything root transitively depends on via blocked_by or parent.
    Downstream: everything transitively blocked by root or nested under it.
    """
    upstream: set[str] = set()
    stack = [root_id]
    while stack:
        current = stack.pop()
        if current in upstream:
            continue
        upstream.add(current)
        issue = state.get(current)
        if issue is None:
            continue
        stack.extend(issue.blocked_by)
        if issue.parent is not None:
            stack.append(issue.parent)

    downstream: set[str] = set()
    stack = [root_id]
    while stack:
        current = stack.pop()
        if current in downstream:
            continue
        downstream.add(current)
        for issue in state.values():
            if current in issue.blocked_by or issue.parent == current:
                stack.append(issue.id)

    members = upstream | downstream
    return [issue for issue_id, issue in state.items() if issue_id in members]


def get_blockers(issue_id: str, state: Snapshot) -> list[Issue]:
    """Issues listed in issue_id's blocked_by that exist in the snapshot."""
    issue = state.get(issue_id)
    if issue is None:
        return []
    return [state[blocker_id] for blocker_id in issue.blocked_by if blocker_id in state]


def get_blocking(issue_id: str, state: Snapshot) -> list[Issue]:
    """Issues that list issue_id as a blocker."""
    return [issue for issue in state.values() if issue_id in issue.blocked_by]


def get_children(epic_id: str, state: Snapshot) -> list[Issue]:
    return [issue for issue in state.values() if issue.parent == epic_id]


def get_verifications(issue_id: str, state: Snapshot) -> list[Issue]:
    return [issue for issue in state.values() if issue.verifies == issue_id]


def get_related(issue_id: str, state: Snapshot) -> list[Issue]:
    issue = state.get(issue_id)
    if issue is None:
        return []
    return [state[related_id] for related_id in issue.related_to if related_id in state]


def has_open_children(epic_id: str, state: Snapshot) -> bool:
    return any(not child.is_closed for child in get_children(epic_id, state))


def get_newly_unblocked(closed_id: str, state: Snapshot) -> list[Issue]:
    """Issues blocked by closed_id that are now ready.

    Call with a snapshot taken after closed_id was closed.
    """
    return [
        issue
        for issue in get_blocking(closed_id, state)
        if not issue.is_closed and not _has_open_blocker(issue, state)
    ]
