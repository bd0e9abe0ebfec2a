"""Tree views over a snapshot: dependency trees and parent/child hierarchies."""

from dataclasses import dataclass, field

from pebble.core.state import Snapshot
from pebble.core.types import Issue


@dataclass(frozen=True)
class IssueTreeNode:
    """A node in a rendered issue tree.

    Attributes:
        issue: The issue at this node
        children: Child nodes in display order
        is_target: True for the issue the tree was requested for
        is_repeat: True when the issue is already expanded elsewhere in the
            tree (including its own ancestors); its children are omitted
    """

    issue: Issue
    children: tuple["IssueTreeNode", ...] = field(default=())
    is_target: bool = False
    is_repeat: bool = False


def build_dependency_tree(root_id: str, state: Snapshot) -> IssueTreeNode | None:
    """Build the tree of everything root_id is (transitively) blocked by.

    Blockers missing from the snapshot are omitted. Each issue is expanded at
    most once; later occurrences, including cycles back to an ancestor, become
    leaves marked is_repeat.

    Returns:
        Root node, or None if root_id is not in the snapshot
    """
    root = state.get(root_id)
    if root is None:
        return None

    expanded: set[str] = {root_id}

    def build(issue: Issue, is_target: bool) -> IssueTreeNode:
        children: list[IssueTreeNode] = []
        for blocker_id in issue.blocked_by:
            blocker = state.get(blocker_id)
            if blocker is None:
                continue
            if blocker_id in expanded:
                children.append(IssueTreeNode(issue=blocker, is_repeat=True))
                continue
            expanded.add(blocker_id)
            children.append(build(blocker, False))
        return IssueTreeNode(issue=issue, children=tuple(children), is_target=is_target)

    return build(root, True)


def _is_nested_under(issue: Issue, owner_id: str) -> bool:
    return issue.parent == owner_id or issue.verifies == owner_id


def build_hierarchy_tree(issue_id: str, state: Snapshot) -> IssueTreeNode | None:
    """Build the parent/child hierarchy around an issue.

    Children and verification issues are nested recursively below the target.
    The tree is then walked upward through `parent` to the top-most ancestor;
    at each level the target's siblings are attached unexpanded so the caller
    can see the surrounding context.

    Returns:
        The top-most ancestor node, or None if issue_id is not in the snapshot
    """
    target = state.get(issue_id)
    if target is None:
        return None

    visited: set[str] = {issue_id}

    def build_children(owner_id: str) -> tuple[IssueTreeNode, ...]:
        children: list[IssueTreeNode] = []
        for issue in state.values():
            if _is_nested_under(issue, owner_id) and issue.id not in visited:
                visited.add(issue.id)
                children.append(IssueTreeNode(issue=issue, children=build_children(issue.id)))
        return tuple(children)

    current_node = IssueTreeNode(issue=target, children=build_children(issue_id), is_target=True)
    current_issue = target
    ancestors: set[str] = {issue_id}

    while current_issue.parent is not None:
        parent_issue = state.get(current_issue.parent)
        if parent_issue is None or parent_issue.id in ancestors:
            break
        ancestors.add(parent_issue.id)

        siblings = tuple(
            IssueTreeNode(issue=issue)
            for issue in state.values()
            if _is_nested_under(issue, parent_issue.id) and issue.id != current_issue.id
        )
        current_node = IssueTreeNode(issue=parent_issue, children=(current_node, *siblings))
        current_issue = parent_issue

    return current_node


def count_nodes(node: IssueTreeNode) -> int:
    """Total number of nodes in a tree, including the root."""
    return 1 + sum(count_nodes(child) for child in node.children)
