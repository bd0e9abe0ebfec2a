"""Output helpers shared by CLI commands.

user_output() writes status and error messages to stderr. Primary results
(issue tables, JSON) go to stdout so they can be piped.
"""

import json
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pebble.core.merge import MergedIssue
from pebble.core.trees import IssueTreeNode
from pebble.core.types import PRIORITY_LABELS, STATUS_LABELS, Comment, Issue

_STATUS_ICONS: dict[str, str] = {
    "closed": "✓",
    "in_progress": "▶",
    "pending_verification": "⏳",
    "blocked": "⊘",
    "open": "○",
}

_STATUS_STYLES: dict[str, str] = {
    "open": "white",
    "in_progress": "yellow",
    "blocked": "red",
    "pending_verification": "cyan",
    "closed": "dim",
}


def user_output(message: str = "") -> None:
    """Write a message for the user to stderr."""
    click.echo(message, err=True)


def echo_json(data: object) -> None:
    """Write JSON to stdout for programmatic use."""
    click.echo(json.dumps(data, ensure_ascii=False))


def status_icon(status: str) -> str:
    return _STATUS_ICONS.get(status, "?")


def comment_to_dict(comment: Comment) -> dict[str, Any]:
    data: dict[str, Any] = {"text": comment.text, "timestamp": comment.timestamp}
    if comment.author is not None:
        data["author"] = comment.author
    return data


def issue_to_dict(issue: Issue) -> dict[str, Any]:
    """Serialize an issue using the same camelCase keys as the event log."""
    data: dict[str, Any] = {
        "id": issue.id,
        "title": issue.title,
        "type": issue.type,
        "priority": issue.priority,
        "status": issue.status,
        "blockedBy": list(issue.blocked_by),
        "relatedTo": list(issue.related_to),
        "comments": [comment_to_dict(c) for c in issue.comments],
        "createdAt": issue.created_at,
        "updatedAt": issue.updated_at,
    }
    if issue.description is not None:
        data["description"] = issue.description
    if issue.parent is not None:
        data["parent"] = issue.parent
    if issue.verifies is not None:
        data["verifies"] = issue.verifies
    return data


def merged_issue_to_dict(merged: MergedIssue, *, show_sources: bool) -> dict[str, Any]:
    data = issue_to_dict(merged.issue)
    if show_sources:
        data["_sources"] = list(merged.sources)
    return data


def issue_summary(issue: Issue) -> dict[str, Any]:
    return {"id": issue.id, "title": issue.title, "status": issue.status}


def tree_to_dict(node: IssueTreeNode) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": node.issue.id,
        "title": node.issue.title,
        "type": node.issue.type,
        "priority": node.issue.priority,
        "status": node.issue.status,
        "childrenCount": len(node.children),
    }
    if node.is_target:
        data["isTarget"] = True
    if node.is_repeat:
        data["isRepeat"] = True
    if node.children:
        data["children"] = [tree_to_dict(child) for child in node.children]
    return data


def print_issue_table(issues: list[Issue], *, empty_message: str) -> None:
    """Print issues as a rich table on stdout."""
    if not issues:
        click.echo(empty_message)
        return

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False, padding=(0, 1))
    table.add_column("id", style="cyan", no_wrap=True)
    table.add_column("type", no_wrap=True)
    table.add_column("pri", no_wrap=True)
    table.add_column("status", no_wrap=True)
    table.add_column("title")

    for issue in issues:
        style = _STATUS_STYLES.get(issue.status, "white")
        table.add_row(
            escape(issue.id),
            issue.type,
            f"P{issue.priority}",
            f"[{style}]{STATUS_LABELS.get(issue.status, issue.status)}[/{style}]",
            escape(issue.title),
        )

    Console().print(table)


def format_issue_detail(issue: Issue, *, blockers: list[Issue], blocking: list[Issue]) -> str:
    """Multi-line human-readable view of one issue."""
    priority_label = PRIORITY_LABELS.get(issue.priority, str(issue.priority))
    lines = [
        click.style(f"{issue.id}: ", dim=True) + click.style(issue.title, bold=True),
        "",
        f"Type:      {issue.type}",
        f"Priority:  P{issue.priority} ({priority_label})",
        f"Status:    {STATUS_LABELS.get(issue.status, issue.status)}",
    ]
    if issue.parent is not None:
        lines.append(f"Parent:    {issue.parent}")
    if issue.verifies is not None:
        lines.append(f"Verifies:  {issue.verifies}")
    lines.append(f"Created:   {issue.created_at}")
    lines.append(f"Updated:   {issue.updated_at}")

    if issue.description:
        lines.extend(["", "Description:", issue.description])

    if blockers:
        lines.extend(["", "Blocked by:"])
        lines.extend(f"  {status_icon(b.status)} {b.id} - {b.title}" for b in blockers)
    if blocking:
        lines.extend(["", "Blocking:"])
        lines.extend(f"  {status_icon(b.status)} {b.id} - {b.title}" for b in blocking)
    if issue.related_to:
        lines.extend(["", "Related: " + ", ".join(issue.related_to)])

    if issue.comments:
        lines.extend(["", "Comments:"])
        for comment in issue.comments:
            author = f" ({comment.author})" if comment.author else ""
            lines.append(f"  [{comment.timestamp}]{author} {comment.text}")

    return "\n".join(lines)


def format_tree(node: IssueTreeNode) -> str:
    """Render a tree with box-drawing connectors, marking the target with ◀."""
    lines: list[str] = []

    def render(current: IssueTreeNode, prefix: str, is_last: bool, is_root: bool) -> None:
        connector = "" if is_root else ("└─ " if is_last else "├─ ")
        issue = current.issue
        marker = " ◀" if current.is_target else ""
        repeat = " (see above)" if current.is_repeat else ""
        lines.append(
            f"{prefix}{connector}{status_icon(issue.status)} {issue.id}: {issue.title} "
            f"[{issue.type}] P{issue.priority}{marker}{repeat}"
        )
        child_prefix = "" if is_root else prefix + ("   " if is_last else "│  ")
        for index, child in enumerate(current.children):
            render(child, child_prefix, index == len(current.children) - 1, False)

    render(node, "", True, True)
    return "\n".join(lines)
