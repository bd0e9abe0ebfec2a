"""Tests for pb summary."""

import json
from pathlib import Path

from click.testing import CliRunner

from pebble.cli.cli import cli
from pebble.core.context import PebbleContext
from pebble.core.events import CloseEvent, CreateEvent, IssueEvent, IssueUpdate, UpdateEvent
from pebble.core.types import IssueType, PebbleConfig, Status
from pebble.gateway.event_log.abc import issues_path
from pebble.gateway.event_log.fake import FakeEventLog

PEBBLE_DIR = Path("/fake/project/.pebble")
LOG_PATH = issues_path(PEBBLE_DIR)


def _create(
    issue_id: str,
    created_at: str,
    *,
    title: str | None = None,
    issue_type: IssueType = "task",
    parent: str | None = None,
    verifies: str | None = None,
) -> CreateEvent:
    return CreateEvent(
        issue_id=issue_id,
        timestamp=created_at,
        title=title or f"Issue {issue_id}",
        issue_type=issue_type,
        priority=2,
        parent=parent,
        verifies=verifies,
    )


def _set_status(issue_id: str, status: Status) -> UpdateEvent:
    return UpdateEvent(
        issue_id=issue_id,
        timestamp="2024-01-14T00:00:00.000Z",
        changes=IssueUpdate(status=status),
    )


def _sample_events() -> list[IssueEvent]:
    return [
        _create("PEBL-epic01", "2024-01-10T00:00:00.000Z", title="Launch", issue_type="epic"),
        _create(
            "PEBL-epic02", "2024-01-12T00:00:00.000Z", issue_type="epic", parent="PEBL-epic01"
        ),
        _create("PEBL-epic03", "2024-01-05T00:00:00.000Z", issue_type="epic"),
        _create("PEBL-epic04", "2024-01-01T00:00:00.000Z", issue_type="epic"),
        _create("PEBL-task01", "2024-01-10T01:00:00.000Z", parent="PEBL-epic01"),
        _create("PEBL-task02", "2024-01-10T02:00:00.000Z", parent="PEBL-epic01"),
        _create("PEBL-task03", "2024-01-10T03:00:00.000Z", parent="PEBL-epic01"),
        _create(
            "PEBL-veri01",
            "2024-01-10T04:00:00.000Z",
            issue_type="verification",
            verifies="PEBL-task01",
        ),
        _create(
            "PEBL-veri02",
            "2024-01-10T05:00:00.000Z",
            issue_type="verification",
            verifies="PEBL-task03",
        ),
        CloseEvent(issue_id="PEBL-task01", timestamp="2024-01-13T00:00:00.000Z"),
        CloseEvent(issue_id="PEBL-veri01", timestamp="2024-01-13T01:00:00.000Z"),
        _set_status("PEBL-task02", "in_progress"),
        _set_status("PEBL-task03", "pending_verification"),
        CloseEvent(issue_id="PEBL-epic03", timestamp="2024-01-15T10:00:00.000Z"),
        CloseEvent(issue_id="PEBL-epic04", timestamp="2024-01-02T00:00:00.000Z"),
    ]


def _make_ctx() -> PebbleContext:
    event_log = FakeEventLog(
        events={LOG_PATH: _sample_events()},
        configs={PEBBLE_DIR: PebbleConfig(prefix="PEBL", version="0.1.0")},
    )
    return PebbleContext.for_test(event_log=event_log, pebble_dir=PEBBLE_DIR)


def _summary_json(*args: str) -> object:
    result = CliRunner().invoke(cli, ["summary", *args, "--json-output"], obj=_make_ctx())
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


def test_open_epics_newest_first_with_counts() -> None:
    summaries = _summary_json()

    assert isinstance(summaries, list)
    assert [s["id"] for s in summaries] == ["PEBL-epic02", "PEBL-epic01"]
    launch = summaries[1]
    assert launch["children"] == {
        "total": 4,
        "done": 1,
        "pending_verification": 1,
        "in_progress": 1,
        "open": 1,
        "blocked": 0,
    }
    assert launch["verifications"] == {"total": 2, "done": 1}
    assert summaries[0]["parent"] == {"id": "PEBL-epic01", "title": "Launch"}


def test_status_filter_and_limit() -> None:
    closed = _summary_json("--status", "closed")
    limited = _summary_json("--limit", "1")

    assert isinstance(closed, list) and isinstance(limited, list)
    assert [s["id"] for s in closed] == ["PEBL-epic03", "PEBL-epic04"]
    assert [s["id"] for s in limited] == ["PEBL-epic02"]


def test_include_closed_keeps_only_recent_closures() -> None:
    sections = _summary_json("--include-closed")

    assert isinstance(sections, dict)
    assert [s["id"] for s in sections["open"]] == ["PEBL-epic02", "PEBL-epic01"]
    assert [s["id"] for s in sections["closed"]] == ["PEBL-epic03"]


def test_human_output() -> None:
    result = CliRunner().invoke(cli, ["summary"], obj=_make_ctx())

    assert result.exit_code == 0, result.output
    assert "## Open Epics (2)" in result.output
    assert "Issues: 1/4 done (1 pending verification) | Verifications: 1/2 done" in result.output
    assert "Parent: PEBL-epic01 (Launch)" in result.output
    assert "pb list --parent PEBL-epic01" in result.output


def test_no_epics() -> None:
    event_log = FakeEventLog(
        events={LOG_PATH: []},
        configs={PEBBLE_DIR: PebbleConfig(prefix="PEBL", version="0.1.0")},
    )
    ctx = PebbleContext.for_test(event_log=event_log, pebble_dir=PEBBLE_DIR)

    result = CliRunner().invoke(cli, ["summary"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "No epics found." in result.output
