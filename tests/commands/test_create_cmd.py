"""Tests for pb create."""

import json
from pathlib import Path

from click.testing import CliRunner

from pebble.cli.cli import cli
from pebble.core.context import PebbleContext
from pebble.core.events import CreateEvent
from pebble.core.types import PebbleConfig
from pebble.gateway.event_log.abc import issues_path
from pebble.gateway.event_log.fake import FakeEventLog

PEBBLE_DIR = Path("/fake/project/.pebble")
LOG_PATH = issues_path(PEBBLE_DIR)


def _make_ctx(events: list[CreateEvent] | None = None) -> tuple[PebbleContext, FakeEventLog]:
    event_log = FakeEventLog(
        events={LOG_PATH: events or []},
        configs={PEBBLE_DIR: PebbleConfig(prefix="PEBL", version="0.1.0")},
    )
    return PebbleContext.for_test(event_log=event_log, pebble_dir=PEBBLE_DIR), event_log


def test_create_prints_id() -> None:
    runner = CliRunner()
    ctx, event_log = _make_ctx()

    result = runner.invoke(cli, ["create", "Fix login", "-t", "bug", "-p", "1"], obj=ctx)

    assert result.exit_code == 0, result.output
    [(path, event)] = event_log.appended_events
    assert path == LOG_PATH
    assert isinstance(event, CreateEvent)
    assert event.issue_type == "bug"
    assert event.priority == 1
    assert event.issue_id in result.output


def test_create_json_output() -> None:
    runner = CliRunner()
    ctx, _ = _make_ctx()

    result = runner.invoke(
        cli, ["create", "Write docs", "-d", "All of them", "--json-output"], obj=ctx
    )

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["id"].startswith("PEBL-")
    assert data["type"] == "task"
    assert data["priority"] == 2
    assert data["status"] == "open"
    assert data["description"] == "All of them"
    assert data["blockedBy"] == []


def test_create_under_epic() -> None:
    runner = CliRunner()
    epic = CreateEvent(
        issue_id="PEBL-epic01",
        timestamp="2024-01-01T00:00:00.000Z",
        title="Epic",
        issue_type="epic",
        priority=1,
    )
    ctx, _ = _make_ctx([epic])

    result = runner.invoke(cli, ["create", "Child", "--parent", "epic01", "--json-output"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["parent"] == "PEBL-epic01"


def test_create_auto_initializes() -> None:
    runner = CliRunner()
    event_log = FakeEventLog()
    ctx = PebbleContext.for_test(event_log=event_log)

    result = runner.invoke(cli, ["create", "First", "--json-output"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["id"].startswith("PROJ-")
    assert event_log.load_config(PEBBLE_DIR).prefix == "PROJ"


def test_create_invalid_priority() -> None:
    runner = CliRunner()
    ctx, event_log = _make_ctx()

    result = runner.invoke(cli, ["create", "T", "-p", "9"], obj=ctx)

    assert result.exit_code == 1
    assert "Invalid priority" in result.output
    assert event_log.appended_events == []


def test_title_with_line_separator_stays_listable() -> None:
    runner = CliRunner()
    ctx, _ = _make_ctx()

    created = runner.invoke(cli, ["create", "first\u2028second"], obj=ctx)
    listed = runner.invoke(cli, ["list", "--json-output"], obj=ctx)

    assert created.exit_code == 0, created.output
    assert listed.exit_code == 0, listed.output
    assert [issue["title"] for issue in json.loads(listed.output)] == ["first\u2028second"]
