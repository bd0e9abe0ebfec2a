"""Tests for FakeEventLog."""

from pathlib import Path

import pytest

from pebble.core.errors import MalformedLogError, PebbleDirNotFoundError
from pebble.core.events import CreateEvent
from pebble.core.types import PebbleConfig
from pebble.gateway.event_log.abc import issues_path
from pebble.gateway.event_log.fake import FakeEventLog

PEBBLE_DIR = Path("/repo/.pebble")
CONFIG = PebbleConfig(prefix="PEBL", version="0.1.0")


def _create(issue_id: str) -> CreateEvent:
    return CreateEvent(
        issue_id=issue_id,
        timestamp="2024-01-01T00:00:00.000Z",
        title="Title",
        issue_type="task",
        priority=2,
    )


class TestFakeEventLog:
    def test_pre_populated_events_are_readable(self) -> None:
        log_path = issues_path(PEBBLE_DIR)
        event_log = FakeEventLog(events={log_path: [_create("PEBL-aaaaaa")]})

        assert event_log.read_events(log_path) == [_create("PEBL-aaaaaa")]
        assert event_log.appended_events == []

    def test_append_tracks_events_and_content(self) -> None:
        event_log = FakeEventLog()
        log_path = issues_path(PEBBLE_DIR)

        event_log.append_event(log_path, _create("PEBL-aaaaaa"))

        assert event_log.appended_events == [(log_path, _create("PEBL-aaaaaa"))]
        assert event_log.file_content(log_path).count("\n") == 1

    def test_raw_logs_use_real_decoder(self) -> None:
        log_path = issues_path(PEBBLE_DIR)
        event_log = FakeEventLog(raw_logs={log_path: "garbage\n"})

        with pytest.raises(MalformedLogError):
            event_log.read_events(log_path)

    def test_line_separator_characters_survive_round_trip(self) -> None:
        event_log = FakeEventLog()
        log_path = issues_path(PEBBLE_DIR)
        event = CreateEvent(
            issue_id="PEBL-aaaaaa",
            timestamp="2024-01-01T00:00:00.000Z",
            title="a\x85b\u2028c",
            issue_type="task",
            priority=2,
        )

        event_log.append_event(log_path, event)

        assert event_log.read_events(log_path) == [event]

    def test_find_pebble_dir_from_nested_directory(self) -> None:
        event_log = FakeEventLog(configs={PEBBLE_DIR: CONFIG})

        assert event_log.find_pebble_dir(Path("/repo/src/pkg")) == PEBBLE_DIR
        assert event_log.find_pebble_dir(Path("/other")) is None

    def test_initialize_then_load_config(self) -> None:
        event_log = FakeEventLog()

        with pytest.raises(PebbleDirNotFoundError):
            event_log.load_config(PEBBLE_DIR)

        event_log.initialize(PEBBLE_DIR, CONFIG)

        assert event_log.load_config(PEBBLE_DIR) == CONFIG
        assert event_log.read_events(issues_path(PEBBLE_DIR)) == []
