"""Tests for the JSONL event codec."""

import json
from pathlib import Path

import pytest

from pebble.core.errors import MalformedLogError
from pebble.core.events import (
    CloseEvent,
    CommentEvent,
    CreateEvent,
    IssueUpdate,
    UpdateEvent,
    decode_event_log,
    encode_event,
    event_from_dict,
    event_to_dict,
)
from pebble.core.types import Comment


def test_encode_uses_camel_case_wire_keys_and_drops_absent_fields() -> None:
    event = UpdateEvent(
        issue_id="PEBL-aaaaaa",
        timestamp="2024-01-01T00:00:00.000Z",
        changes=IssueUpdate(blocked_by=("PEBL-bbbbbb",), related_to=()),
    )

    data = json.loads(encode_event(event))

    assert data == {
        "type": "update",
        "issueId": "PEBL-aaaaaa",
        "timestamp": "2024-01-01T00:00:00.000Z",
        "data": {"blockedBy": ["PEBL-bbbbbb"], "relatedTo": []},
    }


def test_encode_create_omits_optional_fields() -> None:
    event = CreateEvent(
        issue_id="PEBL-aaaaaa",
        timestamp="2024-01-01T00:00:00.000Z",
        title="Fix login",
        issue_type="bug",
        priority=1,
    )

    assert event_to_dict(event)["data"] == {"title": "Fix login", "type": "bug", "priority": 1}


def test_encode_is_single_line() -> None:
    event = CommentEvent(
        issue_id="PEBL-aaaaaa",
        timestamp="2024-01-01T00:00:00.000Z",
        comment=Comment(text="line one\nline two", timestamp="2024-01-01T00:00:00.000Z"),
    )

    assert "\n" not in encode_event(event)


def test_decode_reads_original_wire_format() -> None:
    content = "\n".join(
        [
            '{"type":"create","issueId":"PEBL-aaaaaa","timestamp":"2024-01-01T00:00:00.000Z",'
            '"data":{"title":"Epic","type":"epic","priority":0}}',
            "",
            '{"type":"comment","issueId":"PEBL-aaaaaa","timestamp":"2024-01-02T00:00:00.000Z",'
            '"data":{"text":"hi","timestamp":"2024-01-02T00:00:00.000Z","author":"ana"}}',
            '{"type":"close","issueId":"PEBL-aaaaaa","timestamp":"2024-01-03T00:00:00.000Z",'
            '"data":{"reason":"done"}}',
        ]
    )

    events = decode_event_log(content, path=None)

    assert len(events) == 3
    create = events[0]
    assert isinstance(create, CreateEvent)
    assert create.issue_type == "epic"
    assert create.priority == 0
    comment = events[1]
    assert isinstance(comment, CommentEvent)
    assert comment.comment.author == "ana"
    assert events[2] == CloseEvent(
        issue_id="PEBL-aaaaaa", timestamp="2024-01-03T00:00:00.000Z", reason="done"
    )


def test_decode_defaults_missing_create_priority() -> None:
    event = event_from_dict(
        {
            "type": "create",
            "issueId": "PEBL-aaaaaa",
            "timestamp": "2024-01-01T00:00:00.000Z",
            "data": {"title": "T", "type": "task"},
        }
    )

    assert isinstance(event, CreateEvent)
    assert event.priority == 2


def test_encode_then_decode_preserves_update() -> None:
    event = UpdateEvent(
        issue_id="PEBL-aaaaaa",
        timestamp="2024-01-01T00:00:00.000Z",
        changes=IssueUpdate(status="in_progress", priority=0, blocked_by=("PEBL-bbbbbb",)),
    )

    assert decode_event_log(encode_event(event) + "\n", path=None) == [event]


class TestMalformedLines:
    def test_invalid_json_reports_line_number(self) -> None:
        content = (
            '{"type":"close","issueId":"PEBL-aaaaaa","timestamp":"2024-01-01T00:00:00.000Z"}\n'
            "{not json\n"
        )

        with pytest.raises(MalformedLogError) as exc_info:
            decode_event_log(content, path=Path("/x/issues.jsonl"))

        assert exc_info.value.line_number == 2
        assert exc_info.value.path == Path("/x/issues.jsonl")

    def test_unknown_event_type(self) -> None:
        content = '{"type":"delete","issueId":"PEBL-aaaaaa","timestamp":"2024-01-01T00:00:00Z"}'

        with pytest.raises(MalformedLogError, match="unknown event type"):
            decode_event_log(content, path=None)

    def test_missing_issue_id(self) -> None:
        with pytest.raises(MalformedLogError, match="issueId"):
            decode_event_log('{"type":"close","timestamp":"2024-01-01T00:00:00Z"}', path=None)

    def test_non_iso_timestamp(self) -> None:
        content = '{"type":"close","issueId":"PEBL-aaaaaa","timestamp":"yesterday"}'

        with pytest.raises(MalformedLogError, match="timestamp"):
            decode_event_log(content, path=None)

    def test_wrong_blocked_by_type(self) -> None:
        content = (
            '{"type":"update","issueId":"PEBL-aaaaaa","timestamp":"2024-01-01T00:00:00Z",'
            '"data":{"blockedBy":"PEBL-bbbbbb"}}'
        )

        with pytest.raises(MalformedLogError, match="blockedBy"):
            decode_event_log(content, path=None)
