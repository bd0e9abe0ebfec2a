"""Tests for IssueService using the fake event log."""

from pathlib import Path

import pytest

from pebble.core.errors import (
    CycleDetectedError,
    InvalidStateError,
    IssueNotFoundError,
    PebbleDirNotFoundError,
    ValidationError,
)
from pebble.core.events import CloseEvent, CommentEvent, IssueUpdate, UpdateEvent
from pebble.core.issue_service import IssueService
from pebble.core.types import Issue, IssueType, PebbleConfig
from pebble.gateway.event_log.abc import issues_path
from pebble.gateway.event_log.fake import FakeEventLog
from pebble.gateway.time.fake import FakeTime

PEBBLE_DIR = Path("/repo/.pebble")


def _make_service() -> tuple[IssueService, FakeEventLog]:
    event_log = FakeEventLog(configs={PEBBLE_DIR: PebbleConfig(prefix="PEBL", version="0.1.0")})
    service = IssueService(event_log=event_log, time=FakeTime(), pebble_dir=PEBBLE_DIR)
    return service, event_log


def _create(
    service: IssueService,
    title: str,
    *,
    issue_type: IssueType = "task",
    parent: str | None = None,
    verifies: str | None = None,
) -> Issue:
    return service.create(
        title=title,
        issue_type=issue_type,
        priority=2,
        description=None,
        parent=parent,
        verifies=verifies,
    )


class TestCreate:
    def test_appends_create_event_with_prefixed_id(self) -> None:
        service, event_log = _make_service()

        issue = _create(service, "Write docs")

        assert issue.id.startswith("PEBL-")
        assert issue.status == "open"
        assert issue.created_at == "2024-01-15T12:00:00.000Z"
        assert [path for path, _ in event_log.appended_events] == [issues_path(PEBBLE_DIR)]
        assert service.load_state()[issue.id] == issue

    def test_invalid_priority(self) -> None:
        service, event_log = _make_service()

        with pytest.raises(ValidationError, match="priority"):
            service.create(
                title="T",
                issue_type="task",
                priority=7,
                description=None,
                parent=None,
                verifies=None,
            )

        assert event_log.appended_events == []

    def test_verifies_forces_verification_type(self) -> None:
        service, _ = _make_service()
        target = _create(service, "Feature")

        verification = _create(service, "Check feature", verifies=target.id[-6:])

        assert verification.type == "verification"
        assert verification.verifies == target.id

    def test_verification_requires_target(self) -> None:
        service, _ = _make_service()

        with pytest.raises(ValidationError, match="--verifies"):
            _create(service, "Check", issue_type="verification")

    def test_parent_must_be_epic(self) -> None:
        service, _ = _make_service()
        task = _create(service, "Not an epic")

        with pytest.raises(InvalidStateError, match="Parent must be an epic"):
            _create(service, "Child", parent=task.id)

    def test_parent_must_be_open(self) -> None:
        service, _ = _make_service()
        epic = _create(service, "Epic", issue_type="epic")
        service.close(epic.id, reason=None, comment=None)

        with pytest.raises(InvalidStateError, match="closed epic"):
            _create(service, "Child", parent=epic.id)

    def test_unknown_parent(self) -> None:
        service, _ = _make_service()

        with pytest.raises(IssueNotFoundError):
            _create(service, "Child", parent="PEBL-nope00")

    def test_uninitialized_directory(self) -> None:
        service = IssueService(
            event_log=FakeEventLog(), time=FakeTime(), pebble_dir=Path("/elsewhere/.pebble")
        )

        with pytest.raises(PebbleDirNotFoundError):
            _create(service, "T")


class TestUpdate:
    def test_applies_changes(self) -> None:
        service, _ = _make_service()
        issue = _create(service, "Old")

        updated = service.update(issue.id, IssueUpdate(title="New", status="blocked"))

        assert updated.title == "New"
        assert updated.status == "blocked"

    def test_rejects_empty_update(self) -> None:
        service, _ = _make_service()
        issue = _create(service, "T")

        with pytest.raises(ValidationError, match="No changes"):
            service.update(issue.id, IssueUpdate())

    def test_rejects_blocked_by_changes(self) -> None:
        service, _ = _make_service()
        issue = _create(service, "T")

        with pytest.raises(ValidationError):
            service.update(issue.id, IssueUpdate(blocked_by=("PEBL-aaaaaa",)))

    def test_claim(self) -> None:
        service, event_log = _make_service()
        issue = _create(service, "T")

        claimed = service.claim(issue.id)
        service.claim(issue.id)

        assert claimed.status == "in_progress"
        assert len(event_log.appended_events) == 2


class TestClose:
    def test_close_with_comment_writes_comment_first(self) -> None:
        service, event_log = _make_service()
        issue = _create(service, "T")

        result = service.close(issue.id, reason="done", comment="Shipped in v2")

        kinds = [type(event) for _, event in event_log.appended_events]
        assert kinds[-2:] == [CommentEvent, CloseEvent]
        assert result.issue.status == "closed"
        assert result.issue.comments[0].text == "Shipped in v2"

    def test_close_reports_unblocked_issues(self) -> None:
        service, _ = _make_service()
        blocker = _create(service, "Blocker")
        blocked = _create(service, "Blocked")
        service.add_dependency(blocked.id, blocker.id)

        result = service.close(blocker.id, reason=None, comment=None)

        assert [i.id for i in result.unblocked] == [blocked.id]

    def test_cannot_close_twice(self) -> None:
        service, _ = _make_service()
        issue = _create(service, "T")
        service.close(issue.id, reason=None, comment=None)

        with pytest.raises(InvalidStateError, match="already closed"):
            service.close(issue.id, reason=None, comment=None)

    def test_epic_with_open_children(self) -> None:
        service, _ = _make_service()
        epic = _create(service, "Epic", issue_type="epic")
        child = _create(service, "Child", parent=epic.id)

        with pytest.raises(InvalidStateError, match="open children"):
            service.close(epic.id, reason=None, comment=None)

        service.close(child.id, reason=None, comment=None)
        assert service.close(epic.id, reason=None, comment=None).issue.is_closed

    def test_reopen(self) -> None:
        service, _ = _make_service()
        issue = _create(service, "T")

        with pytest.raises(InvalidStateError, match="not closed"):
            service.reopen(issue.id, reason=None)

        service.close(issue.id, reason=None, comment=None)
        assert service.reopen(issue.id, reason="regressed").status == "open"


class TestDependencies:
    def test_add_and_remove(self) -> None:
        service, _ = _make_service()
        a = _create(service, "A")
        b = _create(service, "B")

        assert service.add_dependency(a.id, b.id).blocked_by == (b.id,)
        assert service.remove_dependency(a.id, b.id).blocked_by == ()

    def test_self_dependency_is_rejected_before_append(self) -> None:
        service, event_log = _make_service()
        a = _create(service, "A")

        with pytest.raises(CycleDetectedError, match="itself"):
            service.add_dependency(a.id, a.id)

        assert len(event_log.appended_events) == 1

    def test_cycle_is_rejected_before_append(self) -> None:
        service, event_log = _make_service()
        a = _create(service, "A")
        b = _create(service, "B")
        c = _create(service, "C")
        service.add_dependency(b.id, a.id)
        service.add_dependency(c.id, b.id)
        appended = len(event_log.appended_events)

        with pytest.raises(CycleDetectedError):
            service.add_dependency(a.id, c.id)

        assert len(event_log.appended_events) == appended

    def test_duplicate_dependency(self) -> None:
        service, _ = _make_service()
        a = _create(service, "A")
        b = _create(service, "B")
        service.add_dependency(a.id, b.id)

        with pytest.raises(InvalidStateError, match="already exists"):
            service.add_dependency(a.id, b.id)

    def test_remove_missing_dependency(self) -> None:
        service, _ = _make_service()
        a = _create(service, "A")
        b = _create(service, "B")

        with pytest.raises(InvalidStateError, match="does not exist"):
            service.remove_dependency(a.id, b.id)

    def test_relate_is_symmetric_and_same_timestamp(self) -> None:
        service, event_log = _make_service()
        a = _create(service, "A")
        b = _create(service, "B")

        first, second = service.relate(a.id, b.id)

        assert first.related_to == (b.id,)
        assert second.related_to == (a.id,)
        updates = [e for _, e in event_log.appended_events if isinstance(e, UpdateEvent)]
        assert updates[0].timestamp == updates[1].timestamp

        first, second = service.unrelate(a.id, b.id)
        assert first.related_to == ()
        assert second.related_to == ()

    def test_relate_to_self(self) -> None:
        service, _ = _make_service()
        a = _create(service, "A")

        with pytest.raises(ValidationError):
            service.relate(a.id, a.id)


def test_add_comment_records_author() -> None:
    service, _ = _make_service()
    issue = _create(service, "T")

    commented = service.add_comment(issue.id, text="Needs review", author="ana")

    assert commented.comments[0].author == "ana"
    assert commented.comments[0].text == "Needs review"
