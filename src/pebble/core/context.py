"""Application context with dependency injection."""

import os
from dataclasses import dataclass
from pathlib import Path

from pebble.core.issue_service import IssueService
from pebble.core.state import Snapshot, compute_state
from pebble.gateway.event_log.abc import EventLog, issues_path
from pebble.gateway.event_log.real import RealEventLog
from pebble.gateway.time.abc import Time
from pebble.gateway.time.real import RealTime

PEBBLE_DIR_ENV_VAR = "PEBBLE_DIR"


@dataclass(frozen=True)
class PebbleContext:
    """Immutable context holding all dependencies for pebble operations.

    Created at CLI entry point and threaded through the application.

    Attributes:
        event_log: Event log gateway
        time: Clock for stamping events
        cwd: Current working directory at CLI invocation
        pebble_dir: Discovered `.pebble` directory, or None when there is none yet
    """

    event_log: EventLog
    time: Time
    cwd: Path
    pebble_dir: Path | None

    def issue_service(self, pebble_dir: Path) -> IssueService:
        return IssueService(event_log=self.event_log, time=self.time, pebble_dir=pebble_dir)

    def load_state(self) -> Snapshot:
        """Current snapshot of the discovered log; empty when no log exists."""
        if self.pebble_dir is None:
            return {}
        return compute_state(self.event_log.read_events(issues_path(self.pebble_dir)))

    @staticmethod
    def for_test(
        event_log: EventLog | None = None,
        time: Time | None = None,
        cwd: Path | None = None,
        pebble_dir: Path | None = None,
    ) -> "PebbleContext":
        """Create test context with fakes for anything not provided.

        Args:
            event_log: Optional EventLog. If None, creates an empty FakeEventLog.
            time: Optional Time. If None, creates FakeTime.
            cwd: Working directory (defaults to Path("/fake/project"))
            pebble_dir: Pebble directory (defaults to None, i.e. not initialized)

        Example:
            >>> log = FakeEventLog(configs={Path("/fake/project/.pebble"): config})
            >>> ctx = PebbleContext.for_test(
            ...     event_log=log, pebble_dir=Path("/fake/project/.pebble")
            ... )
        """
        from pebble.gateway.event_log.fake import FakeEventLog
        from pebble.gateway.time.fake import FakeTime

        return PebbleContext(
            event_log=event_log if event_log is not None else FakeEventLog(),
            time=time if time is not None else FakeTime(),
            cwd=cwd if cwd is not None else Path("/fake/project"),
            pebble_dir=pebble_dir,
        )


def discover_pebble_dir(event_log: EventLog, cwd: Path) -> Path | None:
    """Resolve the pebble directory: PEBBLE_DIR env var > upward search from cwd."""
    env_value = os.environ.get(PEBBLE_DIR_ENV_VAR)
    if env_value:
        return Path(env_value)
    return event_log.find_pebble_dir(cwd)


def create_context() -> PebbleContext:
    """Create production context with real implementations."""
    event_log = RealEventLog()
    cwd = Path.cwd()
    return PebbleContext(
        event_log=event_log,
        time=RealTime(),
        cwd=cwd,
        pebble_dir=discover_pebble_dir(event_log, cwd),
    )
