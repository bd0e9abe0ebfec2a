"""Error taxonomy for pebble.

Engine functions raise these synchronously. Nothing in pebble.core retries,
logs or recovers; presentation is the caller's job.
"""

from pathlib import Path


class PebbleError(Exception):
    """Base class for all pebble errors."""


class IssueNotFoundError(PebbleError):
    """Raised when no issue matches a (partial) identifier."""

    def __init__(self, reference: str) -> None:
        super().__init__(f"Issue not found: {reference}")
        self.reference = reference


class AmbiguousIdError(PebbleError):
    """Raised when a partial identifier matches several ids at the same tier."""

    def __init__(self, reference: str, candidates: list[str]) -> None:
        super().__init__(f"Ambiguous issue ID '{reference}'. Matches: {', '.join(candidates)}")
        self.reference = reference
        self.candidates = candidates


class CycleDetectedError(PebbleError):
    """Raised when a proposed blocking edge would close a cycle."""

    def __init__(self, issue_id: str, blocker_id: str) -> None:
        if issue_id == blocker_id:
            message = f"Cannot add {issue_id} as a blocker of itself"
        else:
            message = (
                f"Adding {blocker_id} as a blocker of {issue_id} would create a dependency cycle"
            )
        super().__init__(message)
        self.issue_id = issue_id
        self.blocker_id = blocker_id


class InvalidStateError(PebbleError):
    """Raised when a mutation is not allowed in the issue's current state."""


class ValidationError(PebbleError):
    """Raised when user-supplied values are out of range or inconsistent."""


class MalformedLogError(PebbleError):
    """Raised when a log line cannot be parsed into an event.

    Attributes:
        path: Log file the line came from (None for in-memory sources)
        line_number: 1-based line number within the source
    """

    def __init__(self, path: Path | None, line_number: int, detail: str) -> None:
        location = f"line {line_number}" if path is None else f"line {line_number} in {path}"
        super().__init__(f"Invalid event at {location}: {detail}")
        self.path = path
        self.line_number = line_number


class PebbleDirNotFoundError(PebbleError):
    """Raised when no `.pebble` directory exists at or above the working directory."""

    def __init__(self, start: Path) -> None:
        super().__init__(f"No .pebble directory found from {start}. Run 'pb init' to initialize.")
        self.start = start
