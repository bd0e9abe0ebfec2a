"""Abstract interface for reading and appending the JSONL event log.

The log is append-only: existing lines are never rewritten. Every read is a
snapshot-in-time; no implementation locks the file.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path

from pebble.core.errors import MalformedLogError
from pebble.core.events import IssueEvent
from pebble.core.types import PebbleConfig

PEBBLE_DIR_NAME = ".pebble"
ISSUES_FILE_NAME = "issues.jsonl"
CONFIG_FILE_NAME = "config.json"


def issues_path(pebble_dir: Path) -> Path:
    return pebble_dir / ISSUES_FILE_NAME


def config_path(pebble_dir: Path) -> Path:
    return pebble_dir / CONFIG_FILE_NAME


class EventLog(ABC):
    """Abstract interface for event log storage.

    All implementations (real, fake) must implement this interface. Callers
    pass the log location explicitly; implementations hold no notion of a
    current directory.
    """

    @abstractmethod
    def find_pebble_dir(self, start: Path) -> Path | None:
        """Search start and its ancestors for a `.pebble` directory.

        Args:
            start: Directory to begin the upward search from

        Returns:
            Path to the `.pebble` directory, or None if there is none
        """
        ...

    @abstractmethod
    def initialize(self, pebble_dir: Path, config: PebbleConfig) -> None:
        """Create the directory, its config and an empty log.

        Does nothing to an existing log file.
        """
        ...

    @abstractmethod
    def read_events(self, log_path: Path) -> list[IssueEvent]:
        """Read all events from a log file in append order.

        Args:
            log_path: Path to an issues.jsonl file

        Returns:
            Events in append order; empty if the file does not exist

        Raises:
            MalformedLogError: If any non-blank line is not a valid event
        """
        ...

    @abstractmethod
    def append_event(self, log_path: Path, event: IssueEvent) -> None:
        """Append one event as a single line."""
        ...

    @abstractmethod
    def read_text(self, path: Path) -> str | None:
        """Read an arbitrary text file such as an export or another log.

        Returns:
            File content, or None if the file does not exist
        """
        ...

    @abstractmethod
    def write_text(self, path: Path, content: str) -> None:
        """Write an output file, replacing any existing content."""
        ...

    @abstractmethod
    def load_config(self, pebble_dir: Path) -> PebbleConfig:
        """Load `config.json` from a pebble directory.

        Raises:
            PebbleDirNotFoundError: If the config file does not exist
            MalformedLogError: If the config is not a JSON object with a prefix
        """
        ...

    @abstractmethod
    def save_config(self, pebble_dir: Path, config: PebbleConfig) -> None:
        """Write `config.json`, replacing any existing file."""
        ...


def encode_config(config: PebbleConfig) -> str:
    return json.dumps({"prefix": config.prefix, "version": config.version}, indent=2) + "\n"


def decode_config(content: str, *, path: Path) -> PebbleConfig:
    """Parse config.json content.

    Raises:
        MalformedLogError: If the content is not an object with a string prefix
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise MalformedLogError(path, e.lineno, f"invalid JSON ({e.msg})") from e
    if not isinstance(data, dict) or not isinstance(data.get("prefix"), str):
        raise MalformedLogError(path, 1, "config must be an object with a 'prefix' string")
    version = data.get("version")
    return PebbleConfig(prefix=data["prefix"], version=str(version) if version is not None else "")
