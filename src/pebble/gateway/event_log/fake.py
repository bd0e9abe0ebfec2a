"""In-memory fake implementation of the event log gateway."""

from pathlib import Path

from pebble.core.errors import PebbleDirNotFoundError
from pebble.core.events import IssueEvent, decode_event_log, encode_event
from pebble.core.types import PebbleConfig
from pebble.gateway.event_log.abc import (
    PEBBLE_DIR_NAME,
    EventLog,
    config_path,
    decode_config,
    encode_config,
    issues_path,
)


class FakeEventLog(EventLog):
    """In-memory fake implementation for testing.

    Logs are kept as raw JSONL text and decoded with the same codec as the
    real implementation, so malformed content behaves exactly as on disk.
    All state is provided via constructor using keyword arguments.
    """

    def __init__(
        self,
        *,
        events: dict[Path, list[IssueEvent]] | None = None,
        raw_logs: dict[Path, str] | None = None,
        configs: dict[Path, PebbleConfig] | None = None,
    ) -> None:
        """Create FakeEventLog with pre-configured state.

        Args:
            events: Log path -> events to pre-populate (encoded as JSONL)
            raw_logs: Path -> raw file content, for malformed-log tests and
                for files read with read_text()
            configs: Pebble directory -> config; each key is also treated as
                an existing `.pebble` directory
        """
        self._files: dict[Path, str] = dict(raw_logs) if raw_logs is not None else {}
        if events is not None:
            for path, path_events in events.items():
                self._files[path] = "".join(encode_event(e) + "\n" for e in path_events)
        self._configs: dict[Path, str] = {}
        if configs is not None:
            for pebble_dir, config in configs.items():
                self._configs[config_path(pebble_dir)] = encode_config(config)
        self._appended: list[tuple[Path, IssueEvent]] = []

    @property
    def appended_events(self) -> list[tuple[Path, IssueEvent]]:
        """Events appended through this gateway, for test assertions."""
        return list(self._appended)

    def file_content(self, log_path: Path) -> str:
        """Raw JSONL content of a log, for test assertions."""
        return self._files.get(log_path, "")

    def find_pebble_dir(self, start: Path) -> Path | None:
        for directory in (start, *start.parents):
            candidate = directory / PEBBLE_DIR_NAME
            if config_path(candidate) in self._configs:
                return candidate
        return None

    def initialize(self, pebble_dir: Path, config: PebbleConfig) -> None:
        self.save_config(pebble_dir, config)
        self._files.setdefault(issues_path(pebble_dir), "")

    def read_events(self, log_path: Path) -> list[IssueEvent]:
        content = self._files.get(log_path)
        if content is None:
            return []
        return decode_event_log(content, path=log_path)

    def append_event(self, log_path: Path, event: IssueEvent) -> None:
        self._files[log_path] = self._files.get(log_path, "") + encode_event(event) + "\n"
        self._appended.append((log_path, event))

    def read_text(self, path: Path) -> str | None:
        return self._files.get(path)

    def write_text(self, path: Path, content: str) -> None:
        self._files[path] = content

    def load_config(self, pebble_dir: Path) -> PebbleConfig:
        path = config_path(pebble_dir)
        content = self._configs.get(path)
        if content is None:
            raise PebbleDirNotFoundError(pebble_dir)
        return decode_config(content, path=path)

    def save_config(self, pebble_dir: Path, config: PebbleConfig) -> None:
        self._configs[config_path(pebble_dir)] = encode_config(config)
