"""Filesystem implementation of the event log gateway."""

import logging
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

logger = logging.getLogger(__name__)


class RealEventLog(EventLog):
    """Production implementation that reads and appends `.pebble/issues.jsonl`.

    Appends open the file in append mode and write one complete line, relying
    on the filesystem to keep single-line appends atomic. There is no locking
    and no fsync.
    """

    def find_pebble_dir(self, start: Path) -> Path | None:
        current = start.resolve()
        for directory in (current, *current.parents):
            candidate = directory / PEBBLE_DIR_NAME
            if candidate.is_dir():
                logger.debug("Found pebble directory at %s", candidate)
                return candidate
        return None

    def initialize(self, pebble_dir: Path, config: PebbleConfig) -> None:
        pebble_dir.mkdir(parents=True, exist_ok=True)
        self.save_config(pebble_dir, config)
        log_path = issues_path(pebble_dir)
        if not log_path.exists():
            log_path.write_text("", encoding="utf-8")
        logger.debug("Initialized pebble directory at %s (prefix=%s)", pebble_dir, config.prefix)

    def read_events(self, log_path: Path) -> list[IssueEvent]:
        if not log_path.exists():
            return []
        content = log_path.read_text(encoding="utf-8")
        events = decode_event_log(content, path=log_path)
        logger.debug("Read %d events from %s", len(events), log_path)
        return events

    def append_event(self, log_path: Path, event: IssueEvent) -> None:
        with log_path.open("a", encoding="utf-8") as f:
            f.write(encode_event(event) + "\n")
        logger.debug("Appended event for %s to %s", event.issue_id, log_path)

    def read_text(self, path: Path) -> str | None:
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, content: str) -> None:
        path.write_text(content, encoding="utf-8")
        logger.debug("Wrote %d bytes to %s", len(content), path)

    def load_config(self, pebble_dir: Path) -> PebbleConfig:
        path = config_path(pebble_dir)
        if not path.exists():
            raise PebbleDirNotFoundError(pebble_dir)
        return decode_config(path.read_text(encoding="utf-8"), path=path)

    def save_config(self, pebble_dir: Path, config: PebbleConfig) -> None:
        config_path(pebble_dir).write_text(encode_config(config), encoding="utf-8")
