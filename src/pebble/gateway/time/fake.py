"""Controllable clock for tests."""

from datetime import UTC, datetime, timedelta

from pebble.gateway.time.abc import Time

DEFAULT_FAKE_NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=UTC)


class FakeTime(Time):
    """Fake clock that only moves when told to.

    Each call to now() returns the current fake time and then advances it by
    `step`, so consecutive events get distinct, ordered timestamps.
    """

    def __init__(
        self, *, start: datetime = DEFAULT_FAKE_NOW, step: timedelta | None = None
    ) -> None:
        self._current = start
        self._step = step if step is not None else timedelta(seconds=1)

    def now(self) -> datetime:
        result = self._current
        self._current = self._current + self._step
        return result

    def advance(self, delta: timedelta) -> None:
        self._current = self._current + delta
