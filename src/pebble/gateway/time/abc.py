"""Abstract clock used for event timestamps."""

from abc import ABC, abstractmethod
from datetime import datetime


class Time(ABC):
    """Abstract interface for reading the current time.

    Injected wherever events are stamped so tests get deterministic timestamps.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
        ...
