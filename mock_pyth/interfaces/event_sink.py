"""Event sink protocol — receives oracle notifications."""
from typing import Protocol

from ..events import OracleEvent


class EventSink(Protocol):
    """Abstract interface for observing emitted oracle events."""

    def emit(self, event: OracleEvent) -> None: ...
