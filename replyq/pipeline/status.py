"""Status sinks: where short progress/error strings for the user go."""

from __future__ import annotations

from typing import Protocol

from replyq.observability.logging import get_logger

logger = get_logger(__name__)


class StatusReporter(Protocol):
    def report(self, message: str) -> None: ...


class LoggingStatusReporter:
    """Default sink when no UI is attached."""

    def report(self, message: str) -> None:
        logger.info("status: %s", message)


class RecordingStatusReporter:
    """Keeps every message; handy for UIs that render history, and for tests."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def report(self, message: str) -> None:
        self.messages.append(message)

    @property
    def last(self) -> str | None:
        return self.messages[-1] if self.messages else None
