"""Progress reporting and cancellation for background fetch cycles."""

import threading
from typing import Protocol, runtime_checkable

import structlog

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


@runtime_checkable
class ProgressSink(Protocol):
    """Receives progress updates from a running cycle."""

    def set_text(self, text: str) -> None: ...

    def set_fraction(self, fraction: float) -> None: ...


@runtime_checkable
class CancellationToken(Protocol):
    """Reports whether the owner of a cycle has asked it to stop."""

    @property
    def is_cancelled(self) -> bool: ...


class ProgressIndicator:
    """Progress sink and cancellation token for one background cycle."""

    def __init__(self, title: str = "") -> None:
        """Initialize the indicator with an optional title used in log events."""
        self.title = title
        self.text = ""
        self.fraction = 0.0
        self._cancelled = threading.Event()

    def set_text(self, text: str) -> None:
        """Set the progress text."""
        self.text = text
        logger.debug("Progress", title=self.title, text=text)

    def set_fraction(self, fraction: float) -> None:
        """Set the completed fraction, clamped to [0, 1]."""
        self.fraction = min(max(fraction, 0.0), 1.0)

    def cancel(self) -> None:
        """Ask the cycle using this indicator to stop."""
        if not self._cancelled.is_set():
            logger.info("Cancellation requested", title=self.title)
        self._cancelled.set()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()
