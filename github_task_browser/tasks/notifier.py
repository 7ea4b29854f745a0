"""Notifications shown to the user at the end of an import phase."""

from typing import Protocol

import structlog
import typer

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class Notifier(Protocol):
    """Fire-and-forget user notifications."""

    def info(self, title: str, message: str) -> None: ...

    def error(self, title: str, message: str) -> None: ...


class LoggingNotifier:
    """Notifier that emits notifications as structured log events."""

    def info(self, title: str, message: str) -> None:
        logger.info(message, title=title)

    def error(self, title: str, message: str) -> None:
        logger.error(message, title=title)


class ConsoleNotifier:
    """Notifier that prints notifications to the terminal."""

    def info(self, title: str, message: str) -> None:
        typer.echo(f"{title}: {message}")

    def error(self, title: str, message: str) -> None:
        typer.echo(f"{title}: {message}", err=True)
