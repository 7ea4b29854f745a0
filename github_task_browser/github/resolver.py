"""Resolves a search's repository presentable name to a live issue source."""

from typing import Iterable, Protocol

import structlog

from .abc import IssueSourceBase

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class RepositoryResolver(Protocol):
    """Looks up a live issue source by presentable name."""

    async def resolve(self, presentable_name: str) -> IssueSourceBase | None: ...


class RepositoryRegistry:
    """The issue sources known to the application, looked up by presentable name."""

    def __init__(self, sources: Iterable[IssueSourceBase] = ()) -> None:
        """Initialize the registry with already-created sources."""
        self._sources: list[IssueSourceBase] = list(sources)

    def register(self, source: IssueSourceBase) -> None:
        """Register a source, replacing any source with the same presentable name."""
        self._sources = [existing for existing in self._sources if existing.presentable_name != source.presentable_name]
        self._sources.append(source)

    def all_repositories(self) -> list[IssueSourceBase]:
        """Return every registered source."""
        return list(self._sources)

    async def resolve(self, presentable_name: str) -> IssueSourceBase | None:
        """Return the source registered under presentable_name, or None."""
        for source in self._sources:
            if source.presentable_name == presentable_name:
                return source
        logger.debug("Repository not configured", repository=presentable_name)
        return None
