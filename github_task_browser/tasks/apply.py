"""Serialized application of mutations to the tracked issues of a search.

The fetch cycle runs as a background worker, while the ordered issue set
and whatever view displays it are only ever changed by one consumer task,
the apply context. The worker hands mutations over either waiting for them
to be applied (structural changes the next lookup depends on) or without
waiting (in-place payload updates).
"""

import asyncio
from functools import partial
from typing import Any, Callable, Protocol

import structlog
import typer

from github_task_browser.tasks.models import TrackedIssue
from github_task_browser.tasks.search import SearchSpec

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

Mutation = Callable[[], Any]


class ApplyContext:
    """Single consumer task applying submitted mutations in submission order."""

    def __init__(self) -> None:
        """Initialize an apply context. Call start() or use it as an async context manager."""
        self._queue: asyncio.Queue[tuple[Mutation, asyncio.Future[Any] | None] | None] = asyncio.Queue()
        self._consumer: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._consumer is not None and not self._consumer.done()

    def start(self) -> None:
        """Start the consumer task on the running event loop."""
        if self.running:
            return
        self._consumer = asyncio.create_task(self._consume(), name="apply-context")

    async def stop(self) -> None:
        """Apply everything already submitted, then stop the consumer task."""
        if not self.running:
            return
        await self._queue.put(None)
        assert self._consumer is not None
        await self._consumer
        self._consumer = None

    async def __aenter__(self) -> "ApplyContext":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    async def invoke_and_wait(self, mutation: Mutation) -> Any:
        """Submit a mutation and wait until it has been applied.

        Returns:
            The mutation's return value.

        Raises:
            Exception: Whatever the mutation raised.
        """
        self._ensure_running()
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        await self._queue.put((mutation, future))
        return await future

    def invoke_later(self, mutation: Mutation) -> None:
        """Submit a mutation without waiting for it to be applied."""
        self._ensure_running()
        self._queue.put_nowait((mutation, None))

    async def join(self) -> None:
        """Wait until every submitted mutation has been applied."""
        await self._queue.join()

    def _ensure_running(self) -> None:
        if not self.running:
            raise RuntimeError("Apply context is not running")

    async def _consume(self) -> None:
        while True:
            item = await self._queue.get()
            try:
                if item is None:
                    return
                mutation, future = item
                try:
                    result = mutation()
                except Exception as exc:
                    if future is None:
                        logger.exception("Deferred mutation failed")
                    elif not future.done():
                        future.set_exception(exc)
                else:
                    if future is not None and not future.done():
                        future.set_result(result)
            finally:
                self._queue.task_done()


class IssueViewSink(Protocol):
    """Receives the changes applied to a search's tracked issues, e.g. a UI tree."""

    def insert_at(self, index: int, issue: TrackedIssue) -> None: ...

    def remove_at(self, index: int, issue: TrackedIssue) -> None: ...

    def update_at(self, index: int, issue: TrackedIssue) -> None: ...


class NullViewSink:
    """View sink that ignores every change."""

    def insert_at(self, index: int, issue: TrackedIssue) -> None:
        pass

    def remove_at(self, index: int, issue: TrackedIssue) -> None:
        pass

    def update_at(self, index: int, issue: TrackedIssue) -> None:
        pass


class ConsoleViewSink:
    """View sink printing one line per change to the terminal."""

    def insert_at(self, index: int, issue: TrackedIssue) -> None:
        typer.echo(f"+ #{issue.id} {issue.summary}")

    def remove_at(self, index: int, issue: TrackedIssue) -> None:
        typer.echo(f"- #{issue.id} {issue.summary}")

    def update_at(self, index: int, issue: TrackedIssue) -> None:
        state = "closed" if issue.closed else "open"
        typer.echo(f"~ #{issue.id} {issue.summary} [{state}]")


class SearchNode:
    """Binds a search's ordered issue set to a view sink through an apply context."""

    def __init__(self, search: SearchSpec, apply_context: ApplyContext, sink: IssueViewSink | None = None) -> None:
        """Initialize the node for a search."""
        self.search = search
        self.apply_context = apply_context
        self.sink: IssueViewSink = sink if sink is not None else NullViewSink()

    async def insert_at(self, index: int, issue: TrackedIssue) -> None:
        """Insert an issue and wait until the insertion is visible."""
        await self.apply_context.invoke_and_wait(partial(self._insert, index, issue))

    async def remove_at(self, index: int) -> None:
        """Remove the issue at index and wait until the removal is visible."""
        await self.apply_context.invoke_and_wait(partial(self._remove, index))

    def update(self, issue: TrackedIssue) -> None:
        """Schedule an in-place replacement of the issue with the same id."""
        self.apply_context.invoke_later(partial(self._update, issue))

    def _insert(self, index: int, issue: TrackedIssue) -> None:
        self.search.issues.insert_at(index, issue)
        self.sink.insert_at(index, issue)

    def _remove(self, index: int) -> None:
        issue = self.search.issues.remove_at(index)
        self.sink.remove_at(index, issue)

    def _update(self, issue: TrackedIssue) -> None:
        index = self.search.issues.replace(issue)
        if index is None:
            logger.debug("Dropping update for issue no longer tracked", repository=self.search.repository, issue_id=issue.id)
            return
        self.sink.update_at(index, issue)
