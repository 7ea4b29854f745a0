"""Fixtures for unit tests."""

import asyncio
from typing import AsyncGenerator, Callable, Generator
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
import structlog

from github_task_browser.github.abc import IssueSourceBase
from github_task_browser.tasks.apply import ApplyContext, SearchNode
from github_task_browser.tasks.context import FetchContext
from github_task_browser.tasks.models import RemoteIssue, TrackedIssue
from github_task_browser.tasks.ordered_set import OrderedIssueSet
from github_task_browser.tasks.progress import CancellationToken, ProgressIndicator
from github_task_browser.tasks.search import SearchSpec

REPOSITORY = "octocat/Hello-World"


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


class FakeIssueSource(IssueSourceBase):
    """In-memory issue source recording the calls made to it."""

    def __init__(
        self,
        name: str = REPOSITORY,
        page: list[RemoteIssue] | None = None,
        current: dict[str, RemoteIssue] | None = None,
        fetch_error: Exception | None = None,
        find_errors: set[str] | None = None,
    ) -> None:
        """Initialize the source with the page it returns and the current issue states."""
        self._name = name
        self.page = list(page or [])
        self.current = dict(current or {})
        self.fetch_error = fetch_error
        self.find_errors = set(find_errors or ())
        self.gate: asyncio.Event | None = None
        self.fetch_calls: list[dict[str, object]] = []
        self.find_calls: list[str] = []

    @property
    def presentable_name(self) -> str:
        return self._name

    async def fetch_issues(
        self,
        query: str,
        offset: int,
        limit: int,
        exclude_closed: bool,
        cancellation: CancellationToken | None = None,
    ) -> list[RemoteIssue]:
        self.fetch_calls.append(
            {"query": query, "offset": offset, "limit": limit, "exclude_closed": exclude_closed, "cancellation": cancellation}
        )
        if self.gate is not None:
            await self.gate.wait()
        if self.fetch_error is not None:
            raise self.fetch_error
        return list(self.page)

    async def find_issue(self, issue_id: str) -> RemoteIssue | None:
        self.find_calls.append(issue_id)
        if issue_id in self.find_errors:
            raise ConnectionError(f"lost connection while fetching {issue_id}")
        return self.current.get(issue_id)


def remote(issue_id: str, closed: bool = False, summary: str | None = None) -> RemoteIssue:
    """Build a remote issue with a summary derived from its id."""
    return RemoteIssue(id=issue_id, summary=summary if summary is not None else f"Issue {issue_id}", closed=closed)


def tracked(issue_id: str, summary: str | None = None) -> TrackedIssue:
    """Build an open tracked issue with a summary derived from its id."""
    return TrackedIssue(id=issue_id, summary=summary if summary is not None else f"Issue {issue_id}")


@pytest.fixture
def make_remote() -> Callable[..., RemoteIssue]:
    """Factory for remote issues."""
    return remote


@pytest.fixture
def make_search() -> Callable[..., SearchSpec]:
    """Factory for searches already tracking the given issue ids."""

    def _make_search(*issue_ids: str, query: str = "label:bug") -> SearchSpec:
        return SearchSpec(repository=REPOSITORY, query=query, issues=OrderedIssueSet([tracked(i) for i in issue_ids]))

    return _make_search


@pytest.fixture
def make_source() -> Callable[..., FakeIssueSource]:
    """Factory for in-memory issue sources."""
    return FakeIssueSource


@pytest_asyncio.fixture
async def apply_context() -> AsyncGenerator[ApplyContext, None]:
    """A running apply context, stopped after the test."""
    async with ApplyContext() as context:
        yield context


@pytest.fixture
def sink() -> MagicMock:
    """A view sink recording the changes applied to it."""
    return MagicMock()


@pytest.fixture
def notifier() -> MagicMock:
    """A notifier recording the notifications sent to it."""
    return MagicMock()


@pytest.fixture
def diagnostic_log() -> MagicMock:
    """A diagnostic log sink recording the failures sent to it."""
    return MagicMock()


@pytest.fixture
def make_context(
    apply_context: ApplyContext,
    sink: MagicMock,
    notifier: MagicMock,
    diagnostic_log: MagicMock,
) -> Callable[..., FetchContext]:
    """Factory for fetch contexts wired to the shared sink, notifier and diagnostic log."""

    def _make_context(search: SearchSpec, source: FakeIssueSource, buffer_size: int = 1024) -> FetchContext:
        indicator = ProgressIndicator(title=search.repository)
        return FetchContext(
            search=search,
            source=source,
            node=SearchNode(search, apply_context, sink),
            notifier=notifier,
            progress=indicator,
            cancellation=indicator,
            diagnostic_log=diagnostic_log,
            buffer_size=buffer_size,
        )

    return _make_context
