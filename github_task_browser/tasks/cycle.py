"""Orchestrates one single-flight fetch cycle for a search."""

import time

import structlog

from github_task_browser.github.resolver import RepositoryResolver
from github_task_browser.tasks.apply import SearchNode
from github_task_browser.tasks.context import DiagnosticLog, FetchContext
from github_task_browser.tasks.import_phase import import_new_issues
from github_task_browser.tasks.models import FetchOutcome
from github_task_browser.tasks.notifier import Notifier
from github_task_browser.tasks.progress import CancellationToken, ProgressSink
from github_task_browser.tasks.refresh_phase import refresh_tracked_issues
from github_task_browser.utils.constants import FETCH_ISSUES_BUFFER_SIZE

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def log_unexpected_failure(error: BaseException) -> None:
    """Default diagnostic log: record an unexpected failure as a defect."""
    logger.error("Unexpected failure while fetching issues", exc_info=error)


async def run_fetch_cycle(
    node: SearchNode,
    resolver: RepositoryResolver,
    notifier: Notifier,
    progress: ProgressSink,
    cancellation: CancellationToken,
    diagnostic_log: DiagnosticLog = log_unexpected_failure,
    buffer_size: int = FETCH_ISSUES_BUFFER_SIZE,
) -> FetchOutcome | None:
    """Import new issues and refresh tracked ones for the node's search.

    Returns None without side effects when the repository cannot be
    resolved, the cycle was cancelled before it started, or another cycle
    for the same search is already running.

    Returns:
        The import phase counts when the cycle ran, otherwise None.
    """
    search = node.search
    source = await resolver.resolve(search.repository)
    if source is None or cancellation.is_cancelled:
        return None

    ctx = FetchContext(
        search=search,
        source=source,
        node=node,
        notifier=notifier,
        progress=progress,
        cancellation=cancellation,
        diagnostic_log=diagnostic_log,
        buffer_size=buffer_size,
    )

    # don't run the same search twice at once
    if not search.guard.try_acquire():
        logger.debug("Fetch cycle already running", repository=search.repository)
        return None

    start_time = time.time()
    logger.info("Starting fetch cycle", repository=search.repository, query=search.query)
    try:
        outcome = await import_new_issues(ctx)
        await refresh_tracked_issues(ctx)
    finally:
        search.guard.release()
    logger.info(
        "Finished fetch cycle",
        repository=search.repository,
        duration=round(time.time() - start_time, 2),
        added=outcome.added_count,
        updated=outcome.updated_count,
    )
    return outcome
