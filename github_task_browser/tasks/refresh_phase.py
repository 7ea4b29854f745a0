"""Refresh phase: re-validate every tracked issue against the remote source."""

import structlog

from github_task_browser.tasks.context import FetchContext
from github_task_browser.tasks.models import TrackedIssue
from github_task_browser.utils.messages import message

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def refresh_tracked_issues(ctx: FetchContext) -> int:
    """Replace each tracked issue with its current remote state.

    Items that cannot be fetched are skipped silently. Updates are handed to
    the apply context without waiting, since replacing an issue in place
    never moves it. The set's length and order are left unchanged; closed
    issues are removed by the next import phase.

    Returns:
        The number of issues for which an update was scheduled.
    """
    issues = ctx.search.issues
    length = len(issues)
    refreshed = 0
    ctx.progress.set_text(message("fetch.refreshing", ctx.source.presentable_name))

    for index in range(length):
        ctx.progress.set_fraction(index / length)
        tracked = issues[index]
        try:
            remote = await ctx.source.find_issue(tracked.id)
        except Exception as e:
            logger.debug("Failed to refresh issue", repository=ctx.search.repository, issue_id=tracked.id, error=str(e))
            continue
        if remote is None:
            continue
        ctx.node.update(TrackedIssue.from_remote(remote))
        refreshed += 1

    ctx.progress.set_fraction(1.0)
    logger.info("Refreshed tracked issues", repository=ctx.search.repository, tracked=length, refreshed=refreshed)
    return refreshed
