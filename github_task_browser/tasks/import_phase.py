"""Import phase: merge a freshly fetched page of issues into the tracked set."""

import structlog

from github_task_browser.tasks.context import FetchContext
from github_task_browser.tasks.exceptions import RemoteFetchError
from github_task_browser.tasks.models import FetchOutcome, Found, RemoteIssue, TrackedIssue
from github_task_browser.utils.messages import message, pluralize

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def summarize_outcome(outcome: FetchOutcome) -> str:
    """Select the summary message for the counts of one import phase."""
    added, updated = outcome.added_count, outcome.updated_count
    if added > 0 and updated > 0 and added != updated:
        return message("fetch.finishing.addedAndUpdated", added, pluralize("task", added), updated)
    if added > 0:
        return message("fetch.finishing.added", added, pluralize("task", added))
    if updated > 0:
        return message("fetch.finishing.updated", updated, pluralize("task", updated))
    return message("fetch.finishing.noIssues")


async def fetch_page(ctx: FetchContext) -> list[RemoteIssue]:
    """Fetch one buffer of issues for the search, wrapping any failure in RemoteFetchError."""
    try:
        return await ctx.source.fetch_issues(
            ctx.search.query,
            offset=0,
            limit=ctx.buffer_size,
            exclude_closed=False,
            cancellation=ctx.cancellation,
        )
    except Exception as e:
        raise RemoteFetchError(f"{message('error.connection.broken')}: {e}") from e


async def merge_page(ctx: FetchContext, issues: list[RemoteIssue]) -> None:
    """Classify each fetched issue against the tracked set and apply the structural changes.

    Each insertion or removal is awaited before the next lookup, since it
    shifts the indices that lookup returns.
    """
    outcome = ctx.outcome
    for issue in issues:
        result = ctx.search.issues.find(issue.id)
        if isinstance(result, Found):
            outcome.updated_count += 1
            if issue.closed:
                logger.debug("Removing closed issue", repository=ctx.search.repository, issue_id=issue.id, index=result.index)
                await ctx.node.remove_at(result.index)
            continue

        # Closed issues are only shown while they were already tracked.
        if issue.closed:
            continue

        outcome.added_count += 1
        logger.debug("Adding new issue", repository=ctx.search.repository, issue_id=issue.id, index=result.insertion_point)
        await ctx.node.insert_at(result.insertion_point, TrackedIssue.from_remote(issue))


async def import_new_issues(ctx: FetchContext) -> FetchOutcome:
    """Run the import phase and notify the user of its outcome.

    Exactly one notification is emitted: a summary on success, or an error
    carrying the failure's message. Failures other than RemoteFetchError are
    also sent to the diagnostic log, as they point at a defect rather than
    at the remote side.
    """
    name = ctx.source.presentable_name
    title = message("fetch.title", name)
    try:
        ctx.progress.set_text(message("fetch.starting", name))
        issues = await fetch_page(ctx)
        logger.info("Fetched issues", repository=name, query=ctx.search.query, count=len(issues))
        if issues:
            await merge_page(ctx, issues)
    except Exception as e:
        ctx.notifier.error(title, message("fetch.error", e))
        if not isinstance(e, RemoteFetchError):
            ctx.diagnostic_log(e)
        return ctx.outcome

    logger.info(
        "Imported issues",
        repository=name,
        added=ctx.outcome.added_count,
        updated=ctx.outcome.updated_count,
        tracked=len(ctx.search.issues),
    )
    ctx.notifier.info(title, summarize_outcome(ctx.outcome))
    return ctx.outcome
