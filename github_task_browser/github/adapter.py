"""GitHub issue source adapter for the PyGithub library.

PyGithub is a blocking client, so every request runs in a worker thread
to keep the event loop free for the apply context.
"""

import asyncio
from functools import wraps
from pathlib import Path
from typing import Any, Awaitable, Callable, Self, TypeVar

import structlog
from github import Github, GithubException
from github.Issue import Issue

from github_task_browser.configuration.models import GitHubAuthenticationType
from github_task_browser.tasks.models import RemoteIssue
from github_task_browser.tasks.progress import CancellationToken
from github_task_browser.utils.constants import GITHUB_SEARCH_PAGE_SIZE, GITHUB_SEARCH_RESULT_LIMIT
from github_task_browser.utils.github import build_issue_search_query, split_repository_in_configuration

from .abc import IssueSourceBase
from .client import get_github_client

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

# Status codes GitHub answers with for issues that do not exist (anymore).
ISSUE_NOT_FOUND_STATUS_CODES = (404, 410)


def handle_github_422(func: F) -> F:
    """Decorator to handle GitHub 422 Unprocessable Entity errors, logging and raising with details.

    The search API answers malformed queries with 422.
    """

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except GithubException as exc:
            if exc.status != 422:
                raise
            error_data = exc.data if isinstance(exc.data, dict) else {}
            message = error_data.get("message", "Unprocessable Entity")
            errors = error_data.get("errors", [])
            logger.warning(
                "GitHub 422 Unprocessable Entity",
                function=func.__name__,
                message=message,
                errors=errors,
                status_code=422,
            )
            details = "; ".join(str(error.get("message", error)) if isinstance(error, dict) else str(error) for error in errors)
            raise ValueError(f"{message}: {details}" if details else message) from exc

    return wrapper  # type: ignore


def remote_issue_from_github(issue: Issue) -> RemoteIssue:
    """Convert a PyGithub issue to a RemoteIssue."""
    updated_at = issue.updated_at
    return RemoteIssue(
        id=str(issue.number),
        summary=issue.title,
        closed=issue.state == "closed",
        payload={
            "number": issue.number,
            "title": issue.title,
            "state": issue.state,
            "html_url": issue.html_url,
            "labels": [label.name for label in issue.labels],
            "assignees": [assignee.login for assignee in issue.assignees],
            "updated_at": updated_at.isoformat() if updated_at else None,
        },
    )


class GitHubIssueSource(IssueSourceBase):
    """Issue source for one GitHub repository, backed by PyGithub."""

    def __init__(self, client: Github, owner: str, repo_name: str) -> None:
        """Initialize the adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name

    @property
    def presentable_name(self) -> str:
        return f"{self.owner}/{self.repo_name}"

    @classmethod
    async def create(
        cls,
        repo: str,
        github_auth_type: GitHubAuthenticationType,
        github_pat_token: str | None = None,
        github_app_id: int | None = None,
        github_app_private_key_path: Path | None = None,
        github_app_installation_id: int | None = None,
        github_api_url: str = "https://api.github.com",
    ) -> Self:
        """Create a new GitHub issue source.

        Args:
            repo: Repository in 'owner/repo' format
            github_auth_type: Type of authentication (PAT or APP)
            github_pat_token: Personal access token (required for PAT auth)
            github_app_id: GitHub App ID (required for APP auth)
            github_app_private_key_path: Path to private key file (required for APP auth)
            github_app_installation_id: Installation ID (required for APP auth)
            github_api_url: GitHub API URL (defaults to https://api.github.com)

        Returns:
            Configured GitHubIssueSource instance

        Raises:
            ValueError: If the repository is not in 'owner/repo' format
            RuntimeError: If required parameters for the chosen auth type are missing
        """
        owner, repo_name = await split_repository_in_configuration(repo=repo)
        logger.info(
            "Creating client for GitHub instance and repository",
            github_api_url=github_api_url,
            owner=owner,
            repo_name=repo_name,
            authentication=github_auth_type.label,
        )
        client = await get_github_client(
            github_auth_type=github_auth_type,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
            github_api_url=github_api_url,
        )
        return cls(client, owner, repo_name)

    @handle_github_422
    async def fetch_issues(
        self,
        query: str,
        offset: int,
        limit: int,
        exclude_closed: bool,
        cancellation: CancellationToken | None = None,
    ) -> list[RemoteIssue]:
        """Search the repository's issues, returning at most limit results starting at offset.

        GitHub serves search results in pages of at most 100, so the window
        [offset, offset + limit) is assembled from as many pages as it spans.
        No further pages are requested once cancellation is reported.
        """
        if limit <= 0:
            return []
        end = min(offset + limit, GITHUB_SEARCH_RESULT_LIMIT)
        q = build_issue_search_query(self.owner, self.repo_name, query, exclude_closed)
        results = self.client.search_issues(query=q)
        page = offset // GITHUB_SEARCH_PAGE_SIZE
        position = page * GITHUB_SEARCH_PAGE_SIZE
        issues: list[RemoteIssue] = []

        logger.debug("Searching issues", q=q, offset=offset, limit=limit)
        while position < end:
            if cancellation is not None and cancellation.is_cancelled:
                logger.info("Issue search cancelled", q=q, fetched=len(issues))
                break
            items: list[Issue] = await asyncio.to_thread(results.get_page, page)
            for item in items:
                if offset <= position < end:
                    issues.append(remote_issue_from_github(item))
                position += 1
            if len(items) < GITHUB_SEARCH_PAGE_SIZE:
                break
            page += 1

        logger.debug("Searched issues", q=q, count=len(issues))
        return issues

    async def find_issue(self, issue_id: str) -> RemoteIssue | None:
        """Get the current state of an issue by number, or None if it does not exist."""
        if not issue_id.isdigit():
            return None
        try:
            return await asyncio.to_thread(self._find_issue, int(issue_id))
        except GithubException as exc:
            if exc.status in ISSUE_NOT_FOUND_STATUS_CODES:
                return None
            raise

    def _find_issue(self, number: int) -> RemoteIssue | None:
        # Attribute access may trigger requests on lazy objects, so all of it stays in the worker thread.
        repository = self.client.get_repo(self.presentable_name, lazy=True)
        issue = repository.get_issue(number)
        if issue.pull_request is not None:
            return None
        return remote_issue_from_github(issue)
