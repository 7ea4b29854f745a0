"""Base ABC for remote issue sources."""

from abc import ABC, abstractmethod

from github_task_browser.tasks.models import RemoteIssue
from github_task_browser.tasks.progress import CancellationToken


class IssueSourceBase(ABC):
    """Base ABC for remote issue sources."""

    @property
    @abstractmethod
    def presentable_name(self) -> str:
        """Name the source is configured and looked up under."""
        pass

    @abstractmethod
    async def fetch_issues(
        self,
        query: str,
        offset: int,
        limit: int,
        exclude_closed: bool,
        cancellation: CancellationToken | None = None,
    ) -> list[RemoteIssue]:
        """Fetch up to limit issues matching query, starting at offset."""
        pass

    @abstractmethod
    async def find_issue(self, issue_id: str) -> RemoteIssue | None:
        """Fetch the current state of one issue, or None if it does not exist."""
        pass
