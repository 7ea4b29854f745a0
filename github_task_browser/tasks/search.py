"""A saved search: a repository and a query tracked against a local issue set."""

from dataclasses import dataclass, field

from github_task_browser.tasks.guard import SyncGuard
from github_task_browser.tasks.ordered_set import OrderedIssueSet


@dataclass
class SearchSpec:
    """A (repository, query) pair with its guard and tracked issues.

    ``repository`` is the presentable name of the remote repository, for
    GitHub the ``owner/repo`` string.
    """

    repository: str
    query: str = ""
    guard: SyncGuard = field(default_factory=SyncGuard, repr=False, compare=False)
    issues: OrderedIssueSet = field(default_factory=OrderedIssueSet, repr=False, compare=False)
