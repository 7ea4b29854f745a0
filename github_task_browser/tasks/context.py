"""State shared by the phases of one fetch cycle."""

from dataclasses import dataclass, field
from typing import Callable

from github_task_browser.github.abc import IssueSourceBase
from github_task_browser.tasks.apply import SearchNode
from github_task_browser.tasks.models import FetchOutcome
from github_task_browser.tasks.notifier import Notifier
from github_task_browser.tasks.progress import CancellationToken, ProgressSink
from github_task_browser.tasks.search import SearchSpec
from github_task_browser.utils.constants import FETCH_ISSUES_BUFFER_SIZE

DiagnosticLog = Callable[[BaseException], None]


@dataclass
class FetchContext:
    """Everything a running cycle needs, resolved once before the guard is taken."""

    search: SearchSpec
    source: IssueSourceBase
    node: SearchNode
    notifier: Notifier
    progress: ProgressSink
    cancellation: CancellationToken
    diagnostic_log: DiagnosticLog
    buffer_size: int = FETCH_ISSUES_BUFFER_SIZE
    outcome: FetchOutcome = field(default_factory=FetchOutcome)
