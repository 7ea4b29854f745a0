"""Sorted collection of the issues tracked for one search."""

import bisect
from typing import Iterator

from github_task_browser.tasks.models import Found, NotFound, SearchResult, TrackedIssue, decode_search_result, issue_sort_key


class OrderedIssueSet:
    """Strictly sorted, duplicate-free sequence of tracked issues.

    Issues are ordered by ``issue_sort_key`` of their id. Structural
    mutations are expected to happen from a single apply context; reads may
    happen from anywhere that is serialized against it.
    """

    def __init__(self, issues: list[TrackedIssue] | None = None) -> None:
        """Initialize the set, sorting any initial issues."""
        self._issues: list[TrackedIssue] = []
        for issue in issues or []:
            result = self.find(issue.id)
            if isinstance(result, Found):
                raise ValueError(f"Duplicate issue id: {issue.id}")
            self._issues.insert(result.insertion_point, issue)

    def __len__(self) -> int:
        return len(self._issues)

    def __iter__(self) -> Iterator[TrackedIssue]:
        return iter(list(self._issues))

    def __getitem__(self, index: int) -> TrackedIssue:
        return self._issues[index]

    def ids(self) -> list[str]:
        """Return the ids of all tracked issues in order."""
        return [issue.id for issue in self._issues]

    def binary_search(self, issue_id: str) -> int:
        """Return the index of issue_id, or -(insertion_point + 1) if absent."""
        key = issue_sort_key(issue_id)
        position = bisect.bisect_left(self._issues, key, key=lambda issue: issue.sort_key)
        if position < len(self._issues) and self._issues[position].id == issue_id:
            return position
        return -(position + 1)

    def find(self, issue_id: str) -> SearchResult:
        """Look up issue_id, returning Found(index) or NotFound(insertion_point)."""
        return decode_search_result(self.binary_search(issue_id))

    def insert_at(self, index: int, issue: TrackedIssue) -> None:
        """Insert issue at index.

        Raises:
            ValueError: If the insertion would break ordering or duplicate an id.
        """
        if not 0 <= index <= len(self._issues):
            raise IndexError(f"Insertion index {index} out of range for {len(self._issues)} issues")
        key = issue.sort_key
        if index > 0 and not self._issues[index - 1].sort_key < key:
            raise ValueError(f"Inserting issue {issue.id} at {index} would break ordering")
        if index < len(self._issues) and not key < self._issues[index].sort_key:
            raise ValueError(f"Inserting issue {issue.id} at {index} would break ordering")
        self._issues.insert(index, issue)

    def remove_at(self, index: int) -> TrackedIssue:
        """Remove and return the issue at index."""
        return self._issues.pop(index)

    def replace(self, issue: TrackedIssue) -> int | None:
        """Replace the issue with the same id in place.

        Returns:
            The index of the replaced issue, or None if the id is not tracked.
        """
        result = self.find(issue.id)
        if isinstance(result, NotFound):
            return None
        self._issues[result.index] = issue
        return result.index
