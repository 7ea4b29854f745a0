"""Data models shared by the fetch cycle phases."""

import re
from dataclasses import dataclass
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field

_DIGIT_RUN = re.compile(r"(\d+)")


SortKey = tuple[tuple[tuple[int, int | str], ...], str]


def issue_sort_key(issue_id: str) -> SortKey:
    """Natural sort key for issue ids, so that "9" sorts before "10".

    Digit runs compare numerically and before any text at the same position.
    The raw id breaks ties between ids such as "01" and "1".
    """
    parts: list[tuple[int, int | str]] = []
    for part in _DIGIT_RUN.split(issue_id):
        if not part:
            continue
        if part.isdigit():
            parts.append((0, int(part)))
        else:
            parts.append((1, part))
    return tuple(parts), issue_id


class RemoteIssue(BaseModel):
    """An issue as returned by a remote source. Not owned locally until inserted."""

    model_config = ConfigDict(frozen=True)

    id: str
    summary: str = ""
    closed: bool = False
    payload: dict[str, Any] = Field(default_factory=dict)


class TrackedIssue(BaseModel):
    """An issue held in the local ordered set of a search."""

    model_config = ConfigDict(frozen=True)

    id: str
    summary: str = ""
    closed: bool = False
    payload: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_remote(cls, issue: RemoteIssue) -> Self:
        """Wrap a remote issue for local tracking."""
        return cls(id=issue.id, summary=issue.summary, closed=issue.closed, payload=dict(issue.payload))

    @property
    def sort_key(self) -> SortKey:
        """Key used to order tracked issues."""
        return issue_sort_key(self.id)


@dataclass
class FetchOutcome:
    """Counts accumulated by one import phase run."""

    added_count: int = 0
    updated_count: int = 0


@dataclass(frozen=True)
class Found:
    """Lookup result for an id present in the ordered set."""

    index: int

    def encoded(self) -> int:
        return self.index


@dataclass(frozen=True)
class NotFound:
    """Lookup result for an absent id, carrying the position it would be inserted at."""

    insertion_point: int

    def encoded(self) -> int:
        return -(self.insertion_point + 1)


SearchResult = Found | NotFound


def decode_search_result(encoded: int) -> SearchResult:
    """Convert a classic sorted-search return value into a SearchResult.

    Non-negative values are matching indices, negative values encode the
    insertion point p as -(p + 1).
    """
    if encoded >= 0:
        return Found(encoded)
    return NotFound(-(encoded + 1))
