"""Utility modules for shared functionality."""

from .constants import (
    FETCH_ISSUES_BUFFER_SIZE,
    GITHUB_SEARCH_PAGE_SIZE,
    GITHUB_SEARCH_RESULT_LIMIT,
)
from .messages import message, pluralize

__all__ = [
    "FETCH_ISSUES_BUFFER_SIZE",
    "GITHUB_SEARCH_PAGE_SIZE",
    "GITHUB_SEARCH_RESULT_LIMIT",
    "message",
    "pluralize",
]
