"""Shared constants used across the application."""

# Fetch Cycle Constants
# ---------------------

FETCH_ISSUES_BUFFER_SIZE = 1024
"""Maximum number of issues requested from the remote source in one import phase."""

GITHUB_SEARCH_PAGE_SIZE = 100
"""GitHub's maximum page size for the search API."""

GITHUB_SEARCH_RESULT_LIMIT = 1000
"""GitHub only serves the first 1000 results of any search."""
