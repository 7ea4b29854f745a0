"""User-facing message bundle for fetch cycle notifications and progress text."""

MESSAGES: dict[str, str] = {
    "fetch.title": "Fetching new issues from {0}",
    "fetch.starting": "Fetching issues from {0}...",
    "fetch.refreshing": "Refreshing tracked issues from {0}...",
    "fetch.finishing.added": "added {0} {1}",
    "fetch.finishing.addedAndUpdated": "added {0} {1} and updated {2}",
    "fetch.finishing.updated": "updated {0} {1}",
    "fetch.finishing.noIssues": "no issues found",
    "fetch.error": "failed to fetch issues: {0}",
    "error.connection.broken": "connection broken",
    "task.1": "task",
    "task.many": "tasks",
}


def message(key: str, *args: object) -> str:
    """Format the message registered under key with positional arguments.

    Raises:
        KeyError: If no message is registered under key.
    """
    return MESSAGES[key].format(*args)


def pluralize(message_base: str, count: int) -> str:
    """Return the singular or plural unit word for message_base depending on count."""
    return message(f"{message_base}.many" if count > 1 else f"{message_base}.1")
