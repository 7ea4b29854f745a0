"""Contains exceptions raised while running a fetch cycle."""


class RemoteFetchError(Exception):
    """Raised when fetching issues from the remote source fails.

    These are expected, user-facing failures (network, authentication,
    protocol) and are reported to the user without being logged as defects.
    """

    pass
