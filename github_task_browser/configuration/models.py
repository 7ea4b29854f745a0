"""Models describing how the browser authenticates against GitHub."""

from enum import Enum


class GitHubAuthenticationType(str, Enum):
    """How the issue source authenticates its requests, as chosen by reconcile."""

    # Personal access token sent as a bearer token
    PAT = "pat"
    # Installation token minted for a GitHub App
    APP = "app"

    @property
    def label(self) -> str:
        """Human readable name used in log events."""
        return "personal access token" if self is GitHubAuthenticationType.PAT else "GitHub App installation"
