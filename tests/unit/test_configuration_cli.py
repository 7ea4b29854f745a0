"""Unit tests for the fetch command of the CLI."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from typer.testing import CliRunner

from github_task_browser.configuration import cli

runner = CliRunner()

AUTH_ENVIRONMENT_VARIABLES = ["GITHUB_PAT_TOKEN", "GITHUB_APP_ID", "GITHUB_APP_PRIVATE_KEY_PATH", "GITHUB_APP_INSTALLATION_ID", "REPO"]


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear credentials from the environment and leave logging configuration alone."""
    for name in AUTH_ENVIRONMENT_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(cli, "configure_logging", lambda debug: None)


def test_fetch_without_authentication() -> None:
    """Test that the command exits with an error when no credentials are configured."""
    result = runner.invoke(cli.typer_app, ["fetch", "octocat/Hello-World"])
    assert result.exit_code == 1
    assert "No GitHub authentication configuration provided" in result.output


def test_fetch_with_both_authentication_methods() -> None:
    """Test that the command exits with an error when PAT and App credentials are mixed."""
    result = runner.invoke(cli.typer_app, ["fetch", "octocat/Hello-World", "--github-pat-token", "token", "--github-app-id", "1"])
    assert result.exit_code == 1
    assert "Both PAT and GitHub App configurations are defined" in result.output


def test_fetch_malformed_repository() -> None:
    """Test that a repository not in owner/repo format is reported as an error."""
    result = runner.invoke(cli.typer_app, ["fetch", "octocat", "--github-pat-token", "token"])
    assert result.exit_code == 1
    assert "owner/repo" in result.output


def test_fetch_runs_cycle_and_lists_tracked_issues(monkeypatch: pytest.MonkeyPatch, make_source: Any, make_remote: Any) -> None:
    """Test that one cycle is run and the tracked issues are printed."""
    source = make_source(page=[make_remote("2"), make_remote("1"), make_remote("3", closed=True)])
    issue_source_class = MagicMock()
    issue_source_class.create = AsyncMock(return_value=source)
    monkeypatch.setattr(cli, "GitHubIssueSource", issue_source_class)

    result = runner.invoke(cli.typer_app, ["fetch", "octocat/Hello-World", "--query", "label:bug", "--github-pat-token", "token"])

    assert result.exit_code == 0, result.output
    assert source.fetch_calls[0]["query"] == "label:bug"
    assert "+ #1 Issue 1" in result.output
    assert "Fetching new issues from octocat/Hello-World: added 2 tasks" in result.output
    assert "Tracking 2 tasks for octocat/Hello-World" in result.output
    assert issue_source_class.create.await_args.kwargs["github_pat_token"] == "token"
