"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import contextlib
import logging
import signal
from pathlib import Path

import structlog
import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from github_task_browser.config import settings
from github_task_browser.configuration.exceptions import GitHubAuthenticationConfigurationUndefinedError
from github_task_browser.configuration.models import GitHubAuthenticationType
from github_task_browser.configuration.reconcile import validate_github_authentication_configuration
from github_task_browser.github.adapter import GitHubIssueSource
from github_task_browser.github.resolver import RepositoryRegistry
from github_task_browser.tasks.apply import ApplyContext, ConsoleViewSink, SearchNode
from github_task_browser.tasks.cycle import run_fetch_cycle
from github_task_browser.tasks.notifier import ConsoleNotifier
from github_task_browser.tasks.progress import ProgressIndicator
from github_task_browser.tasks.search import SearchSpec
from github_task_browser.utils.messages import message, pluralize

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False)


@typer_app.callback()
def main() -> None:
    """Track GitHub issue searches locally."""


def configure_logging(debug: bool) -> None:
    """Configure structlog to emit events at INFO, or DEBUG when debugging."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if debug else logging.INFO),
    )


async def run_fetch_command(
    repo: str,
    query: str,
    cycles: int,
    interval: float,
    buffer_size: int,
    github_auth_type: GitHubAuthenticationType,
    github_api_url: str,
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
) -> SearchSpec:
    """Run fetch cycles for one search against a GitHub repository.

    SIGINT cancels the search cooperatively: no further cycles or result
    pages are started once it is received.
    """
    adapter = await GitHubIssueSource.create(
        repo=repo,
        github_auth_type=github_auth_type,
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
        github_api_url=github_api_url,
    )
    registry = RepositoryRegistry([adapter])
    search = SearchSpec(repository=adapter.presentable_name, query=query)
    indicator = ProgressIndicator(title=message("fetch.title", search.repository))
    notifier = ConsoleNotifier()

    cancelled = asyncio.Event()

    def cancel() -> None:
        indicator.cancel()
        cancelled.set()

    loop = asyncio.get_running_loop()
    with contextlib.suppress(NotImplementedError):
        loop.add_signal_handler(signal.SIGINT, cancel)

    async with ApplyContext() as apply_context:
        node = SearchNode(search, apply_context, ConsoleViewSink())
        for cycle in range(cycles):
            if cycle:
                with contextlib.suppress(TimeoutError):
                    await asyncio.wait_for(cancelled.wait(), timeout=interval)
            if indicator.is_cancelled:
                break
            await run_fetch_cycle(node, registry, notifier, indicator, indicator, buffer_size=buffer_size)
            await apply_context.join()

    with contextlib.suppress(NotImplementedError):
        loop.remove_signal_handler(signal.SIGINT)
    return search


@typer_app.command(name="fetch")
def fetch_cli(
    repo: Annotated[str, Argument(envvar="REPO", help="Repository name (owner/repo).")],
    query: Annotated[str, Option(help="GitHub search qualifiers narrowing the tracked issues, e.g. 'label:bug'.")] = "",
    cycles: Annotated[int, Option(min=1, help="Number of fetch cycles to run against the same search.")] = 1,
    interval: Annotated[float, Option(min=0.0, help="Seconds to wait between fetch cycles.")] = 60.0,
    buffer_size: Annotated[
        int, Option(envvar="FETCH_ISSUES_BUFFER_SIZE", min=1, help="Maximum number of issues fetched per cycle.")
    ] = settings.FETCH_ISSUES_BUFFER_SIZE,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug logging.")] = settings.DEBUG,
    github_api_url: Annotated[str, Option(envvar="GITHUB_API_URL", help="GitHub API URL.")] = settings.GITHUB_API_URL,
    github_pat_token: Annotated[str | None, Option(envvar="GITHUB_PAT_TOKEN", help="GitHub Personal Access Token.")] = None,
    github_app_id: Annotated[int | None, Option(envvar="GITHUB_APP_ID", help="GitHub App ID.")] = None,
    github_app_private_key_path: Annotated[Path | None, Option(envvar="GITHUB_APP_PRIVATE_KEY_PATH", help="Path to GitHub App private key.")] = None,
    github_app_installation_id: Annotated[int | None, Option(envvar="GITHUB_APP_INSTALLATION_ID", help="GitHub App Installation ID.")] = None,
) -> None:
    """Track the issues of a GitHub repository search, importing new issues and refreshing known ones."""
    configure_logging(debug)
    try:
        github_auth_type = asyncio.run(
            validate_github_authentication_configuration(
                github_pat_token=github_pat_token,
                github_app_id=github_app_id,
                github_app_private_key_path=github_app_private_key_path,
                github_app_installation_id=github_app_installation_id,
            )
        )
    except GitHubAuthenticationConfigurationUndefinedError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from e

    try:
        search = asyncio.run(
            run_fetch_command(
                repo=repo,
                query=query,
                cycles=cycles,
                interval=interval,
                buffer_size=buffer_size,
                github_auth_type=github_auth_type,
                github_api_url=github_api_url,
                github_pat_token=github_pat_token,
                github_app_id=github_app_id,
                github_app_private_key_path=github_app_private_key_path,
                github_app_installation_id=github_app_installation_id,
            )
        )
    except (ValueError, RuntimeError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    count = len(search.issues)
    typer.echo(f"Tracking {count} {pluralize('task', count)} for {search.repository}")
    for issue in search.issues:
        typer.echo(f"  #{issue.id} {issue.summary}")


if __name__ == "__main__":
    typer_app()
