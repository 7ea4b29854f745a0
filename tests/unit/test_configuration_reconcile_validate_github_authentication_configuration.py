"""Unit tests for validate_github_authentication_configuration function."""

from pathlib import Path

import pytest

from github_task_browser.configuration.exceptions import GitHubAuthenticationConfigurationUndefinedError
from github_task_browser.configuration.models import GitHubAuthenticationType
from github_task_browser.configuration.reconcile import validate_github_authentication_configuration

KEY_PATH = Path("/path/to/key.pem")


@pytest.mark.asyncio
async def test_valid_pat_authentication() -> None:
    """Test that PAT authentication is validated correctly."""
    auth_type = await validate_github_authentication_configuration(
        github_pat_token="test-token",
        github_app_id=None,
        github_app_private_key_path=None,
        github_app_installation_id=None,
    )
    assert auth_type == GitHubAuthenticationType.PAT


@pytest.mark.asyncio
async def test_valid_app_authentication() -> None:
    """Test that GitHub App authentication is validated correctly."""
    auth_type = await validate_github_authentication_configuration(
        github_pat_token=None,
        github_app_id=12345,
        github_app_private_key_path=KEY_PATH,
        github_app_installation_id=67890,
    )
    assert auth_type == GitHubAuthenticationType.APP


@pytest.mark.asyncio
async def test_both_auth_methods_error() -> None:
    """Test that error is raised when both PAT and App authentication are provided."""
    with pytest.raises(GitHubAuthenticationConfigurationUndefinedError, match="Both PAT and GitHub App configurations are defined"):
        await validate_github_authentication_configuration(
            github_pat_token="test-token",
            github_app_id=12345,
            github_app_private_key_path=None,
            github_app_installation_id=None,
        )


@pytest.mark.asyncio
async def test_no_auth_error() -> None:
    """Test that error is raised when no authentication is provided."""
    with pytest.raises(GitHubAuthenticationConfigurationUndefinedError, match="No GitHub authentication configuration provided"):
        await validate_github_authentication_configuration(
            github_pat_token=None,
            github_app_id=None,
            github_app_private_key_path=None,
            github_app_installation_id=None,
        )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "app_id, key_path, installation_id, missing",
    [
        pytest.param(None, KEY_PATH, 67890, ["GitHub App ID"], id="missing app id"),
        pytest.param(12345, None, 67890, ["GitHub App private key path"], id="missing private key path"),
        pytest.param(12345, KEY_PATH, None, ["GitHub App installation ID"], id="missing installation id"),
        pytest.param(None, None, 67890, ["GitHub App ID", "GitHub App private key path"], id="missing several"),
    ],
)
async def test_incomplete_app_configuration(app_id: int | None, key_path: Path | None, installation_id: int | None, missing: list[str]) -> None:
    """Test that every missing GitHub App setting is named in the error."""
    with pytest.raises(GitHubAuthenticationConfigurationUndefinedError) as exc_info:
        await validate_github_authentication_configuration(
            github_pat_token=None,
            github_app_id=app_id,
            github_app_private_key_path=key_path,
            github_app_installation_id=installation_id,
        )

    assert "Incomplete GitHub App configuration" in str(exc_info.value)
    for name in missing:
        assert name in str(exc_info.value)


@pytest.mark.asyncio
async def test_error_message_contains_cli_and_env_variable_names() -> None:
    """Test that error messages include CLI option and environment variable names."""
    with pytest.raises(GitHubAuthenticationConfigurationUndefinedError) as exc_info:
        await validate_github_authentication_configuration(
            github_pat_token=None,
            github_app_id=12345,
            github_app_private_key_path=None,
            github_app_installation_id=None,
        )

    error_message = str(exc_info.value)
    assert "command line option --github-app-private-key-path" in error_message
    assert "environment variable GITHUB_APP_PRIVATE_KEY_PATH" in error_message
