"""Contains utility functions for GitHub interactions."""


async def split_repository_in_configuration(repo: str | None) -> tuple[str, str]:
    """Splits a repository presentable name into owner and repository."""
    if repo is None:
        raise ValueError("A repository in 'owner/repo' format is required.")
    repo = repo.strip("/")
    parts = repo.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError("Repository must be in the format 'owner/repo' with no leading/trailing slashes or extra parts.")
    owner, repository = parts
    return owner, repository


def build_issue_search_query(owner: str, repo_name: str, query: str, exclude_closed: bool) -> str:
    """Build a GitHub search query scoped to the issues of one repository."""
    qualifiers = [f"repo:{owner}/{repo_name}", "is:issue"]
    if exclude_closed:
        qualifiers.append("is:open")
    if query.strip():
        qualifiers.append(query.strip())
    return " ".join(qualifiers)
