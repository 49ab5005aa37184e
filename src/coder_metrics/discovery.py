"""Repository discovery: find repositories a user touched through search."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .collectors import paginate_reduce
from .github.client import GitHubClient
from .models import RepoId, Window

logger = logging.getLogger(__name__)

# qualifier -> verb used in log lines
_QUERIES = (
    ("author", "created a pull request"),
    ("commenter", "commented on a pull request"),
    ("reviewed-by", "reviewed a pull request"),
)


def _in_organization(repo: RepoId, organization: str | None) -> bool:
    return not organization or repo.owner == organization


async def discover_repositories(
    client: GitHubClient,
    user: str,
    window: Window,
    organization: str | None = None,
) -> list[RepoId]:
    """Union of repositories where ``user`` authored, commented on or reviewed PRs."""
    found: dict[RepoId, None] = {}

    for qualifier, verb in _QUERIES:
        query = f"is:pr {qualifier}:{user} created:>{window.date()}"

        def reduce(repos: dict[RepoId, None], item: dict, verb: str = verb) -> dict[RepoId, None]:
            if item.get("pull_request") is None:
                return repos
            repo = RepoId.from_api_url(item.get("repository_url", ""))
            if repo is None or not _in_organization(repo, organization):
                return repos
            if repo not in repos:
                logger.debug("User %s %s in %s", user, verb, repo)
            repos[repo] = None
            return repos

        await paginate_reduce(
            client.search_issues(query),
            reduce,
            found,
            f"pull requests where {user} is {qualifier}",
        )

    return list(found)


def resolve_repositories(
    discovered: Iterable[RepoId],
    explicit: Iterable[str] = (),
    organization: str | None = None,
) -> list[RepoId]:
    """Merge discovered repositories with explicitly configured ``owner/name`` strings."""
    repos: dict[RepoId, None] = dict.fromkeys(discovered)
    for text in explicit:
        try:
            repo = RepoId.parse(text)
        except ValueError:
            logger.warning("Skipping invalid repo string: %s", text)
            continue
        if _in_organization(repo, organization):
            repos[repo] = None
    return list(repos)
