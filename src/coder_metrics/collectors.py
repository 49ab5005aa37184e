"""Metric collectors: one paginated query per metric, reduced to a single value."""

from __future__ import annotations

import inspect
import logging
from datetime import datetime
from typing import Any, AsyncIterator, Awaitable, Callable, TypeVar, Union

import httpx

from .github.client import GitHubClient
from .models import Window

logger = logging.getLogger(__name__)

A = TypeVar("A")

Item = dict[str, Any]
Reducer = Callable[[A, Item], Union[A, Awaitable[A]]]


async def paginate_reduce(
    pages: AsyncIterator[list[Item]],
    reducer: Reducer[A],
    initial: A,
    label: str,
) -> A:
    """Fold every item of every page into ``initial``.

    When a page cannot be fetched even after retries, the failure is logged
    and the value accumulated so far is returned.
    """
    acc = initial
    try:
        async for page in pages:
            for item in page:
                result = reducer(acc, item)
                acc = await result if inspect.isawaitable(result) else result
    except httpx.HTTPError as exc:
        logger.warning("Error fetching %s: %s", label, exc)
    return acc


def _parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def is_merge_commit(commit: Item) -> bool:
    return len(commit.get("parents") or []) > 1


def _is_own_commit(commit: Item, user: str) -> bool:
    author = commit.get("author") or {}
    return author.get("login") == user and not is_merge_commit(commit)


def _is_pull_request(item: Item) -> bool:
    return item.get("pull_request") is not None


async def count_commits(
    client: GitHubClient, owner: str, repo: str, user: str, window: Window
) -> int:
    """Non-merge commits authored by ``user`` since the window start."""

    def reduce(count: int, commit: Item) -> int:
        if not _is_own_commit(commit, user):
            return count
        logger.debug("Found commit %s by %s in %s/%s", commit.get("sha"), user, owner, repo)
        return count + 1

    return await paginate_reduce(
        client.list_commits(owner, repo, author=user, since=window.iso()),
        reduce,
        0,
        f"commits for {user} in {owner}/{repo}",
    )


async def count_hoc(
    client: GitHubClient, owner: str, repo: str, user: str, window: Window
) -> int:
    """Hits of code: additions plus changes over every file of every own commit.

    Each qualifying commit costs one extra request for its diff stats.
    """

    async def reduce(hoc: int, commit: Item) -> int:
        if not _is_own_commit(commit, user):
            return hoc
        sha = commit.get("sha", "")
        try:
            details = await client.get_commit(owner, repo, sha)
        except httpx.HTTPError as exc:
            logger.warning("Error fetching commit details for %s: %s", sha, exc)
            return hoc
        for f in details.get("files") or []:
            additions = f.get("additions", 0)
            changes = f.get("changes", 0)
            logger.debug(
                "Commit %s: file %s - additions: %d, changes: %d",
                sha,
                f.get("filename"),
                additions,
                changes,
            )
            hoc += additions + changes
        return hoc

    return await paginate_reduce(
        client.list_commits(owner, repo, author=user, since=window.iso()),
        reduce,
        0,
        f"commits for {user} in {owner}/{repo}",
    )


async def count_issues(
    client: GitHubClient, owner: str, repo: str, user: str, window: Window
) -> int:
    """Issues (not pull requests) opened by ``user``."""
    return await paginate_reduce(
        client.list_issues(owner, repo, creator=user, since=window.iso()),
        lambda count, issue: count if _is_pull_request(issue) else count + 1,
        0,
        f"issues for {user} in {owner}/{repo}",
    )


async def pr_lifecycle(
    client: GitHubClient, owner: str, repo: str, user: str, window: Window
) -> float:
    """Average hours from creation to closure of ``user``'s closed pull requests."""

    def reduce(acc: tuple[float, int], issue: Item) -> tuple[float, int]:
        created = issue.get("created_at")
        closed = issue.get("closed_at")
        if not _is_pull_request(issue) or not created or not closed:
            return acc
        hours = (_parse_ts(closed) - _parse_ts(created)).total_seconds() / 3600
        logger.debug(
            "Pull request #%s by %s: created %s, closed %s, %.2f hours",
            issue.get("number"),
            user,
            created,
            closed,
            hours,
        )
        return acc[0] + hours, acc[1] + 1

    total, count = await paginate_reduce(
        client.list_issues(owner, repo, creator=user, since=window.iso(), state="closed"),
        reduce,
        (0.0, 0),
        f"pull requests for {user} in {owner}/{repo}",
    )
    if count == 0:
        return 0.0
    average = total / count
    logger.debug(
        "Average pull request lifecycle for %s in %s/%s: %.2f hours", user, owner, repo, average
    )
    return average


async def count_msgs(
    client: GitHubClient, owner: str, repo: str, user: str, window: Window
) -> int:
    """Comments on pull requests ``user`` commented on."""

    def reduce(msgs: int, pr: Item) -> int:
        comments = pr.get("comments") or 0
        logger.debug("Pull request #%s in %s/%s has %d comments", pr.get("number"), owner, repo, comments)
        return msgs + comments

    query = f"repo:{owner}/{repo} is:pr commenter:{user} created:>{window.date()}"
    return await paginate_reduce(
        client.search_issues(query),
        reduce,
        0,
        f"pull request comments for {user} in {owner}/{repo}",
    )


async def count_pulls(
    client: GitHubClient, owner: str, repo: str, user: str, window: Window
) -> int:
    """Merged pull requests authored by ``user``."""

    def reduce(pulls: int, pr: Item) -> int:
        if not _is_pull_request(pr) or pr.get("closed_at") is None:
            return pulls
        logger.debug("Pull request #%s by %s merged at %s", pr.get("number"), user, pr["closed_at"])
        return pulls + 1

    query = f"repo:{owner}/{repo} is:pr author:{user} merged:>{window.date()}"
    return await paginate_reduce(
        client.search_issues(query),
        reduce,
        0,
        f"pull requests for {user} in {owner}/{repo}",
    )


async def count_reviews(
    client: GitHubClient, owner: str, repo: str, user: str, window: Window
) -> int:
    """Merged pull requests reviewed by ``user``.

    The ``merged:`` qualifier is trusted; results are not re-checked.
    """

    def reduce(reviews: int, pr: Item) -> int:
        logger.debug("Pull request #%s reviewed by %s", pr.get("number"), user)
        return reviews + 1

    query = f"repo:{owner}/{repo} reviewed-by:{user} is:pr merged:>{window.date()}"
    return await paginate_reduce(
        client.search_issues(query),
        reduce,
        0,
        f"reviewed pull requests for {user} in {owner}/{repo}",
    )


COLLECTORS: dict[str, Callable[..., Awaitable[Any]]] = {
    "commits": count_commits,
    "hoc": count_hoc,
    "issues": count_issues,
    "lcp": pr_lifecycle,
    "msgs": count_msgs,
    "pulls": count_pulls,
    "reviews": count_reviews,
}
