"""Canned GitHub payloads and page iterators for tests."""

from __future__ import annotations


async def iter_pages(*pages):
    for page in pages:
        yield page


def pages_of(*pages):
    """side_effect producing a fresh page iterator on every call."""
    return lambda *args, **kwargs: iter_pages(*pages)


def commit(sha: str, login: str = "alice", parents: int = 1) -> dict:
    return {
        "sha": sha,
        "author": {"login": login},
        "parents": [{"sha": f"p{i}"} for i in range(parents)],
    }


def search_item(repo: str, number: int = 1, **fields) -> dict:
    item = {
        "number": number,
        "repository_url": f"https://api.github.com/repos/{repo}",
        "pull_request": {"url": f"https://api.github.com/repos/{repo}/pulls/{number}"},
    }
    item.update(fields)
    return item
