"""Data models for coder-metrics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

SCORE_WEIGHTS = {
    "hoc": 1,
    "pulls": 250,
    "issues": 50,
    "commits": 5,
    "reviews": 150,
    "msgs": 5,
}


@dataclass(frozen=True)
class Window:
    """Trailing period within which contributions are counted."""

    start: datetime
    days: int = 0

    @classmethod
    def trailing(cls, days: int, now: datetime | None = None) -> Window:
        now = now or datetime.now(timezone.utc)
        return cls(start=now - timedelta(days=days), days=days)

    def iso(self) -> str:
        """Timestamp for REST ``since=`` parameters."""
        return self.start.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    def date(self) -> str:
        """Date for search qualifiers such as ``created:>``."""
        return self.start.astimezone(timezone.utc).strftime("%Y-%m-%d")


@dataclass(frozen=True)
class RepoId:
    owner: str
    name: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"

    @classmethod
    def parse(cls, text: str) -> RepoId:
        parts = text.split("/")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise ValueError(f"invalid repository identifier: {text!r}")
        return cls(owner=parts[0], name=parts[1])

    @classmethod
    def from_api_url(cls, url: str) -> RepoId | None:
        """Take owner/name from the tail of an API ``repository_url``."""
        parts = [p for p in url.rstrip("/").split("/") if p]
        if len(parts) < 2:
            return None
        return cls(owner=parts[-2], name=parts[-1])


@dataclass
class UserMetrics:
    commits: int = 0
    hoc: int = 0
    issues: int = 0
    lcp: float = 0.0
    msgs: int = 0
    pulls: int = 0
    reviews: int = 0
    score: int = 0
    repo_hoc: dict[str, int] = field(default_factory=dict)

    def add(self, other: UserMetrics) -> None:
        """Merge another set of counts into this one.

        Everything is summed, including ``lcp`` which is an average per
        repository; the score is left alone and must be recomputed.
        """
        self.commits += other.commits
        self.hoc += other.hoc
        self.issues += other.issues
        self.lcp += other.lcp
        self.msgs += other.msgs
        self.pulls += other.pulls
        self.reviews += other.reviews
        for repo, lines in other.repo_hoc.items():
            self.repo_hoc[repo] = self.repo_hoc.get(repo, 0) + lines

    def compute_score(self) -> int:
        return sum(getattr(self, name) * weight for name, weight in SCORE_WEIGHTS.items())

    def recompute_score(self) -> int:
        self.score = self.compute_score()
        return self.score

    def top_repositories(self, limit: int = 3) -> str:
        ranked = sorted(self.repo_hoc.items(), key=lambda x: x[1], reverse=True)
        return ", ".join(f"{repo}({lines})" for repo, lines in ranked[:limit])
