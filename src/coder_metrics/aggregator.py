"""Aggregation: run collectors per user and repository and sum the results."""

from __future__ import annotations

import logging

from rich.progress import Progress, SpinnerColumn, TextColumn

from .collectors import COLLECTORS
from .config import ALL_METRICS, Settings
from .discovery import discover_repositories, resolve_repositories
from .github.client import GitHubClient
from .models import RepoId, UserMetrics, Window

logger = logging.getLogger(__name__)


def _selected(metric: str) -> tuple[str, ...]:
    if metric == ALL_METRICS:
        return tuple(COLLECTORS)
    if metric not in COLLECTORS:
        raise ValueError(f"Unknown metric: {metric}")
    return (metric,)


async def collect_repo_metrics(
    client: GitHubClient,
    repo: RepoId,
    user: str,
    window: Window,
    metric: str = ALL_METRICS,
) -> UserMetrics:
    """Contribution of ``user`` to one repository for the selected metric(s)."""
    selected = _selected(metric)
    delta = UserMetrics()
    for name in selected:
        value = await COLLECTORS[name](client, repo.owner, repo.name, user, window)
        setattr(delta, name, value)
    if "hoc" in selected and delta.hoc:
        delta.repo_hoc[str(repo)] = delta.hoc
    return delta


async def aggregate_metrics(
    client: GitHubClient,
    settings: Settings,
    window: Window | None = None,
) -> dict[str, UserMetrics]:
    """Per-user totals over every repository each user touched in the window."""
    _selected(settings.metric)
    window = window or settings.window()
    logger.debug(
        "Calculating %s metric for %d users for %d days",
        settings.metric,
        len(settings.coders),
        settings.days,
    )

    metrics: dict[str, UserMetrics] = {}
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
    ) as progress:
        for user in settings.coders:
            totals = metrics.setdefault(user, UserMetrics())
            discovered = await discover_repositories(
                client, user, window, organization=settings.organization
            )
            repos = resolve_repositories(
                discovered, settings.repos, organization=settings.organization
            )
            logger.info("User %s has %d repositories", user, len(repos))

            task = progress.add_task(f"Collecting {user}...", total=len(repos))
            for repo in repos:
                progress.update(task, description=f"Collecting {user} in {repo}...")
                totals.add(
                    await collect_repo_metrics(client, repo, user, window, settings.metric)
                )
                progress.advance(task)
            progress.remove_task(task)

            totals.recompute_score()

    return metrics
