"""Orchestrator: wires together client, aggregator, and renderer."""

from __future__ import annotations

from .aggregator import aggregate_metrics
from .config import Settings
from .github.client import GitHubClient
from .renderer import load_template, render_html, render_summary, write_report


async def run(settings: Settings) -> None:
    """Main pipeline: fetch data, aggregate, render."""
    template = load_template(settings.template)
    window = settings.window()

    async with GitHubClient(
        token=settings.token,
        delay=settings.delay,
        base_url=settings.api_url,
        verify_ssl=settings.verify_ssl,
    ) as client:
        metrics = await aggregate_metrics(client, settings, window=window)

    content = render_html(
        metrics, window, organization=settings.organization, template=template
    )
    write_report(content, settings.output)
    render_summary(metrics)
