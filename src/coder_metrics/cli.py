"""CLI entrypoint for coder-metrics."""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from pathlib import Path

import click
import httpx

from . import __version__
from .config import ALL_METRICS, CONFIG_FILE, METRICS, Settings, load_config_file


def _load_config(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    """Use the config file as the default map so explicit flags win."""
    path = value
    if path is None and os.path.isfile(CONFIG_FILE):
        path = CONFIG_FILE
    if path is not None:
        ctx.default_map = {**load_config_file(path), **(ctx.default_map or {})}
    return path


def _setup_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # keep per-request noise out of verbose output
    logging.getLogger("httpx").setLevel(logging.WARNING)


@click.command()
@click.option(
    "--config",
    type=click.Path(dir_okay=False),
    default=None,
    is_eager=True,
    expose_value=False,
    callback=_load_config,
    help=f"Config file with --key=value lines [default: ./{CONFIG_FILE} if present]",
)
@click.option(
    "--token",
    envvar="GITHUB_TOKEN",
    required=True,
    show_envvar=True,
    help="GitHub personal access token",
)
@click.option(
    "--days",
    type=click.IntRange(min=1),
    default=30,
    show_default=True,
    help="Number of days to measure",
)
@click.option(
    "--coder",
    multiple=True,
    help="GitHub username to measure (repeatable)",
)
@click.option(
    "--repo",
    multiple=True,
    help="Repository owner/name to measure in addition to discovered ones (repeatable)",
)
@click.option(
    "--organization",
    default=None,
    help="Only count repositories owned by this organization",
)
@click.option(
    "--metric",
    type=click.Choice([*METRICS, ALL_METRICS], case_sensitive=False),
    default=ALL_METRICS,
    show_default=True,
    help="Metric to calculate",
)
@click.option(
    "--delay",
    type=float,
    default=30.0,
    show_default=True,
    help="Extra seconds to wait after a rate limit reset",
)
@click.option("--verbose", is_flag=True, default=False, help="Enable verbose logging")
@click.option(
    "--output",
    "output_file",
    default="metrics.html",
    show_default=True,
    type=click.Path(dir_okay=False, writable=True),
    help="HTML report path (overwritten)",
)
@click.option(
    "--template",
    default=None,
    type=click.Path(exists=True, dir_okay=False, readable=True),
    help="Custom HTML template with $rows placeholder",
)
@click.option(
    "--api-url",
    default=None,
    help="GitHub Enterprise API base URL",
)
@click.option(
    "--no-ssl-verify",
    is_flag=True,
    default=False,
    help="Disable SSL verification (self-signed certs)",
)
@click.version_option(version=__version__)
def main(
    token: str,
    days: int,
    coder: tuple[str, ...],
    repo: tuple[str, ...],
    organization: str | None,
    metric: str,
    delay: float,
    verbose: bool,
    output_file: str,
    template: str | None,
    api_url: str | None,
    no_ssl_verify: bool,
) -> None:
    """Rank GitHub coders by a weighted contribution score.

    \b
    Score = HoC + 250*Pulls + 50*Issues + 5*Commits + 150*Reviews + 5*Msgs

    \b
    Examples:
      coder-metrics --coder alice --coder bob --organization myorg
      coder-metrics --coder alice --repo myorg/api --days 90 --metric hoc
    """
    if not coder:
        raise click.UsageError("No coders specified. Use --coder to add GitHub usernames.")
    if not repo and not organization:
        raise click.UsageError(
            "No repositories or organization specified. Use --repo to add "
            "repositories or --organization to filter by organization."
        )
    parent = Path(output_file).parent
    if not parent.is_dir():
        raise click.UsageError(f"Output directory '{parent}' does not exist.")

    settings = Settings(
        token=token,
        days=days,
        coders=coder,
        repos=repo,
        organization=organization,
        metric=metric.lower(),
        delay=delay,
        verbose=verbose,
        output=output_file,
        template=template,
        api_url=api_url,
        verify_ssl=not no_ssl_verify,
    )

    _setup_logging(settings)

    from .orchestrator import run

    try:
        asyncio.run(run(settings))
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        if status in (401, 403):
            click.echo("Error: Authentication failed. Check your --token or $GITHUB_TOKEN.", err=True)
        else:
            click.echo(f"Error: GitHub API returned {status}.", err=True)
        sys.exit(1)
    except (httpx.ConnectError, httpx.ConnectTimeout) as exc:
        click.echo(f"Error: Could not connect to GitHub API. {exc}", err=True)
        sys.exit(1)
    except OSError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
