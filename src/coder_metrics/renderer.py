"""HTML report renderer with a rich terminal summary."""

from __future__ import annotations

import html
from datetime import datetime
from pathlib import Path
from string import Template
from urllib.parse import urlencode

from rich.console import Console
from rich.table import Table

from .models import UserMetrics, Window
from .report_template import DEFAULT_TEMPLATE

SEARCH_URL = "https://github.com/search"

# metric -> (search qualifiers, search type)
_LINKS = {
    "commits": ("author:{user} author-date:>{since}", "commits"),
    "hoc": ("author:{user} author-date:>{since}", "commits"),
    "issues": ("is:issue author:{user} created:>{since}", "issues"),
    "pulls": ("is:pr author:{user} merged:>{since}", "pullrequests"),
    "reviews": ("is:pr reviewed-by:{user} merged:>{since}", "pullrequests"),
    "msgs": ("is:pr commenter:{user} created:>{since}", "pullrequests"),
}


def _format_number(n: int) -> str:
    return f"{n:,}"


def rank_users(metrics: dict[str, UserMetrics]) -> list[tuple[str, UserMetrics]]:
    """Users ordered by descending score."""
    return sorted(metrics.items(), key=lambda x: x[1].score, reverse=True)


def search_links(
    user: str, window: Window, organization: str | None = None
) -> dict[str, str]:
    """Links to the GitHub search reproducing each linked metric."""
    links = {}
    for metric, (qualifiers, search_type) in _LINKS.items():
        query = qualifiers.format(user=user, since=window.date())
        if organization:
            query += f" org:{organization}"
        links[metric] = f"{SEARCH_URL}?{urlencode({'q': query, 'type': search_type})}"
    return links


def _render_row(user: str, m: UserMetrics, window: Window, organization: str | None) -> str:
    links = search_links(user, window, organization)
    cells = [f"<td>{html.escape(user)}</td>"]
    for metric in ("commits", "hoc", "issues", "pulls", "reviews", "msgs"):
        url = html.escape(links[metric])
        cells.append(f'<td><a href="{url}">{getattr(m, metric)}</a></td>')
    cells.append(f"<td>{m.lcp:.2f}</td>")
    cells.append(f'<td class="score">{m.score}</td>')
    cells.append(f'<td class="repos">{html.escape(m.top_repositories())}</td>')
    return "<tr>" + "".join(cells) + "</tr>"


def load_template(path: str | None) -> str:
    if path is None:
        return DEFAULT_TEMPLATE
    return Path(path).read_text(encoding="utf-8")


def render_html(
    metrics: dict[str, UserMetrics],
    window: Window,
    organization: str | None = None,
    template: str = DEFAULT_TEMPLATE,
) -> str:
    """Fill the report template with one table row per user, best score first."""
    rows = "\n".join(
        _render_row(user, m, window, organization) for user, m in rank_users(metrics)
    )
    return Template(template).safe_substitute(
        rows=rows,
        since=window.date(),
        days=window.days,
        organization=f"in {html.escape(organization)}" if organization else "",
        generated=datetime.now().strftime("%Y-%m-%d %H:%M"),
    )


def write_report(content: str, output_file: str) -> None:
    """Write the report, replacing any existing file, and print confirmation."""
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(content)
    Console().print(f"Saved to {output_file}")


def render_summary(metrics: dict[str, UserMetrics], console: Console | None = None) -> None:
    """Print the ranking to the terminal."""
    console = console or Console()
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Coder")
    for label in ("Commits", "HoC", "Issues", "Pulls", "Reviews", "Msgs", "LcP", "Score ▼"):
        table.add_column(label, justify="right")
    table.add_column("Top repositories")

    for i, (user, m) in enumerate(rank_users(metrics), 1):
        table.add_row(
            str(i),
            user,
            _format_number(m.commits),
            _format_number(m.hoc),
            _format_number(m.issues),
            _format_number(m.pulls),
            _format_number(m.reviews),
            _format_number(m.msgs),
            f"{m.lcp:.1f}h",
            _format_number(m.score),
            m.top_repositories(),
        )
    console.print(table)
