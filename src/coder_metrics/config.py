"""Run settings and the ``.githubmetrics`` config file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click

from .models import Window

CONFIG_FILE = ".githubmetrics"

METRICS = ("commits", "hoc", "issues", "lcp", "msgs", "pulls", "reviews")
ALL_METRICS = "all"

# config file key -> (click parameter name, repeatable)
_CONFIG_KEYS = {
    "--token": ("token", False),
    "--days": ("days", False),
    "--coder": ("coder", True),
    "--repo": ("repo", True),
    "--verbose": ("verbose", False),
    "--metric": ("metric", False),
    "--delay": ("delay", False),
    "--organization": ("organization", False),
    "--output": ("output_file", False),
    "--template": ("template", False),
    "--api-url": ("api_url", False),
}

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    token: str
    days: int = 30
    coders: tuple[str, ...] = ()
    repos: tuple[str, ...] = ()
    organization: str | None = None
    metric: str = ALL_METRICS
    delay: float = 30.0
    verbose: bool = False
    output: str = "metrics.html"
    template: str | None = None
    api_url: str | None = None
    verify_ssl: bool = True

    def window(self) -> Window:
        return Window.trailing(self.days)


def parse_config(text: str) -> dict[str, Any]:
    """Parse ``--key=value`` lines into a click ``default_map``.

    Lines without ``=`` and unknown keys are ignored. ``--coder`` and
    ``--repo`` may repeat.
    """
    values: dict[str, Any] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or "=" not in line:
            continue
        key, value = line.split("=", 1)
        entry = _CONFIG_KEYS.get(key.strip())
        if entry is None:
            continue
        name, repeatable = entry
        value = value.strip()
        if repeatable:
            values.setdefault(name, []).append(value)
        elif name == "verbose":
            values[name] = value.lower() in _TRUE
        else:
            values[name] = value
    return values


def load_config_file(path: str | Path) -> dict[str, Any]:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise click.FileError(str(path), hint=str(exc)) from exc
    return parse_config(text)
