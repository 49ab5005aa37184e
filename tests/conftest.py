"""Shared fixtures: a fake GitHub client fed with canned pages."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from coder_metrics.github.client import GitHubClient
from coder_metrics.models import Window

from .helpers import pages_of


@pytest.fixture
def window() -> Window:
    return Window.trailing(30, now=datetime(2024, 6, 30, tzinfo=timezone.utc))


@pytest.fixture
def client():
    client = MagicMock(spec=GitHubClient)
    client.list_commits.side_effect = pages_of()
    client.list_issues.side_effect = pages_of()
    client.search_issues.side_effect = pages_of()
    client.get_commit = AsyncMock(return_value={"files": []})
    return client
