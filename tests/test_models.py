"""Tests for data models."""

from datetime import datetime, timezone

import pytest

from coder_metrics.models import SCORE_WEIGHTS, RepoId, UserMetrics, Window


def test_window_trailing():
    now = datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)
    window = Window.trailing(30, now=now)
    assert window.days == 30
    assert window.date() == "2024-05-31"
    assert window.iso() == "2024-05-31T12:00:00Z"


def test_repo_id_parse():
    repo = RepoId.parse("org/repo")
    assert repo.owner == "org"
    assert repo.name == "repo"
    assert str(repo) == "org/repo"


@pytest.mark.parametrize("text", ["repo", "org/repo/extra", "/repo", "org/", ""])
def test_repo_id_parse_invalid(text):
    with pytest.raises(ValueError):
        RepoId.parse(text)


def test_repo_id_from_api_url():
    repo = RepoId.from_api_url("https://api.github.com/repos/octo/hello")
    assert repo == RepoId("octo", "hello")
    assert RepoId.from_api_url("hello") is None
    assert RepoId.from_api_url("") is None


def test_repo_id_is_hashable():
    assert len({RepoId("a", "b"), RepoId.parse("a/b")}) == 1


def test_user_metrics_defaults():
    m = UserMetrics()
    assert m.score == 0
    assert m.lcp == 0.0
    assert m.repo_hoc == {}


def test_score_weights():
    m = UserMetrics(hoc=7, pulls=2, issues=3, commits=11, reviews=4, msgs=13, lcp=99.5)
    assert m.compute_score() == 7 + 2 * 250 + 3 * 50 + 11 * 5 + 4 * 150 + 13 * 5
    assert set(SCORE_WEIGHTS) == {"hoc", "pulls", "issues", "commits", "reviews", "msgs"}


def test_add_is_additive_and_leaves_score():
    total = UserMetrics(commits=1, hoc=10, lcp=2.0, repo_hoc={"a/b": 10})
    total.recompute_score()
    total.add(UserMetrics(commits=2, hoc=5, lcp=3.0, pulls=1, score=999, repo_hoc={"a/b": 5, "c/d": 1}))
    assert total.commits == 3
    assert total.hoc == 15
    assert total.lcp == 5.0
    assert total.pulls == 1
    assert total.repo_hoc == {"a/b": 15, "c/d": 1}
    assert total.score == 15
    assert total.recompute_score() == 15 + 250 + 15


def test_top_repositories():
    m = UserMetrics(repo_hoc={"o/a": 5, "o/b": 50, "o/c": 20, "o/d": 1})
    assert m.top_repositories() == "o/b(50), o/c(20), o/a(5)"


def test_top_repositories_empty():
    assert UserMetrics().top_repositories() == ""
