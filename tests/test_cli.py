"""Tests for the CLI entrypoint."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
from click.testing import CliRunner

from coder_metrics import __version__
from coder_metrics.cli import main


def _invoke(args, env=None):
    runner = CliRunner()
    with patch("coder_metrics.orchestrator.run", new=AsyncMock()) as run:
        result = runner.invoke(main, args, env=env or {"GITHUB_TOKEN": "tok"})
    return result, run


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_builds_settings_from_flags():
    result, run = _invoke(
        ["--coder", "alice", "--coder", "bob", "--organization", "org", "--days", "14", "--metric", "HOC"]
    )
    assert result.exit_code == 0, result.output
    settings = run.await_args.args[0]
    assert settings.token == "tok"
    assert settings.coders == ("alice", "bob")
    assert settings.organization == "org"
    assert settings.days == 14
    assert settings.metric == "hoc"
    assert settings.output == "metrics.html"
    assert settings.verify_ssl is True


def test_requires_coder():
    result, run = _invoke(["--organization", "org"])
    assert result.exit_code == 2
    assert "No coders specified" in result.output
    run.assert_not_awaited()


def test_requires_repo_or_organization():
    result, run = _invoke(["--coder", "alice"])
    assert result.exit_code == 2
    assert "No repositories or organization" in result.output
    run.assert_not_awaited()


def test_rejects_unknown_metric():
    result, run = _invoke(["--coder", "alice", "--organization", "org", "--metric", "score"])
    assert result.exit_code == 2
    run.assert_not_awaited()


def test_requires_token():
    result, run = _invoke(["--coder", "alice", "--organization", "org"], env={"GITHUB_TOKEN": None})
    assert result.exit_code == 2
    run.assert_not_awaited()


def test_missing_template_is_fatal():
    result, run = _invoke(
        ["--coder", "alice", "--organization", "org", "--template", "/nonexistent/t.html"]
    )
    assert result.exit_code == 2
    run.assert_not_awaited()


def test_missing_output_directory_is_fatal():
    result, run = _invoke(
        ["--coder", "alice", "--organization", "org", "--output", "/nonexistent/dir/m.html"]
    )
    assert result.exit_code == 2
    run.assert_not_awaited()


def test_config_file_with_flag_override():
    runner = CliRunner()
    with runner.isolated_filesystem():
        with open(".githubmetrics", "w") as f:
            f.write("--token=from-file\n--coder=alice\n--organization=org\n--days=7\n--metric=pulls\n")
        with patch("coder_metrics.orchestrator.run", new=AsyncMock()) as run:
            result = runner.invoke(main, ["--days", "60"], env={"GITHUB_TOKEN": None})
    assert result.exit_code == 0, result.output
    settings = run.await_args.args[0]
    assert settings.token == "from-file"
    assert settings.coders == ("alice",)
    assert settings.organization == "org"
    assert settings.metric == "pulls"
    assert settings.days == 60


def test_explicit_config_path(tmp_path):
    config = tmp_path / "team.conf"
    config.write_text("--coder=carol\n--repo=org/a\n--repo=org/b\n--delay=5\n")
    result, run = _invoke(["--config", str(config)])
    assert result.exit_code == 0, result.output
    settings = run.await_args.args[0]
    assert settings.coders == ("carol",)
    assert settings.repos == ("org/a", "org/b")
    assert settings.delay == 5.0


def test_unreadable_config_is_fatal(tmp_path):
    result, run = _invoke(["--config", str(tmp_path / "missing.conf")])
    assert result.exit_code != 0
    run.assert_not_awaited()


def test_http_error_exits_1():
    response = MagicMock(spec=httpx.Response)
    response.status_code = 401
    error = httpx.HTTPStatusError("unauthorized", request=MagicMock(), response=response)
    runner = CliRunner()
    with patch("coder_metrics.orchestrator.run", new=AsyncMock(side_effect=error)):
        result = runner.invoke(
            main, ["--coder", "alice", "--organization", "org"], env={"GITHUB_TOKEN": "tok"}
        )
    assert result.exit_code == 1
    assert "Authentication failed" in result.output


def test_verbose_enables_debug_logging():
    with patch("coder_metrics.cli.logging.basicConfig") as basic_config:
        result, run = _invoke(["--coder", "alice", "--organization", "org", "--verbose"])
    assert result.exit_code == 0, result.output
    assert run.await_args.args[0].verbose is True
    assert basic_config.call_args.kwargs["level"] == logging.DEBUG


def test_default_logging_level_is_info():
    with patch("coder_metrics.cli.logging.basicConfig") as basic_config:
        result, _ = _invoke(["--coder", "alice", "--organization", "org"])
    assert result.exit_code == 0, result.output
    assert basic_config.call_args.kwargs["level"] == logging.INFO
