"""Tests for the ``backlog`` CLI commands."""

from __future__ import annotations

import json
from typing import Any

import pytest
from click.testing import CliRunner

from backlog_mcp import __version__
from backlog_mcp.cli import cli
from backlog_mcp.config import BacklogSettings
from tests._fake_backlog import FakeBacklog


class TestDoctor:
    def test_ok(self, cli_runner: CliRunner, cli_obj: dict[str, Any]) -> None:
        result = cli_runner.invoke(cli, ["doctor"], obj=cli_obj)
        assert result.exit_code == 0
        assert "OK  Space: example.backlog.com" in result.output
        assert "2 project(s) visible" in result.output

    def test_missing_settings(self, cli_runner: CliRunner, cli_obj: dict[str, Any]) -> None:
        result = cli_runner.invoke(cli, ["doctor"], obj={"settings": BacklogSettings()})
        assert result.exit_code == 1
        assert "!!  BACKLOG_API_KEY is not set" in result.output
        assert "BACKLOG_SPACE_ID is not set" in result.output

    def test_rejected_key(self, cli_runner: CliRunner, cli_obj: dict[str, Any]) -> None:
        obj = {"settings": BacklogSettings(api_key="wrong", space_id="example")}
        result = cli_runner.invoke(cli, ["doctor"], obj=obj)
        assert result.exit_code == 1
        assert "401" in result.output


class TestQueries:
    def test_projects(self, cli_runner: CliRunner, cli_obj: dict[str, Any]) -> None:
        result = cli_runner.invoke(cli, ["projects"], obj=cli_obj)
        assert result.exit_code == 0
        assert "DEV" in result.output
        assert "Operations" in result.output
        assert "2 project(s)" in result.output

    def test_projects_json(self, cli_runner: CliRunner, cli_obj: dict[str, Any]) -> None:
        result = cli_runner.invoke(cli, ["projects", "--json"], obj=cli_obj)
        assert result.exit_code == 0
        assert [p["projectKey"] for p in json.loads(result.output)] == ["DEV", "OPS"]

    def test_issues(self, cli_runner: CliRunner, cli_obj: dict[str, Any]) -> None:
        result = cli_runner.invoke(cli, ["issues", "1"], obj=cli_obj)
        assert result.exit_code == 0
        assert "DEV-1" in result.output
        assert "[In Progress] Add dark mode" in result.output
        assert "2 issue(s)" in result.output

    def test_issues_keyword(self, cli_runner: CliRunner, cli_obj: dict[str, Any], backend: FakeBacklog) -> None:
        result = cli_runner.invoke(cli, ["issues", "1", "--keyword", "login", "--json"], obj=cli_obj)
        assert result.exit_code == 0
        assert [i["issueKey"] for i in json.loads(result.output)] == ["DEV-1"]
        assert backend.calls("list_issues")[0].url.params["keyword"] == "login"

    def test_issues_rejects_non_numeric_project(self, cli_runner: CliRunner, cli_obj: dict[str, Any]) -> None:
        result = cli_runner.invoke(cli, ["issues", "DEV"], obj=cli_obj)
        assert result.exit_code == 2

    def test_comments(self, cli_runner: CliRunner, cli_obj: dict[str, Any]) -> None:
        result = cli_runner.invoke(cli, ["comments", "DEV-1"], obj=cli_obj)
        assert result.exit_code == 0
        assert "alice: Reproduced on Chrome" in result.output

    def test_no_comments(self, cli_runner: CliRunner, cli_obj: dict[str, Any]) -> None:
        result = cli_runner.invoke(cli, ["comments", "11"], obj=cli_obj)
        assert result.exit_code == 0
        assert "No comments." in result.output

    def test_backend_error_exits_1(self, cli_runner: CliRunner, cli_obj: dict[str, Any]) -> None:
        result = cli_runner.invoke(cli, ["comments", "NOPE-1"], obj=cli_obj)
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "No issue." in result.output


class TestServeHttp:
    def test_configures_and_serves(
        self, cli_runner: CliRunner, cli_obj: dict[str, Any], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        configured: list[BacklogSettings] = []
        served: dict[str, Any] = {}
        monkeypatch.setattr("backlog_mcp.mcp_server.configure", configured.append)
        monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: served.update(kwargs, app=app))

        result = cli_runner.invoke(cli, ["serve-http", "--port", "9001", "--no-resources"], obj=cli_obj)

        assert result.exit_code == 0, result.output
        assert configured[0].expose_resources is False
        assert served["port"] == 9001
        assert served["host"] == "127.0.0.1"
        assert "http://127.0.0.1:9001/mcp" in result.output


def test_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
