"""Tests for settings loading."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest

from backlog_mcp.config import BacklogSettings, load_settings, missing_settings

_ENV_VARS = ("BACKLOG_API_KEY", "BACKLOG_SPACE_ID", "BACKLOG_DOMAIN", "BACKLOG_MCP_RESOURCES", "BACKLOG_MCP_LOG_DIR")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    # load_dotenv writes os.environ directly; monkeypatch then restores the originals.
    for name in _ENV_VARS:
        os.environ.pop(name, None)


class TestLoadSettings:
    def test_defaults(self) -> None:
        settings = load_settings(dotenv=False)
        assert settings == BacklogSettings()
        assert settings.domain == "backlog.com"
        assert settings.expose_resources is True
        assert settings.log_dir is None

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("BACKLOG_API_KEY", "k")
        monkeypatch.setenv("BACKLOG_SPACE_ID", "acme")
        monkeypatch.setenv("BACKLOG_DOMAIN", "backlog.jp")
        monkeypatch.setenv("BACKLOG_MCP_LOG_DIR", str(tmp_path))
        settings = load_settings(dotenv=False)
        assert settings.api_key == "k"
        assert settings.base_url == "https://acme.backlog.jp/api/v2"
        assert settings.log_dir == tmp_path

    @pytest.mark.parametrize(("raw", "expected"), [("0", False), ("off", False), ("False", False), ("1", True), ("", True)])
    def test_resources_flag(self, monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
        monkeypatch.setenv("BACKLOG_MCP_RESOURCES", raw)
        assert load_settings(dotenv=False).expose_resources is expected

    def test_overrides_win_and_none_is_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BACKLOG_DOMAIN", "backlog.jp")
        settings = load_settings(dotenv=False, domain="backlog.com", expose_resources=None)
        assert settings.domain == "backlog.com"
        assert settings.expose_resources is True

    def test_unknown_domain_warns(self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
        monkeypatch.setenv("BACKLOG_DOMAIN", "example.org")
        with caplog.at_level(logging.WARNING, logger="backlog_mcp"):
            settings = load_settings(dotenv=False)
        assert settings.domain == "example.org"
        assert "example.org" in caplog.text

    def test_dotenv_file_loaded(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("BACKLOG_API_KEY=from-dotenv\nBACKLOG_SPACE_ID=dotspace\n")
        monkeypatch.chdir(tmp_path)
        settings = load_settings()
        assert settings.api_key == "from-dotenv"
        assert settings.space_id == "dotspace"

    def test_environment_beats_dotenv(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("BACKLOG_API_KEY=from-dotenv\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("BACKLOG_API_KEY", "from-env")
        assert load_settings().api_key == "from-env"


class TestMissingSettings:
    def test_reports_empty_credentials(self) -> None:
        assert missing_settings(BacklogSettings()) == ["BACKLOG_API_KEY", "BACKLOG_SPACE_ID"]

    def test_complete(self) -> None:
        assert missing_settings(BacklogSettings(api_key="k", space_id="s")) == []
