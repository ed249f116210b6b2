"""Fixtures for CLI interface tests."""

from __future__ import annotations

from typing import Any

import pytest
from click.testing import CliRunner

from backlog_mcp.client import BacklogClient
from backlog_mcp.config import BacklogSettings
from tests._fake_backlog import FakeBacklog


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def cli_obj(settings: BacklogSettings, backend: FakeBacklog, monkeypatch: pytest.MonkeyPatch) -> dict[str, Any]:
    """Context object for ``cli.invoke`` with every client routed to the fake backend."""

    def _client(s: BacklogSettings) -> BacklogClient:
        return BacklogClient(s, transport=backend.transport())

    monkeypatch.setattr("backlog_mcp.cli.BacklogClient", _client)
    return {"settings": settings}
