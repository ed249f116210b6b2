"""Fixtures for MCP server tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest

from backlog_mcp.client import BacklogClient
from backlog_mcp.config import BacklogSettings
from tests._fake_backlog import FakeBacklog


@pytest.fixture
async def mcp_client(settings: BacklogSettings, backend: FakeBacklog) -> AsyncGenerator[BacklogClient, None]:
    """Set up a BacklogClient on the fake backend and patch the MCP module global."""
    c = BacklogClient(settings, transport=backend.transport())

    import backlog_mcp.mcp_server as mcp_mod

    original_client = mcp_mod.client
    mcp_mod.client = c

    yield c

    mcp_mod.client = original_client
    await c.aclose()
