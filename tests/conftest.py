"""Shared pytest fixtures for backlog-mcp tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest

from backlog_mcp.client import BacklogClient
from backlog_mcp.config import BacklogSettings
from tests._fake_backlog import FakeBacklog


@pytest.fixture
def settings() -> BacklogSettings:
    return BacklogSettings(api_key="test-key", space_id="example")


@pytest.fixture
def backend() -> FakeBacklog:
    """Fresh in-memory Backlog for each test."""
    return FakeBacklog(api_key="test-key")


@pytest.fixture
async def client(settings: BacklogSettings, backend: FakeBacklog) -> AsyncGenerator[BacklogClient, None]:
    """BacklogClient wired to the fake backend."""
    c = BacklogClient(settings, transport=backend.transport())
    yield c
    await c.aclose()
