# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
# NEVER import from client.py, mcp_server.py, or mcp_tools: circular imports.
"""Typed contracts for Backlog payloads, link bundles, and tool responses."""

from __future__ import annotations

from backlog_mcp.types.backlog import (
    BacklogComment,
    BacklogIssue,
    BacklogProject,
    BacklogUser,
    CreateIssueParams,
    IssueStatus,
)

__all__ = [
    "BacklogComment",
    "BacklogIssue",
    "BacklogProject",
    "BacklogUser",
    "CreateIssueParams",
    "IssueStatus",
]
