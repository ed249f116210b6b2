"""TypedDicts for link bundles and MCP tool / resource responses."""

from __future__ import annotations

from typing import Any, TypedDict

# ---------------------------------------------------------------------------
# Link bundles
# ---------------------------------------------------------------------------


class ToolCallLink(TypedDict):
    """A ready-to-run tool suggestion with concrete arguments."""

    name: str
    arguments: dict[str, Any]


class ToolTemplateLink(TypedDict):
    """A tool suggestion whose arguments the caller still has to fill in."""

    name: str
    template: dict[str, Any]


ToolLink = ToolCallLink | ToolTemplateLink


class ToolLinks(TypedDict):
    tools: dict[str, ToolLink]


class ProjectResourceLinks(TypedDict):
    self: str
    issues: str


class IssueResourceLinks(TypedDict):
    self: str
    comments: str
    project: str


class CommentResourceLinks(TypedDict):
    self: str
    issue: str


# ---------------------------------------------------------------------------
# Resource projections
# ---------------------------------------------------------------------------


class ProjectView(TypedDict):
    id: int
    key: str
    name: str
    description: str | None
    _links: ProjectResourceLinks


class IssueSummaryView(TypedDict):
    id: int
    issueKey: str
    summary: str
    status: dict[str, Any]
    _links: IssueResourceLinks


class IssueDetailView(IssueSummaryView):
    projectId: int
    description: str | None


# ---------------------------------------------------------------------------
# Tool responses
# ---------------------------------------------------------------------------


class ProjectListResponse(TypedDict):
    total: int
    projects: list[dict[str, Any]]


class IssueListResponse(TypedDict):
    total: int
    issues: list[dict[str, Any]]


class CommentListResponse(TypedDict):
    total: int
    comments: list[dict[str, Any]]


class ErrorResponse(TypedDict):
    """Soft error envelope returned by every failing tool call."""

    error: str
