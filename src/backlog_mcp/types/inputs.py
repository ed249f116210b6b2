# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
"""TypedDict contracts for MCP tool handler input arguments.

Each TypedDict mirrors the JSON Schema ``inputSchema`` on the corresponding
``mcp.types.Tool`` definition.  ``TOOL_ARGS_MAP`` is the tagged union:
tool name -> argument record.  ``mcp_tools.common.parse_args`` validates a
raw argument mapping against these declarations (required keys present,
scalar types correct) before a handler touches the backend.
"""

# NOTE: Do NOT add ``from __future__ import annotations`` to this module.
# It breaks TypedDict.__required_keys__ / __optional_keys__ introspection
# on Python <3.14, which parse_args and the schema sync test rely on.

from typing import NotRequired, TypedDict

# ---------------------------------------------------------------------------
# projects.py handlers
# ---------------------------------------------------------------------------


class ListProjectsArgs(TypedDict):
    keyword: NotRequired[str]


class GetProjectDetailsArgs(TypedDict):
    projectIdOrKey: str


class GetProjectIssuesArgs(TypedDict):
    projectId: int
    keyword: NotRequired[str]
    statusId: NotRequired[int]


# ---------------------------------------------------------------------------
# issues.py handlers
# ---------------------------------------------------------------------------


class GetIssueDetailsArgs(TypedDict):
    issueIdOrKey: str


class GetIssueCommentsArgs(TypedDict):
    issueId: int


class CreateIssueArgs(TypedDict):
    projectId: int
    summary: str
    issueTypeId: int
    priorityId: int
    description: NotRequired[str]
    startDate: NotRequired[str]
    dueDate: NotRequired[str]
    estimatedHours: NotRequired[float]
    actualHours: NotRequired[float]
    assigneeId: NotRequired[int]


class CreateIssueCommentArgs(TypedDict):
    issueId: int
    content: str


# Registry: tool_name -> TypedDict class.
TOOL_ARGS_MAP: dict[str, type] = {
    # projects.py
    "list_projects": ListProjectsArgs,
    "get_project_details": GetProjectDetailsArgs,
    "get_project_issues": GetProjectIssuesArgs,
    # issues.py
    "get_issue_details": GetIssueDetailsArgs,
    "get_issue_comments": GetIssueCommentsArgs,
    "create_issue": CreateIssueArgs,
    "create_issue_comment": CreateIssueCommentArgs,
}
