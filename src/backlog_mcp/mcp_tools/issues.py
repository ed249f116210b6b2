"""MCP tools for issue details, comments, and issue/comment creation."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from mcp.types import TextContent, Tool

from backlog_mcp import links
from backlog_mcp.client import BacklogClient
from backlog_mcp.mcp_tools.common import _text, parse_args
from backlog_mcp.types.api import CommentListResponse
from backlog_mcp.types.backlog import CreateIssueParams
from backlog_mcp.types.inputs import (
    CreateIssueArgs,
    CreateIssueCommentArgs,
    GetIssueCommentsArgs,
    GetIssueDetailsArgs,
)


def register() -> tuple[list[Tool], dict[str, Callable[..., Any]]]:
    """Return (tool_definitions, handler_map) for issue-domain tools."""
    tools = [
        Tool(
            name="get_issue_details",
            description="Get full details of an issue by numeric ID or issue key (e.g. 'DEV-12')",
            inputSchema={
                "type": "object",
                "properties": {
                    "issueIdOrKey": {"type": "string", "description": "Issue ID or issue key"},
                },
                "required": ["issueIdOrKey"],
            },
        ),
        Tool(
            name="get_issue_comments",
            description="List the comments on an issue",
            inputSchema={
                "type": "object",
                "properties": {
                    "issueId": {"type": "integer", "description": "Numeric issue ID"},
                },
                "required": ["issueId"],
            },
        ),
        Tool(
            name="create_issue",
            description=(
                "Create a new issue in a project. The create_issue template from list_projects or "
                "get_project_details prefills projectId and a default priority."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "projectId": {"type": "integer", "description": "Numeric project ID"},
                    "summary": {"type": "string", "description": "Issue title"},
                    "description": {"type": "string", "description": "Issue description"},
                    "issueTypeId": {"type": "integer", "description": "Issue type ID"},
                    "priorityId": {"type": "integer", "description": "Priority ID (as listed by the Backlog priorities API)"},
                    "startDate": {"type": "string", "description": "Start date (YYYY-MM-DD)"},
                    "dueDate": {"type": "string", "description": "Due date (YYYY-MM-DD)"},
                    "estimatedHours": {"type": "number", "description": "Estimated hours"},
                    "actualHours": {"type": "number", "description": "Actual hours"},
                    "assigneeId": {"type": "integer", "description": "Assignee user ID"},
                },
                "required": ["projectId", "summary", "issueTypeId", "priorityId"],
            },
        ),
        Tool(
            name="create_issue_comment",
            description="Add a comment to an issue",
            inputSchema={
                "type": "object",
                "properties": {
                    "issueId": {"type": "integer", "description": "Numeric issue ID"},
                    "content": {"type": "string", "description": "Comment text"},
                },
                "required": ["issueId", "content"],
            },
        ),
    ]

    handlers: dict[str, Callable[..., Any]] = {
        "get_issue_details": _handle_get_issue_details,
        "get_issue_comments": _handle_get_issue_comments,
        "create_issue": _handle_create_issue,
        "create_issue_comment": _handle_create_issue_comment,
    }

    return tools, handlers


async def _handle_get_issue_details(arguments: dict[str, Any], client: BacklogClient) -> list[TextContent]:
    args = parse_args(arguments, GetIssueDetailsArgs)
    issue = await client.get_issue(args["issueIdOrKey"])
    return _text(links.with_links(issue, links.issue_tool_links(issue["id"], include_details=False)))


async def _handle_get_issue_comments(arguments: dict[str, Any], client: BacklogClient) -> list[TextContent]:
    args = parse_args(arguments, GetIssueCommentsArgs)
    issue_id = args["issueId"]
    comments = await client.list_comments(issue_id)
    follow_up = links.tool_links(links.create_issue_comment_link(issue_id))
    return _text(
        CommentListResponse(
            total=len(comments),
            comments=[links.with_links(c, follow_up) for c in comments],
        )
    )


async def _handle_create_issue(arguments: dict[str, Any], client: BacklogClient) -> list[TextContent]:
    args = parse_args(arguments, CreateIssueArgs)
    issue = await client.create_issue(CreateIssueParams(**args))
    return _text(links.with_links(issue, links.issue_tool_links(issue["id"])))


async def _handle_create_issue_comment(arguments: dict[str, Any], client: BacklogClient) -> list[TextContent]:
    args = parse_args(arguments, CreateIssueCommentArgs)
    comment = await client.create_comment(args["issueId"], args["content"])
    return _text(links.with_links(comment, links.tool_links(links.get_issue_comments_link(args["issueId"]))))
