"""MCP tools for browsing projects and their issue lists."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from mcp.types import TextContent, Tool

from backlog_mcp import links
from backlog_mcp.client import BacklogClient
from backlog_mcp.mcp_tools.common import _text, parse_args
from backlog_mcp.types.api import IssueListResponse, ProjectListResponse
from backlog_mcp.types.inputs import GetProjectDetailsArgs, GetProjectIssuesArgs, ListProjectsArgs


def register() -> tuple[list[Tool], dict[str, Callable[..., Any]]]:
    """Return (tool_definitions, handler_map) for project-domain tools."""
    tools = [
        Tool(
            name="list_projects",
            description="List Backlog projects. Each project links to get_project_details, get_project_issues and a create_issue template.",
            inputSchema={
                "type": "object",
                "properties": {
                    "keyword": {
                        "type": "string",
                        "description": "Only return projects whose name or key contains this text (optional)",
                    },
                },
            },
        ),
        Tool(
            name="get_project_details",
            description="Get details of a project by numeric ID or project key",
            inputSchema={
                "type": "object",
                "properties": {
                    "projectIdOrKey": {"type": "string", "description": "Project ID or project key (e.g. 'DEV')"},
                },
                "required": ["projectIdOrKey"],
            },
        ),
        Tool(
            name="get_project_issues",
            description="List the issues of a project. Each issue links to get_issue_details, get_issue_comments and a comment template.",
            inputSchema={
                "type": "object",
                "properties": {
                    "projectId": {"type": "integer", "description": "Numeric project ID"},
                    "keyword": {"type": "string", "description": "Full-text search keyword (optional)"},
                    "statusId": {"type": "integer", "description": "Only issues in this status ID (optional)"},
                },
                "required": ["projectId"],
            },
        ),
    ]

    handlers: dict[str, Callable[..., Any]] = {
        "list_projects": _handle_list_projects,
        "get_project_details": _handle_get_project_details,
        "get_project_issues": _handle_get_project_issues,
    }

    return tools, handlers


async def _handle_list_projects(arguments: dict[str, Any], client: BacklogClient) -> list[TextContent]:
    args = parse_args(arguments, ListProjectsArgs)
    projects = await client.list_projects()
    keyword = args.get("keyword")
    if keyword:
        needle = keyword.lower()
        projects = [p for p in projects if needle in p["name"].lower() or needle in p["projectKey"].lower()]
    return _text(
        ProjectListResponse(
            total=len(projects),
            projects=[links.with_links(p, links.project_tool_links(p["id"], include_details=True)) for p in projects],
        )
    )


async def _handle_get_project_details(arguments: dict[str, Any], client: BacklogClient) -> list[TextContent]:
    args = parse_args(arguments, GetProjectDetailsArgs)
    project = await client.get_project(args["projectIdOrKey"])
    return _text(links.with_links(project, links.project_tool_links(project["id"], include_details=False)))


async def _handle_get_project_issues(arguments: dict[str, Any], client: BacklogClient) -> list[TextContent]:
    args = parse_args(arguments, GetProjectIssuesArgs)
    status_id = args.get("statusId")
    issues = await client.list_issues(
        args["projectId"],
        keyword=args.get("keyword"),
        status_ids=[status_id] if status_id is not None else None,
    )
    return _text(
        IssueListResponse(
            total=len(issues),
            issues=[links.with_links(i, links.issue_tool_links(i["id"])) for i in issues],
        )
    )
