"""Builders for the ``_links`` bundles embedded in every response.

Resources link to other resources by ``backlog:///`` URI.  Tool results
link forward to the tools an agent is likely to call next, either with
concrete ``arguments`` or with a fill-in-the-blank ``template``.
"""

from __future__ import annotations

from typing import Any

from backlog_mcp.types.api import ToolCallLink, ToolLink, ToolLinks, ToolTemplateLink

SCHEME = "backlog"
PROJECTS_URI = f"{SCHEME}:///projects"

# Priority prefilled in create_issue templates.
DEFAULT_PRIORITY_ID = 2


# ---------------------------------------------------------------------------
# Resource URIs
# ---------------------------------------------------------------------------


def project_uri(project_id: int | str) -> str:
    return f"{SCHEME}:///project/{project_id}"


def project_issues_uri(project_id: int | str) -> str:
    return f"{project_uri(project_id)}/issues"


def issue_uri(issue_id: int | str) -> str:
    return f"{SCHEME}:///issue/{issue_id}"


def issue_comments_uri(issue_id: int | str) -> str:
    return f"{issue_uri(issue_id)}/comments"


# ---------------------------------------------------------------------------
# Tool suggestions
# ---------------------------------------------------------------------------


def tool_call(name: str, **arguments: Any) -> ToolCallLink:
    return ToolCallLink(name=name, arguments=arguments)


def tool_template(name: str, **template: Any) -> ToolTemplateLink:
    return ToolTemplateLink(name=name, template=template)


def get_project_details_link(project_id: int) -> ToolCallLink:
    return tool_call("get_project_details", projectIdOrKey=str(project_id))


def get_project_issues_link(project_id: int) -> ToolCallLink:
    return tool_call("get_project_issues", projectId=project_id)


def create_issue_link(project_id: int) -> ToolTemplateLink:
    return tool_template("create_issue", projectId=project_id, summary="", issueTypeId=0, priorityId=DEFAULT_PRIORITY_ID)


def get_issue_details_link(issue_id: int) -> ToolCallLink:
    return tool_call("get_issue_details", issueIdOrKey=str(issue_id))


def get_issue_comments_link(issue_id: int) -> ToolCallLink:
    return tool_call("get_issue_comments", issueId=issue_id)


def create_issue_comment_link(issue_id: int) -> ToolTemplateLink:
    return tool_template("create_issue_comment", issueId=issue_id, content="")


def tool_links(*links: ToolLink) -> ToolLinks:
    """Key suggestions by tool name: ``{"tools": {name: link, ...}}``."""
    return ToolLinks(tools={link["name"]: link for link in links})


def with_links(payload: Any, links: Any) -> dict[str, Any]:
    """Return a copy of a backend payload with ``_links`` attached."""
    return {**payload, "_links": links}


def project_tool_links(project_id: int, *, include_details: bool = True) -> dict[str, Any]:
    suggestions: list[ToolLink] = [get_project_issues_link(project_id), create_issue_link(project_id)]
    if include_details:
        suggestions.insert(0, get_project_details_link(project_id))
    return dict(tool_links(*suggestions))


def issue_tool_links(issue_id: int, *, include_details: bool = True) -> dict[str, Any]:
    suggestions: list[ToolLink] = [get_issue_comments_link(issue_id), create_issue_comment_link(issue_id)]
    if include_details:
        suggestions.insert(0, get_issue_details_link(issue_id))
    return dict(tool_links(*suggestions))
