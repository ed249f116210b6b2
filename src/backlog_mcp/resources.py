"""Read-only ``backlog:///`` resources.

URI shapes::

    backlog:///projects
    backlog:///project/<id-or-key>
    backlog:///project/<id-or-key>/issues
    backlog:///issue/<id-or-key>
    backlog:///issue/<id-or-key>/comments

Paths are matched literally and case-sensitively; query strings are not
supported.  Each projection carries ``_links`` pointing at related
resources, and ``_links.self`` always re-fetches the entity it sits on.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from mcp.types import Resource

from backlog_mcp import links
from backlog_mcp.client import BacklogClient
from backlog_mcp.errors import BackendError, InternalError, InvalidRequest, NotFound
from backlog_mcp.types.api import CommentResourceLinks, IssueDetailView, IssueSummaryView, ProjectView
from backlog_mcp.types.backlog import BacklogComment, BacklogIssue, BacklogProject

logger = logging.getLogger(__name__)

JSON_MIME = "application/json"


class PathKind(enum.Enum):
    PROJECTS = "projects"
    PROJECT = "project"
    PROJECT_ISSUES = "project_issues"
    ISSUE = "issue"
    ISSUE_COMMENTS = "issue_comments"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class ResourcePath:
    kind: PathKind
    ident: str | None = None


def parse_resource_uri(uri: str) -> ResourcePath:
    """Classify a resource URI into one of the known path shapes.

    Raises InvalidRequest when a ``project``/``issue`` URI lacks its id.
    Everything that does not match a known shape is ``UNRECOGNIZED``.
    """
    parts = urlsplit(uri)
    if parts.scheme != links.SCHEME or parts.netloc or parts.query:
        return ResourcePath(PathKind.UNRECOGNIZED)
    segments = parts.path.strip("/").split("/") if parts.path.strip("/") else []

    match segments:
        case ["projects"]:
            return ResourcePath(PathKind.PROJECTS)
        case ["project" | "issue" as kind] | ["project" | "issue" as kind, "", *_]:
            msg = f"Missing {kind} id in resource URI: {uri}"
            raise InvalidRequest(msg)
        case ["project", ident]:
            return ResourcePath(PathKind.PROJECT, ident)
        case ["project", ident, "issues"]:
            return ResourcePath(PathKind.PROJECT_ISSUES, ident)
        case ["issue", ident]:
            return ResourcePath(PathKind.ISSUE, ident)
        case ["issue", ident, "comments"]:
            return ResourcePath(PathKind.ISSUE_COMMENTS, ident)
        case _:
            return ResourcePath(PathKind.UNRECOGNIZED)


# ---------------------------------------------------------------------------
# Projections
# ---------------------------------------------------------------------------


def project_view(project: BacklogProject) -> ProjectView:
    return ProjectView(
        id=project["id"],
        key=project["projectKey"],
        name=project["name"],
        description=project.get("description"),
        _links={
            "self": links.project_uri(project["id"]),
            "issues": links.project_issues_uri(project["id"]),
        },
    )


def _issue_links(issue: BacklogIssue) -> dict[str, str]:
    return {
        "self": links.issue_uri(issue["id"]),
        "comments": links.issue_comments_uri(issue["id"]),
        "project": links.project_uri(issue["projectId"]),
    }


def issue_summary_view(issue: BacklogIssue) -> IssueSummaryView:
    return IssueSummaryView(
        id=issue["id"],
        issueKey=issue["issueKey"],
        summary=issue["summary"],
        status=dict(issue["status"]),
        _links=_issue_links(issue),  # type: ignore[typeddict-item]
    )


def issue_detail_view(issue: BacklogIssue) -> IssueDetailView:
    return IssueDetailView(
        id=issue["id"],
        issueKey=issue["issueKey"],
        projectId=issue["projectId"],
        summary=issue["summary"],
        description=issue.get("description"),
        status=dict(issue["status"]),
        _links=_issue_links(issue),  # type: ignore[typeddict-item]
    )


def comment_view(comment: BacklogComment, issue_id: int | str) -> dict[str, Any]:
    # Comments have no URI of their own; self points at the collection.
    comment_links: CommentResourceLinks = {
        "self": links.issue_comments_uri(issue_id),
        "issue": links.issue_uri(issue_id),
    }
    return links.with_links(comment, comment_links)


# ---------------------------------------------------------------------------
# Read / list
# ---------------------------------------------------------------------------


async def _project_id(client: BacklogClient, ident: str) -> int:
    """Resolve a project key to its numeric id; numeric idents pass through."""
    if ident.isdigit():
        return int(ident)
    project = await client.get_project(ident)
    return project["id"]


async def _fetch(client: BacklogClient, path: ResourcePath) -> Any:
    match path.kind:
        case PathKind.PROJECTS:
            return [project_view(p) for p in await client.list_projects()]
        case PathKind.PROJECT:
            return project_view(await client.get_project(path.ident or ""))
        case PathKind.PROJECT_ISSUES:
            project_id = await _project_id(client, path.ident or "")
            return [issue_summary_view(i) for i in await client.list_issues(project_id)]
        case PathKind.ISSUE:
            return issue_detail_view(await client.get_issue(path.ident or ""))
        case PathKind.ISSUE_COMMENTS:
            issue_id = path.ident or ""
            return [comment_view(c, issue_id) for c in await client.list_comments(issue_id)]
        case _:
            return None


async def read_resource(client: BacklogClient, uri: str) -> Any:
    """Fetch and project the resource behind *uri*.

    Raises NotFound for unknown paths (or a backend 404), InvalidRequest for
    a missing id, InternalError for any other backend failure.
    """
    try:
        path = parse_resource_uri(uri)
    except InvalidRequest as exc:
        logger.warning("resource_invalid", extra={"uri": uri, "error": str(exc)})
        raise
    try:
        payload = await _fetch(client, path)
    except BackendError as exc:
        logger.error("resource_read_failed", extra={"uri": uri, "error": str(exc)})
        if exc.status_code == 404:
            raise NotFound(f"Resource not found: {uri}") from exc
        raise InternalError(f"Failed to read {uri}: {exc}") from exc
    if payload is None:
        msg = f"Unknown resource: {uri}"
        logger.warning("resource_invalid", extra={"uri": uri, "error": msg})
        raise NotFound(msg)
    return payload


async def list_resources(client: BacklogClient) -> list[Resource]:
    """The project index plus one resource per live project."""
    try:
        projects = await client.list_projects()
    except BackendError as exc:
        logger.error("resource_list_failed", extra={"uri": links.PROJECTS_URI, "error": str(exc)})
        raise InternalError(f"Failed to list resources: {exc}") from exc

    resources = [
        Resource(
            uri=links.PROJECTS_URI,  # type: ignore[arg-type]
            name="Backlog projects",
            description="All projects visible to the configured API key",
            mimeType=JSON_MIME,
        ),
    ]
    for project in projects:
        resources.append(
            Resource(
                uri=links.project_uri(project["id"]),  # type: ignore[arg-type]
                name=project["name"],
                description=project.get("description") or None,
                mimeType=JSON_MIME,
            )
        )
    return resources
