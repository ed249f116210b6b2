"""Shapes of the Backlog API v2 JSON payloads this server consumes.

Only the keys the server reads are declared.  Backlog returns many more
(``archived``, ``assignee``, ``priority`` ...) and those pass through to
tool results untouched.
"""

from __future__ import annotations

from typing import NotRequired, TypedDict


class BacklogProject(TypedDict):
    id: int
    projectKey: str
    name: str
    description: NotRequired[str | None]


class IssueStatus(TypedDict):
    id: int
    name: str


class BacklogIssue(TypedDict):
    id: int
    projectId: int
    issueKey: str
    summary: str
    description: str | None
    status: IssueStatus


class BacklogUser(TypedDict):
    id: int
    name: str
    roleType: int


class BacklogComment(TypedDict):
    id: int
    content: str | None
    created: str
    updated: str
    createdUser: BacklogUser


class CreateIssueParams(TypedDict):
    """Form fields accepted by ``POST /issues``."""

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
