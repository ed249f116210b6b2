"""Prompt templates that steer an agent through chains of tool calls.

Two flavours: static guides that only name the tools to call, and
``analyze_bug_issues`` which does its own backend aggregation up front and
embeds every matching issue as a resource in the returned messages.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from mcp.types import (
    EmbeddedResource,
    GetPromptResult,
    Prompt,
    PromptArgument,
    PromptMessage,
    TextContent,
    TextResourceContents,
)

from backlog_mcp import links
from backlog_mcp.client import BacklogClient
from backlog_mcp.errors import BackendError, InternalError, NotFound
from backlog_mcp.types.backlog import BacklogIssue, BacklogProject

logger = logging.getLogger(__name__)

# Matched case-insensitively against issue summary and description.
BUG_KEYWORD = "bug"
# Concurrent per-project issue fetches in analyze_bug_issues.
MAX_CONCURRENT_FETCHES = 5
# Matches embedded in a single analyze_bug_issues prompt.
MAX_EMBEDDED_ISSUES = 50

_ANALYZE_PROJECT_ISSUES_TEXT = """\
Analyze the issues of a Backlog project and organize them under these headings:
1. Main categories of issues
2. Current progress
3. Remaining work
4. Recommended next actions

Start by calling the list_projects tool to fetch the project list, then pick
the project to analyze and call get_project_issues with its projectId. The
_links.tools entries in each result tell you which call to make next.
"""

_SUMMARIZE_DISCUSSION_TEXT = """\
To summarize the discussion on {target}, collect the information in these steps:

1. Call get_issue_details to fetch the issue
2. Call get_issue_comments with the issue's numeric id to fetch its comments
3. Summarize:
   - Main points of the discussion
   - Decisions made
   - Open questions
   - Next actions
"""

_BUG_ANALYSIS_TEXT = """\
The issues above are every issue across all projects whose summary or
description mentions "{keyword}". Analyze them:
1. Group the bugs by probable cause or affected area
2. Flag the ones that look most severe or most frequently reported
3. Point out duplicates
4. Suggest an order in which to fix them

Use get_issue_comments with an issue id for more context before concluding,
and create_issue_comment to record findings on an issue.
"""

PROMPTS: tuple[Prompt, ...] = (
    Prompt(
        name="analyze_project_issues",
        description="Analyze and organize the issues of a project",
    ),
    Prompt(
        name="summarize_issue_discussion",
        description="Summarize the discussion on an issue",
        arguments=[
            PromptArgument(
                name="issueIdOrKey",
                description="Issue ID or key to summarize (optional; the agent asks otherwise)",
                required=False,
            ),
        ],
    ),
    Prompt(
        name="analyze_bug_issues",
        description=f"Collect every issue mentioning '{BUG_KEYWORD}' across all projects and analyze them",
    ),
)


def list_prompts() -> list[Prompt]:
    return list(PROMPTS)


def _user_text(text: str) -> PromptMessage:
    return PromptMessage(role="user", content=TextContent(type="text", text=text))


def _mentions(issue: BacklogIssue, keyword: str) -> bool:
    haystack = f"{issue.get('summary') or ''}\n{issue.get('description') or ''}".lower()
    return keyword.lower() in haystack


async def collect_keyword_issues(
    client: BacklogClient,
    keyword: str = BUG_KEYWORD,
    *,
    max_concurrency: int = MAX_CONCURRENT_FETCHES,
) -> list[BacklogIssue]:
    """Fetch every project's issues concurrently and keep keyword matches.

    One fetch per project, at most *max_concurrency* in flight.  Any failed
    fetch fails the whole collection.  Result order is not guaranteed.
    """
    projects: list[BacklogProject] = await client.list_projects()
    semaphore = asyncio.Semaphore(max_concurrency)

    async def _project_matches(project: BacklogProject) -> list[BacklogIssue]:
        async with semaphore:
            issues = await client.list_issues(project["id"])
        return [i for i in issues if _mentions(i, keyword)]

    per_project = await asyncio.gather(*(_project_matches(p) for p in projects))
    return [issue for matches in per_project for issue in matches]


def _issue_resource(issue: BacklogIssue) -> PromptMessage:
    uri = links.issue_uri(issue["id"])
    return PromptMessage(
        role="user",
        content=EmbeddedResource(
            type="resource",
            resource=TextResourceContents(
                uri=uri,  # type: ignore[arg-type]
                mimeType="application/json",
                text=json.dumps(issue, ensure_ascii=False, default=str),
            ),
        ),
    )


async def _bug_analysis(client: BacklogClient) -> GetPromptResult:
    try:
        matches = await collect_keyword_issues(client, BUG_KEYWORD)
    except BackendError as exc:
        logger.error("prompt_aggregation_failed", extra={"prompt": "analyze_bug_issues", "error": str(exc)})
        raise InternalError(f"Failed to collect issues: {exc}") from exc

    messages = [_issue_resource(issue) for issue in matches[:MAX_EMBEDDED_ISSUES]]
    instruction = _BUG_ANALYSIS_TEXT.format(keyword=BUG_KEYWORD)
    if len(matches) > MAX_EMBEDDED_ISSUES:
        instruction += (
            f"\nOnly the first {MAX_EMBEDDED_ISSUES} of {len(matches)} matching issues are included; "
            "use get_project_issues with keyword to see the rest.\n"
        )
    elif not matches:
        instruction = f'No issue in any project mentions "{BUG_KEYWORD}". Report that no bug reports were found.\n'
    messages.append(_user_text(instruction))
    return GetPromptResult(
        description=f"{len(matches)} issue(s) mentioning '{BUG_KEYWORD}'",
        messages=messages,
    )


async def get_prompt(client: BacklogClient, name: str, arguments: dict[str, Any] | None = None) -> GetPromptResult:
    """Render prompt *name*.  Unknown names raise NotFound."""
    match name:
        case "analyze_project_issues":
            return GetPromptResult(
                description="Analyze and organize the issues of a project",
                messages=[_user_text(_ANALYZE_PROJECT_ISSUES_TEXT)],
            )
        case "summarize_issue_discussion":
            issue_ref = (arguments or {}).get("issueIdOrKey")
            target = f"issue {issue_ref}" if issue_ref else "the issue"
            return GetPromptResult(
                description="Summarize the discussion on an issue",
                messages=[_user_text(_SUMMARIZE_DISCUSSION_TEXT.format(target=target))],
            )
        case "analyze_bug_issues":
            return await _bug_analysis(client)
        case _:
            msg = f"Unknown prompt: {name}"
            raise NotFound(msg)
