"""Async client for the Backlog API v2.

A thin pass-through: one method per endpoint, one HTTP attempt per call,
no caching.  The API key rides along as the ``apiKey`` query parameter on
every request; POST payloads are sent form-encoded in the request body.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import TracebackType
from typing import Any, cast

import httpx

from backlog_mcp.config import BacklogSettings
from backlog_mcp.errors import BackendError
from backlog_mcp.types.backlog import BacklogComment, BacklogIssue, BacklogProject, CreateIssueParams

logger = logging.getLogger(__name__)

_USER_AGENT = "backlog-mcp"


def _error_detail(response: httpx.Response) -> str:
    """Pull Backlog's ``errors[].message`` out of a failed response, if any.

    Never raises: anything unexpected falls back to the raw body text.
    """
    fallback = response.text.strip()[:200]
    try:
        body = response.json()
    except ValueError:
        return fallback
    errors = body.get("errors") if isinstance(body, dict) else None
    if not isinstance(errors, list):
        return fallback
    messages = [e["message"] for e in errors if isinstance(e, dict) and isinstance(e.get("message"), str) and e["message"]]
    return "; ".join(messages) if messages else fallback


def _form(params: Mapping[str, Any]) -> dict[str, str]:
    """Drop unset fields and stringify the rest for a form-encoded body."""
    return {k: str(v) for k, v in params.items() if v is not None}


class BacklogClient:
    """Typed fetch operations against ``https://<space>.<domain>/api/v2``."""

    def __init__(self, settings: BacklogSettings, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self._http = httpx.AsyncClient(
            base_url=settings.base_url,
            transport=transport,
            headers={"User-Agent": _USER_AGENT, "Accept": "application/json"},
        )

    async def __aenter__(self) -> BacklogClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # -- transport ---------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        data: Mapping[str, str] | None = None,
    ) -> Any:
        query: dict[str, Any] = dict(params or {})
        query["apiKey"] = self.settings.api_key
        try:
            response = await self._http.request(method, path, params=query, data=data)
        except httpx.HTTPError as exc:
            logger.error("backend_request_failed", extra={"args_data": {"method": method, "path": path}, "error": str(exc)})
            msg = f"Backlog request {method} {path} failed: {exc}"
            raise BackendError(msg, method=method, path=path) from exc

        if not response.is_success:
            detail = _error_detail(response)
            logger.warning(
                "backend_error_status",
                extra={"args_data": {"method": method, "path": path, "status": response.status_code}, "error": detail},
            )
            msg = f"Backlog API error {response.status_code} on {method} {path}"
            if detail:
                msg = f"{msg}: {detail}"
            raise BackendError(msg, method=method, path=path, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            logger.error("backend_malformed_payload", extra={"args_data": {"method": method, "path": path}}, exc_info=True)
            msg = f"Backlog returned malformed JSON for {method} {path}"
            raise BackendError(msg, method=method, path=path, status_code=response.status_code) from exc

    # -- projects ----------------------------------------------------------

    async def list_projects(self) -> list[BacklogProject]:
        return cast(list[BacklogProject], await self._request("GET", "/projects"))

    async def get_project(self, project_id_or_key: str | int) -> BacklogProject:
        return cast(BacklogProject, await self._request("GET", f"/projects/{project_id_or_key}"))

    # -- issues ------------------------------------------------------------

    async def list_issues(
        self,
        project_id: int | None = None,
        *,
        keyword: str | None = None,
        status_ids: list[int] | None = None,
    ) -> list[BacklogIssue]:
        """List issues, optionally narrowed to one project.

        Backlog's list endpoint only accepts array-shaped filters, so a
        single project id still goes out as ``projectId[]=<id>``.
        """
        params: dict[str, Any] = {}
        if project_id is not None:
            params["projectId[]"] = [project_id]
        if status_ids:
            params["statusId[]"] = list(status_ids)
        if keyword:
            params["keyword"] = keyword
        return cast(list[BacklogIssue], await self._request("GET", "/issues", params=params))

    async def get_issue(self, issue_id_or_key: str | int) -> BacklogIssue:
        return cast(BacklogIssue, await self._request("GET", f"/issues/{issue_id_or_key}"))

    async def create_issue(self, params: CreateIssueParams) -> BacklogIssue:
        return cast(BacklogIssue, await self._request("POST", "/issues", data=_form(params)))

    # -- comments ----------------------------------------------------------

    async def list_comments(self, issue_id: int | str) -> list[BacklogComment]:
        return cast(list[BacklogComment], await self._request("GET", f"/issues/{issue_id}/comments"))

    async def create_comment(self, issue_id: int | str, content: str) -> BacklogComment:
        return cast(
            BacklogComment,
            await self._request("POST", f"/issues/{issue_id}/comments", data={"content": content}),
        )
