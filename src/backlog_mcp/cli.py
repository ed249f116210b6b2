"""CLI for the Backlog MCP server.

Settings come from BACKLOG_API_KEY / BACKLOG_SPACE_ID (or a local .env).

Usage:
    backlog doctor                        # Check settings and connectivity
    backlog projects                      # List projects
    backlog issues <project-id>           # List a project's issues
    backlog comments <issue-id>           # List an issue's comments
    backlog serve-http --port 8765        # Serve MCP over streamable HTTP
"""

from __future__ import annotations

import asyncio
import json as json_mod
import sys
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import click

from backlog_mcp import __version__
from backlog_mcp.client import BacklogClient
from backlog_mcp.config import BacklogSettings, load_settings, missing_settings
from backlog_mcp.errors import BackendError

_T = TypeVar("_T")

DEFAULT_HTTP_PORT = 8765


def _settings(ctx: click.Context) -> BacklogSettings:
    settings: BacklogSettings = ctx.obj["settings"]
    return settings


def _call(settings: BacklogSettings, fn: Callable[[BacklogClient], Awaitable[_T]]) -> _T:
    """Run one client coroutine, exiting 1 with a message on backend failure."""

    async def _go() -> _T:
        async with BacklogClient(settings) as client:
            return await fn(client)

    try:
        return asyncio.run(_go())
    except BackendError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _emit_json(data: Any) -> None:
    click.echo(json_mod.dumps(data, indent=2, ensure_ascii=False, default=str))


@click.group()
@click.version_option(version=__version__, prog_name="backlog")
@click.option("--domain", default=None, help="Backlog domain (backlog.com, backlog.jp)")
@click.pass_context
def cli(ctx: click.Context, domain: str | None) -> None:
    """Backlog issue tracker: MCP server and read-only queries."""
    ctx.ensure_object(dict)
    if "settings" not in ctx.obj:
        ctx.obj["settings"] = load_settings(domain=domain)


@cli.command()
@click.pass_context
def doctor(ctx: click.Context) -> None:
    """Check settings, then call the API once to confirm they work."""
    settings = _settings(ctx)
    missing = missing_settings(settings)
    if missing:
        for name in missing:
            click.echo(f"  !!  {name} is not set")
        sys.exit(1)
    click.echo(f"  OK  Space: {settings.space_id}.{settings.domain}")
    projects = _call(settings, lambda c: c.list_projects())
    click.echo(f"  OK  API key accepted ({len(projects)} project(s) visible)")


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def projects(ctx: click.Context, as_json: bool) -> None:
    """List projects."""
    result = _call(_settings(ctx), lambda c: c.list_projects())
    if as_json:
        _emit_json(result)
        return
    for p in result:
        click.echo(f"{p['id']:>8}  {p['projectKey']:<12} {p['name']}")
    click.echo(f"\n{len(result)} project(s)")


@cli.command()
@click.argument("project_id", type=int)
@click.option("--keyword", default=None, help="Full-text search keyword")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def issues(ctx: click.Context, project_id: int, keyword: str | None, as_json: bool) -> None:
    """List the issues of PROJECT_ID."""
    result = _call(_settings(ctx), lambda c: c.list_issues(project_id, keyword=keyword))
    if as_json:
        _emit_json(result)
        return
    for i in result:
        status = i.get("status", {}).get("name", "")
        click.echo(f"{i['issueKey']:<14} [{status}] {i['summary']}")
    click.echo(f"\n{len(result)} issue(s)")


@cli.command()
@click.argument("issue_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def comments(ctx: click.Context, issue_id: str, as_json: bool) -> None:
    """List the comments on ISSUE_ID (numeric id or issue key)."""
    result = _call(_settings(ctx), lambda c: c.list_comments(issue_id))
    if as_json:
        _emit_json(result)
        return
    if not result:
        click.echo("No comments.")
        return
    for c in result:
        author = c.get("createdUser", {}).get("name", "?")
        click.echo(f"[{c['created']}] {author}: {c.get('content') or ''}")


@cli.command("serve-http")
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address")
@click.option("--port", default=DEFAULT_HTTP_PORT, show_default=True, type=int, help="Bind port")
@click.option("--no-resources", is_flag=True, help="Expose only tools and prompts")
@click.pass_context
def serve_http(ctx: click.Context, host: str, port: int, no_resources: bool) -> None:
    """Serve the MCP server over streamable HTTP at /mcp."""
    import dataclasses

    import uvicorn

    from backlog_mcp import mcp_server

    settings = _settings(ctx)
    if no_resources:
        settings = dataclasses.replace(settings, expose_resources=False)
    mcp_server.configure(settings)
    click.echo(f"Backlog MCP: http://{host}:{port}/mcp")
    uvicorn.run(mcp_server.create_mcp_app(), host=host, port=port, log_level="warning")


if __name__ == "__main__":
    cli()
