"""MCP server for the Backlog issue tracker.

Exposes Backlog projects, issues, and comments as MCP tools, resources,
and prompts.  Every request re-fetches from the Backlog API; nothing is
cached.

Usage:
    backlog-mcp                      # stdio transport, settings from env / .env
    backlog-mcp --no-resources       # tools + prompts only
    backlog-mcp --log-dir ./logs     # JSONL log file instead of stderr
"""

from __future__ import annotations

import argparse
import json
import logging
import time
from pathlib import Path
from typing import Any

from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.types import (
    CallToolRequest,
    CallToolResult,
    GetPromptResult,
    Prompt,
    Resource,
    ServerResult,
    TextContent,
    Tool,
)

from backlog_mcp import __version__, prompts, resources
from backlog_mcp.client import BacklogClient
from backlog_mcp.config import BacklogSettings, load_settings
from backlog_mcp.errors import InvalidRequest
from backlog_mcp.mcp_tools.common import _text
from backlog_mcp.tool_registry import ToolRegistry, build_registry, dispatch
from backlog_mcp.types.api import ErrorResponse

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Server setup
# ---------------------------------------------------------------------------

server = Server("backlog-mcp", version=__version__)
registry: ToolRegistry = build_registry()
client: BacklogClient | None = None


def _get_client() -> BacklogClient:
    if client is None:
        msg = "Backlog client not initialized"
        raise RuntimeError(msg)
    return client


# ---------------------------------------------------------------------------
# Resources (registered by enable_resources)
# ---------------------------------------------------------------------------


async def list_resources() -> list[Resource]:
    return await resources.list_resources(_get_client())


async def read_resource(uri: Any) -> list[ReadResourceContents]:
    payload = await resources.read_resource(_get_client(), str(uri))
    return [
        ReadResourceContents(
            content=json.dumps(payload, indent=2, ensure_ascii=False, default=str),
            mime_type=resources.JSON_MIME,
        )
    ]


def enable_resources(srv: Server) -> None:
    """Register the resource handlers, advertising the ``resources`` capability.

    Some deployments only want tools and prompts, so resources are opt-out
    rather than registered at import time.
    """
    srv.list_resources()(list_resources)  # type: ignore[no-untyped-call]
    srv.read_resource()(read_resource)  # type: ignore[no-untyped-call]


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


@server.list_prompts()  # type: ignore[untyped-decorator,no-untyped-call]
async def list_prompts() -> list[Prompt]:
    return prompts.list_prompts()


@server.get_prompt()  # type: ignore[untyped-decorator,no-untyped-call]
async def get_prompt(name: str, arguments: dict[str, str] | None = None) -> GetPromptResult:
    try:
        return await prompts.get_prompt(_get_client(), name, arguments)
    except Exception:
        logger.error("prompt_error", extra={"prompt": name, "args_data": arguments}, exc_info=True)
        raise


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@server.list_tools()  # type: ignore[untyped-decorator,no-untyped-call]
async def list_tools() -> list[Tool]:
    return list(registry.tools)


@server.call_tool(validate_input=False)  # type: ignore[untyped-decorator]
async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
    """Run a tool; failures come back as ``{"error": ...}`` text, never as protocol errors."""
    t0 = time.monotonic()
    try:
        result = await dispatch(registry, _get_client(), name, arguments)
    except InvalidRequest as exc:
        logger.warning("tool_invalid_request", extra={"tool": name, "args_data": arguments, "error": str(exc)})
        return _text(ErrorResponse(error=str(exc)))
    except Exception as exc:
        logger.error("tool_error", extra={"tool": name, "args_data": arguments}, exc_info=True)
        return _text(ErrorResponse(error=str(exc)))
    duration_ms = round((time.monotonic() - t0) * 1000, 1)
    logger.info("tool_call", extra={"tool": name, "args_data": arguments, "duration_ms": duration_ms})
    return result


_sdk_call_tool = server.request_handlers[CallToolRequest]


async def _handle_call_tool_request(req: CallToolRequest) -> ServerResult:
    """Route ``tools/call`` requests, keeping an omitted ``arguments`` as ``None``.

    The SDK's own handler substitutes ``{}`` for a missing argument mapping,
    which would hide it from ``dispatch``.
    """
    if req.params.arguments is None:
        content = await call_tool(req.params.name, None)
        return ServerResult(CallToolResult(content=list(content), isError=False))
    return await _sdk_call_tool(req)


server.request_handlers[CallToolRequest] = _handle_call_tool_request


# ---------------------------------------------------------------------------
# HTTP transport factory
# ---------------------------------------------------------------------------


def create_mcp_app() -> Any:
    """Create a Starlette app serving MCP streamable-HTTP at ``/mcp``.

    The session manager's task group runs for the lifetime of the app, so
    the app must be served with lifespan support (uvicorn does this).
    """
    import contextlib
    from collections.abc import AsyncIterator

    from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
    from starlette.applications import Starlette
    from starlette.routing import Mount

    session_manager = StreamableHTTPSessionManager(
        app=server,
        json_response=False,
        stateless=True,
    )

    async def _handle_mcp(scope: Any, receive: Any, send: Any) -> None:
        await session_manager.handle_request(scope, receive, send)

    @contextlib.asynccontextmanager
    async def _lifespan(app: Starlette) -> AsyncIterator[None]:
        async with session_manager.run():
            yield

    return Starlette(routes=[Mount("/mcp", app=_handle_mcp)], lifespan=_lifespan)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def configure(settings: BacklogSettings) -> BacklogClient:
    """Install the process-wide client and optional resource handlers."""
    global client

    from backlog_mcp.logging import setup_logging

    setup_logging(settings.log_dir)
    client = BacklogClient(settings)
    if settings.expose_resources:
        enable_resources(server)
    logger.info(
        "mcp_server_start",
        extra={"args_data": {"space_id": settings.space_id, "domain": settings.domain, "resources": settings.expose_resources}},
    )
    return client


async def _run(settings: BacklogSettings) -> None:
    backlog = configure(settings)
    async with backlog:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    import asyncio

    parser = argparse.ArgumentParser(description="Backlog MCP server")
    parser.add_argument("--domain", default=None, help="Backlog domain (backlog.com, backlog.jp)")
    parser.add_argument("--no-resources", action="store_true", help="Expose only tools and prompts")
    parser.add_argument("--log-dir", type=Path, default=None, help="Write JSONL logs here instead of stderr")
    args = parser.parse_args()

    settings = load_settings(
        domain=args.domain,
        expose_resources=False if args.no_resources else None,
        log_dir=args.log_dir,
    )
    asyncio.run(_run(settings))


if __name__ == "__main__":
    main()
