"""Immutable tool table and the name-based dispatcher.

The registry is assembled once from every ``mcp_tools`` domain module's
``register()`` and never mutated afterwards.  ``dispatch`` is a plain
function of (registry, client, name, arguments); the MCP server owns the
soft-error policy on top of it.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from mcp.types import TextContent, Tool

from backlog_mcp.client import BacklogClient
from backlog_mcp.errors import InvalidRequest, NotFound
from backlog_mcp.mcp_tools import issues, projects

_DOMAIN_MODULES = (projects, issues)


@dataclass(frozen=True)
class ToolRegistry:
    tools: tuple[Tool, ...]
    handlers: Mapping[str, Callable[..., Any]]

    def names(self) -> list[str]:
        return [t.name for t in self.tools]


def build_registry() -> ToolRegistry:
    """Collect tool definitions and handlers from all domain modules."""
    tools: list[Tool] = []
    handlers: dict[str, Callable[..., Any]] = {}
    for module in _DOMAIN_MODULES:
        module_tools, module_handlers = module.register()
        for name in module_handlers:
            if name in handlers:
                msg = f"Duplicate tool name: {name}"
                raise ValueError(msg)
        tools.extend(module_tools)
        handlers.update(module_handlers)
    return ToolRegistry(tools=tuple(tools), handlers=MappingProxyType(handlers))


async def dispatch(
    registry: ToolRegistry,
    client: BacklogClient,
    name: str,
    arguments: dict[str, Any] | None,
) -> list[TextContent]:
    """Resolve *name* and run its handler.

    Raises NotFound for an unknown tool and InvalidRequest when no argument
    mapping was supplied at all; handlers raise their own InvalidRequest for
    missing or mistyped fields and BackendError for failed calls.
    """
    handler = registry.handlers.get(name)
    if handler is None:
        msg = f"Unknown tool: {name}"
        raise NotFound(msg)
    if arguments is None:
        msg = "No arguments provided"
        raise InvalidRequest(msg)
    result: list[TextContent] = await handler(arguments, client)
    return result
