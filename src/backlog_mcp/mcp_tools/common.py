"""Pure helpers shared across MCP tool modules.

This module has NO dependency on ``mcp_server`` module globals, so it can
be imported freely without triggering circular-import issues.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, TypeVar, cast, get_type_hints

from mcp.types import TextContent

from backlog_mcp.errors import InvalidRequest

_T = TypeVar("_T")


def _text(content: object) -> list[TextContent]:
    if isinstance(content, str):
        return [TextContent(type="text", text=content)]
    return [TextContent(type="text", text=json.dumps(content, indent=2, ensure_ascii=False, default=str))]


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_type(name: str, value: Any, expected: Any) -> Any:
    if expected is int:
        if isinstance(value, bool) or not isinstance(value, int):
            msg = f"{name} must be an integer"
            raise InvalidRequest(msg)
    elif expected is float:
        if isinstance(value, bool) or not isinstance(value, int | float):
            msg = f"{name} must be a number"
            raise InvalidRequest(msg)
    elif expected is str and not isinstance(value, str):
        msg = f"{name} must be a string"
        raise InvalidRequest(msg)
    return value


def parse_args(arguments: Mapping[str, Any], cls: type[_T]) -> _T:
    """Build the typed argument record *cls* from a raw MCP argument mapping.

    Fields are checked in declaration order.  A required field that is absent,
    ``None`` or blank raises ``InvalidRequest`` naming it; a present field of
    the wrong scalar type raises ``InvalidRequest`` too.  Blank optional fields
    and keys the record does not declare are dropped.
    """
    required: frozenset[str] = getattr(cls, "__required_keys__", frozenset())
    parsed: dict[str, Any] = {}
    for name, expected in get_type_hints(cls).items():
        value = arguments.get(name)
        if _is_missing(value):
            if name in required:
                msg = f"Missing required argument: {name}"
                raise InvalidRequest(msg)
            continue
        parsed[name] = _check_type(name, value, expected)
    return cast(_T, parsed)
