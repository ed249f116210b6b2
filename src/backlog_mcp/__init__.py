"""backlog-mcp: MCP server exposing the Backlog issue tracker to agents."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("backlog-mcp")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

from backlog_mcp.client import BacklogClient
from backlog_mcp.config import BacklogSettings, load_settings

__all__ = ["BacklogClient", "BacklogSettings", "__version__", "load_settings"]
