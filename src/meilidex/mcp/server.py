"""Meilidex MCP server entrypoint using FastMCP.

Exposes index, document, settings and task tools built atop the Meilidex client.
Run with:
  - meilidex-mcp
  - or: python -m meilidex.mcp.server (ensure PYTHONPATH includes ./src)
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastmcp import FastMCP

from meilidex.client import Client
from meilidex.config import Settings, load_settings
from meilidex.mcp.tools import register_index_tools, register_task_tools
from meilidex.mcp.tools.indexes import get_client


class AppState:
    """Application state shared by MCP tools."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.client: Optional[Client] = None

    def init_client(self) -> None:
        """Initialize the search client from configuration."""
        if self.settings.meilisearch.url:
            self.client = Client.from_settings(self.settings)
        else:
            self.client = None


# Global state and server instance
_state: Optional[AppState] = None
mcp = FastMCP("Meilidex MCP Server")


# ----- Tools -----

@mcp.tool
async def health() -> Dict[str, Any]:
    """Report whether the search service is reachable and available."""
    client = get_client(_state)
    return {"healthy": await client.is_healthy(), "url": client.host}


# ----- Entrypoint -----

def main() -> None:
    """Initialize state and run the MCP server."""
    global _state
    settings = load_settings()
    logging.basicConfig(
        level=settings.app.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _state = AppState(settings)
    _state.init_client()
    # Register tools
    register_index_tools(mcp, get_state=lambda: _state)
    register_task_tools(mcp, get_state=lambda: _state)
    # Choose transport based on configuration: stdio (default), http, or sse
    transport = settings.app.transport
    if transport in ("http", "sse"):
        mcp.run(transport=transport, host=settings.app.host, port=settings.app.port)
    else:
        mcp.run()


if __name__ == "__main__":  # pragma: no cover
    main()
