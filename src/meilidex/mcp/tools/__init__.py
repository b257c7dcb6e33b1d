"""Tool registration modules for the Meilidex MCP server."""

from .indexes import register_index_tools
from .tasks import register_task_tools

__all__ = [
    "register_index_tools",
    "register_task_tools",
]
