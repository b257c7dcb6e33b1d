"""Task tools for FastMCP."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Callable, Dict, Optional

from fastmcp import FastMCP

from meilidex.mcp.tools.indexes import get_client


def register_task_tools(mcp: FastMCP, get_state: Callable[[], Any]) -> None:
    """Register task tools on the given FastMCP instance."""

    @mcp.tool
    async def task_get(task_uid: int) -> Dict[str, Any]:
        """Return the current state of a task."""
        client = get_client(get_state())
        task = await client.get_task(task_uid)
        return task.model_dump(mode="json", by_alias=True, exclude_none=True)

    @mcp.tool
    async def task_wait(
        task_uid: int,
        interval_ms: Optional[int] = None,
        timeout_ms: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Wait until a task succeeds, fails or is canceled, then return it.

        Parameters
        ----------
        task_uid: int
            Task uid returned by a mutating tool.
        interval_ms: int | None
            Pause between polls in milliseconds. Default: configured poll interval.
        timeout_ms: int | None
            Give up after this many milliseconds. Default: configured poll timeout.
        """
        client = get_client(get_state())
        task = await client.wait_for_task(
            task_uid,
            interval=timedelta(milliseconds=interval_ms) if interval_ms is not None else None,
            timeout=timedelta(milliseconds=timeout_ms) if timeout_ms is not None else None,
        )
        return task.model_dump(mode="json", by_alias=True, exclude_none=True)
