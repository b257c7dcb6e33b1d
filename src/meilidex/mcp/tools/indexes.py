"""Index, document and settings tools for FastMCP.

Mutating tools return the enqueued task, or the finished task when `wait` is true.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from fastmcp import FastMCP

from meilidex.client import Client
from meilidex.settings import Settings
from meilidex.tasks import TaskInfo


def _dump(model: Any) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def get_client(state_obj: Any) -> Client:
    client = getattr(state_obj, "client", None)
    if client is None:
        raise RuntimeError(
            "Search service is not configured. Set MEILIDEX_MEILISEARCH__URL "
            "(and MEILIDEX_MEILISEARCH__API_KEY if the instance is protected)."
        )
    return client


async def task_result(client: Client, task_info: TaskInfo, wait: bool) -> Dict[str, Any]:
    if not wait:
        return _dump(task_info)
    task = await client.wait_for_task(task_info)
    return _dump(task)


def register_index_tools(mcp: FastMCP, get_state: Callable[[], Any]) -> None:
    """Register index tools on the given FastMCP instance.

    The `get_state` callable should return an object with a `client` attribute
    holding a `meilidex.Client`.
    """

    @mcp.tool
    async def index_create(
        uid: str, primary_key: Optional[str] = None, wait: bool = False
    ) -> Dict[str, Any]:
        """Create an index.

        Parameters
        ----------
        uid: str
            Index uid, e.g. "movies".
        primary_key: str | None
            Primary key attribute; inferred by the service when omitted.
        wait: bool
            Wait for the creation task to finish and return it.
        """
        client = get_client(get_state())
        task_info = await client.create_index(uid, primary_key)
        return await task_result(client, task_info, wait)

    @mcp.tool
    async def index_delete(uid: str, wait: bool = False) -> Dict[str, Any]:
        """Delete an index and all its documents."""
        client = get_client(get_state())
        task_info = await client.delete_index(uid)
        return await task_result(client, task_info, wait)

    @mcp.tool
    async def index_get(uid: str) -> Dict[str, Any]:
        """Return an index description (uid, primary key, timestamps)."""
        client = get_client(get_state())
        return _dump(await client.get_raw_index(uid))

    @mcp.tool
    async def documents_add(
        uid: str,
        documents: List[Dict[str, Any]],
        primary_key: Optional[str] = None,
        wait: bool = False,
    ) -> Dict[str, Any]:
        """Add or replace documents in an index."""
        client = get_client(get_state())
        task_info = await client.index(uid).add_documents(documents, primary_key)
        return await task_result(client, task_info, wait)

    @mcp.tool
    async def documents_get(
        uid: str,
        offset: Optional[int] = None,
        limit: Optional[int] = 20,
        fields: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """Return a page of documents from an index."""
        client = get_client(get_state())
        page = await client.index(uid).get_documents(offset=offset, limit=limit, fields=fields)
        return _dump(page)

    @mcp.tool
    async def settings_get(uid: str) -> Dict[str, Any]:
        """Return all settings of an index."""
        client = get_client(get_state())
        return _dump(await client.index(uid).get_settings())

    @mcp.tool
    async def settings_update(
        uid: str, settings: Dict[str, Any], wait: bool = False
    ) -> Dict[str, Any]:
        """Update index settings. Keys use the service's camelCase names.

        Only the keys provided are changed.
        """
        client = get_client(get_state())
        parsed = Settings.model_validate(settings)
        task_info = await client.index(uid).set_settings(parsed)
        return await task_result(client, task_info, wait)
