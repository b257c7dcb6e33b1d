"""Index handle: a named index on the service plus its document and settings operations."""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import TYPE_CHECKING, Any, Optional, Union

from meilidex.documents import DocumentsMixin
from meilidex.request import Get
from meilidex.settings import SettingsMixin
from meilidex.tasks import ServiceModel, Task, TaskInfo

if TYPE_CHECKING:
    from meilidex.client import Client


class IndexInfo(ServiceModel):
    """Raw index description as returned by the service."""

    uid: str
    primary_key: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class Index(DocumentsMixin, SettingsMixin):
    """Handle to one index. Creating it performs no request."""

    def __init__(
        self,
        client: Client,
        uid: str,
        *,
        primary_key: Optional[str] = None,
        created_at: Optional[str] = None,
        updated_at: Optional[str] = None,
    ) -> None:
        self.client = client
        self.uid = uid
        self.primary_key = primary_key
        self.created_at = created_at
        self.updated_at = updated_at

    def __repr__(self) -> str:
        return f"Index(uid={self.uid!r}, primary_key={self.primary_key!r})"

    @classmethod
    def from_info(cls, client: Client, info: IndexInfo) -> Index:
        return cls(
            client,
            info.uid,
            primary_key=info.primary_key,
            created_at=info.created_at,
            updated_at=info.updated_at,
        )

    def _url(self, suffix: str = "") -> str:
        return f"{self.client.host}/indexes/{self.uid}{suffix}"

    async def _request(
        self, suffix: str, method: Any, expected_status: int, output_type: Any = Any
    ) -> Any:
        return await self.client.request(self._url(suffix), method, expected_status, output_type)

    async def fetch_info(self) -> Index:
        """Refresh primary key and timestamps from the service."""
        info: IndexInfo = await self._request("", Get(), 200, IndexInfo)
        self.primary_key = info.primary_key
        self.created_at = info.created_at
        self.updated_at = info.updated_at
        return self

    async def get_primary_key(self) -> Optional[str]:
        await self.fetch_info()
        return self.primary_key

    async def delete(self) -> TaskInfo:
        return await self.client.delete_index(self.uid)

    async def wait_for_task(
        self,
        task: Union[TaskInfo, Task, int],
        *,
        interval: Optional[timedelta] = None,
        timeout: Optional[timedelta] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Task:
        return await self.client.wait_for_task(
            task, interval=interval, timeout=timeout, cancel_event=cancel_event
        )
