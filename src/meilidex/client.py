"""Entry point for talking to a search service instance.

`Client` holds the host, the optional API key and the request client used for
every call. Index-level operations live on `meilidex.indexes.Index`.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from functools import partial
from typing import Any, Dict, Optional, Union

from meilidex.config import Settings
from meilidex.exceptions import MeilidexError
from meilidex.indexes import Index, IndexInfo
from meilidex.request import Delete, Get, Method, Post, default_request_client, request
from meilidex.request.dispatcher import RequestClientFactory
from meilidex.request.native_client import HttpxRequestClient
from meilidex.tasks import Task, TaskInfo, wait_for_task

logger = logging.getLogger(__name__)


class Client:
    def __init__(
        self,
        url: str,
        api_key: Optional[str] = None,
        *,
        request_client: Optional[RequestClientFactory] = None,
        poll_interval: Optional[timedelta] = None,
        poll_timeout: Optional[timedelta] = None,
    ) -> None:
        self.host = url.rstrip("/")
        self.api_key = api_key
        self.request_client = request_client or default_request_client()
        self.poll_interval = poll_interval
        self.poll_timeout = poll_timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> Client:
        """Build a client from loaded settings."""
        mcfg = settings.meilisearch
        request_client: RequestClientFactory = default_request_client()
        if request_client is HttpxRequestClient:
            request_client = partial(
                HttpxRequestClient, timeout=mcfg.timeout, verify_ssl=mcfg.verify_ssl
            )
        return cls(
            mcfg.url,
            mcfg.api_key,
            request_client=request_client,
            poll_interval=settings.tasks.poll_interval,
            poll_timeout=settings.tasks.poll_timeout,
        )

    async def request(
        self, url: str, method: Method, expected_status: int, output_type: Any = Any
    ) -> Any:
        return await request(
            url,
            self.api_key,
            method,
            expected_status,
            output_type,
            request_client=self.request_client,
        )

    # ----- indexes -----

    def index(self, uid: str) -> Index:
        """Return a handle to an index without checking that it exists."""
        return Index(self, uid)

    async def get_raw_index(self, uid: str) -> IndexInfo:
        return await self.request(f"{self.host}/indexes/{uid}", Get(), 200, IndexInfo)

    async def get_index(self, uid: str) -> Index:
        return Index.from_info(self, await self.get_raw_index(uid))

    async def create_index(self, uid: str, primary_key: Optional[str] = None) -> TaskInfo:
        """Enqueue the creation of an index.

        Use `TaskInfo.wait_for_completion` then `Task.try_make_index` to get a
        usable `Index` once it exists.
        """
        body = {"uid": uid, "primaryKey": primary_key}
        return await self.request(f"{self.host}/indexes", Post(body=body), 202, TaskInfo)

    async def delete_index(self, uid: str) -> TaskInfo:
        return await self.request(f"{self.host}/indexes/{uid}", Delete(), 202, TaskInfo)

    # ----- tasks -----

    async def get_task(self, task_uid: Union[TaskInfo, Task, int]) -> Task:
        if isinstance(task_uid, TaskInfo):
            task_uid = task_uid.task_uid
        elif isinstance(task_uid, Task):
            task_uid = task_uid.uid
        return await self.request(f"{self.host}/tasks/{task_uid}", Get(), 200, Task)

    async def wait_for_task(
        self,
        task: Union[TaskInfo, Task, int],
        *,
        interval: Optional[timedelta] = None,
        timeout: Optional[timedelta] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Task:
        """Wait for a task to finish.

        Falls back to the client's poll settings, then to the poller defaults.
        """
        return await wait_for_task(
            self,
            task,
            interval=interval if interval is not None else self.poll_interval,
            timeout=timeout if timeout is not None else self.poll_timeout,
            cancel_event=cancel_event,
        )

    # ----- health -----

    async def health(self) -> Dict[str, Any]:
        return await self.request(f"{self.host}/health", Get(), 200, Dict[str, Any])

    async def is_healthy(self) -> bool:
        try:
            status = await self.health()
        except MeilidexError as e:
            logger.warning("Health check failed: %s", e)
            return False
        return status.get("status") == "available"
