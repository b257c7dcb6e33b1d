"""Background task handles and the completion poller.

Every mutating call is answered with a `TaskInfo`. The service offers no
completion callback, so `wait_for_task` re-fetches the task until it reaches a
terminal status or the deadline passes. Status only ever changes by fetching
it again; nothing here advances it locally.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional, Protocol, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from meilidex.exceptions import (
    TaskNotSucceededError,
    TaskResultError,
    TaskTimeoutError,
    WaitCancelledError,
)

if TYPE_CHECKING:
    from meilidex.client import Client
    from meilidex.indexes import Index

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = timedelta(milliseconds=50)
DEFAULT_POLL_TIMEOUT = timedelta(seconds=5)


class TaskStatus(str, Enum):
    ENQUEUED = "enqueued"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.SUCCEEDED, TaskStatus.FAILED, TaskStatus.CANCELED)


class ServiceModel(BaseModel):
    """Base for records exchanged with the service (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskError(ServiceModel):
    """Error payload attached to a failed task."""

    message: str
    code: str
    type: Optional[str] = None
    link: Optional[str] = None


class TaskInfo(ServiceModel):
    """Handle returned when a mutating call has been enqueued."""

    model_config = ConfigDict(extra="allow")

    task_uid: int = Field(validation_alias=AliasChoices("taskUid", "uid", "id"))
    index_uid: Optional[str] = None
    status: TaskStatus = TaskStatus.ENQUEUED
    type: Optional[str] = None
    enqueued_at: Optional[str] = None

    async def wait_for_completion(
        self,
        client: TaskSource,
        *,
        interval: Optional[timedelta] = None,
        timeout: Optional[timedelta] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Task:
        return await wait_for_task(
            client, self, interval=interval, timeout=timeout, cancel_event=cancel_event
        )


class Task(ServiceModel):
    """Task state as last fetched from the service."""

    model_config = ConfigDict(extra="allow")

    uid: int = Field(validation_alias=AliasChoices("uid", "taskUid", "id"))
    index_uid: Optional[str] = None
    status: TaskStatus
    type: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    error: Optional[TaskError] = None
    duration: Optional[str] = None
    enqueued_at: Optional[str] = None
    started_at: Optional[str] = None
    finished_at: Optional[str] = None
    canceled_by: Optional[int] = None

    def is_pending(self) -> bool:
        return not self.status.is_terminal

    def is_success(self) -> bool:
        return self.status is TaskStatus.SUCCEEDED

    def is_failure(self) -> bool:
        return self.status is TaskStatus.FAILED

    def is_canceled(self) -> bool:
        return self.status is TaskStatus.CANCELED

    def unwrap_failure(self) -> TaskError:
        """Return the error of a failed task; raise ValueError for any other status."""
        if not self.is_failure() or self.error is None:
            raise ValueError(f"Task {self.uid} has status {self.status.value}, not failed")
        return self.error

    def try_make_index(self, client: Client) -> Index:
        """Turn a succeeded index creation into an `Index` handle.

        Uses only the fetched task data; no request is made.
        """
        if not self.is_success():
            raise TaskNotSucceededError(self)
        if self.type != "indexCreation" or not self.index_uid:
            raise TaskResultError(self)
        from meilidex.indexes import Index

        primary_key = (self.details or {}).get("primaryKey")
        return Index(client, self.index_uid, primary_key=primary_key)

    async def wait_for_completion(
        self,
        client: TaskSource,
        *,
        interval: Optional[timedelta] = None,
        timeout: Optional[timedelta] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Task:
        return await wait_for_task(
            client, self, interval=interval, timeout=timeout, cancel_event=cancel_event
        )


class TaskSource(Protocol):
    async def get_task(self, task_uid: int) -> Task: ...


def _task_uid(task: Union[TaskInfo, Task, int]) -> int:
    if isinstance(task, TaskInfo):
        return task.task_uid
    if isinstance(task, Task):
        return task.uid
    return int(task)


async def wait_for_task(
    client: TaskSource,
    task: Union[TaskInfo, Task, int],
    *,
    interval: Optional[timedelta] = None,
    timeout: Optional[timedelta] = None,
    cancel_event: Optional[asyncio.Event] = None,
) -> Task:
    """Poll a task until it reaches a terminal status.

    Parameters
    ----------
    client:
        Anything with ``async get_task(uid) -> Task``, usually a `Client`.
    task: TaskInfo | Task | int
        The task handle or its uid.
    interval: timedelta | None
        Pause between polls. Defaults to `DEFAULT_POLL_INTERVAL`.
    timeout: timedelta | None
        Overall deadline measured from the call's start. Defaults to
        `DEFAULT_POLL_TIMEOUT`.
    cancel_event: asyncio.Event | None
        When set, the wait stops before the next poll with `WaitCancelledError`.

    Failed and canceled tasks are returned, not raised. Raises
    `TaskTimeoutError` once the deadline passes without a terminal status.
    """
    task_uid = _task_uid(task)
    interval = DEFAULT_POLL_INTERVAL if interval is None else interval
    timeout = DEFAULT_POLL_TIMEOUT if timeout is None else timeout

    loop = asyncio.get_running_loop()
    started = loop.time()
    while True:
        current = await client.get_task(task_uid)
        logger.debug("Task %s is %s", task_uid, current.status.value)
        if current.status.is_terminal:
            return current

        if loop.time() - started >= timeout.total_seconds():
            logger.warning("Timed out waiting for task %s after %s", task_uid, timeout)
            raise TaskTimeoutError(task_uid, timeout)

        if cancel_event is None:
            await asyncio.sleep(interval.total_seconds())
            continue
        try:
            await asyncio.wait_for(cancel_event.wait(), interval.total_seconds())
        except asyncio.TimeoutError:
            continue
        raise WaitCancelledError(task_uid)
