"""Custom exception hierarchy for Meilidex.

These exceptions allow callers to discriminate error categories
and handle them appropriately while preserving the original context.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from meilidex.tasks import Task


class MeilidexError(Exception):
    """Base class for all Meilidex exceptions."""


class ConfigError(MeilidexError):
    """Raised when configuration loading or validation fails."""


class ParseError(MeilidexError):
    """Raised when a response body does not match the expected shape."""


class ServiceError(MeilidexError):
    """Raised when the service rejected the request with a structured error payload."""

    def __init__(
        self,
        *,
        error_code: str,
        error_message: str,
        url: str,
        error_type: Optional[str] = None,
        error_link: Optional[str] = None,
    ) -> None:
        super().__init__(f"{error_code}: {error_message} ({url})")
        self.error_code = error_code
        self.error_message = error_message
        self.error_type = error_type
        self.error_link = error_link
        self.url = url


class CommunicationError(MeilidexError):
    """Raised for an error status whose body is not a recognizable service error."""

    def __init__(self, *, status_code: int, url: str, message: Optional[str] = None) -> None:
        text = f"HTTP {status_code} from {url}"
        if message:
            text = f"{text}: {message}"
        super().__init__(text)
        self.status_code = status_code
        self.url = url
        self.message = message


class TransportError(MeilidexError):
    """Raised when a request could not be built or never got a response."""

    def __init__(self, message: str, *, url: Optional[str] = None) -> None:
        super().__init__(f"{message} ({url})" if url else message)
        self.url = url


class TaskTimeoutError(MeilidexError):
    """Raised when a task did not reach a terminal status before the deadline."""

    def __init__(self, task_uid: int, timeout: timedelta) -> None:
        super().__init__(
            f"Task {task_uid} did not finish within {timeout.total_seconds():g}s"
        )
        self.task_uid = task_uid
        self.timeout = timeout


class WaitCancelledError(MeilidexError):
    """Raised when waiting for a task was aborted through a cancel event."""

    def __init__(self, task_uid: int) -> None:
        super().__init__(f"Stopped waiting for task {task_uid}")
        self.task_uid = task_uid


class TaskResultError(MeilidexError):
    """Raised when a finished task cannot be turned into the requested resource."""

    def __init__(self, task: "Task", message: Optional[str] = None) -> None:
        super().__init__(message or f"Task {task.uid} ({task.type}) did not create an index")
        self.task = task


class TaskNotSucceededError(TaskResultError):
    """Raised when a task finished as failed or canceled where success was required."""

    def __init__(self, task: "Task") -> None:
        super().__init__(task, f"Task {task.uid} finished with status {task.status.value}")
