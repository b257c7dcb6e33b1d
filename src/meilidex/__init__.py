"""Async client for Meilisearch-compatible search services."""

import logging

from .client import Client
from .documents import DocumentDeletionQuery, DocumentQuery, DocumentsQuery, DocumentsResults
from .exceptions import (
    CommunicationError,
    ConfigError,
    MeilidexError,
    ParseError,
    ServiceError,
    TaskNotSucceededError,
    TaskResultError,
    TaskTimeoutError,
    TransportError,
    WaitCancelledError,
)
from .index_config import IndexConfig, IndexField
from .indexes import Index, IndexInfo
from .settings import FacetingSettings, PaginationSetting, Settings
from .tasks import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_POLL_TIMEOUT,
    Task,
    TaskError,
    TaskInfo,
    TaskStatus,
    wait_for_task,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Client",
    "CommunicationError",
    "ConfigError",
    "DEFAULT_POLL_INTERVAL",
    "DEFAULT_POLL_TIMEOUT",
    "DocumentDeletionQuery",
    "DocumentQuery",
    "DocumentsQuery",
    "DocumentsResults",
    "FacetingSettings",
    "Index",
    "IndexConfig",
    "IndexField",
    "IndexInfo",
    "MeilidexError",
    "PaginationSetting",
    "ParseError",
    "ServiceError",
    "Settings",
    "Task",
    "TaskError",
    "TaskInfo",
    "TaskNotSucceededError",
    "TaskResultError",
    "TaskStatus",
    "TaskTimeoutError",
    "TransportError",
    "WaitCancelledError",
    "wait_for_task",
]
