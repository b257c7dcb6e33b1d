"""Base interface for request clients.

A request client performs one HTTP call over one concrete channel and hands
back the status code and the raw response text. The dispatcher builds every
request through this interface, so request building and error parsing stay
identical whatever the channel is.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from pydantic_core import to_json

from meilidex.request.method import Method

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")


def serialize_body(body: Any) -> bytes:
    """Encode a request body as JSON.

    Pydantic models (settings and other service records) drop unset optional
    fields; anything else, documents included, is encoded as given.
    """
    if isinstance(body, BaseModel):
        return body.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")
    return to_json(body, by_alias=True)


class RequestClient(ABC, Generic[RequestT, ResponseT]):
    """Abstract request client.

    Implementations should be safe to construct without side effects and should
    not perform network calls until `send_request` is awaited. Every failure
    must be raised as `meilidex.exceptions.TransportError`.
    """

    @abstractmethod
    def __init__(self, url: str) -> None:
        """Start building a request for the fully qualified `url`."""

    @abstractmethod
    def with_authorization_header(self, value: str) -> RequestClient[RequestT, ResponseT]:
        """Set the Authorization header value (e.g. "Bearer <key>")."""

    @abstractmethod
    def with_user_agent_header(self, value: str) -> RequestClient[RequestT, ResponseT]:
        """Identify the client library to the service."""

    @abstractmethod
    def with_method(self, http_method: str) -> RequestClient[RequestT, ResponseT]:
        """Set the HTTP verb."""

    @abstractmethod
    def add_body(self, method: Method, content_type: str) -> RequestT:
        """Finish the request, attaching the method's body when it has one."""

    @abstractmethod
    async def send_request(self, request: RequestT) -> ResponseT:
        """Perform the network round trip."""

    @abstractmethod
    def status_code(self, response: ResponseT) -> int:
        """Return the HTTP status code of a response."""

    @abstractmethod
    async def response_text(self, response: ResponseT) -> str:
        """Drain the response body as text."""
