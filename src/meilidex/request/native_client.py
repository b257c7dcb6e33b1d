"""Request client for regular interpreters, built on httpx."""

from __future__ import annotations

from typing import Dict, Optional

import httpx

from meilidex.exceptions import TransportError
from meilidex.request.base_client import RequestClient, serialize_body
from meilidex.request.method import Method, has_body


class HttpxRequestClient(RequestClient[httpx.Request, httpx.Response]):
    def __init__(self, url: str, *, timeout: float = 30.0, verify_ssl: bool = True) -> None:
        self.url = url
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.http_method = "GET"
        self.headers: Dict[str, str] = {}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, verify=self.verify_ssl)

    def with_authorization_header(self, value: str) -> HttpxRequestClient:
        self.headers["Authorization"] = value
        return self

    def with_user_agent_header(self, value: str) -> HttpxRequestClient:
        self.headers["User-Agent"] = value
        return self

    def with_method(self, http_method: str) -> HttpxRequestClient:
        self.http_method = http_method
        return self

    def add_body(self, method: Method, content_type: str) -> httpx.Request:
        headers = dict(self.headers)
        content: Optional[bytes] = None
        if has_body(method):
            content = serialize_body(method.body)  # type: ignore[union-attr]
            headers["Content-Type"] = content_type
        try:
            return httpx.Request(self.http_method, self.url, headers=headers, content=content)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise TransportError(f"Invalid URL: {e}", url=self.url) from e
        except (TypeError, ValueError) as e:
            # httpx rejects header values it cannot encode
            raise TransportError(f"Invalid request header: {e}", url=self.url) from e

    async def send_request(self, request: httpx.Request) -> httpx.Response:
        try:
            async with self._client() as client:
                return await client.send(request)
        except httpx.HTTPError as e:
            raise TransportError(f"{type(e).__name__}: {e}", url=str(request.url)) from e

    def status_code(self, response: httpx.Response) -> int:
        return response.status_code

    async def response_text(self, response: httpx.Response) -> str:
        try:
            await response.aread()
            return response.text
        except httpx.HTTPError as e:
            raise TransportError(f"Failed to read response: {e}", url=str(response.url)) from e
