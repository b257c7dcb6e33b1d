"""Request client for browser-hosted interpreters (Pyodide).

Networking goes through the host page's ``fetch`` via ``pyodide.http.pyfetch``.
Browsers refuse to let scripts set ``User-Agent``, so the client identity is
sent in ``X-Meilisearch-Client`` instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional

from meilidex.exceptions import TransportError
from meilidex.request.base_client import RequestClient, serialize_body
from meilidex.request.method import Method, has_body

Fetch = Callable[..., Awaitable[Any]]


@dataclass(slots=True)
class BrowserRequest:
    url: str
    method: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None

    def fetch_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {"method": self.method, "headers": dict(self.headers)}
        if self.body is not None:
            options["body"] = self.body
        return options


def _pyfetch() -> Fetch:
    # Only importable inside a Pyodide runtime
    from pyodide.http import pyfetch  # type: ignore[import-not-found]

    return pyfetch


class BrowserRequestClient(RequestClient[BrowserRequest, Any]):
    def __init__(self, url: str, *, fetch: Optional[Fetch] = None) -> None:
        self.url = url
        self.http_method = "GET"
        self.headers: Dict[str, str] = {}
        self._fetch = fetch

    def with_authorization_header(self, value: str) -> BrowserRequestClient:
        self.headers["Authorization"] = value
        return self

    def with_user_agent_header(self, value: str) -> BrowserRequestClient:
        self.headers["X-Meilisearch-Client"] = value
        return self

    def with_method(self, http_method: str) -> BrowserRequestClient:
        self.http_method = http_method
        return self

    def add_body(self, method: Method, content_type: str) -> BrowserRequest:
        request = BrowserRequest(url=self.url, method=self.http_method, headers=dict(self.headers))
        if has_body(method):
            request.body = serialize_body(method.body).decode("utf-8")  # type: ignore[union-attr]
            request.headers["Content-Type"] = content_type
        return request

    async def send_request(self, request: BrowserRequest) -> Any:
        try:
            fetch = self._fetch or _pyfetch()
        except ImportError as e:
            raise TransportError("pyodide is not available in this runtime", url=request.url) from e
        try:
            return await fetch(request.url, **request.fetch_options())
        except Exception as e:
            # pyfetch surfaces network failures as OSError or JsException
            raise TransportError(f"Fetch failed: {e}", url=request.url) from e

    def status_code(self, response: Any) -> int:
        return int(response.status)

    async def response_text(self, response: Any) -> str:
        try:
            return await response.string()
        except Exception as e:
            raise TransportError(f"Failed to read response: {e}", url=self.url) from e
