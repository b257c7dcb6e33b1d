import json
import sys
from functools import partial
from typing import Any, Dict, List

import pytest

from meilidex.exceptions import ServiceError, TransportError
from meilidex.request import Get, Post, default_request_client, qualified_version, request
from meilidex.request.browser_client import BrowserRequestClient
from meilidex.request.native_client import HttpxRequestClient
from meilidex.tasks import TaskInfo

BASE = "https://search.example.com"


class FakeFetchResponse:
    def __init__(self, status: int, text: str) -> None:
        self.status = status
        self._text = text

    async def string(self) -> str:
        return self._text


def make_fetch(calls: List[Dict[str, Any]], status: int, text: str) -> Any:
    async def fetch(url: str, **options: Any) -> FakeFetchResponse:
        calls.append({"url": url, **options})
        return FakeFetchResponse(status, text)

    return fetch


@pytest.mark.asyncio
async def test_browser_client_sends_method_headers_and_body() -> None:
    calls: List[Dict[str, Any]] = []
    fetch = make_fetch(calls, 202, json.dumps({"taskUid": 3, "status": "enqueued"}))

    out = await request(
        f"{BASE}/indexes",
        "key",
        Post(body={"uid": "movies"}, query={"primaryKey": "id"}),
        202,
        TaskInfo,
        request_client=partial(BrowserRequestClient, fetch=fetch),
    )

    assert out.task_uid == 3
    call = calls[0]
    assert call["url"] == f"{BASE}/indexes?primaryKey=id"
    assert call["method"] == "POST"
    assert json.loads(call["body"]) == {"uid": "movies"}
    headers = call["headers"]
    assert headers["Authorization"] == "Bearer key"
    assert headers["X-Meilisearch-Client"] == qualified_version()
    assert headers["Content-Type"] == "application/json"
    assert "User-Agent" not in headers


@pytest.mark.asyncio
async def test_browser_client_get_has_no_body() -> None:
    calls: List[Dict[str, Any]] = []
    fetch = make_fetch(calls, 200, "{}")

    await request(f"{BASE}/health", None, Get(), 200,
                  request_client=partial(BrowserRequestClient, fetch=fetch))

    assert "body" not in calls[0]
    assert "Authorization" not in calls[0]["headers"]


@pytest.mark.asyncio
async def test_browser_client_errors_use_same_taxonomy() -> None:
    body = json.dumps({"message": "Index `x` not found.", "code": "index_not_found"})
    fetch = make_fetch([], 404, body)

    with pytest.raises(ServiceError) as exc_info:
        await request(f"{BASE}/indexes/x", None, Get(), 200,
                      request_client=partial(BrowserRequestClient, fetch=fetch))

    assert exc_info.value.error_code == "index_not_found"


@pytest.mark.asyncio
async def test_browser_fetch_failure_is_transport_error() -> None:
    async def fetch(url: str, **options: Any) -> Any:
        raise OSError("Failed to fetch")

    with pytest.raises(TransportError):
        await request(f"{BASE}/health", None, Get(), 200,
                      request_client=partial(BrowserRequestClient, fetch=fetch))


def test_default_request_client_follows_platform(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "platform", "linux")
    assert default_request_client() is HttpxRequestClient
    monkeypatch.setattr(sys, "platform", "emscripten")
    assert default_request_client() is BrowserRequestClient
