import json
from datetime import timedelta
from functools import partial
from typing import Any, List

import httpx
import pytest

from meilidex.client import Client
from meilidex.config import MeilisearchConfig, Settings, TasksConfig
from meilidex.exceptions import ServiceError
from meilidex.indexes import Index
from meilidex.request.native_client import HttpxRequestClient
from meilidex.tasks import TaskStatus

# ---------- Helpers ----------


def make_client(monkeypatch: pytest.MonkeyPatch, responder: Any) -> Client:
    def _client(self: HttpxRequestClient) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(responder))

    monkeypatch.setattr(HttpxRequestClient, "_client", _client)
    return Client("http://meili.test", "key", request_client=HttpxRequestClient)


def recording(seen: List[httpx.Request], status: int, body: Any) -> Any:
    def responder(req: httpx.Request) -> httpx.Response:
        seen.append(req)
        return httpx.Response(status, json=body)

    return responder


# ---------- Construction ----------


def test_index_handle_performs_no_request() -> None:
    client = Client("http://meili.test/")

    index = client.index("movies")

    assert isinstance(index, Index)
    assert client.host == "http://meili.test"
    assert index.primary_key is None


def test_from_settings_applies_transport_and_poll_options() -> None:
    settings = Settings(
        meilisearch=MeilisearchConfig(url="http://search:7700", api_key="k", timeout=5.0),
        tasks=TasksConfig(poll_interval=timedelta(milliseconds=200)),
    )

    client = Client.from_settings(settings)

    assert client.host == "http://search:7700"
    assert client.api_key == "k"
    assert client.poll_interval == timedelta(milliseconds=200)
    assert client.poll_timeout == timedelta(seconds=5)
    assert isinstance(client.request_client, partial)
    assert client.request_client.func is HttpxRequestClient
    assert client.request_client.keywords == {"timeout": 5.0, "verify_ssl": True}


# ---------- Indexes ----------


@pytest.mark.asyncio
async def test_create_index_posts_uid_and_primary_key(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: List[httpx.Request] = []
    body = {"taskUid": 0, "indexUid": "movies", "status": "enqueued", "type": "indexCreation"}
    client = make_client(monkeypatch, recording(seen, 202, body))

    info = await client.create_index("movies", "movie_id")

    assert info.task_uid == 0
    assert info.type == "indexCreation"
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/indexes"
    assert json.loads(seen[0].content) == {"uid": "movies", "primaryKey": "movie_id"}


@pytest.mark.asyncio
async def test_get_index_fills_handle_from_service(monkeypatch: pytest.MonkeyPatch) -> None:
    body = {
        "uid": "movies",
        "primaryKey": "movie_id",
        "createdAt": "2024-01-01T00:00:00Z",
        "updatedAt": "2024-01-02T00:00:00Z",
    }
    client = make_client(monkeypatch, recording([], 200, body))

    index = await client.get_index("movies")

    assert index.uid == "movies"
    assert index.primary_key == "movie_id"
    assert index.updated_at == "2024-01-02T00:00:00Z"


@pytest.mark.asyncio
async def test_get_index_missing_raises_service_error(monkeypatch: pytest.MonkeyPatch) -> None:
    body = {"message": "Index `nope` not found.", "code": "index_not_found", "type": "invalid_request"}
    client = make_client(monkeypatch, recording([], 404, body))

    with pytest.raises(ServiceError) as exc_info:
        await client.get_index("nope")

    assert exc_info.value.error_code == "index_not_found"


@pytest.mark.asyncio
async def test_delete_index_through_client_and_handle(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: List[httpx.Request] = []
    body = {"taskUid": 2, "indexUid": "movies", "status": "enqueued", "type": "indexDeletion"}
    client = make_client(monkeypatch, recording(seen, 202, body))

    await client.delete_index("movies")
    await client.index("movies").delete()

    assert [(r.method, r.url.path) for r in seen] == [
        ("DELETE", "/indexes/movies"),
        ("DELETE", "/indexes/movies"),
    ]


# ---------- Tasks ----------


@pytest.mark.asyncio
async def test_get_task_accepts_handles_and_ids(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: List[httpx.Request] = []
    body = {"uid": 4, "indexUid": "movies", "status": "processing", "type": "indexCreation"}
    client = make_client(monkeypatch, recording(seen, 200, body))

    task = await client.get_task(4)
    await client.get_task(task)

    assert task.status is TaskStatus.PROCESSING
    assert [r.url.path for r in seen] == ["/tasks/4", "/tasks/4"]


# ---------- Health ----------


@pytest.mark.asyncio
async def test_is_healthy(monkeypatch: pytest.MonkeyPatch) -> None:
    client = make_client(monkeypatch, recording([], 200, {"status": "available"}))

    assert await client.is_healthy() is True


@pytest.mark.asyncio
async def test_is_healthy_false_on_error_status(monkeypatch: pytest.MonkeyPatch) -> None:
    def responder(req: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="Service Unavailable")

    client = make_client(monkeypatch, responder)

    assert await client.is_healthy() is False


@pytest.mark.asyncio
async def test_is_healthy_false_when_unreachable(monkeypatch: pytest.MonkeyPatch) -> None:
    def responder(req: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=req)

    client = make_client(monkeypatch, responder)

    assert await client.is_healthy() is False
