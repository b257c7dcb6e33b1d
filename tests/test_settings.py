import json
from typing import Any, List

import httpx
import pytest

from meilidex.client import Client
from meilidex.request.native_client import HttpxRequestClient
from meilidex.settings import FacetingSettings, PaginationSetting, Settings

TASK = {"taskUid": 1, "indexUid": "movies", "status": "enqueued", "type": "settingsUpdate"}

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


# ---------- Builders ----------


def test_builders_return_new_settings_and_keep_the_original() -> None:
    base = Settings()
    built = (
        base.with_stop_words(["the", "a"])
        .with_synonyms({"logan": ("wolverine", "xmen")})
        .with_distinct_attribute("owner")
        .with_pagination(PaginationSetting(max_total_hits=100))
    )

    assert base.stop_words is None
    assert built.stop_words == ["the", "a"]
    assert built.synonyms == {"logan": ["wolverine", "xmen"]}
    assert built.distinct_attribute == "owner"
    assert built.pagination == PaginationSetting(max_total_hits=100)


# ---------- Requests ----------


@pytest.mark.asyncio
async def test_set_settings_patches_camel_case_without_unset_fields(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    seen: List[httpx.Request] = []
    client = make_client(monkeypatch, recording(seen, 202, TASK))
    settings = (
        Settings()
        .with_filterable_attributes(["genres"])
        .with_faceting(FacetingSettings(max_values_per_facet=5))
    )

    info = await client.index("movies").set_settings(settings)

    assert info.task_uid == 1
    sent = seen[0]
    assert sent.method == "PATCH"
    assert sent.url.path == "/indexes/movies/settings"
    assert json.loads(sent.content) == {
        "filterableAttributes": ["genres"],
        "faceting": {"maxValuesPerFacet": 5},
    }


@pytest.mark.asyncio
async def test_get_settings_parses_service_payload(monkeypatch: pytest.MonkeyPatch) -> None:
    payload = {
        "displayedAttributes": ["*"],
        "searchableAttributes": ["*"],
        "filterableAttributes": [],
        "sortableAttributes": [],
        "rankingRules": ["words", "typo"],
        "stopWords": [],
        "synonyms": {},
        "distinctAttribute": None,
        "pagination": {"maxTotalHits": 1000},
        "faceting": {"maxValuesPerFacet": 100},
    }
    client = make_client(monkeypatch, recording([], 200, payload))

    settings = await client.index("movies").get_settings()

    assert settings.ranking_rules == ["words", "typo"]
    assert settings.pagination == PaginationSetting(max_total_hits=1000)
    assert settings.distinct_attribute is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "call, verb, path, body",
    [
        (lambda i: i.set_stop_words(["the"]), "PUT", "stop-words", ["the"]),
        (lambda i: i.set_ranking_rules(["words"]), "PUT", "ranking-rules", ["words"]),
        (lambda i: i.set_synonyms({"a": ["b"]}), "PUT", "synonyms", {"a": ["b"]}),
        (lambda i: i.set_filterable_attributes(["g"]), "PUT", "filterable-attributes", ["g"]),
        (lambda i: i.set_sortable_attributes(["d"]), "PUT", "sortable-attributes", ["d"]),
        (lambda i: i.set_searchable_attributes(["t"]), "PUT", "searchable-attributes", ["t"]),
        (lambda i: i.set_displayed_attributes(["t"]), "PUT", "displayed-attributes", ["t"]),
        (lambda i: i.set_distinct_attribute("owner"), "PUT", "distinct-attribute", "owner"),
        (
            lambda i: i.set_pagination(PaginationSetting(max_total_hits=10)),
            "PATCH",
            "pagination",
            {"maxTotalHits": 10},
        ),
        (
            lambda i: i.set_faceting(FacetingSettings(max_values_per_facet=3)),
            "PATCH",
            "faceting",
            {"maxValuesPerFacet": 3},
        ),
    ],
)
async def test_sub_setting_setters(
    monkeypatch: pytest.MonkeyPatch, call: Any, verb: str, path: str, body: Any
) -> None:
    seen: List[httpx.Request] = []
    client = make_client(monkeypatch, recording(seen, 202, TASK))

    await call(client.index("movies"))

    assert seen[0].method == verb
    assert seen[0].url.path == f"/indexes/movies/settings/{path}"
    assert json.loads(seen[0].content) == body


@pytest.mark.asyncio
async def test_reset_uses_delete(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: List[httpx.Request] = []
    client = make_client(monkeypatch, recording(seen, 202, TASK))
    index = client.index("movies")

    await index.reset_settings()
    await index.reset_displayed_attributes()

    assert [(r.method, r.url.path) for r in seen] == [
        ("DELETE", "/indexes/movies/settings"),
        ("DELETE", "/indexes/movies/settings/displayed-attributes"),
    ]


@pytest.mark.asyncio
async def test_get_distinct_attribute_may_be_null(monkeypatch: pytest.MonkeyPatch) -> None:
    client = make_client(monkeypatch, recording([], 200, None))

    assert await client.index("movies").get_distinct_attribute() is None
