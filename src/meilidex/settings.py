"""Index settings records and the index operations that read and change them.

Setters and resets are enqueued by the service and answer with a `TaskInfo`.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from meilidex.request import Delete, Get, Patch, Put
from meilidex.tasks import ServiceModel, TaskInfo


class PaginationSetting(ServiceModel):
    max_total_hits: int


class FacetingSettings(ServiceModel):
    max_values_per_facet: int


class Settings(ServiceModel):
    """Index settings. Unset fields are left untouched by `set_settings`."""

    synonyms: Optional[Dict[str, List[str]]] = None
    stop_words: Optional[List[str]] = None
    ranking_rules: Optional[List[str]] = None
    filterable_attributes: Optional[List[str]] = None
    sortable_attributes: Optional[List[str]] = None
    distinct_attribute: Optional[str] = None
    searchable_attributes: Optional[List[str]] = None
    displayed_attributes: Optional[List[str]] = None
    pagination: Optional[PaginationSetting] = None
    faceting: Optional[FacetingSettings] = None

    def with_synonyms(self, synonyms: Mapping[str, Iterable[str]]) -> Settings:
        return self.model_copy(
            update={"synonyms": {str(k): [str(v) for v in vs] for k, vs in synonyms.items()}}
        )

    def with_stop_words(self, stop_words: Iterable[str]) -> Settings:
        return self.model_copy(update={"stop_words": [str(w) for w in stop_words]})

    def with_ranking_rules(self, ranking_rules: Iterable[str]) -> Settings:
        return self.model_copy(update={"ranking_rules": [str(r) for r in ranking_rules]})

    def with_filterable_attributes(self, attributes: Iterable[str]) -> Settings:
        return self.model_copy(update={"filterable_attributes": [str(a) for a in attributes]})

    def with_sortable_attributes(self, attributes: Iterable[str]) -> Settings:
        return self.model_copy(update={"sortable_attributes": [str(a) for a in attributes]})

    def with_distinct_attribute(self, attribute: str) -> Settings:
        return self.model_copy(update={"distinct_attribute": str(attribute)})

    def with_searchable_attributes(self, attributes: Iterable[str]) -> Settings:
        return self.model_copy(update={"searchable_attributes": [str(a) for a in attributes]})

    def with_displayed_attributes(self, attributes: Iterable[str]) -> Settings:
        return self.model_copy(update={"displayed_attributes": [str(a) for a in attributes]})

    def with_pagination(self, pagination: PaginationSetting) -> Settings:
        return self.model_copy(update={"pagination": pagination})

    def with_faceting(self, faceting: FacetingSettings) -> Settings:
        return self.model_copy(update={"faceting": faceting})


class SettingsMixin:
    """Settings operations, mixed into `meilidex.indexes.Index`."""

    async def _request(
        self, suffix: str, method: Any, expected_status: int, output_type: Any = Any
    ) -> Any:
        raise NotImplementedError

    async def _get_setting(self, name: str, output_type: Any) -> Any:
        return await self._request(f"/settings/{name}", Get(), 200, output_type)

    async def _reset_setting(self, name: str) -> TaskInfo:
        return await self._request(f"/settings/{name}", Delete(), 202, TaskInfo)

    async def get_settings(self) -> Settings:
        return await self._request("/settings", Get(), 200, Settings)

    async def set_settings(self, settings: Settings) -> TaskInfo:
        return await self._request("/settings", Patch(body=settings), 202, TaskInfo)

    async def reset_settings(self) -> TaskInfo:
        return await self._request("/settings", Delete(), 202, TaskInfo)

    # ----- synonyms -----

    async def get_synonyms(self) -> Dict[str, List[str]]:
        return await self._get_setting("synonyms", Dict[str, List[str]])

    async def set_synonyms(self, synonyms: Mapping[str, Iterable[str]]) -> TaskInfo:
        body = {str(k): [str(v) for v in vs] for k, vs in synonyms.items()}
        return await self._request("/settings/synonyms", Put(body=body), 202, TaskInfo)

    async def reset_synonyms(self) -> TaskInfo:
        return await self._reset_setting("synonyms")

    # ----- pagination -----

    async def get_pagination(self) -> PaginationSetting:
        return await self._get_setting("pagination", PaginationSetting)

    async def set_pagination(self, pagination: PaginationSetting) -> TaskInfo:
        return await self._request("/settings/pagination", Patch(body=pagination), 202, TaskInfo)

    async def reset_pagination(self) -> TaskInfo:
        return await self._reset_setting("pagination")

    # ----- stop words -----

    async def get_stop_words(self) -> List[str]:
        return await self._get_setting("stop-words", List[str])

    async def set_stop_words(self, stop_words: Iterable[str]) -> TaskInfo:
        body = [str(w) for w in stop_words]
        return await self._request("/settings/stop-words", Put(body=body), 202, TaskInfo)

    async def reset_stop_words(self) -> TaskInfo:
        return await self._reset_setting("stop-words")

    # ----- ranking rules -----

    async def get_ranking_rules(self) -> List[str]:
        return await self._get_setting("ranking-rules", List[str])

    async def set_ranking_rules(self, ranking_rules: Iterable[str]) -> TaskInfo:
        body = [str(r) for r in ranking_rules]
        return await self._request("/settings/ranking-rules", Put(body=body), 202, TaskInfo)

    async def reset_ranking_rules(self) -> TaskInfo:
        return await self._reset_setting("ranking-rules")

    # ----- filterable attributes -----

    async def get_filterable_attributes(self) -> List[str]:
        return await self._get_setting("filterable-attributes", List[str])

    async def set_filterable_attributes(self, attributes: Iterable[str]) -> TaskInfo:
        body = [str(a) for a in attributes]
        return await self._request(
            "/settings/filterable-attributes", Put(body=body), 202, TaskInfo
        )

    async def reset_filterable_attributes(self) -> TaskInfo:
        return await self._reset_setting("filterable-attributes")

    # ----- sortable attributes -----

    async def get_sortable_attributes(self) -> List[str]:
        return await self._get_setting("sortable-attributes", List[str])

    async def set_sortable_attributes(self, attributes: Iterable[str]) -> TaskInfo:
        body = [str(a) for a in attributes]
        return await self._request("/settings/sortable-attributes", Put(body=body), 202, TaskInfo)

    async def reset_sortable_attributes(self) -> TaskInfo:
        return await self._reset_setting("sortable-attributes")

    # ----- distinct attribute -----

    async def get_distinct_attribute(self) -> Optional[str]:
        return await self._get_setting("distinct-attribute", Optional[str])

    async def set_distinct_attribute(self, attribute: str) -> TaskInfo:
        return await self._request(
            "/settings/distinct-attribute", Put(body=str(attribute)), 202, TaskInfo
        )

    async def reset_distinct_attribute(self) -> TaskInfo:
        return await self._reset_setting("distinct-attribute")

    # ----- searchable attributes -----

    async def get_searchable_attributes(self) -> List[str]:
        return await self._get_setting("searchable-attributes", List[str])

    async def set_searchable_attributes(self, attributes: Iterable[str]) -> TaskInfo:
        body = [str(a) for a in attributes]
        return await self._request(
            "/settings/searchable-attributes", Put(body=body), 202, TaskInfo
        )

    async def reset_searchable_attributes(self) -> TaskInfo:
        return await self._reset_setting("searchable-attributes")

    # ----- displayed attributes -----

    async def get_displayed_attributes(self) -> List[str]:
        return await self._get_setting("displayed-attributes", List[str])

    async def set_displayed_attributes(self, attributes: Iterable[str]) -> TaskInfo:
        body = [str(a) for a in attributes]
        return await self._request(
            "/settings/displayed-attributes", Put(body=body), 202, TaskInfo
        )

    async def reset_displayed_attributes(self) -> TaskInfo:
        return await self._reset_setting("displayed-attributes")

    # ----- faceting -----

    async def get_faceting(self) -> FacetingSettings:
        return await self._get_setting("faceting", FacetingSettings)

    async def set_faceting(self, faceting: FacetingSettings) -> TaskInfo:
        return await self._request("/settings/faceting", Patch(body=faceting), 202, TaskInfo)

    async def reset_faceting(self) -> TaskInfo:
        return await self._reset_setting("faceting")
