"""Document reads and writes on an index, plus their query builders.

Documents are passed through untouched: plain mappings, pydantic models or
anything else JSON-serializable.
"""

from __future__ import annotations

from typing import Any, Generic, Iterable, List, Optional, Sequence, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

from meilidex.request import Delete, Get, Post, Put
from meilidex.tasks import ServiceModel, TaskInfo

T = TypeVar("T")


class DocumentsResults(BaseModel, Generic[T]):
    """One page of documents returned by `get_documents`."""

    results: List[T]
    limit: int
    offset: int
    total: int


class _IndexQuery(ServiceModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    # The index the query runs against; never sent to the service.
    index: Any = Field(exclude=True)

    def __init__(self, index: Any, **data: Any) -> None:
        super().__init__(index=index, **data)


class DocumentQuery(_IndexQuery):
    fields: Optional[List[str]] = None

    def with_fields(self, fields: Iterable[str]) -> DocumentQuery:
        self.fields = list(fields)
        return self

    async def execute(self, document_id: Union[str, int], output_type: Any = Any) -> Any:
        return await self.index.get_document_with(document_id, self, output_type=output_type)


class DocumentsQuery(_IndexQuery):
    offset: Optional[int] = None
    limit: Optional[int] = None
    fields: Optional[List[str]] = None

    def with_offset(self, offset: int) -> DocumentsQuery:
        self.offset = offset
        return self

    def with_limit(self, limit: int) -> DocumentsQuery:
        self.limit = limit
        return self

    def with_fields(self, fields: Iterable[str]) -> DocumentsQuery:
        self.fields = list(fields)
        return self

    async def execute(self, output_type: Any = Any) -> DocumentsResults[Any]:
        return await self.index.get_documents_with(self, output_type=output_type)


class DocumentDeletionQuery(_IndexQuery):
    filter: Union[str, List[Any]] = ""

    def with_filter(self, filter: Union[str, List[Any]]) -> DocumentDeletionQuery:
        self.filter = filter
        return self

    async def execute(self) -> TaskInfo:
        return await self.index.delete_documents_with(self)


class DocumentsMixin:
    """Document operations, mixed into `meilidex.indexes.Index`."""

    async def _request(
        self, suffix: str, method: Any, expected_status: int, output_type: Any = Any
    ) -> Any:
        raise NotImplementedError

    async def get_document(
        self,
        document_id: Union[str, int],
        *,
        fields: Optional[Iterable[str]] = None,
        output_type: Any = Any,
    ) -> Any:
        """Fetch one document, optionally restricted to `fields`."""
        query = DocumentQuery(self)
        if fields is not None:
            query.with_fields(fields)
        return await self.get_document_with(document_id, query, output_type=output_type)

    async def get_document_with(
        self, document_id: Union[str, int], query: DocumentQuery, *, output_type: Any = Any
    ) -> Any:
        return await self._request(
            f"/documents/{document_id}", Get(query=query), 200, output_type
        )

    async def get_documents(
        self,
        *,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        fields: Optional[Iterable[str]] = None,
        output_type: Any = Any,
    ) -> DocumentsResults[Any]:
        query = DocumentsQuery(self, offset=offset, limit=limit)
        if fields is not None:
            query.with_fields(fields)
        return await self.get_documents_with(query, output_type=output_type)

    async def get_documents_with(
        self, query: DocumentsQuery, *, output_type: Any = Any
    ) -> DocumentsResults[Any]:
        return await self._request(
            "/documents", Get(query=query), 200, DocumentsResults[output_type]
        )

    async def add_or_replace(
        self, documents: Sequence[Any], primary_key: Optional[str] = None
    ) -> TaskInfo:
        """Add documents, replacing any existing document with the same id."""
        return await self._request(
            "/documents",
            Post(body=list(documents), query={"primaryKey": primary_key}),
            202,
            TaskInfo,
        )

    async def add_documents(
        self, documents: Sequence[Any], primary_key: Optional[str] = None
    ) -> TaskInfo:
        return await self.add_or_replace(documents, primary_key)

    async def add_or_update(
        self, documents: Sequence[Any], primary_key: Optional[str] = None
    ) -> TaskInfo:
        """Add documents, merging fields into any existing document with the same id."""
        return await self._request(
            "/documents",
            Put(body=list(documents), query={"primaryKey": primary_key}),
            202,
            TaskInfo,
        )

    async def delete_document(self, document_id: Union[str, int]) -> TaskInfo:
        return await self._request(f"/documents/{document_id}", Delete(), 202, TaskInfo)

    async def delete_all_documents(self) -> TaskInfo:
        return await self._request("/documents", Delete(), 202, TaskInfo)

    async def delete_documents(self, document_ids: Iterable[Union[str, int]]) -> TaskInfo:
        return await self._request(
            "/documents/delete-batch", Post(body=list(document_ids)), 202, TaskInfo
        )

    async def delete_documents_with(self, query: DocumentDeletionQuery) -> TaskInfo:
        """Delete every document matching the query's filter."""
        return await self._request("/documents/delete", Post(body=query), 202, TaskInfo)
