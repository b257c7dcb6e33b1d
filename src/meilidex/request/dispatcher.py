"""Turn a method description into one HTTP call and a typed result.

`request()` is the single entry point every facade goes through. It appends
the query string, identifies the client, authenticates, sends the call with a
`RequestClient` and classifies the outcome into a value or a typed exception.
No retries happen here.
"""

from __future__ import annotations

import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Callable, Dict, Optional, Type, TypeVar

import httpx
from pydantic import AliasChoices, BaseModel, Field, TypeAdapter, ValidationError

from meilidex.exceptions import CommunicationError, ParseError, ServiceError
from meilidex.request.base_client import RequestClient
from meilidex.request.method import Method

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/json"

T = TypeVar("T")

RequestClientFactory = Callable[[str], RequestClient[Any, Any]]


class _ServiceErrorBody(BaseModel):
    message: str = Field(validation_alias=AliasChoices("message", "errorMessage"))
    code: str = Field(validation_alias=AliasChoices("code", "errorCode"))
    type: Optional[str] = None
    link: Optional[str] = None


def qualified_version() -> str:
    """Return the User-Agent value identifying this library."""
    try:
        pkg_version = version("meilidex")
    except PackageNotFoundError:
        pkg_version = "unknown"
    return f"Meilidex Python (v{pkg_version})"


def _query_items(query: Any) -> Dict[str, Any]:
    if query is None:
        return {}
    if isinstance(query, BaseModel):
        data = query.model_dump(by_alias=True, exclude_none=True, mode="json")
    else:
        data = dict(query)
    items: Dict[str, Any] = {}
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            value = ",".join(str(v) for v in value)
        items[key] = value
    return items


def add_query_parameters(url: str, query: Any) -> str:
    """Append the encoded query to `url`; an empty query leaves it untouched."""
    encoded = str(httpx.QueryParams(_query_items(query)))
    return f"{url}?{encoded}" if encoded else url


def default_request_client() -> Type[RequestClient[Any, Any]]:
    """Pick the request client for the current runtime."""
    if sys.platform == "emscripten":
        from meilidex.request.browser_client import BrowserRequestClient

        return BrowserRequestClient
    from meilidex.request.native_client import HttpxRequestClient

    return HttpxRequestClient


def parse_response(
    status_code: int,
    expected_status_code: int,
    body: str,
    url: str,
    output_type: Any = Any,
) -> Any:
    """Classify a response into a value of `output_type` or a typed exception."""
    if not body:
        body = "null"

    if status_code == expected_status_code:
        try:
            output = TypeAdapter(output_type).validate_json(body)
        except ValidationError as e:
            logger.error("Request succeeded but failed to parse response from %s", url)
            raise ParseError(f"Unexpected response body from {url}: {e}") from e
        logger.debug("Request to %s succeeded", url)
        return output

    logger.warning(
        "Expected response code %s, got %s from %s", expected_status_code, status_code, url
    )

    try:
        err = _ServiceErrorBody.model_validate_json(body)
    except ValidationError as e:
        if status_code >= 400:
            raise CommunicationError(status_code=status_code, url=url) from e
        raise ParseError(f"Unexpected status {status_code} from {url}: {e}") from e
    raise ServiceError(
        error_code=err.code,
        error_message=err.message,
        error_type=err.type,
        error_link=err.link,
        url=url,
    )


async def request(
    url: str,
    api_key: Optional[str],
    method: Method,
    expected_status_code: int,
    output_type: Any = Any,
    *,
    request_client: Optional[RequestClientFactory] = None,
) -> Any:
    """Execute `method` against `url` and return the parsed response.

    Parameters
    ----------
    url: str
        Fully qualified URL without query string.
    api_key: str | None
        Sent as a bearer token when set.
    method: Method
        Verb, query and optional body of the call.
    expected_status_code: int
        The status that means success for this call (200 for reads, 202 for
        enqueued tasks).
    output_type:
        Any type a pydantic `TypeAdapter` accepts. Defaults to raw JSON.
    request_client:
        Factory building a `RequestClient` for a URL. Defaults to the
        implementation matching the current runtime.
    """
    factory = request_client or default_request_client()
    client = (
        factory(add_query_parameters(url, method.query))
        .with_method(method.http_method)
        .with_user_agent_header(qualified_version())
    )
    if api_key:
        client = client.with_authorization_header(f"Bearer {api_key}")

    response = await client.send_request(client.add_body(method, CONTENT_TYPE))
    status_code = client.status_code(response)
    text = await client.response_text(response)

    return parse_response(status_code, expected_status_code, text, url, output_type)
