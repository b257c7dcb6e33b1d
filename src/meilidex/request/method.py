"""HTTP call descriptions: verb, query parameters and optional body.

Each variant fixes its verb, so a body can only travel with POST, PUT or PATCH.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Union


@dataclass(frozen=True, slots=True)
class Get:
    query: Any = None

    http_method: ClassVar[str] = "GET"


@dataclass(frozen=True, slots=True)
class Delete:
    query: Any = None

    http_method: ClassVar[str] = "DELETE"


@dataclass(frozen=True, slots=True)
class Post:
    body: Any = None
    query: Any = None

    http_method: ClassVar[str] = "POST"


@dataclass(frozen=True, slots=True)
class Put:
    body: Any = None
    query: Any = None

    http_method: ClassVar[str] = "PUT"


@dataclass(frozen=True, slots=True)
class Patch:
    body: Any = None
    query: Any = None

    http_method: ClassVar[str] = "PATCH"


Method = Union[Get, Delete, Post, Put, Patch]

BODY_METHODS = (Post, Put, Patch)


def has_body(method: Method) -> bool:
    """Return True if the method carries a request payload."""
    return isinstance(method, BODY_METHODS)
