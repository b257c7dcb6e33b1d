"""Request dispatching and the request clients it runs on."""

from .base_client import RequestClient
from .dispatcher import (
    add_query_parameters,
    default_request_client,
    parse_response,
    qualified_version,
    request,
)
from .method import Delete, Get, Method, Patch, Post, Put

__all__ = [
    "Delete",
    "Get",
    "Method",
    "Patch",
    "Post",
    "Put",
    "RequestClient",
    "add_query_parameters",
    "default_request_client",
    "parse_response",
    "qualified_version",
    "request",
]
