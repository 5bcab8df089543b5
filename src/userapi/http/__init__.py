"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

Translates between bytes on a TCP stream and Python objects:

    ┌──────────────────┬──────────────────────────────────────────────────┐
    │ request.py       │ raw bytes → HTTPRequest (RequestParser)          │
    │ response.py      │ HTTPResponse → raw bytes, plus ok()/not_found()… │
    │ router.py        │ "GET /users/:id" → handler, 404 vs 405           │
    │ status_codes.py  │ HTTPStatus enum with reason phrases              │
    └──────────────────┴──────────────────────────────────────────────────┘

    REQUEST:                          RESPONSE:
    GET /users/1 HTTP/1.1\r\n         HTTP/1.1 200 OK\r\n
    Host: localhost\r\n               Content-Type: application/json\r\n
    \r\n                              \r\n
                                      {"id": 1, "name": "Alice", "age": 30}

=============================================================================
"""

from .request import HTTPRequest, RequestParser, HTTPParseError
from .response import (
    HTTPResponse,
    ResponseBuilder,
    ok,                  # 200
    no_content,          # 204
    not_found,           # 404
    method_not_allowed,  # 405
    internal_error,      # 500
    error_response,      # any status, {"error": ...}
)
from .router import Router, Route
from .status_codes import HTTPStatus

__all__ = [
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "HTTPResponse",
    "ResponseBuilder",
    "ok",
    "no_content",
    "not_found",
    "method_not_allowed",
    "internal_error",
    "error_response",
    "Router",
    "Route",
    "HTTPStatus",
]
