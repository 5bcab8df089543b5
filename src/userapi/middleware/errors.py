"""
=============================================================================
ERROR MIDDLEWARE
=============================================================================

Turns APIError exceptions into JSON error responses so handlers can
simply raise:

    def get_user(request):
        user = store.get(user_id)        # may raise NotFoundError
        return ok(user.to_dict())

    NotFoundError("User 7 not found")
        │
        ▼
    HTTP/1.1 404 Not Found
    Content-Type: application/json; charset=utf-8

    {"error": "User 7 not found"}

HTTPParseError raised lazily by ``request.json`` is mapped the same way
(400). Any other exception is logged with its traceback and answered with
a generic 500, still inside LoggingMiddleware, so even a crash gets an
access-log line and an X-Request-ID.

=============================================================================
"""

import logging

from .base import Middleware, NextHandler
from ..errors import APIError
from ..http.request import HTTPRequest, HTTPParseError
from ..http.response import HTTPResponse, error_response, internal_error
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


class ErrorMiddleware(Middleware):
    """
    Maps APIError and HTTPParseError to ``{"error": message}`` responses.

    Client errors (4xx) are logged as warnings, server errors (5xx) as
    errors. Unexpected exceptions become a 500 without leaking their text.
    """

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        try:
            return next(request)
        except APIError as e:
            return self._to_response(request, HTTPStatus(e.status_code), e.message)
        except HTTPParseError as e:
            return self._to_response(request, HTTPStatus(e.status_code), str(e))
        except Exception as e:
            logger.exception(f"Unhandled error for {request.method} {request.path}: {e}")
            return internal_error()

    def _to_response(self, request: HTTPRequest, status: HTTPStatus, message: str) -> HTTPResponse:
        log = logger.error if status.is_server_error else logger.warning
        log(f"{request.method} {request.path} -> {int(status)}: {message}")
        return error_response(status, message)
