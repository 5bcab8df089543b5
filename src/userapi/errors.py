"""
=============================================================================
API ERRORS
=============================================================================

Handlers and the store raise these; ErrorMiddleware turns them into
responses. Each class knows its own status code, the same way
HTTPParseError does for the parser.

    ┌─────────────────────────┬────────┬──────────────────────────────────┐
    │ Exception               │ Status │ Raised when                      │
    ├─────────────────────────┼────────┼──────────────────────────────────┤
    │ ValidationError         │  400   │ bad name/age, undecodable body   │
    │ NotFoundError           │  404   │ no row with that id              │
    │ InvalidIdentifierError  │  500   │ /users/:id where :id is not int  │
    │ StorageError            │  500   │ any sqlite3.Error                │
    └─────────────────────────┴────────┴──────────────────────────────────┘

All of them share APIError, so callers can catch the family at once:

    try:
        user = store.get(user_id)
    except APIError as e:
        return error_response(e.status_code, e.message)

=============================================================================
"""

from .http.status_codes import HTTPStatus


class APIError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(APIError):
    status_code = HTTPStatus.BAD_REQUEST


class NotFoundError(APIError):
    status_code = HTTPStatus.NOT_FOUND


class InvalidIdentifierError(APIError):
    """
    A path parameter that should be an integer id is not one.

    Answered with 500: the route matched, but the value
    could not be converted for the query.
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR


class StorageError(APIError):
    """The database refused or failed an operation."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
