"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The subset of RFC 7231 status codes the users API can emit, with their
reason phrases.

=============================================================================
WHERE EACH CODE COMES FROM
=============================================================================

    ┌──────┬──────────────────────────┬──────────────────────────────────┐
    │ Code │ Phrase                   │ Produced by                      │
    ├──────┼──────────────────────────┼──────────────────────────────────┤
    │ 200  │ OK                       │ every successful read/write      │
    │ 204  │ No Content               │ DELETE /users/:id                │
    │ 400  │ Bad Request              │ parser, ValidationError          │
    │ 404  │ Not Found                │ router, NotFoundError            │
    │ 405  │ Method Not Allowed       │ router (path known, method not)  │
    │ 408  │ Request Timeout          │ connection read timeout          │
    │ 413  │ Payload Too Large        │ parser size guard                │
    │ 500  │ Internal Server Error    │ StorageError, bad :id, crashes   │
    │ 503  │ Service Unavailable      │ thread pool queue full           │
    │ 505  │ HTTP Version Not Supp.   │ parser version check             │
    └──────┴──────────────────────────┴──────────────────────────────────┘

The first digit is the class of the response:

    1xx informational, 2xx success, 3xx redirection,
    4xx client error, 5xx server error

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes usable as plain integers.

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    # 2xx SUCCESS
    OK = 200
    NO_CONTENT = 204

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    REQUEST_TIMEOUT = 408
    PAYLOAD_TOO_LARGE = 413

    # 5xx SERVER ERRORS
    INTERNAL_SERVER_ERROR = 500
    SERVICE_UNAVAILABLE = 503
    HTTP_VERSION_NOT_SUPPORTED = 505

    @property
    def phrase(self) -> str:
        """Reason phrase written after the code in the status line."""
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_server_error(self) -> bool:
        return 500 <= self < 600


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NO_CONTENT: "No Content",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.REQUEST_TIMEOUT: "Request Timeout",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload Too Large",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
    HTTPStatus.HTTP_VERSION_NOT_SUPPORTED: "HTTP Version Not Supported",
}
