"""
=============================================================================
HTTP RESPONSE BUILDING
=============================================================================

Everything a handler returns is an HTTPResponse. This module provides the
response object, a fluent builder and one-line helpers for the responses
the users API sends.

=============================================================================
SERIALIZED FORM
=============================================================================

    HTTP/1.1 200 OK\r\n                              ◄── status line
    Content-Type: application/json; charset=utf-8\r\n
    Content-Length: 34\r\n                           ◄── added by to_bytes()
    Date: Mon, 19 Oct 2026 12:00:00 GMT\r\n          ◄── added by to_bytes()
    Server: userapi/1.0\r\n                          ◄── added by to_bytes()
    \r\n
    {"id": 1, "name": "Alice", "age": 30}

=============================================================================
HELPERS AND THEIR STATUS CODES
=============================================================================

    ok(body)                 200   dict/list → JSON, str → text/plain
    no_content()             204   empty body
    not_found(msg)           404   {"error": msg}
    method_not_allowed(m)    405   {"error": ..., "allowed": m} + Allow
    internal_error(msg)      500   {"error": msg}
    error_response(s, msg)   any   {"error": msg}

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Any, Union
import json

from .status_codes import HTTPStatus


@dataclass
class HTTPResponse:
    """
    An HTTP response waiting to be written to the socket.

    Handlers usually build one through ResponseBuilder or a helper such as
    ok(); middleware may add headers on the way out.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """"HTTP/1.1 404 Not Found"."""
        return f"{self.version} {int(self.status)} {HTTPStatus(self.status).phrase}"

    @property
    def json(self) -> Any:
        """Decoded JSON body (handy in tests and middleware)."""
        if not self.body:
            return None
        return json.loads(self.body.decode("utf-8"))

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        self.headers[name] = value
        return self

    def to_bytes(self, server_name: str = "userapi/1.0") -> bytes:
        """
        Serialize to the bytes sent with socket.sendall().

        Content-Length, Date and Server are filled in when the handler did
        not set them.
        """
        response_headers = dict(self.headers)

        if "Content-Length" not in response_headers:
            response_headers["Content-Length"] = str(len(self.body))
        if "Date" not in response_headers:
            response_headers["Date"] = format_http_date(datetime.now(timezone.utc))
        if "Server" not in response_headers:
            response_headers["Server"] = server_name

        lines = [self.status_line]
        lines.extend(f"{name}: {value}" for name, value in response_headers.items())
        lines.append("")

        head = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return head + self.body


class ResponseBuilder:
    """
    Fluent builder for HTTPResponse.

    Every method except build() returns the builder, so calls chain:

        response = (ResponseBuilder()
            .status(HTTPStatus.NOT_FOUND)
            .json({"error": "User 7 not found"})
            .build())
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def text(self, text: str) -> "ResponseBuilder":
        self._body = text.encode("utf-8")
        self._headers["Content-Type"] = "text/plain; charset=utf-8"
        return self

    def json(self, data: Any) -> "ResponseBuilder":
        """
        Serialize ``data`` as the JSON body.

        ensure_ascii=False keeps non-ASCII names readable in the payload.
        """
        self._body = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self._headers["Content-Type"] = "application/json; charset=utf-8"
        return self

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=self._headers,
            body=self._body,
        )


def format_http_date(dt: datetime) -> str:
    """
    Format a UTC datetime as an RFC 7231 HTTP-date.

        Mon, 19 Oct 2026 12:00:00 GMT

    Names are spelled out by hand so the result never depends on locale.
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def ok(body: Union[str, dict, list] = "") -> HTTPResponse:
    """200 OK. dict and list bodies become JSON, str becomes text/plain."""
    builder = ResponseBuilder().status(HTTPStatus.OK)
    if isinstance(body, str):
        return builder.text(body).build()
    return builder.json(body).build()


def no_content() -> HTTPResponse:
    """204 No Content, the answer to a successful DELETE."""
    return ResponseBuilder().status(HTTPStatus.NO_CONTENT).build()


def error_response(status: HTTPStatus, message: str) -> HTTPResponse:
    """Any error status with the API's {"error": message} body."""
    return ResponseBuilder().status(status).json({"error": message}).build()


def not_found(message: str = "Not Found") -> HTTPResponse:
    return error_response(HTTPStatus.NOT_FOUND, message)


def method_not_allowed(allowed_methods: list[str]) -> HTTPResponse:
    """
    405 Method Not Allowed.

    RFC 7231 requires the Allow header listing what the resource accepts.
    """
    return (ResponseBuilder()
        .status(HTTPStatus.METHOD_NOT_ALLOWED)
        .header("Allow", ", ".join(allowed_methods))
        .json({"error": "Method Not Allowed", "allowed": allowed_methods})
        .build())


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, message)
