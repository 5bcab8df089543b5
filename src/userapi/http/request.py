"""
=============================================================================
HTTP REQUEST PARSING
=============================================================================

Turns the raw bytes read from a client socket into an HTTPRequest object
that route handlers can work with.

=============================================================================
WHAT A REQUEST LOOKS LIKE ON THE WIRE
=============================================================================

    POST /users HTTP/1.1\r\n                 ◄── request line
    Host: localhost:8080\r\n                 ◄── headers
    Content-Type: application/json\r\n
    Content-Length: 26\r\n
    \r\n                                     ◄── blank line
    {"name": "Alice", "age": 30}             ◄── body (Content-Length bytes)

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     PARSING PIPELINE                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   raw bytes ──► size guard ──► split at \r\n\r\n                   │
    │                                   │                                 │
    │                 ┌─────────────────┴────────────────┐                │
    │                 ▼                                  ▼                │
    │          header section                         body               │
    │                 │                                  │                │
    │      ┌──────────┴──────────┐                       │                │
    │      ▼                     ▼                       ▼                │
    │  request line          header lines       trimmed to              │
    │  METHOD URI VERSION    name: value        Content-Length          │
    │                                                                      │
    │                 └──────────── HTTPRequest ─────────┘                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
RULES WE ENFORCE
=============================================================================

1. Only the RFC 7231 methods are accepted          → otherwise 405
2. Only HTTP/1.0 and HTTP/1.1                      → otherwise 505
3. Requests bigger than max_request_size           → 413
4. Header names are case-insensitive               → stored lower-case
5. Repeated headers are folded with ", "
6. The body is exactly Content-Length bytes; anything after it belongs to
   the next pipelined request

=============================================================================
INTERVIEW QUESTIONS ABOUT HTTP PARSING
=============================================================================

Q: "How does the server know the headers are finished?"
A: "An empty line. The header block always ends with CRLF CRLF, so we look
   for b'\\r\\n\\r\\n' and split there."

Q: "How do you know how much body to read?"
A: "Content-Length. Without chunked encoding that header is the only
   length indicator we trust, which also keeps us safe from request
   smuggling through conflicting length signals."

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from urllib.parse import parse_qs, urlparse, unquote
import json
import re


class HTTPParseError(Exception):
    """
    Raised when a request cannot be parsed.

    Carries the status code the client should receive:

        400 Bad Request                 malformed syntax, invalid JSON body
        405 Method Not Allowed          unknown method
        413 Payload Too Large           request over the size limit
        505 HTTP Version Not Supported  anything but HTTP/1.0 or HTTP/1.1
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class HTTPRequest:
    """
    A parsed HTTP request.

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method          "GET", "POST", "PUT", "DELETE", ...
        path            request path without the query string ("/users/7")
        version         "HTTP/1.1" or "HTTP/1.0"
        headers         lower-cased header names → values
        query_params    "?a=1&a=2" → {"a": ["1", "2"]}
        body            raw body bytes
        path_params     filled in by the router: "/users/:id" → {"id": "7"}
        client_address  (ip, port) of the peer

    =========================================================================
    """

    method: str
    path: str
    version: str = "HTTP/1.1"

    headers: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, list[str]] = field(default_factory=dict)
    body: bytes = b""

    # Set by Router.handle() once a route matches
    path_params: Dict[str, str] = field(default_factory=dict)

    client_address: tuple[str, int] = ("", 0)

    _body_json: Optional[Any] = field(default=None, repr=False)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

    @property
    def json(self) -> Any:
        """
        The body decoded as JSON, cached after the first access.

        An empty body decodes to None.

        Raises:
            HTTPParseError: If the body is not valid UTF-8 JSON.
        """
        if self._body_json is None and self.body:
            try:
                self._body_json = json.loads(self.body.decode("utf-8"))
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise HTTPParseError(f"Invalid JSON body: {e}")
        return self._body_json

    @property
    def is_keep_alive(self) -> bool:
        """
        Whether the client expects the connection to stay open.

        HTTP/1.1 keeps connections open unless told "Connection: close";
        HTTP/1.0 closes them unless told "Connection: keep-alive".
        """
        connection = self.headers.get("connection", "").lower()
        if self.version == "HTTP/1.1":
            return connection != "close"
        return connection == "keep-alive"

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)


class RequestParser:
    """
    Parses raw request bytes into HTTPRequest objects.

    One parser is created per server and shared by every worker thread;
    it holds no per-request state.

        parser = RequestParser(max_request_size=1024 * 1024)
        request = parser.parse(raw_bytes, ("127.0.0.1", 52344))
    """

    VALID_METHODS = {
        "GET", "POST", "PUT", "DELETE", "PATCH",
        "HEAD", "OPTIONS", "TRACE", "CONNECT",
    }

    # METHOD SP REQUEST-URI SP HTTP-VERSION
    REQUEST_LINE_PATTERN = re.compile(r"^([A-Z]+) ([^ ]+) (HTTP/\d\.\d)$")
    # field-name ":" OWS field-value
    HEADER_PATTERN = re.compile(r"^([^:]+):\s*(.*)$")

    def __init__(self, max_request_size: int = 10 * 1024 * 1024):
        self.max_request_size = max_request_size

    def parse(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0)
    ) -> HTTPRequest:
        """
        Parse one complete request.

        Args:
            data: Raw request bytes (headers and body).
            client_address: Peer address, kept for logging.

        Returns:
            The parsed HTTPRequest.

        Raises:
            HTTPParseError: If the request is malformed.
        """
        if len(data) > self.max_request_size:
            raise HTTPParseError(
                f"Request too large: {len(data)} bytes",
                status_code=413,
            )

        # ─────────────────────────────────────────────────────────────────
        # SPLIT HEADER SECTION AND BODY
        # ─────────────────────────────────────────────────────────────────
        header_end = data.find(b"\r\n\r\n")
        if header_end == -1:
            raise HTTPParseError("Incomplete request: no header terminator")

        header_section = data[:header_end].decode("utf-8", errors="replace")
        body = data[header_end + 4:]

        lines = header_section.split("\r\n")
        method, path, query_params, version = self._parse_request_line(lines[0])
        headers = self._parse_headers(lines[1:])

        # ─────────────────────────────────────────────────────────────────
        # BODY: exactly Content-Length bytes
        # ─────────────────────────────────────────────────────────────────
        try:
            content_length = int(headers.get("content-length", 0))
        except ValueError:
            raise HTTPParseError("Invalid Content-Length header")
        if content_length < 0:
            raise HTTPParseError("Invalid Content-Length header")
        if len(body) < content_length:
            raise HTTPParseError(
                f"Incomplete body: expected {content_length} bytes, got {len(body)}"
            )

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
            query_params=query_params,
            body=body[:content_length],
            client_address=client_address,
        )

    def _parse_request_line(
        self,
        line: str
    ) -> tuple[str, str, Dict[str, list[str]], str]:
        """
        Split "GET /users?page=1 HTTP/1.1" into its parts.

            ─┬─ ──────┬─────── ───┬────
             │        │           │
           method    URI       version

        Returns:
            (method, decoded path, query params, version)
        """
        match = self.REQUEST_LINE_PATTERN.match(line)
        if not match:
            raise HTTPParseError(f"Invalid request line: {line}")

        method, uri, version = match.groups()

        if method not in self.VALID_METHODS:
            raise HTTPParseError(f"Invalid method: {method}", status_code=405)

        if version not in ("HTTP/1.0", "HTTP/1.1"):
            raise HTTPParseError(
                f"Unsupported HTTP version: {version}",
                status_code=505,
            )

        parsed = urlparse(uri)
        path = unquote(parsed.path) or "/"
        query_params = parse_qs(parsed.query, keep_blank_values=True)

        if ".." in path:
            raise HTTPParseError("Invalid path: contains ..")

        return method, path, query_params, version

    def _parse_headers(self, lines: list[str]) -> Dict[str, str]:
        """
        Parse "Name: value" lines into a dict keyed by lower-case name.

        Repeated headers are joined with ", " (RFC 7230 section 3.2.2).
        Lines that do not look like headers are skipped.
        """
        headers: Dict[str, str] = {}

        for line in lines:
            if not line:
                continue

            match = self.HEADER_PATTERN.match(line)
            if not match:
                continue

            name, value = match.groups()
            name = name.strip().lower()
            value = value.strip()

            if name in headers:
                headers[name] += ", " + value
            else:
                headers[name] = value

        return headers

