"""
=============================================================================
CLIENT CONNECTION
=============================================================================

TCP is a byte stream, not a message stream. One recv() may return half a
request, or one and a half. Connection keeps a buffer between reads and
hands the HTTP layer exactly one request at a time.

    recv() #1:  "POST /users HTTP/1.1\r\nContent-Le"
    recv() #2:  "ngth: 26\r\n\r\n{\"name\": \"Alice\", "
    recv() #3:  "\"age\": 30}GET /users HTTP/1.1\r\n..."
                           ▲
                           └── start of the next (pipelined) request,
                               left in the buffer for read_request()

=============================================================================
LIFECYCLE
=============================================================================

    NEW ──► READING ──► PROCESSING ──► WRITING ──► KEEP_ALIVE ─┐
                ▲                                               │
                └───────────────────────────────────────────────┘
                                                   │
                                      timeout / "Connection: close"
                                                   ▼
                                         CLOSING ──► CLOSED

The first request gets ``timeout`` seconds to arrive; every following one
on the same connection gets the shorter ``keep_alive_timeout``. An idle
keep-alive connection simply ends, while a slow first request is an error
(408).

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional
import uuid


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    NEW = "new"
    READING = "reading"
    PROCESSING = "processing"
    WRITING = "writing"
    KEEP_ALIVE = "keep_alive"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass
class Connection:
    """
    A client socket plus the read buffer and bookkeeping around it.

    Attributes:
        socket: The accepted client socket.
        address: Client (ip, port).
        id: Short random id used to tag log lines.
        state: Current ConnectionState.
        requests_handled: Requests read so far on this connection.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    last_activity: float = field(default_factory=time.time)
    requests_handled: int = 0

    buffer_size: int = 8192
    timeout: float = 30.0
    keep_alive_timeout: float = 5.0
    max_request_size: int = 10 * 1024 * 1024

    _buffer: bytes = field(default=b"", repr=False)

    def __post_init__(self):
        self.socket.setblocking(True)
        if self.timeout:
            self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def client_port(self) -> int:
        return self.address[1]

    @property
    def age(self) -> float:
        return time.time() - self.created_at

    @property
    def idle_time(self) -> float:
        return time.time() - self.last_activity

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> Optional[bytes]:
        """
        Read exactly one request (headers plus Content-Length body bytes).

        Returns:
            The raw request, or None when the client closed the connection
            or an idle keep-alive connection timed out.

        Raises:
            TimeoutError: If the first request does not arrive in time.
            ValueError: If the buffered request exceeds max_request_size.
        """
        self.state = ConnectionState.READING
        self.last_activity = time.time()

        if self.requests_handled > 0:
            self.socket.settimeout(self.keep_alive_timeout)

        try:
            # ─────────────────────────────────────────────────────────────
            # Headers: until the blank line
            # ─────────────────────────────────────────────────────────────
            while b"\r\n\r\n" not in self._buffer:
                chunk = self._recv()
                if not chunk:
                    return None
                self._buffer += chunk
                self._check_size()

            header_end = self._buffer.find(b"\r\n\r\n")
            body_start = header_end + 4
            content_length = self._parse_content_length(self._buffer[:header_end])

            # ─────────────────────────────────────────────────────────────
            # Body: Content-Length more bytes
            # ─────────────────────────────────────────────────────────────
            while len(self._buffer) - body_start < content_length:
                chunk = self._recv()
                if not chunk:
                    # Peer hung up mid-body; the parser reports it as incomplete
                    break
                self._buffer += chunk
                self._check_size()

            request_end = body_start + content_length
            request_data = self._buffer[:request_end]
            self._buffer = self._buffer[request_end:]

            self.requests_handled += 1
            self.last_activity = time.time()
            return request_data

        except socket.timeout:
            if self.requests_handled > 0:
                logger.debug(f"[{self.id}] Keep-alive timeout")
                return None
            raise TimeoutError("Request read timeout")

        finally:
            if self.state != ConnectionState.CLOSED:
                self.socket.settimeout(self.timeout)

    def _check_size(self):
        if len(self._buffer) > self.max_request_size:
            raise ValueError(f"Request too large: {len(self._buffer)} bytes")

    def _recv(self) -> bytes:
        try:
            data = self.socket.recv(self.buffer_size)
        except (ConnectionResetError, BrokenPipeError):
            return b""
        self.last_activity = time.time()
        return data

    def _parse_content_length(self, headers: bytes) -> int:
        """
        Find Content-Length in the raw header block.

        Only used to know how many body bytes to wait for. An unparsable
        value counts as 0 here; RequestParser rejects it afterwards.
        """
        header_str = headers.decode("utf-8", errors="replace").lower()
        for line in header_str.split("\r\n"):
            if line.startswith("content-length:"):
                try:
                    return max(int(line.split(":", 1)[1].strip()), 0)
                except ValueError:
                    return 0
        return 0

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """sendall() the response. False if the client has gone away."""
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False
        self.last_activity = time.time()
        return True

    def set_keep_alive(self):
        self.state = ConnectionState.KEEP_ALIVE

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Half-close, drain, then release the socket.

        shutdown(SHUT_WR) sends our FIN first so the client sees the end of
        the response before the descriptor goes away.
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            # Peer already disconnected
            pass

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            # socket.timeout is an OSError; either way we are closing
            pass

        self.socket.close()
        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.requests_handled} requests")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
