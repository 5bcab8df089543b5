"""
pytest configuration and fixtures.
"""

import threading
from typing import Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from userapi import HTTPServer, ServerConfig, create_app
from userapi.storage import UserStore


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /users?page=1&limit=10 HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: application/json\r\n"
        b"Connection: keep-alive\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with JSON body."""
    body = b'{"name": "Alice", "age": 30}'
    return (
        b"POST /users HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Content-Type: application/json\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"Connection: close\r\n"
        b"\r\n"
    ) + body


@pytest.fixture
def config(tmp_path) -> ServerConfig:
    """Test configuration: ephemeral port, temporary database, short timeouts."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,
        min_workers=2,
        max_workers=4,
        timeout=5.0,
        keep_alive_timeout=1.0,
        db_path=str(tmp_path / "users.db"),
        log_level="WARNING",
    )


@pytest.fixture
def store(tmp_path) -> Generator[UserStore, None, None]:
    """A UserStore on a fresh database file."""
    user_store = UserStore.open(str(tmp_path / "store.db"))
    yield user_store
    user_store.close()


class LiveServer:
    """Runs an HTTPServer on a background thread for integration tests."""

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def host(self) -> str:
        return self.server.address[0]

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"banner": False},
            daemon=True,
        )
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=10.0)


@pytest.fixture
def live_server(config: ServerConfig) -> Generator[LiveServer, None, None]:
    """The full users API listening on a free port."""
    live = LiveServer(create_app(config))
    live.start()

    yield live

    live.stop()


@pytest.fixture
def lenient_server(config: ServerConfig) -> Generator[LiveServer, None, None]:
    """Same as live_server, with the name/age policy switched off."""
    config.validate_users = False
    live = LiveServer(create_app(config))
    live.start()

    yield live

    live.stop()
