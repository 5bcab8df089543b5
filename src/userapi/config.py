"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Every tunable of the users API lives in one dataclass. Values come from,
in increasing priority:

    1. the defaults below
    2. environment variables        (ServerConfig.from_env())
    3. command-line flags           (python -m userapi --port 9000 ...)

=============================================================================
ENVIRONMENT VARIABLES
=============================================================================

    HTTP_HOST           bind address                    127.0.0.1
    HTTP_PORT           bind port                       8080
    HTTP_WORKERS        max worker threads              16
    HTTP_TIMEOUT        first-request timeout, seconds  30
    HTTP_LOG_LEVEL      DEBUG / INFO / WARNING / ...    INFO
    USERAPI_DB_PATH     SQLite file                     users.db
    USERAPI_VALIDATE    "0", "false", "no" disable name/age checks

    HTTP_PORT=9000 USERAPI_DB_PATH=/tmp/users.db python -m userapi

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ServerConfig:
    """
    Configuration for the users API server.

    Groups: network, HTTP, thread pool, storage, logging, identity.
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """Address to bind. "0.0.0.0" to accept connections from other hosts."""

    port: int = 8080
    """TCP port. 0 asks the OS for a free one (used by the tests)."""

    backlog: int = 128
    """Completed handshakes the kernel queues before accept()."""

    buffer_size: int = 8192
    """Bytes requested per recv()."""

    timeout: Optional[float] = 30.0
    """Seconds to wait for the first request on a new connection."""

    # ─────────────────────────────────────────────────────────────────────
    # HTTP
    # ─────────────────────────────────────────────────────────────────────

    keep_alive: bool = True
    """Serve several requests per TCP connection."""

    keep_alive_timeout: float = 5.0
    """Idle seconds before a kept-alive connection is dropped."""

    max_request_size: int = 1024 * 1024
    """Largest accepted request, headers included. A user is a few bytes."""

    # ─────────────────────────────────────────────────────────────────────
    # THREAD POOL
    # ─────────────────────────────────────────────────────────────────────

    min_workers: int = 4
    max_workers: int = 16

    queue_size: int = 100
    """Connections waiting for a worker before the server answers 503."""

    # ─────────────────────────────────────────────────────────────────────
    # STORAGE
    # ─────────────────────────────────────────────────────────────────────

    db_path: str = "users.db"
    """SQLite database file; ":memory:" keeps everything in RAM."""

    validate_users: bool = True
    """Apply the name length and age range checks on create and update."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"

    log_format: str = "text"
    """Access log format: "text" (Apache-like) or "json" (one object per line)."""

    # ─────────────────────────────────────────────────────────────────────
    # IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "userapi/1.0"
    """Value of the Server response header."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Build a configuration from the environment, falling back to defaults.

        Raises:
            ValueError: If a numeric variable does not parse.
        """
        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", "8080")),
            max_workers=int(os.getenv("HTTP_WORKERS", "16")),
            timeout=float(os.getenv("HTTP_TIMEOUT", "30")),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
            db_path=os.getenv("USERAPI_DB_PATH", "users.db"),
            validate_users=os.getenv("USERAPI_VALIDATE", "1").strip().lower() not in _FALSE_VALUES,
        )

    def validate(self) -> None:
        """
        Fail fast on impossible settings, before any socket is opened.

        Raises:
            ValueError: Describing the first invalid field.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.min_workers < 1:
            raise ValueError("min_workers must be >= 1")

        if self.max_workers < self.min_workers:
            raise ValueError("max_workers must be >= min_workers")

        if self.queue_size < 1:
            raise ValueError("queue_size must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.keep_alive_timeout <= 0:
            raise ValueError("keep_alive_timeout must be > 0")

        if not self.db_path:
            raise ValueError("db_path must not be empty")

        if self.log_format not in ("text", "json"):
            raise ValueError(f"log_format must be 'text' or 'json', got {self.log_format!r}")


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# - One typed dataclass, defaults suitable for local development
# - from_env() for containers, CLI flags override on top
# - validate() runs at startup so bad settings never reach a socket
# =============================================================================
