"""
=============================================================================
CORE NETWORKING
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │ SocketServer   listening socket, accept loop, SIGINT/SIGTERM        │
    └───────────────────────────────┬─────────────────────────────────────┘
                                    │ one Connection per client
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │ ThreadPool     bounded queue, worker threads, 503 when full         │
    └───────────────────────────────┬─────────────────────────────────────┘
                                    │ worker runs the keep-alive loop
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │ Connection     buffered reads, timeouts, graceful close             │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState
from .thread_pool import ThreadPool

__all__ = [
    "SocketServer",
    "Connection",
    "ConnectionState",
    "ThreadPool",
]
