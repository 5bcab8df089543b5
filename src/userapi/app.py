"""
=============================================================================
APPLICATION FACTORY
=============================================================================

    create_app(config)
        │
        ├── HTTPServer(config)
        ├── use(LoggingMiddleware)       access log, X-Request-ID
        ├── use(ErrorMiddleware)         APIError → {"error": ...}
        ├── GET /                        "Hello World"
        └── UserHandler(store).register  /users, /users/:id

Pass a store to share one between servers or to use a prepared test
database; otherwise the factory opens ``config.db_path`` and closes it
when the server stops.

=============================================================================
"""

import logging
from typing import Optional

from .config import ServerConfig
from .server import HTTPServer
from .http.request import HTTPRequest
from .http.response import HTTPResponse, ok
from .middleware import LoggingMiddleware, ErrorMiddleware
from .storage import UserStore
from .users import UserHandler


logger = logging.getLogger(__name__)


def hello(request: HTTPRequest) -> HTTPResponse:
    return ok("Hello World")


def create_app(config: Optional[ServerConfig] = None, store: Optional[UserStore] = None) -> HTTPServer:
    """
    Build a ready-to-run users API server.

    Args:
        config: Server settings; defaults to ServerConfig().
        store: An open UserStore. When omitted one is opened from
            ``config.db_path`` and closed on shutdown.

    Returns:
        The configured HTTPServer. Call run() to serve.

    Raises:
        StorageError: If the database cannot be opened.
        ValueError: If the configuration is invalid.
    """
    config = config or ServerConfig()
    server = HTTPServer(config)

    if store is None:
        store = UserStore.open(config.db_path)
        server.on_shutdown(store.close)

    server.use(LoggingMiddleware(log_format=config.log_format))
    server.use(ErrorMiddleware())

    server.router.add_route("/", hello, method="GET", name="hello")
    UserHandler(store, validate=config.validate_users).register(server)

    if not config.validate_users:
        logger.warning("User validation is disabled; any name and age will be stored")

    return server
