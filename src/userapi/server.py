"""
=============================================================================
HTTP SERVER
=============================================================================

Glues the pieces together:

    ┌────────────────────────────────────────────────────────────────────┐
    │                                                                    │
    │  SocketServer ── accept() ──► Connection                           │
    │                                   │ submit()                       │
    │                                   ▼                                │
    │                             ThreadPool worker                      │
    │                                   │                                │
    │            ┌──────────────────────┴───────────────────────┐        │
    │            │  keep-alive loop                              │        │
    │            │    read_request() → RequestParser.parse()     │        │
    │            │    → middleware → router → handler            │        │
    │            │    → response.to_bytes() → send_response()    │        │
    │            └───────────────────────────────────────────────┘        │
    │                                                                    │
    └────────────────────────────────────────────────────────────────────┘

Failures are answered at the layer that detects them:

    parser        HTTPParseError        → its status (400/405/413/505), close
    connection    TimeoutError          → 408, close
                  request too large     → 413, close
    pool          queue full            → 503, close
    handler       APIError              → ErrorMiddleware, its status
                  anything else         → ErrorMiddleware, 500
    middleware    anything escaping     → 500 in handle(), traceback logged

=============================================================================
INTERVIEW QUESTIONS
=============================================================================

Q: "What does keep-alive buy you?"
A: "No new TCP handshake per request. The worker loops on the same
   socket until the client says 'Connection: close' or goes quiet for
   keep_alive_timeout seconds."

Q: "How do you stop without dropping requests?"
A: "Stop accepting, let the pool drain its queue for a bounded time,
   then poison-pill the workers and run the shutdown hooks (closing the
   database)."

=============================================================================
"""

import logging
from typing import Optional, Callable, List, Tuple

from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionState, ThreadPool
from .http import (
    HTTPRequest, RequestParser, HTTPParseError,
    HTTPResponse, HTTPStatus, Router, error_response, internal_error,
)
from .middleware import MiddlewarePipeline, Middleware


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Threaded HTTP/1.1 server with routing and middleware.

        server = HTTPServer(ServerConfig(port=8080))
        server.use(LoggingMiddleware())

        @server.get("/")
        def hello(request):
            return ok("Hello World")

        server.run()                 # blocks until SIGINT/SIGTERM or shutdown()
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._thread_pool = ThreadPool(
            min_workers=self.config.min_workers,
            max_workers=self.config.max_workers,
            queue_size=self.config.queue_size,
        )
        self._parser = RequestParser(max_request_size=self.config.max_request_size)

        self._router = Router()
        self._middleware = MiddlewarePipeline()
        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None

        self._shutdown_hooks: List[Callable[[], None]] = []
        self._running = False

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def use(self, middleware: Middleware) -> "HTTPServer":
        """Append middleware; the first one added runs outermost."""
        self._middleware.add(middleware)
        return self

    def on_shutdown(self, callback: Callable[[], None]) -> "HTTPServer":
        """Run ``callback`` once the server has stopped serving."""
        self._shutdown_hooks.append(callback)
        return self

    @property
    def router(self) -> Router:
        return self._router

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port); the real port once run() is listening."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._running

    def route(self, path: str, method: Optional[str] = None, **kwargs):
        return self._router.route(path, method, **kwargs)

    def get(self, path: str, **kwargs):
        return self._router.get(path, **kwargs)

    def post(self, path: str, **kwargs):
        return self._router.post(path, **kwargs)

    def put(self, path: str, **kwargs):
        return self._router.put(path, **kwargs)

    def delete(self, path: str, **kwargs):
        return self._router.delete(path, **kwargs)

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Run one parsed request through middleware and router, in-process.

        This is the same path a request takes inside a worker, minus the
        socket. It never raises: an exception that escapes the middleware
        (a server built without ErrorMiddleware) becomes a bare 500.
        """
        if self._handler is None:
            self._handler = self._middleware.wrap(self._router.handle)
        try:
            return self._handler(request)
        except Exception as e:
            logger.exception(f"Unhandled error for {request.method} {request.path}: {e}")
            return internal_error()

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def run(self, host: Optional[str] = None, port: Optional[int] = None, banner: bool = True):
        """
        Serve until shutdown() or SIGINT/SIGTERM.

        Raises:
            OSError: If the address cannot be bound.
        """
        if host:
            self.config.host = host
        if port is not None:
            self.config.port = port

        self._setup_logging()
        self._handler = self._middleware.wrap(self._router.handle)
        self._running = True
        self._thread_pool.start()

        if banner:
            self._print_startup_banner()

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until run() is accepting connections."""
        return self._socket_server.wait_until_ready(timeout)

    def shutdown(self):
        """Ask a running server to stop; run() returns shortly after."""
        self._socket_server.shutdown()

    def _print_startup_banner(self):
        print()
        print("=" * 64)
        print(f"  {self.config.server_name} running")
        print(f"  http://{self.config.host}:{self.config.port}")
        print(f"  Workers: {self.config.min_workers}-{self.config.max_workers} threads")
        print(f"  Database: {self.config.db_path}")
        print("  Press Ctrl+C to stop")
        print("=" * 64)
        self._router.print_routes()

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("userapi").setLevel(level)

    def _shutdown(self):
        logger.info("Shutting down server...")
        self._running = False
        self._thread_pool.shutdown(wait=True, timeout=self.config.keep_alive_timeout + 5.0)

        for hook in self._shutdown_hooks:
            try:
                hook()
            except Exception as e:
                logger.exception(f"Shutdown hook {hook!r} failed: {e}")

        logger.info("Server stopped")

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """Called by the accept loop. Never blocks on a full pool."""
        submitted = self._thread_pool.submit(
            self._process_connection,
            args=(conn,),
            block=False,
        )
        if not submitted:
            logger.warning(f"[{conn.id}] Thread pool full, rejecting connection")
            self._send_error(conn, HTTPStatus.SERVICE_UNAVAILABLE, "Server overloaded")
            conn.close()

    def _process_connection(self, conn: Connection):
        """Keep-alive loop for one client (runs on a worker thread)."""
        with conn:
            while self._running:
                try:
                    raw_request = conn.read_request()
                except TimeoutError:
                    self._send_error(conn, HTTPStatus.REQUEST_TIMEOUT, "Request timeout")
                    break
                except ValueError as e:
                    self._send_error(conn, HTTPStatus.PAYLOAD_TOO_LARGE, str(e))
                    break

                if raw_request is None:
                    break

                try:
                    request = self._parser.parse(raw_request, conn.address)
                except HTTPParseError as e:
                    self._send_error(conn, HTTPStatus(e.status_code), str(e))
                    break

                conn.state = ConnectionState.PROCESSING
                response = self.handle(request)

                keep_alive = request.is_keep_alive and self.config.keep_alive
                if keep_alive:
                    response.headers.setdefault("Connection", "keep-alive")
                    response.headers.setdefault(
                        "Keep-Alive",
                        f"timeout={int(self.config.keep_alive_timeout)}",
                    )
                else:
                    response.headers["Connection"] = "close"

                if not conn.send_response(response.to_bytes(self.config.server_name)):
                    break

                if not keep_alive:
                    break
                conn.set_keep_alive()

    def _send_error(self, conn: Connection, status: HTTPStatus, message: str):
        """Error for failures before routing; the connection closes after it."""
        response = error_response(status, message)
        response.set_header("Connection", "close")
        conn.send_response(response.to_bytes(self.config.server_name))


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# Accept → pool → parse → middleware → router → handler → bytes.
# Threads, not asyncio: SQLite and the socket calls release the GIL.
# =============================================================================
