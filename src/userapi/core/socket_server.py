"""
=============================================================================
TCP SOCKET SERVER
=============================================================================

Owns the listening socket and the accept loop. Every accepted client
socket is wrapped in a Connection and handed to a callback; the HTTP
server's callback submits it to the thread pool.

    socket() ──► setsockopt() ──► bind() ──► listen() ──► accept() loop
                                                              │
                                            Connection(client_socket)
                                                              │
                                                  connection_handler(conn)

=============================================================================
SOCKET OPTIONS
=============================================================================

    SO_REUSEADDR   rebind immediately after a restart instead of waiting
                   for TIME_WAIT sockets to expire
    TCP_NODELAY    disable Nagle's algorithm; small JSON responses go out
                   at once instead of being coalesced
    settimeout(1)  accept() wakes up every second to check the running flag

=============================================================================
SHUTDOWN
=============================================================================

SIGINT (Ctrl+C) and SIGTERM (docker stop, systemd) are turned into a call
to shutdown(). Python only lets the main thread install signal handlers,
so when the server runs in a background thread (as it does in the test
suite) shutdown() must be called explicitly.

Binding to port 0 lets the OS pick a free port; ``address`` reports the
port actually bound once ``wait_until_ready()`` returns.

=============================================================================
INTERVIEW QUESTIONS ABOUT SOCKETS
=============================================================================

Q: "Why does accept() return a new socket?"
A: "The listening socket only queues handshakes. Each accepted socket is a
   separate (client ip, client port) conversation, so the listener can
   keep accepting while workers talk to clients."

Q: "What is the backlog in listen()?"
A: "How many completed handshakes the kernel queues before accept() picks
   them up. When it is full new clients are refused or retried."

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    Blocking TCP accept loop with graceful shutdown.

        server = SocketServer(config)
        server.start(handle_connection)     # blocks until shutdown()
    """

    def __init__(self, config: ServerConfig):
        self.config = config
        self._socket: Optional[socket.socket] = None
        self._running = False
        self._bound_address: Optional[Tuple[str, int]] = None

        # Set once listen() succeeds, cleared on cleanup
        self._ready_event = threading.Event()
        self._shutdown_event = threading.Event()

        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """(host, port) actually bound, or the configured pair before bind."""
        if self._bound_address:
            return self._bound_address
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        sock.settimeout(1.0)
        return sock

    def _setup_signals(self):
        """
        Route SIGINT and SIGTERM to shutdown().

        signal.signal() raises ValueError outside the main thread, so the
        handlers are only installed when we are on it.
        """
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on the main thread, skipping signal handlers")
            return

        def shutdown_handler(signum, frame):
            logger.info(f"Received {signal.Signals(signum).name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and accept until shutdown() is called.

        Args:
            connection_handler: Called with every accepted Connection.

        Raises:
            OSError: If the address cannot be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)
        self._bound_address = self._socket.getsockname()[:2]

        self._running = True
        self._shutdown_event.clear()
        self._setup_signals()
        self._ready_event.set()

        host, port = self._bound_address
        logger.info(f"Server listening on {host}:{port}")

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                # Poll the running flag
                continue
            except OSError as e:
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
                keep_alive_timeout=self.config.keep_alive_timeout,
                max_request_size=self.config.max_request_size,
            )
            connection_handler(conn)

    def shutdown(self):
        """Stop the accept loop. Safe to call more than once, from any thread."""
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False
        self._shutdown_event.set()

    def _cleanup(self):
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError as e:
                logger.debug(f"Error closing listening socket: {e}")
            self._socket = None

        self._ready_event.clear()
        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the socket is listening. False on timeout."""
        return self._ready_event.wait(timeout)

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        return self._shutdown_event.wait(timeout)
