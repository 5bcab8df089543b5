"""
=============================================================================
MIDDLEWARE BASE
=============================================================================

A middleware receives the request and ``next``, the rest of the chain:

    class Timing(Middleware):
        def __call__(self, request, next):
            start = time.time()                  # before the handler
            response = next(request)             # the handler (and inner layers)
            response.set_header("X-Time", ...)   # after the handler
            return response

Returning without calling ``next`` short-circuits the chain.

=============================================================================
THE ONION
=============================================================================

    pipeline.add(LoggingMiddleware())     # first added = outermost
    pipeline.add(ErrorMiddleware())

        ┌──────────────────────────────────────────────┐
        │ LoggingMiddleware                            │
        │   ┌──────────────────────────────────────┐   │
        │   │ ErrorMiddleware                      │   │
        │   │   ┌──────────────────────────────┐   │   │
        │   │   │ router.handle                │   │   │
        │   │   └──────────────────────────────┘   │   │
        │   └──────────────────────────────────────┘   │
        └──────────────────────────────────────────────┘

Logging sits outside error handling, so the access log records the 404
that ErrorMiddleware produced from a NotFoundError.

=============================================================================
INTERVIEW QUESTIONS ABOUT MIDDLEWARE
=============================================================================

Q: "Which design pattern is this?"
A: "Chain of Responsibility. Each link decides whether to pass the
   request on and may rewrite what comes back."

Q: "Why wrap in reverse order?"
A: "Wrapping builds from the inside out. To make the first-added layer
   the outermost, it has to be wrapped last."

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, List
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


NextHandler = Callable[[HTTPRequest], HTTPResponse]


class Middleware(ABC):
    """Something that runs around every request."""

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        """Handle ``request``, normally by delegating to ``next``."""

    @property
    def name(self) -> str:
        return self.__class__.__name__


class MiddlewarePipeline:
    """
    Ordered middleware list that can wrap a final handler.

        pipeline = MiddlewarePipeline()
        pipeline.add(LoggingMiddleware()).add(ErrorMiddleware())
        handler = pipeline.wrap(router.handle)
        response = handler(request)
    """

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def use(self, *middleware: Middleware) -> "MiddlewarePipeline":
        for mw in middleware:
            self.add(mw)
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Build A(B(C(handler))) from [A, B, C].

        Each layer is a closure over its middleware and the layer inside it.
        """
        current = handler
        for middleware in reversed(self._middleware):
            current = self._bind(middleware, current)
        return current

    @staticmethod
    def _bind(middleware: Middleware, next_handler: NextHandler) -> NextHandler:
        def wrapped(request: HTTPRequest) -> HTTPResponse:
            return middleware(request, next_handler)
        return wrapped

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self):
        return iter(self._middleware)
