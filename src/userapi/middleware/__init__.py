"""
=============================================================================
MIDDLEWARE
=============================================================================

Code that wraps every request without touching the handlers.

    LoggingMiddleware   access log line, X-Request-ID header
    ErrorMiddleware     APIError → {"error": ...} with the right status

    server.use(LoggingMiddleware())      # outermost
    server.use(ErrorMiddleware())        # closest to the router

=============================================================================
"""

from .base import Middleware, MiddlewarePipeline
from .logging import LoggingMiddleware
from .errors import ErrorMiddleware

__all__ = [
    "Middleware",
    "MiddlewarePipeline",
    "LoggingMiddleware",
    "ErrorMiddleware",
]
