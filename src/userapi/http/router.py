"""
=============================================================================
URL ROUTER
=============================================================================

Maps "METHOD /path" to a handler function. Two kinds of segment exist:

    static     /users        must match exactly
    :param     /users/:id    captures one segment into request.path_params

=============================================================================
HOW A ROUTE TABLE IS SEARCHED
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  GET /users/42                                                      │
    │        │                                                            │
    │        ▼                                                            │
    │  ┌───────────────────────────────────────────────────────────────┐  │
    │  │  GET    /             → hello                                  │  │
    │  │  POST   /users        → create_user                            │  │
    │  │  GET    /users        → list_users                             │  │
    │  │  GET    /users/:id    → get_user        ◄── first match wins   │  │
    │  │  PUT    /users/:id    → update_user                            │  │
    │  │  DELETE /users/:id    → delete_user                            │  │
    │  └───────────────────────────────────────────────────────────────┘  │
    │        │                                                            │
    │        ▼                                                            │
    │  request.path_params = {"id": "42"}; get_user(request)              │
    │                                                                     │
    │  No route for the method, but the path exists  → 405 + Allow        │
    │  Path unknown for every method                 → 404                │
    └─────────────────────────────────────────────────────────────────────┘

Each pattern is compiled once, at registration:

    /users/:id   →   ^/users/(?P<id>[^/]+)$

The router never interprets a parameter. "/users/abc" matches /users/:id
and it is the handler's job to decide what a non-numeric id means.

=============================================================================
INTERVIEW QUESTIONS ABOUT ROUTING
=============================================================================

Q: "Why regexes instead of a trie?"
A: "A handful of routes makes a linear scan over compiled patterns
   O(R × P) and perfectly fast. Radix trees pay off with hundreds of
   routes."

Q: "Why distinguish 404 from 405?"
A: "RFC 7231: 405 means the resource exists but not for this method, and
   the response must carry an Allow header so the client can correct
   itself."

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Dict, List
import re

from .request import HTTPRequest
from .response import HTTPResponse, not_found, method_not_allowed


Handler = Callable[[HTTPRequest], HTTPResponse]


@dataclass
class Route:
    """One registered (method, pattern) → handler binding."""

    path: str
    method: Optional[str]            # None accepts any method
    handler: Handler
    name: Optional[str] = None

    _pattern: Optional[re.Pattern] = field(default=None, repr=False)
    _param_names: List[str] = field(default_factory=list, repr=False)


@dataclass
class RouteMatch:
    route: Route
    params: Dict[str, str]


class Router:
    """
    Request router with ``:param`` path segments.

    Routes are registered directly or through decorators:

        router = Router()

        @router.get("/users/:id")
        def get_user(request):
            return ok({"id": request.path_params["id"]})

    Registration order is match order.
    """

    def __init__(self):
        self._routes: List[Route] = []

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        path: str,
        handler: Handler,
        method: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Route:
        """
        Register ``handler`` for ``method`` on ``path``.

        Args:
            path: URL pattern such as "/users/:id".
            handler: Callable taking an HTTPRequest and returning an HTTPResponse.
            method: HTTP method, or None to accept every method.
            name: Optional label shown by print_routes().

        Returns:
            The registered Route.
        """
        pattern, param_names = self._compile_pattern(path)
        route = Route(
            path=path,
            method=method.upper() if method else None,
            handler=handler,
            name=name,
            _pattern=pattern,
            _param_names=param_names,
        )
        self._routes.append(route)
        return route

    def _compile_pattern(self, path: str) -> tuple[re.Pattern, List[str]]:
        """
        Compile "/users/:id" into ^/users/(?P<id>[^/]+)$.

            ""        → skipped (leading slash)
            "users"   → /users            static, regex-escaped
            ":id"     → /(?P<id>[^/]+)    one segment, no slashes

        The root path "/" compiles to ^/$.
        """
        param_names: List[str] = []
        regex_parts = ["^"]

        for segment in path.split("/"):
            if not segment:
                continue
            regex_parts.append("/")
            if segment.startswith(":"):
                param_name = segment[1:]
                param_names.append(param_name)
                regex_parts.append(f"(?P<{param_name}>[^/]+)")
            else:
                regex_parts.append(re.escape(segment))

        if len(regex_parts) == 1:
            regex_parts.append("/")
        regex_parts.append("$")

        return re.compile("".join(regex_parts)), param_names

    # =========================================================================
    # ROUTE MATCHING
    # =========================================================================

    @staticmethod
    def _normalize(path: str) -> str:
        # "/users/" and "/users" are the same resource
        return "/" + path.strip("/") if path != "/" else "/"

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """First route accepting ``method`` whose pattern matches ``path``."""
        path = self._normalize(path)
        method = method.upper()

        for route in self._routes:
            if route.method and route.method != method:
                continue
            found = route._pattern.match(path)
            if found:
                return RouteMatch(route=route, params=found.groupdict())

        return None

    def get_allowed_methods(self, path: str) -> List[str]:
        """Methods registered for ``path``, for the Allow header of a 405."""
        path = self._normalize(path)
        methods = set()

        for route in self._routes:
            if route._pattern.match(path):
                if route.method is None:
                    return ["DELETE", "GET", "HEAD", "OPTIONS", "PATCH", "POST", "PUT"]
                methods.add(route.method)

        return sorted(methods)

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Dispatch ``request`` to its handler.

        Path parameters are stored on request.path_params before the call.
        Exceptions raised by the handler propagate to the middleware.
        """
        found = self.match(request.method, request.path)
        if found:
            request.path_params = found.params
            return found.route.handler(request)

        allowed = self.get_allowed_methods(request.path)
        if allowed:
            return method_not_allowed(allowed)

        return not_found(f"No route matches {request.path}")

    # ─────────────────────────────────────────────────────────────────────
    # Decorators: sugar over add_route()
    # ─────────────────────────────────────────────────────────────────────

    def route(
        self,
        path: str,
        method: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method, name)
            return handler
        return decorator

    def get(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        return self.route(path, "GET", name)

    def post(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        return self.route(path, "POST", name)

    def put(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        return self.route(path, "PUT", name)

    def delete(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        return self.route(path, "DELETE", name)

    def patch(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        return self.route(path, "PATCH", name)

    # =========================================================================
    # INTROSPECTION
    # =========================================================================

    def routes(self) -> List[Route]:
        return list(self._routes)

    def print_routes(self) -> None:
        """
        Print the route table, e.g.

            Registered Routes:
            ------------------------------------------------------------
              GET      /
              POST     /users                         create_user
            ------------------------------------------------------------
        """
        print("\nRegistered Routes:")
        print("-" * 60)
        for route in self._routes:
            method = route.method or "ANY"
            label = route.name or ""
            print(f"  {method:8} {route.path:30} {label}".rstrip())
        print("-" * 60)
