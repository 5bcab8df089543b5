"""
Unit tests for URL router.
"""

import pytest

from userapi.http.router import Router
from userapi.http.request import HTTPRequest
from userapi.http.response import HTTPResponse, ResponseBuilder, ok
from userapi.http.status_codes import HTTPStatus


def make_request(method: str, path: str) -> HTTPRequest:
    return HTTPRequest(method=method, path=path)


def dummy_handler(request: HTTPRequest) -> HTTPResponse:
    return ResponseBuilder().json({"path": request.path}).build()


class TestRouter:
    """Tests for Router matching and dispatch."""

    def test_add_route(self):
        router = Router()
        route = router.add_route("/users", dummy_handler, method="get")

        assert router.routes() == [route]
        assert route.path == "/users"
        assert route.method == "GET"

    def test_match_root(self):
        """The root path only matches "/"."""
        router = Router()
        router.add_route("/", dummy_handler, method="GET")

        assert router.match("GET", "/") is not None
        assert router.match("GET", "/users") is None

    def test_match_with_method(self):
        """Same path, different methods, different routes."""
        router = Router()
        router.add_route("/users", dummy_handler, method="GET")
        router.add_route("/users", dummy_handler, method="POST")

        assert router.match("GET", "/users").route.method == "GET"
        assert router.match("POST", "/users").route.method == "POST"

    def test_match_dynamic_params(self):
        router = Router()
        router.add_route("/users/:id", dummy_handler, method="GET")

        match = router.match("GET", "/users/123")
        assert match is not None
        assert match.params == {"id": "123"}

    def test_param_matches_non_numeric_segment(self):
        """The router captures any segment; converting it is the handler's job."""
        router = Router()
        router.add_route("/users/:id", dummy_handler, method="GET")

        assert router.match("GET", "/users/abc").params == {"id": "abc"}

    def test_param_does_not_cross_slashes(self):
        router = Router()
        router.add_route("/users/:id", dummy_handler, method="GET")

        assert router.match("GET", "/users/1/posts") is None
        assert router.match("GET", "/users") is None

    def test_trailing_slash_ignored(self):
        router = Router()
        router.add_route("/users", dummy_handler, method="GET")

        assert router.match("GET", "/users/") is not None

    def test_first_match_wins(self):
        router = Router()
        first = router.add_route("/users/:id", dummy_handler, method="GET")
        router.add_route("/users/:name", dummy_handler, method="GET")

        assert router.match("GET", "/users/7").route is first

    def test_get_allowed_methods(self):
        router = Router()
        router.add_route("/users/:id", dummy_handler, method="GET")
        router.add_route("/users/:id", dummy_handler, method="PUT")
        router.add_route("/users/:id", dummy_handler, method="DELETE")

        assert router.get_allowed_methods("/users/1") == ["DELETE", "GET", "PUT"]
        assert router.get_allowed_methods("/nothing") == []

    def test_handle_success(self):
        router = Router()

        @router.get("/")
        def hello(request):
            return ok("Hello World")

        response = router.handle(make_request("GET", "/"))

        assert response.status == HTTPStatus.OK
        assert response.body == b"Hello World"

    def test_handle_not_found(self):
        router = Router()
        router.add_route("/users", dummy_handler, method="GET")

        response = router.handle(make_request("GET", "/posts"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert "error" in response.json

    def test_handle_method_not_allowed(self):
        router = Router()
        router.add_route("/users", dummy_handler, method="GET")
        router.add_route("/users", dummy_handler, method="POST")

        response = router.handle(make_request("PATCH", "/users"))

        assert response.status == HTTPStatus.METHOD_NOT_ALLOWED
        assert response.headers["Allow"] == "GET, POST"

    def test_path_params_in_request(self):
        router = Router()
        captured = {}

        @router.get("/users/:id")
        def get_user(request):
            captured.update(request.path_params)
            return ok(request.path_params)

        router.handle(make_request("GET", "/users/42"))

        assert captured == {"id": "42"}

    def test_handler_exceptions_propagate(self):
        """Errors are left for the middleware to translate."""
        router = Router()

        @router.get("/boom")
        def boom(request):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            router.handle(make_request("GET", "/boom"))


class TestRouterDecorators:
    """Tests for decorator-style route registration."""

    @pytest.mark.parametrize("method", ["get", "post", "put", "delete", "patch"])
    def test_method_decorators(self, method: str):
        router = Router()

        @getattr(router, method)("/test")
        def handler(request):
            return ok("test")

        assert router.routes()[0].method == method.upper()
        assert router.routes()[0].handler is handler

    def test_print_routes(self, capsys):
        router = Router()
        router.add_route("/users", dummy_handler, method="POST", name="create_user")

        router.print_routes()

        out = capsys.readouterr().out
        assert "POST" in out
        assert "/users" in out
        assert "create_user" in out
