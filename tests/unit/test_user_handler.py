"""
Unit tests for the /users handlers, driven in-process through
HTTPServer.handle() (middleware and router, no sockets).
"""

import json

import pytest

from userapi import HTTPServer, ServerConfig, create_app
from userapi.errors import InvalidIdentifierError, ValidationError
from userapi.http.request import HTTPRequest
from userapi.http.status_codes import HTTPStatus
from userapi.storage import UserStore
from userapi.users import UserHandler


def make_request(method: str, path: str, body=None, raw: bytes = None) -> HTTPRequest:
    if raw is None:
        raw = json.dumps(body).encode() if body is not None else b""
    return HTTPRequest(
        method=method,
        path=path,
        headers={"content-type": "application/json", "content-length": str(len(raw))},
        body=raw,
        client_address=("127.0.0.1", 5000),
    )


@pytest.fixture
def app(store: UserStore) -> HTTPServer:
    return create_app(ServerConfig(port=0), store=store)


@pytest.fixture
def lenient_app(store: UserStore) -> HTTPServer:
    return create_app(ServerConfig(port=0, validate_users=False), store=store)


class TestCreateUser:
    def test_create(self, app: HTTPServer):
        response = app.handle(make_request("POST", "/users", {"name": "Alice", "age": 30}))

        assert response.status == HTTPStatus.OK
        body = response.json
        assert body["id"] > 0
        assert body["name"] == "Alice"
        assert body["age"] == 30

    @pytest.mark.parametrize("payload", [
        {"name": "", "age": 30},
        {"name": "x" * 101, "age": 30},
        {"name": "Alice", "age": -1},
        {"name": "Alice", "age": 200},
    ])
    def test_policy_violations_are_400(self, app: HTTPServer, payload):
        response = app.handle(make_request("POST", "/users", payload))

        assert response.status == HTTPStatus.BAD_REQUEST
        assert "error" in response.json

    def test_invalid_json_is_400(self, app: HTTPServer):
        response = app.handle(make_request("POST", "/users", raw=b'{"name": '))

        assert response.status == HTTPStatus.BAD_REQUEST

    def test_wrong_types_are_400(self, app: HTTPServer):
        response = app.handle(make_request("POST", "/users", {"name": "Alice", "age": "old"}))

        assert response.status == HTTPStatus.BAD_REQUEST

    def test_validation_disabled_accepts_out_of_range(self, lenient_app: HTTPServer):
        response = lenient_app.handle(make_request("POST", "/users", {"name": "", "age": 500}))

        assert response.status == HTTPStatus.OK
        assert response.json["age"] == 500

    def test_validation_disabled_rejects_age_beyond_storage_range(self, lenient_app: HTTPServer, store: UserStore):
        response = lenient_app.handle(make_request("POST", "/users", {"name": "Alice", "age": 10 ** 30}))

        assert response.status == HTTPStatus.BAD_REQUEST
        assert store.list() == []

    def test_validation_disabled_still_checks_types(self, lenient_app: HTTPServer):
        response = lenient_app.handle(make_request("POST", "/users", {"name": "Alice"}))

        assert response.status == HTTPStatus.BAD_REQUEST


class TestReadUsers:
    def test_list(self, app: HTTPServer, store: UserStore):
        alice = store.create("Alice", 30)
        bob = store.create("Bob", 41)

        response = app.handle(make_request("GET", "/users"))

        assert response.status == HTTPStatus.OK
        assert response.json == [alice.to_dict(), bob.to_dict()]

    def test_get(self, app: HTTPServer, store: UserStore):
        alice = store.create("Alice", 30)

        response = app.handle(make_request("GET", f"/users/{alice.id}"))

        assert response.json == {"id": alice.id, "name": "Alice", "age": 30}

    def test_get_missing_is_404(self, app: HTTPServer):
        response = app.handle(make_request("GET", "/users/12345"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.json == {"error": "User 12345 not found"}

    @pytest.mark.parametrize("raw_id", ["abc", "1_0", "+10", " 10", "10 ", "-1", "\u0661\u0660", "1.5"])
    def test_get_non_integer_id_is_500(self, app: HTTPServer, store: UserStore, raw_id):
        for n in range(10):
            store.create(f"u{n}", 20)

        response = app.handle(make_request("GET", f"/users/{raw_id}"))

        assert response.status == HTTPStatus.INTERNAL_SERVER_ERROR
        assert "Invalid user id" in response.json["error"]

    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
    def test_id_beyond_storage_range_is_404(self, app: HTTPServer, method):
        response = app.handle(make_request(method, "/users/99999999999999999999", {"name": "A", "age": 1}))

        assert response.status == HTTPStatus.NOT_FOUND
        assert "X-Request-ID" in response.headers


class TestUpdateUser:
    def test_update(self, app: HTTPServer, store: UserStore):
        alice = store.create("Alice", 30)

        response = app.handle(make_request("PUT", f"/users/{alice.id}", {"name": "Alicia", "age": 31}))

        assert response.status == HTTPStatus.OK
        assert response.json == {"id": alice.id, "name": "Alicia", "age": 31}

    def test_update_missing_is_404(self, app: HTTPServer):
        response = app.handle(make_request("PUT", "/users/999", {"name": "Nobody", "age": 1}))

        assert response.status == HTTPStatus.NOT_FOUND

    def test_update_invalid_is_400(self, app: HTTPServer, store: UserStore):
        alice = store.create("Alice", 30)

        response = app.handle(make_request("PUT", f"/users/{alice.id}", {"name": "Alice", "age": 250}))

        assert response.status == HTTPStatus.BAD_REQUEST
        assert store.get(alice.id).age == 30


class TestDeleteUser:
    def test_delete(self, app: HTTPServer, store: UserStore):
        alice = store.create("Alice", 30)

        response = app.handle(make_request("DELETE", f"/users/{alice.id}"))

        assert response.status == HTTPStatus.NO_CONTENT
        assert response.body == b""
        assert app.handle(make_request("GET", f"/users/{alice.id}")).status == HTTPStatus.NOT_FOUND

    def test_delete_twice_is_404(self, app: HTTPServer, store: UserStore):
        alice = store.create("Alice", 30)
        app.handle(make_request("DELETE", f"/users/{alice.id}"))

        response = app.handle(make_request("DELETE", f"/users/{alice.id}"))

        assert response.status == HTTPStatus.NOT_FOUND


class TestRouting:
    def test_hello_world(self, app: HTTPServer):
        response = app.handle(make_request("GET", "/"))

        assert response.status == HTTPStatus.OK
        assert response.body == b"Hello World"

    def test_wrong_method_is_405(self, app: HTTPServer):
        response = app.handle(make_request("PATCH", "/users/1"))

        assert response.status == HTTPStatus.METHOD_NOT_ALLOWED
        assert response.headers["Allow"] == "DELETE, GET, PUT"

    def test_unknown_path_is_404(self, app: HTTPServer):
        assert app.handle(make_request("GET", "/accounts")).status == HTTPStatus.NOT_FOUND


class TestUserHandlerDirect:
    """Handler methods raise; translation happens in the middleware."""

    def test_invalid_id_raises(self, store: UserStore):
        handler = UserHandler(store)
        request = make_request("GET", "/users/1.5")
        request.path_params = {"id": "1.5"}

        with pytest.raises(InvalidIdentifierError):
            handler.get_user(request)

    def test_invalid_body_raises(self, store: UserStore):
        handler = UserHandler(store)

        with pytest.raises(ValidationError):
            handler.create_user(make_request("POST", "/users", raw=b"not json"))
