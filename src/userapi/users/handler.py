"""
=============================================================================
USERS RESOURCE
=============================================================================

    ┌────────┬──────────────┬─────────────┬─────────────────────────────────┐
    │ Method │ Path         │ Body        │ Success                         │
    ├────────┼──────────────┼─────────────┼─────────────────────────────────┤
    │ POST   │ /users       │ {name, age} │ 200 {id, name, age}             │
    │ GET    │ /users       │             │ 200 [{id, name, age}, ...]      │
    │ GET    │ /users/:id   │             │ 200 {id, name, age}             │
    │ PUT    │ /users/:id   │ {name, age} │ 200 {id, name, age}             │
    │ DELETE │ /users/:id   │             │ 204                             │
    └────────┴──────────────┴─────────────┴─────────────────────────────────┘

Handlers only raise; ErrorMiddleware decides what the client sees:

    ValidationError         400   body not decodable, name/age out of range
    NotFoundError           404   no user with that id
    InvalidIdentifierError  500   :id is not a run of ASCII digits
    StorageError            500   SQLite failed

    $ curl -X POST localhost:8080/users -d '{"name": "Alice", "age": 30}'
    {"id": 1, "name": "Alice", "age": 30}

=============================================================================
"""

import logging
from typing import TYPE_CHECKING

from ..errors import InvalidIdentifierError, NotFoundError, ValidationError
from ..http.request import HTTPRequest, HTTPParseError
from ..http.response import HTTPResponse, ok, no_content
from .validation import MAX_STORED_INTEGER, UserInput, validate_user

if TYPE_CHECKING:
    from ..server import HTTPServer
    from ..storage.user_store import UserStore


logger = logging.getLogger(__name__)


class UserHandler:
    """
    Request handlers for /users bound to a UserStore.

        handler = UserHandler(store, validate=True)
        handler.register(server)

    Args:
        store: Where users are persisted.
        validate: Apply the name/age policy on create and update.
    """

    def __init__(self, store: "UserStore", validate: bool = True):
        self.store = store
        self.validate = validate

    def register(self, server: "HTTPServer") -> None:
        """Attach the five /users routes to ``server``'s router."""
        router = server.router
        router.add_route("/users", self.create_user, method="POST", name="create_user")
        router.add_route("/users", self.list_users, method="GET", name="list_users")
        router.add_route("/users/:id", self.get_user, method="GET", name="get_user")
        router.add_route("/users/:id", self.update_user, method="PUT", name="update_user")
        router.add_route("/users/:id", self.delete_user, method="DELETE", name="delete_user")

    # =========================================================================
    # ENDPOINTS
    # =========================================================================

    def create_user(self, request: HTTPRequest) -> HTTPResponse:
        data = self._read_input(request)
        user = self.store.create(data.name, data.age)
        logger.info(f"Created user {user.id}")
        return ok(user.to_dict())

    def list_users(self, request: HTTPRequest) -> HTTPResponse:
        return ok([user.to_dict() for user in self.store.list()])

    def get_user(self, request: HTTPRequest) -> HTTPResponse:
        user = self.store.get(self._user_id(request))
        return ok(user.to_dict())

    def update_user(self, request: HTTPRequest) -> HTTPResponse:
        user_id = self._user_id(request)
        data = self._read_input(request)
        user = self.store.update(user_id, data.name, data.age)
        logger.info(f"Updated user {user.id}")
        return ok(user.to_dict())

    def delete_user(self, request: HTTPRequest) -> HTTPResponse:
        user_id = self._user_id(request)
        self.store.delete(user_id)
        logger.info(f"Deleted user {user_id}")
        return no_content()

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _user_id(request: HTTPRequest) -> int:
        """
        The :id segment as an int.

        Only plain ASCII digits are an id; int() would also take "+10",
        " 10", "1_0" and non-ASCII digits. An id too large for SQLite
        cannot name a stored row.
        """
        raw = request.path_params.get("id", "")
        if not (raw.isascii() and raw.isdigit()):
            raise InvalidIdentifierError(f"Invalid user id: {raw!r}")

        user_id = int(raw)
        if user_id > MAX_STORED_INTEGER:
            raise NotFoundError(f"User {raw} not found")
        return user_id

    def _read_input(self, request: HTTPRequest) -> UserInput:
        """Decode the JSON body and, if enabled, apply the policy."""
        try:
            body = request.json
        except HTTPParseError as e:
            raise ValidationError(str(e))

        data = UserInput.from_json(body)
        if self.validate:
            validate_user(data.name, data.age)
        return data
