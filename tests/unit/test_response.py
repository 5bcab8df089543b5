"""
Unit tests for HTTP response building.
"""

from datetime import datetime, timezone

import pytest

from userapi.http.response import (
    HTTPResponse,
    ResponseBuilder,
    ok,
    no_content,
    not_found,
    method_not_allowed,
    internal_error,
    error_response,
    format_http_date,
)
from userapi.http.status_codes import HTTPStatus


class TestHTTPResponse:
    """Tests for HTTPResponse serialization."""

    def test_status_line(self):
        assert HTTPResponse(status=HTTPStatus.OK).status_line == "HTTP/1.1 200 OK"
        assert HTTPResponse(status=HTTPStatus.NO_CONTENT).status_line == "HTTP/1.1 204 No Content"

    def test_to_bytes_includes_headers_and_body(self):
        response = HTTPResponse(
            status=HTTPStatus.OK,
            headers={"X-Custom": "value"},
            body=b"test",
        )

        result = response.to_bytes()

        assert result.startswith(b"HTTP/1.1 200 OK\r\n")
        assert b"X-Custom: value\r\n" in result
        assert b"Content-Length: 4\r\n" in result
        assert result.endswith(b"\r\n\r\ntest")

    def test_to_bytes_adds_date_and_server(self):
        result = HTTPResponse().to_bytes(server_name="userapi/test")

        assert b"Date: " in result
        assert b"Server: userapi/test\r\n" in result

    def test_explicit_headers_not_overridden(self):
        response = HTTPResponse(headers={"Server": "custom"})

        assert b"Server: custom\r\n" in response.to_bytes()

    def test_empty_body_has_zero_length(self):
        assert b"Content-Length: 0\r\n" in no_content().to_bytes()

    def test_set_header_chaining(self):
        response = HTTPResponse().set_header("X-One", "1").set_header("X-Two", "2")

        assert response.headers == {"X-One": "1", "X-Two": "2"}


class TestResponseBuilder:
    """Tests for the fluent builder."""

    def test_json_body(self):
        response = ResponseBuilder().json({"id": 1, "name": "Alice", "age": 30}).build()

        assert response.headers["Content-Type"] == "application/json; charset=utf-8"
        assert response.json == {"id": 1, "name": "Alice", "age": 30}

    def test_json_keeps_non_ascii(self):
        response = ResponseBuilder().json({"name": "Zoë"}).build()

        assert "Zoë".encode("utf-8") in response.body

    def test_text_body(self):
        response = ResponseBuilder().text("Hello World").build()

        assert response.body == b"Hello World"
        assert response.headers["Content-Type"].startswith("text/plain")

        assert response.headers["Connection"] == "close"

    def test_method_chaining(self):
        response = (ResponseBuilder()
            .status(HTTPStatus.NOT_FOUND)
            .header("X-Request-ID", "abc")
            .json({"error": "missing"})
            .build())

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.headers["X-Request-ID"] == "abc"


class TestConvenienceFunctions:
    """Tests for the one-line response helpers."""

    def test_ok_with_dict(self):
        response = ok({"id": 1})

        assert response.status == HTTPStatus.OK
        assert response.json == {"id": 1}

    def test_ok_with_list(self):
        assert ok([]).json == []

    def test_ok_with_text(self):
        response = ok("Hello World")

        assert response.body == b"Hello World"
        assert response.headers["Content-Type"] == "text/plain; charset=utf-8"

    def test_no_content(self):
        response = no_content()

        assert response.status == HTTPStatus.NO_CONTENT
        assert response.body == b""

    @pytest.mark.parametrize("helper, status", [
        (not_found, HTTPStatus.NOT_FOUND),
        (internal_error, HTTPStatus.INTERNAL_SERVER_ERROR),
    ])
    def test_error_helpers(self, helper, status):
        response = helper("something went wrong")

        assert response.status == status
        assert response.json == {"error": "something went wrong"}

    def test_error_response(self):
        response = error_response(HTTPStatus.SERVICE_UNAVAILABLE, "busy")

        assert response.status_line == "HTTP/1.1 503 Service Unavailable"
        assert response.json == {"error": "busy"}

    def test_method_not_allowed(self):
        response = method_not_allowed(["GET", "PUT"])

        assert response.status == HTTPStatus.METHOD_NOT_ALLOWED
        assert response.headers["Allow"] == "GET, PUT"
        assert response.json["allowed"] == ["GET", "PUT"]


class TestHTTPStatus:
    def test_phrases(self):
        assert HTTPStatus.NOT_FOUND.phrase == "Not Found"
        assert HTTPStatus.HTTP_VERSION_NOT_SUPPORTED.phrase == "HTTP Version Not Supported"

    def test_server_error_category(self):
        assert not HTTPStatus.BAD_REQUEST.is_server_error
        assert not HTTPStatus.NOT_FOUND.is_server_error
        assert HTTPStatus.SERVICE_UNAVAILABLE.is_server_error
        assert HTTPStatus.INTERNAL_SERVER_ERROR.is_server_error


class TestHTTPDate:
    def test_format(self):
        dt = datetime(2026, 10, 19, 8, 5, 3, tzinfo=timezone.utc)

        assert format_http_date(dt) == "Mon, 19 Oct 2026 08:05:03 GMT"
