import json
from http import HTTPStatus
from typing import Any, cast

import pytest

from core.models.errors import (
    FileSizeError,
    InvalidSelectorError,
    MissingFileError,
    NotFoundError,
    ServiceError,
    StoreError,
    TranscodeError,
    UnsupportedFileTypeError,
    ValidationError,
)
from core.utils.response import ResponseBuilder


def parse_body(resp: dict[str, Any]) -> dict[str, Any]:
    body = resp.get("body")
    if not body:
        return {}

    return cast(dict[str, Any], json.loads(body))


def test_ok_response() -> None:
    resp = ResponseBuilder.ok({"foo": "bar"}, request_id="req-1", cors_origin="*")
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.OK
    assert parsed["foo"] == "bar"
    assert parsed["request_id"] == "req-1"
    assert resp["headers"]["Access-Control-Allow-Origin"] == "*"
    assert resp["headers"]["Content-Type"] == "application/json"


def test_created_response() -> None:
    resp = ResponseBuilder.created({"id": "abc"})

    assert resp["statusCode"] == HTTPStatus.CREATED
    assert parse_body(resp)["id"] == "abc"


def test_no_content_response() -> None:
    resp = ResponseBuilder.no_content(cors_origin="https://example.com")

    assert resp["statusCode"] == HTTPStatus.NO_CONTENT
    assert resp["body"] == ""
    assert resp["headers"]["Access-Control-Allow-Origin"] == "https://example.com"


def test_error_response_shape() -> None:
    resp = ResponseBuilder.bad_request("Nope", details={"field": "title"})
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
    assert parsed["error"] == "BAD_REQUEST"
    assert parsed["message"] == "Nope"
    assert parsed["details"] == {"field": "title"}
    assert "timestamp" in parsed


@pytest.mark.parametrize(
    "exc,status",
    [
        (InvalidSelectorError(message="x"), HTTPStatus.BAD_REQUEST),
        (MissingFileError(message="x"), HTTPStatus.BAD_REQUEST),
        (UnsupportedFileTypeError(message="x"), HTTPStatus.BAD_REQUEST),
        (ValidationError(message="x"), HTTPStatus.BAD_REQUEST),
        (FileSizeError(message="x"), HTTPStatus.REQUEST_ENTITY_TOO_LARGE),
        (NotFoundError(message="x"), HTTPStatus.NOT_FOUND),
        (TranscodeError(message="x"), HTTPStatus.INTERNAL_SERVER_ERROR),
        (StoreError(message="x"), HTTPStatus.INTERNAL_SERVER_ERROR),
        (ServiceError(message="x", error_code="OTHER"), HTTPStatus.INTERNAL_SERVER_ERROR),
    ],
)
def test_status_for(exc, status) -> None:
    assert ResponseBuilder.status_for(exc) == status


def test_from_service_error_keeps_client_details() -> None:
    exc = InvalidSelectorError(message="Invalid collection/tab", details={"tab": "foo"})

    resp = ResponseBuilder.from_service_error(exc, request_id="req-2")
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
    assert parsed["error"] == "INVALID_COLLECTION"
    assert parsed["message"] == "Invalid collection/tab"
    assert parsed["details"] == {"tab": "foo"}
    assert parsed["request_id"] == "req-2"


def test_from_service_error_hides_server_details() -> None:
    exc = StoreError(message="Unable to list records", details={"table": "CESP"})

    parsed = parse_body(ResponseBuilder.from_service_error(exc))

    assert parsed["error"] == "STORE_ERROR"
    assert "details" not in parsed
