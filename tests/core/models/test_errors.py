"""
Unit tests for core.models.errors
"""

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


class TestServiceError:
    def test_base_error(self) -> None:
        err = ServiceError(
            message="Something went wrong",
            error_code="TEST_ERROR",
            details={"foo": "bar"},
        )

        assert err.message == "Something went wrong"
        assert err.error_code == "TEST_ERROR"
        assert err.details == {"foo": "bar"}
        assert str(err) == "Something went wrong"

    def test_details_default_to_empty_dict(self) -> None:
        err = ServiceError(message="x", error_code="X")

        assert err.details == {}


@pytest.mark.parametrize(
    "error_cls,code",
    [
        (ValidationError, "VALIDATION_FAILED"),
        (InvalidSelectorError, "INVALID_COLLECTION"),
        (MissingFileError, "MISSING_FILE"),
        (UnsupportedFileTypeError, "UNSUPPORTED_MIME_TYPE"),
        (FileSizeError, "FILE_SIZE_EXCEEDED"),
        (TranscodeError, "TRANSCODE_FAILED"),
        (NotFoundError, "NOT_FOUND"),
        (StoreError, "STORE_ERROR"),
    ],
)
def test_default_error_codes(error_cls, code) -> None:
    err = error_cls(message="boom")

    assert isinstance(err, ServiceError)
    assert err.error_code == code
    assert err.message == "boom"


def test_error_code_can_be_overridden() -> None:
    err = StoreError(message="Unable to list records", error_code="RECORD_LIST_FAILED")

    assert err.error_code == "RECORD_LIST_FAILED"
