"""
Request body parsing for API Gateway proxy events.

multipart/form-data bodies are parsed with python-multipart's callback
parser. Callbacks only record parser events; the events are replayed once
the whole body has been consumed, so every check below runs on complete
parts and raises domain errors from ordinary code.
"""

import base64
import binascii
import io
import json
import re
from collections.abc import Collection, Mapping
from enum import Enum
from pathlib import PurePath
from typing import Any
from urllib.parse import parse_qsl

from aws_lambda_powertools import Logger
from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

from core.models.errors import FileSizeError, UnsupportedFileTypeError, ValidationError
from core.models.upload import MultipartForm, UploadedFile
from core.utils.constants import (
    ERROR_CODE_INVALID_MULTIPART,
    ERROR_CODE_UNEXPECTED_FILE_FIELD,
    MAX_FILE_SIZE,
    format_file_size,
    get_max_file_size_mb,
)

logger = Logger(UTC=True)


class _Event(Enum):
    PART_BEGIN = 1
    HEADER_FIELD = 2
    HEADER_VALUE = 3
    HEADER_END = 4
    HEADERS_FINISHED = 5
    PART_DATA = 6
    PART_END = 7


def get_header(event: Mapping[str, Any], name: str) -> str | None:
    """Case-insensitive header lookup (REST and HTTP APIs differ in casing)."""
    headers = event.get("headers") or {}
    wanted = name.lower()

    for key, value in headers.items():
        if key.lower() == wanted:
            return str(value)

    return None


def decode_body(event: Mapping[str, Any]) -> bytes:
    """Return the raw request body, undoing API Gateway's base64 encoding."""
    body = event.get("body") or ""

    if event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError(
                message="Invalid base64 encoded request body",
                error_code=ERROR_CODE_INVALID_MULTIPART,
            ) from exc

    return body.encode("utf-8") if isinstance(body, str) else bytes(body)


class _MultipartCollector:
    """Replays recorded parser events into text fields and file parts."""

    def __init__(
        self,
        *,
        file_fields: Collection[str],
        allowed_types: re.Pattern[str] | None,
        max_file_size: int,
        charset: str,
    ) -> None:
        self.file_fields = file_fields
        self.allowed_types = allowed_types
        self.max_file_size = max_file_size
        self.charset = charset

        self.fields: dict[str, Any] = {}
        self.files: dict[str, UploadedFile] = {}

    def _decode(self, raw: bytes) -> str:
        try:
            return raw.decode(self.charset)
        except (UnicodeDecodeError, LookupError) as exc:
            raise ValidationError(
                message="Form data is not valid text",
                error_code=ERROR_CODE_INVALID_MULTIPART,
            ) from exc

    def _check_file_part(self, field_name: str, filename: str, content_type: str) -> None:
        if field_name not in self.file_fields or field_name in self.files:
            logger.warning("Unexpected file field", extra={"field": field_name})
            raise ValidationError(
                message=f"Unexpected file field: {field_name}",
                error_code=ERROR_CODE_UNEXPECTED_FILE_FIELD,
                details={"field": field_name, "allowed": sorted(self.file_fields)},
            )

        if self.allowed_types is None:
            return

        extension = PurePath(filename).suffix.lower()
        if not (self.allowed_types.search(extension) and self.allowed_types.search(content_type)):
            logger.warning(
                "File rejected",
                extra={"field": field_name, "upload_filename": filename, "content_type": content_type},
            )
            raise UnsupportedFileTypeError(
                message="Invalid file type. Only JPEG, JPG, PNG, and GIF are allowed.",
                details={"filename": filename, "content_type": content_type},
            )

    def replay(self, events: list[tuple[_Event, bytes]]) -> None:
        headers: dict[bytes, bytes] = {}
        header_field = b""
        header_value = b""

        field_name = ""
        filename: str | None = None
        content_type = ""
        buffer = io.BytesIO()
        size = 0

        for kind, data in events:
            if kind is _Event.PART_BEGIN:
                headers = {}
                header_field = header_value = b""
                filename = None
                buffer = io.BytesIO()
                size = 0

            elif kind is _Event.HEADER_FIELD:
                header_field += data

            elif kind is _Event.HEADER_VALUE:
                header_value += data

            elif kind is _Event.HEADER_END:
                headers[header_field.lower()] = header_value
                header_field = header_value = b""

            elif kind is _Event.HEADERS_FINISHED:
                _, options = parse_options_header(headers.get(b"content-disposition"))
                raw_name = options.get(b"name")
                if raw_name is None:
                    raise ValidationError(
                        message="Form part is missing its field name",
                        error_code=ERROR_CODE_INVALID_MULTIPART,
                    )

                field_name = self._decode(raw_name)
                raw_filename = options.get(b"filename")
                filename = self._decode(raw_filename) if raw_filename is not None else None

                mime, _ = parse_options_header(headers.get(b"content-type", b""))
                content_type = mime.decode("latin-1")

                # A file input left empty still sends a part with filename="".
                if filename:
                    self._check_file_part(field_name, filename, content_type)

            elif kind is _Event.PART_DATA:
                size += len(data)
                if filename and size > self.max_file_size:
                    logger.warning(
                        "File size validation error: File size exceeds limit",
                        extra={"field": field_name, "limit": format_file_size(self.max_file_size)},
                    )
                    raise FileSizeError(
                        message=f"File size exceeds {get_max_file_size_mb()}MB limit",
                        details={"field": field_name, "max_bytes": self.max_file_size},
                    )
                buffer.write(data)

            elif kind is _Event.PART_END:
                if filename is None:
                    self.fields[field_name] = self._decode(buffer.getvalue())
                elif filename:
                    buffer.seek(0)
                    self.files[field_name] = UploadedFile(
                        field_name=field_name,
                        filename=filename,
                        content_type=content_type,
                        size=size,
                        stream=buffer,
                    )


def _parse_multipart(
    body: bytes,
    options: dict[bytes, bytes],
    collector: _MultipartCollector,
) -> None:
    boundary = options.get(b"boundary")
    if not boundary:
        raise ValidationError(
            message="Missing boundary in multipart/form-data content type",
            error_code=ERROR_CODE_INVALID_MULTIPART,
        )

    events: list[tuple[_Event, bytes]] = []

    def on_data(kind: _Event):
        def callback(data: bytes, start: int, end: int) -> None:
            events.append((kind, data[start:end]))

        return callback

    def on_marker(kind: _Event):
        def callback() -> None:
            events.append((kind, b""))

        return callback

    parser = MultipartParser(
        boundary,
        {
            "on_part_begin": on_marker(_Event.PART_BEGIN),
            "on_part_data": on_data(_Event.PART_DATA),
            "on_part_end": on_marker(_Event.PART_END),
            "on_header_field": on_data(_Event.HEADER_FIELD),
            "on_header_value": on_data(_Event.HEADER_VALUE),
            "on_header_end": on_marker(_Event.HEADER_END),
            "on_headers_finished": on_marker(_Event.HEADERS_FINISHED),
        },
    )

    try:
        parser.write(body)
        parser.finalize()
    except MultipartParseError as exc:
        logger.warning("Malformed multipart body", extra={"error": str(exc)})
        raise ValidationError(
            message="Malformed multipart/form-data body",
            error_code=ERROR_CODE_INVALID_MULTIPART,
        ) from exc

    collector.replay(events)


def parse_form(
    event: Mapping[str, Any],
    *,
    file_fields: Collection[str],
    allowed_types: re.Pattern[str] | None = None,
    max_file_size: int = MAX_FILE_SIZE,
) -> MultipartForm:
    """Parse the text fields and file parts of a request body.

    Args:
        event: API Gateway proxy event
        file_fields: Form fields that may carry one file each
        allowed_types: Compiled pattern both the filename extension and the
            declared part MIME type must match, or None to accept any file
        max_file_size: Per-file size limit in bytes (inclusive)

    Returns:
        The parsed form. JSON and urlencoded bodies yield fields only.

    Raises:
        ValidationError: If the body is malformed or has unexpected files
        UnsupportedFileTypeError: If a file fails the allow-list
        FileSizeError: If a file exceeds `max_file_size`
    """
    body = decode_body(event)
    if not body:
        return MultipartForm(fields={}, files={})

    mime, options = parse_options_header(get_header(event, "Content-Type") or "")
    charset = options.get(b"charset", b"utf-8").decode("latin-1")

    collector = _MultipartCollector(
        file_fields=file_fields,
        allowed_types=allowed_types,
        max_file_size=max_file_size,
        charset=charset,
    )

    if mime == b"multipart/form-data":
        _parse_multipart(body, options, collector)

    elif mime == b"application/x-www-form-urlencoded":
        text = collector._decode(body)
        collector.fields.update(parse_qsl(text, keep_blank_values=True))

    elif mime in (b"application/json", b""):
        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ValidationError(message="Invalid JSON body") from exc

        if not isinstance(payload, dict):
            raise ValidationError(message="Request body must be a JSON object")

        collector.fields.update(payload)

    else:
        raise ValidationError(
            message=f"Unsupported content type: {mime.decode('latin-1')}",
            error_code=ERROR_CODE_INVALID_MULTIPART,
        )

    logger.debug(
        "Request body parsed",
        extra={
            "fields": sorted(collector.fields),
            "files": {name: f.size for name, f in collector.files.items()},
        },
    )
    return MultipartForm(fields=collector.fields, files=collector.files)
