"""
Pytest configuration and fixtures for gallery/project record tests.
Provides AWS mocking, DynamoDB tables per collection, generated sample
images and API Gateway event builders.
"""

import base64
import io
import os
import tempfile
import uuid
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import boto3
import pytest
from moto import mock_aws
from PIL import Image

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("GALLERY_TABLE_NAME", "gallery-test")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "GalleryRecordsTest")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "gallery-records")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="uploads-"))
os.environ.pop("AWS_ENDPOINT_URL", None)

from core.models.collections import ProjectCollection  # noqa: E402

FileSpec = tuple[str, bytes, str]


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def dynamodb_resource(aws_mock):
    return boto3.resource("dynamodb", region_name=os.getenv("AWS_REGION"))


def _create_table(dynamodb_resource, table_name: str):
    table = dynamodb_resource.create_table(
        TableName=table_name,
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
    )
    table.wait_until_exists()
    return table


@pytest.fixture(scope="function")
def gallery_table(dynamodb_resource):
    """Gallery table, created fresh inside the moto context."""
    return _create_table(dynamodb_resource, os.environ["GALLERY_TABLE_NAME"])


@pytest.fixture(scope="function")
def project_tables(dynamodb_resource) -> dict[ProjectCollection, Any]:
    """One table per project collection."""
    return {
        collection: _create_table(dynamodb_resource, collection.table_name)
        for collection in ProjectCollection
    }


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    """Isolated temporary upload directory, wired through UPLOAD_DIR."""
    path = tmp_path / "uploads"
    path.mkdir()
    monkeypatch.setenv("UPLOAD_DIR", str(path))
    return path


def _render(fmt: str, size: tuple[int, int] = (40, 30), mode: str = "RGB") -> bytes:
    color: Any = (200, 40, 40) if mode == "RGB" else 1
    image = Image.new(mode, size, color)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def sample_png_binary() -> bytes:
    """40x30 PNG generated with Pillow."""
    return _render("PNG")


@pytest.fixture
def sample_jpeg_binary() -> bytes:
    """40x30 JPEG generated with Pillow."""
    return _render("JPEG")


@pytest.fixture
def sample_gif_binary() -> bytes:
    """40x30 palette GIF generated with Pillow."""
    return _render("GIF", mode="P")


def encode_multipart(
    fields: dict[str, str] | None = None,
    files: dict[str, FileSpec] | None = None,
) -> tuple[bytes, str]:
    """Encode a multipart/form-data body; returns (body, content type)."""
    boundary = f"----test-boundary-{uuid.uuid4().hex}"
    chunks: list[bytes] = []

    for name, value in (fields or {}).items():
        chunks.append(
            f"--{boundary}\r\n"
            f'Content-Disposition: form-data; name="{name}"\r\n\r\n'
            f"{value}\r\n".encode()
        )

    for name, (filename, content, content_type) in (files or {}).items():
        chunks.append(
            f"--{boundary}\r\n"
            f'Content-Disposition: form-data; name="{name}"; filename="{filename}"\r\n'
            f"Content-Type: {content_type}\r\n\r\n".encode()
            + content
            + b"\r\n"
        )

    chunks.append(f"--{boundary}--\r\n".encode())
    return b"".join(chunks), f"multipart/form-data; boundary={boundary}"


@pytest.fixture
def multipart_event() -> Callable[..., dict[str, Any]]:
    """
    Build an API Gateway proxy event carrying a multipart body.

    Usage:
        event = multipart_event(
            "POST", "/gallery",
            fields={"title": "Sunset"},
            files={"image": ("a.png", png_bytes, "image/png")},
        )
    """

    def _build(
        method: str,
        path: str,
        *,
        path_params: dict[str, str] | None = None,
        fields: dict[str, str] | None = None,
        files: dict[str, FileSpec] | None = None,
    ) -> dict[str, Any]:
        body, content_type = encode_multipart(fields, files)
        return {
            "httpMethod": method,
            "path": path,
            "pathParameters": path_params,
            "headers": {"Content-Type": content_type},
            "body": base64.b64encode(body).decode("ascii"),
            "isBase64Encoded": True,
        }

    return _build


@pytest.fixture
def api_event() -> Callable[..., dict[str, Any]]:
    """Build a body-less API Gateway proxy event."""

    def _build(
        method: str,
        path: str,
        *,
        path_params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        return {
            "httpMethod": method,
            "path": path,
            "pathParameters": path_params,
            "headers": {},
            "body": None,
            "isBase64Encoded": False,
        }

    return _build


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )
