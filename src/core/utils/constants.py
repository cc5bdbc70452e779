"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

import re
from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_INVALID_MULTIPART = "INVALID_MULTIPART"
ERROR_CODE_UNEXPECTED_FILE_FIELD = "UNEXPECTED_FILE_FIELD"
ERROR_CODE_INVALID_COLLECTION = "INVALID_COLLECTION"
ERROR_CODE_MISSING_FILE = "MISSING_FILE"
ERROR_CODE_UNSUPPORTED_MIME_TYPE = "UNSUPPORTED_MIME_TYPE"
ERROR_CODE_FILE_SIZE_EXCEEDED = "FILE_SIZE_EXCEEDED"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"

# Image Processing Errors
ERROR_CODE_TRANSCODE_FAILED = "TRANSCODE_FAILED"

# Record Store / DynamoDB Errors
ERROR_CODE_STORE = "STORE_ERROR"
ERROR_CODE_RECORD_CREATE_FAILED = "RECORD_CREATE_FAILED"
ERROR_CODE_RECORD_FETCH_FAILED = "RECORD_FETCH_FAILED"
ERROR_CODE_RECORD_UPDATE_FAILED = "RECORD_UPDATE_FAILED"
ERROR_CODE_RECORD_DELETE_FAILED = "RECORD_DELETE_FAILED"
ERROR_CODE_RECORD_LIST_FAILED = "RECORD_LIST_FAILED"


# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB in bytes

# Gallery uploads are matched against this pattern by extension and by the
# declared part content type. Project uploads are not filtered.
ALLOWED_UPLOAD_TYPES: Final[re.Pattern[str]] = re.compile(r"jpeg|jpg|png|gif")

GALLERY_IMAGE_FIELDS: Final[tuple[str, ...]] = ("image",)
PROJECT_IMAGE_FIELDS: Final[tuple[str, ...]] = ("beforePhoto", "afterPhoto")

DEFAULT_UPLOAD_DIR = "/tmp/uploads"

# ============================================================================
# Image Transcoding
# ============================================================================

TRANSCODE_WIDTH = 800
TRANSCODE_QUALITY = 70
TRANSCODE_CONTENT_TYPE = "image/jpeg"
TRANSCODE_MAX_HEIGHT = 65535  # JPEG dimension limit
TRANSCODE_MAX_PIXELS = 800 * 16000

# ============================================================================
# Record Constraints
# ============================================================================

LAT_MIN = -90
LAT_MAX = 90
LNG_MIN = -180
LNG_MAX = 180

# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,PUT,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length"
DEFAULT_CONTENT_TYPE = "application/json"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_GALLERY_TABLE_NAME = "GALLERY_TABLE_NAME"
ENV_PROJECT_TABLE_PREFIX = "PROJECT_TABLE_PREFIX"
ENV_UPLOAD_DIR = "UPLOAD_DIR"
ENV_EMAILJS_SERVICE_ID = "EMAILJS_SERVICE_ID"
ENV_EMAILJS_TEMPLATE_ID = "EMAILJS_TEMPLATE_ID"
ENV_EMAILJS_PUBLIC_KEY = "EMAILJS_PUBLIC_KEY"

# ============================================================================
# Helper Functions
# ============================================================================


def get_max_file_size_mb() -> int:
    """Get maximum file size in megabytes."""
    return MAX_FILE_SIZE // (1024 * 1024)


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0

    return f"{size:.1f} TB"
