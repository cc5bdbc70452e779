"""Uploaded file parts extracted from a multipart request."""

from dataclasses import dataclass
from pathlib import PurePath
from typing import BinaryIO


@dataclass(frozen=True)
class UploadedFile:
    """One file part of a multipart/form-data body."""

    field_name: str
    filename: str
    content_type: str
    size: int
    stream: BinaryIO

    @property
    def extension(self) -> str:
        """Lower-cased filename extension including the dot, or ''."""
        return PurePath(self.filename).suffix.lower()


@dataclass(frozen=True)
class MultipartForm:
    """Text fields and file parts of a parsed request body."""

    fields: dict[str, str]
    files: dict[str, UploadedFile]
