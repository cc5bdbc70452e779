"""
Temporary file store for uploads awaiting transcoding.

Each upload is written to its own uniquely named file in the configured
upload directory and removed once the request reaches a terminal state.
"""

import re
import shutil
import time
import uuid
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

from aws_lambda_powertools import Logger

from core.models.upload import UploadedFile

logger = Logger(UTC=True)

MAX_SUFFIX_LENGTH = 16
_UNSAFE_SUFFIX_CHARS = re.compile(r"[^a-z0-9]")


class TempFileStore:
    """Materializes uploads on local disk and disposes of them."""

    def __init__(self, upload_dir: str | Path) -> None:
        """
        Args:
            upload_dir: Directory receiving temporary files. Created if missing.
        """
        self.upload_dir = Path(upload_dir)
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def _unique_path(self, upload: UploadedFile) -> Path:
        suffix = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}"
        # client supplied; kept short and alphanumeric
        extension = _UNSAFE_SUFFIX_CHARS.sub("", upload.extension)[:MAX_SUFFIX_LENGTH]
        if extension:
            extension = f".{extension}"
        return self.upload_dir / f"{upload.field_name}-{suffix}{extension}"

    def materialize(self, upload: UploadedFile) -> Path:
        """Write an uploaded part to a new file and return its path.

        The file is opened exclusively, so a name collision fails instead of
        overwriting another request's upload.

        Raises:
            OSError: If the file cannot be written
        """
        path = self._unique_path(upload)
        upload.stream.seek(0)

        try:
            with path.open("xb") as buffer:
                shutil.copyfileobj(upload.stream, buffer)
        except OSError:
            self.dispose(path)
            raise

        logger.debug(
            "Saved temporary upload",
            extra={"field": upload.field_name, "path": str(path), "size": upload.size},
        )
        return path

    def dispose(self, path: str | Path) -> None:
        """Remove a temporary file.

        Missing files are ignored. Failures are logged and never raised, so
        cleanup cannot replace the outcome of the request.
        """
        try:
            Path(path).unlink(missing_ok=True)
            logger.debug("Deleted temporary file", extra={"path": str(path)})
        except OSError:
            logger.warning(
                "Failed to delete temporary file",
                extra={"path": str(path)},
                exc_info=True,
            )

    @contextmanager
    def hold(self, uploads: Iterable[UploadedFile]) -> Iterator[dict[str, Path]]:
        """Materialize uploads for the duration of the block.

        Yields a mapping of form field name to temporary path. Every file that
        was written is disposed on exit, whichever way the block exits.
        """
        paths: dict[str, Path] = {}

        try:
            for upload in uploads:
                paths[upload.field_name] = self.materialize(upload)
            yield paths
        finally:
            for path in paths.values():
                self.dispose(path)
