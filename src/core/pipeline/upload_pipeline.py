"""Upload-and-transcode pipeline behind every record operation.

This module coordinates upload validation, transcoding, record persistence
and temporary file cleanup for one collection, translating failures into
domain-specific errors.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Generic

from aws_lambda_powertools import Logger

from core.infrastructure.imaging.pillow_transcoder import ImageTranscoder
from core.infrastructure.local.temp_file_store import TempFileStore
from core.models.errors import MissingFileError, NotFoundError
from core.models.image import ImageAsset
from core.models.upload import UploadedFile
from core.repositories.record_repository import RecordRepository, RecordT
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)


class UploadPipeline(Generic[RecordT]):
    """Application service for one record collection.

    The pipeline orchestrates:
    - Presence checks for required uploads
    - Materializing uploads as temporary files for the duration of a request
    - Transcoding each upload into an ImageAsset
    - Persisting records through the record repository

    Temporary files are released on every exit path.
    """

    def __init__(
        self,
        *,
        model: type[RecordT],
        store: RecordRepository[RecordT],
        transcoder: ImageTranscoder,
        temp_store: TempFileStore,
        image_fields: tuple[str, ...],
        image_required: bool,
    ) -> None:
        """
        Args:
            model: Record model of the collection
            store: Repository persisting the records
            transcoder: Converts uploaded files into assets
            temp_store: Scratch space for uploads
            image_fields: Form fields that carry images (at most one file each)
            image_required: Whether creation needs at least one image
        """
        self.model = model
        self.store = store
        self.transcoder = transcoder
        self.temp_store = temp_store
        self.image_fields = image_fields
        self.image_required = image_required

    def _uploads(self, files: Mapping[str, UploadedFile]) -> list[UploadedFile]:
        return [files[name] for name in self.image_fields if name in files]

    def _text_fields(self, fields: Mapping[str, Any], *, keep_blank: bool) -> dict[str, Any]:
        """Writable non-image fields, optionally dropping blank strings."""
        text = {
            name: value
            for name, value in self.model.writable_fields(dict(fields)).items()
            if name not in self.model.IMAGE_FIELDS
        }

        if keep_blank:
            return text

        return {
            name: value
            for name, value in text.items()
            if not (isinstance(value, str) and not value.strip())
        }

    def _transcode_all(self, paths: Mapping[str, Path]) -> dict[str, ImageAsset]:
        assets: dict[str, ImageAsset] = {}

        for form_field, path in paths.items():
            assets[self.model.image_field_name(form_field)] = self.transcoder.transcode(path)

        return assets

    def create(
        self,
        fields: Mapping[str, Any],
        files: Mapping[str, UploadedFile],
    ) -> RecordT:
        """Create a record from form fields and uploaded images.

        The creation flow is:
        1. Fail fast when a required image is missing
        2. Materialize uploads as temporary files
        3. Transcode each upload
        4. Persist the record (schema enforced by the store)
        5. Dispose of the temporary files, whatever happened above

        Missing optional images are simply left out of the record.

        Raises:
            MissingFileError: If an image is required and none was uploaded
            TranscodeError: If an upload cannot be transcoded
            ValidationError: If the store rejects the record
            StoreError: If persistence fails
        """
        uploads = self._uploads(files)

        if self.image_required and not uploads:
            logger.warning("Image is required", extra={"image_fields": list(self.image_fields)})
            raise MissingFileError(
                message="Image is required!",
                details={"fields": list(self.image_fields)},
            )

        logger.debug(
            "Starting record creation",
            extra={"uploads": [upload.field_name for upload in uploads]},
        )

        with self.temp_store.hold(uploads) as paths:
            assets = self._transcode_all(paths)
            record = self.store.insert(
                fields={**self._text_fields(fields, keep_blank=True), **assets},
            )

        logger.info(
            "Record created with uploads",
            extra={"record_id": record.id, "images": sorted(assets)},
        )
        return record

    def update(
        self,
        record_id: str,
        fields: Mapping[str, Any],
        files: Mapping[str, UploadedFile],
    ) -> RecordT:
        """Apply a partial update to an existing record.

        Only supplied, non-blank fields change. Each image slot with a new
        upload is replaced wholesale; other slots keep their stored asset.

        Raises:
            NotFoundError: If the record does not exist
            TranscodeError: If an upload cannot be transcoded
            ValidationError: If the store rejects the merged record
            StoreError: If persistence fails
        """
        uploads = self._uploads(files)

        if self.store.find_by_id(record_id=record_id) is None:
            logger.warning("Record not found for update", extra={"record_id": record_id})
            raise NotFoundError(
                message="Item not found",
                details={"record_id": record_id},
            )

        with self.temp_store.hold(uploads) as paths:
            assets = self._transcode_all(paths)
            record = self.store.update_by_id(
                record_id=record_id,
                changes={**self._text_fields(fields, keep_blank=False), **assets},
            )

        logger.info(
            "Record updated",
            extra={"record_id": record_id, "replaced_images": sorted(assets)},
        )
        return record

    def list_all(self) -> list[RecordT]:
        """Return every record of the collection."""
        return self.store.find_all()

    def get_by_id(self, record_id: str) -> RecordT:
        """Return one record.

        Raises:
            NotFoundError: If the record does not exist
        """
        record = self.store.find_by_id(record_id=record_id)

        if record is None:
            logger.warning("Record not found", extra={"record_id": record_id})
            raise NotFoundError(
                message="Item not found",
                details={"record_id": record_id},
            )

        return record

    def delete_by_id(self, record_id: str) -> dict[str, Any]:
        """Delete a record together with its embedded images.

        Raises:
            NotFoundError: If the record does not exist
        """
        if not self.store.delete_by_id(record_id=record_id):
            logger.warning("Record not found for deletion", extra={"record_id": record_id})
            raise NotFoundError(
                message="Item not found",
                details={"record_id": record_id},
            )

        logger.info("Record deleted", extra={"record_id": record_id})

        return {
            "id": record_id,
            "deleted_at": utc_now_iso(),
        }
