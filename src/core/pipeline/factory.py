"""Builds upload pipelines from environment configuration."""

import os

from core.infrastructure.aws.dynamodb_record_store import DynamoDBRecordStore
from core.infrastructure.imaging.pillow_transcoder import PillowTranscoder
from core.infrastructure.local.temp_file_store import TempFileStore
from core.models.collections import ProjectCollection
from core.models.gallery import GalleryItem
from core.models.project import ProjectItem
from core.pipeline.upload_pipeline import UploadPipeline
from core.utils.constants import (
    DEFAULT_UPLOAD_DIR,
    ENV_GALLERY_TABLE_NAME,
    ENV_UPLOAD_DIR,
    GALLERY_IMAGE_FIELDS,
    PROJECT_IMAGE_FIELDS,
)


def _temp_store() -> TempFileStore:
    return TempFileStore(os.getenv(ENV_UPLOAD_DIR, DEFAULT_UPLOAD_DIR))


def build_gallery_pipeline() -> UploadPipeline[GalleryItem]:
    """Gallery items require exactly one image on creation."""
    table_name = os.getenv(ENV_GALLERY_TABLE_NAME)
    if not table_name:
        raise RuntimeError(f"{ENV_GALLERY_TABLE_NAME} environment variable is not set")

    return UploadPipeline(
        model=GalleryItem,
        store=DynamoDBRecordStore(GalleryItem, table_name=table_name),
        transcoder=PillowTranscoder(),
        temp_store=_temp_store(),
        image_fields=GALLERY_IMAGE_FIELDS,
        image_required=True,
    )


def build_project_pipeline(collection: ProjectCollection) -> UploadPipeline[ProjectItem]:
    """Project items take optional before/after photos."""
    return UploadPipeline(
        model=ProjectItem,
        store=DynamoDBRecordStore(ProjectItem, table_name=collection.table_name),
        transcoder=PillowTranscoder(),
        temp_store=_temp_store(),
        image_fields=PROJECT_IMAGE_FIELDS,
        image_required=False,
    )
