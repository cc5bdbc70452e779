"""Gallery record model."""

from typing import ClassVar

from pydantic import Field

from core.models.image import ImageAsset
from core.models.record import StoredRecord


class GalleryItem(StoredRecord):
    """A gallery entry: a titled image with an optional description."""

    IMAGE_FIELDS: ClassVar[tuple[str, ...]] = ("image",)

    title: str = Field(..., min_length=1, description="Item title")
    description: str | None = Field(None, description="Optional item description")
    image: ImageAsset | None = Field(None, description="Transcoded gallery image")
