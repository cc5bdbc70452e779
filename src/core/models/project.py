"""Project record model shared by every project collection."""

from typing import ClassVar

from pydantic import Field

from core.models.image import ImageAsset
from core.models.record import StoredRecord
from core.utils.constants import LAT_MAX, LAT_MIN, LNG_MAX, LNG_MIN


class ProjectItem(StoredRecord):
    """A project site with optional before/after photos."""

    IMAGE_FIELDS: ClassVar[tuple[str, ...]] = ("before_photo", "after_photo")

    national_id: str = Field(..., min_length=1, description="Beneficiary national ID")
    name: str = Field(..., min_length=1, description="Beneficiary name")
    project: str = Field(..., min_length=1, description="Project name")
    gs_division: str = Field(..., min_length=1, description="Grama Niladhari division")
    address: str = Field(..., min_length=1, description="Site address")
    description: str = Field(..., min_length=1, description="Project description")

    lat: float = Field(..., ge=LAT_MIN, le=LAT_MAX, description="Latitude")
    lng: float = Field(..., ge=LNG_MIN, le=LNG_MAX, description="Longitude")

    before_photo: ImageAsset | None = Field(None, description="Photo before the work")
    after_photo: ImageAsset | None = Field(None, description="Photo after the work")
