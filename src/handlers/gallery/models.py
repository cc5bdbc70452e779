"""Pydantic models for gallery requests/responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GalleryItemRequest(BaseModel):
    """Validation model for requests addressing one gallery item."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1, description="Gallery item ID")


class GalleryListResponse(BaseModel):
    """Response model for listing gallery items."""

    items: list[dict[str, Any]] = Field(..., description="Gallery items, images as data URIs")
    count: int = Field(..., description="Number of items returned")


class GalleryDeleteResponse(BaseModel):
    """Response model for successful gallery item deletion."""

    id: str = Field(..., description="Deleted item ID")
    message: str = Field(..., description="Success message")
    deleted_at: str = Field(..., description="Deletion timestamp")
