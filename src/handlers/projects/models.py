"""Pydantic models for project requests/responses."""

from typing import Annotated, Any

from pydantic import BaseModel, Field, StringConstraints


class ProjectPathRequest(BaseModel):
    """Validation model for `/api/{tab}` path parameters.

    The tab is matched exactly, surrounding whitespace included.
    """

    tab: str = Field(..., min_length=1, description="Collection tab identifier")


class ProjectItemRequest(ProjectPathRequest):
    """Validation model for `/api/{tab}/{id}` path parameters."""

    id: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)] = Field(
        ..., description="Project item ID"
    )


class ProjectListResponse(BaseModel):
    """Response model for listing the items of one collection."""

    tab: str = Field(..., description="Collection the items belong to")
    items: list[dict[str, Any]] = Field(..., description="Project items, photos as data URIs")
    count: int = Field(..., description="Number of items returned")


class ProjectDeleteResponse(BaseModel):
    """Response model for successful project item deletion."""

    id: str = Field(..., description="Deleted item ID")
    message: str = Field(..., description="Success message")
    deleted_at: str = Field(..., description="Deletion timestamp")
