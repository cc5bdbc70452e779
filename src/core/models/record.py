"""Base model shared by every persisted record."""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, StrictStr
from pydantic.alias_generators import to_camel

from core.models.image import ImageAsset

READ_ONLY_FIELDS = frozenset({"id", "created_at", "updated_at"})


class StoredRecord(BaseModel):
    """Fields and rendering common to gallery and project records.

    Attribute names are snake_case (DynamoDB attributes); the API speaks
    camelCase through the alias generator.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    IMAGE_FIELDS: ClassVar[tuple[str, ...]] = ()

    id: StrictStr = Field(..., description="Store-assigned record identifier")
    created_at: StrictStr = Field(..., description="ISO-8601 creation timestamp (UTC)")
    updated_at: StrictStr = Field(..., description="ISO-8601 last update timestamp (UTC)")

    @classmethod
    def writable_fields(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Normalize camelCase or snake_case input keys to attribute names.

        Unknown keys and the store-managed fields are dropped.
        """
        lookup: dict[str, str] = {}
        for name, field in cls.model_fields.items():
            if name in READ_ONLY_FIELDS:
                continue
            lookup[name] = name
            if field.alias:
                lookup[field.alias] = name

        return {lookup[key]: value for key, value in data.items() if key in lookup}

    @classmethod
    def image_field_name(cls, form_field: str) -> str:
        """Map an upload form field (e.g. ``beforePhoto``) to its attribute."""
        return cls.writable_fields({form_field: None}).popitem()[0]

    def to_response(self) -> dict[str, Any]:
        """Dump the record for JSON transport, images rendered as data URIs."""
        body = self.model_dump(by_alias=True, exclude=set(self.IMAGE_FIELDS))

        for name in self.IMAGE_FIELDS:
            asset: ImageAsset | None = getattr(self, name)
            alias = type(self).model_fields[name].alias or name
            body[alias] = asset.to_data_uri() if asset is not None else None

        return body
