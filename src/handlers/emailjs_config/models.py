"""Pydantic models for the EmailJS configuration response."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EmailJSConfigResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    service_id: str | None = Field(None, description="EmailJS service ID")
    template_id: str | None = Field(None, description="EmailJS template ID")
    public_key: str | None = Field(None, description="EmailJS public key")
