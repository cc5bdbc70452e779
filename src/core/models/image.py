"""Shared image asset model."""

import base64

from pydantic import BaseModel, Field, StrictBytes, StrictStr


class ImageAsset(BaseModel):
    """A transcoded image embedded in its owning record.

    Assets have no lifecycle of their own: they are written with the record,
    replaced wholesale on update and removed when the record is deleted.
    """

    data: StrictBytes = Field(..., min_length=1, description="Encoded image bytes")
    content_type: StrictStr = Field(..., min_length=1, description="MIME type of `data`")

    def to_data_uri(self) -> str:
        """Render the asset as a self-describing `data:` URI."""
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"
