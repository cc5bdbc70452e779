"""Pillow-backed image transcoder producing bounded-size JPEGs."""

import io
from pathlib import Path
from typing import Protocol

from aws_lambda_powertools import Logger
from PIL import Image, UnidentifiedImageError

from core.models.errors import TranscodeError
from core.models.image import ImageAsset
from core.utils.constants import (
    TRANSCODE_CONTENT_TYPE,
    TRANSCODE_MAX_HEIGHT,
    TRANSCODE_MAX_PIXELS,
    TRANSCODE_QUALITY,
    TRANSCODE_WIDTH,
)

logger = Logger(UTC=True)


class ImageTranscoder(Protocol):
    """Turns an image file into a persistable asset."""

    def transcode(self, path: Path) -> ImageAsset: ...


class PillowTranscoder:
    """Resize to a fixed width and re-encode as JPEG.

    The height follows the source aspect ratio. Sources narrower than the
    target width are enlarged.
    """

    def __init__(
        self,
        width: int = TRANSCODE_WIDTH,
        quality: int = TRANSCODE_QUALITY,
        max_pixels: int = TRANSCODE_MAX_PIXELS,
    ) -> None:
        self.width = width
        self.quality = quality
        self.max_height = min(TRANSCODE_MAX_HEIGHT, max_pixels // width)

    def target_height(self, size: tuple[int, int]) -> int:
        """Output height for a source of `size`, keeping its aspect ratio."""
        source_width, source_height = size
        return max(1, round(source_height * self.width / source_width))

    def transcode(self, path: Path) -> ImageAsset:
        """Decode `path`, resize and encode it.

        The output size is checked against the source header before any
        pixel data is decoded.

        Raises:
            TranscodeError: If the source cannot be decoded, its output would
                exceed the height limit, or encoding fails
        """
        try:
            with Image.open(path) as source:
                height = self.target_height(source.size)
                if height > self.max_height:
                    logger.warning(
                        "Image output too tall",
                        extra={"path": str(path), "source_size": source.size, "height": height},
                    )
                    raise TranscodeError(
                        message="Failed to process image",
                        details={"file": Path(path).name, "max_height": self.max_height},
                    )
                source.seek(0)
                image = source.convert("RGB")

            resized = image.resize((self.width, height), Image.LANCZOS)

            buffer = io.BytesIO()
            resized.save(buffer, format="JPEG", quality=self.quality)
            data = buffer.getvalue()

        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            logger.exception("Error compressing image", extra={"path": str(path)})
            raise TranscodeError(
                message="Failed to process image",
                details={"file": Path(path).name},
            ) from exc

        logger.debug(
            "Image transcoded",
            extra={"path": str(path), "width": self.width, "height": height, "size": len(data)},
        )
        return ImageAsset(data=data, content_type=TRANSCODE_CONTENT_TYPE)
