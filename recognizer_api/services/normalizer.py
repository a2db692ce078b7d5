"""Decode raw image bytes into a canonical PNG bitmap."""

import asyncio
import logging
from io import BytesIO

from PIL import Image

from recognizer_api.models.images import CanonicalImage
from recognizer_api.services.errors import NormalizationError

logger = logging.getLogger(__name__)

# Modes the PNG encoder can write without conversion
PNG_MODES = {"1", "L", "LA", "I;16", "P", "RGB", "RGBA"}


def read_dimensions(raw: bytes) -> tuple[int, int]:
    """Read pixel dimensions from the image header without decoding pixels."""
    with Image.open(BytesIO(raw)) as img:
        return img.width, img.height


def encode_png(raw: bytes) -> bytes:
    """Fully decode the image and re-encode it as PNG."""
    with Image.open(BytesIO(raw)) as img:
        img.load()
        if img.mode == "I":
            # 32-bit integer pixels are stored as 16-bit grayscale
            converted = img.convert("I;16")
        elif img.mode not in PNG_MODES:
            has_alpha = "A" in img.getbands()
            converted = img.convert("RGBA" if has_alpha else "RGB")
        else:
            converted = img

        buffer = BytesIO()
        converted.save(buffer, format="PNG")
        return buffer.getvalue()


class ImageNormalizer:
    """Produces CanonicalImage instances from arbitrary encoded bytes."""

    async def normalize(self, raw: bytes) -> CanonicalImage:
        """
        Decode raw bytes into a canonical PNG with known dimensions.

        Dimensions and the re-encoding are independent reads of the same
        bytes, so both run concurrently in worker threads.

        Raises:
            NormalizationError: If the bytes are not a decodable image or have
                no positive dimensions. The cause is logged, not surfaced.
        """
        try:
            (width, height), buffer = await asyncio.gather(
                asyncio.to_thread(read_dimensions, raw),
                asyncio.to_thread(encode_png, raw),
            )
        except Exception as e:
            logger.error(f"Image processing error ({len(raw)} bytes): {e!r}")
            raise NormalizationError("Failed to process image") from e

        if width <= 0 or height <= 0:
            logger.error(f"Image processing error: invalid dimensions {width}x{height}")
            raise NormalizationError("Failed to process image")

        return CanonicalImage(buffer=buffer, width=width, height=height)
