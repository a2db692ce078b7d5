"""Image source variants and conversion from request payloads."""

import logging
from dataclasses import dataclass
from typing import Annotated, Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from recognizer_api.services.errors import SourceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UrlSource:
    """Image fetched from a remote URL."""

    url: str


@dataclass(frozen=True)
class Base64Source:
    """Image inlined as base64 text."""

    data: str


@dataclass(frozen=True)
class BytesSource:
    """Image sent as a sequence of raw byte values."""

    data: bytes


ImageSource: TypeAlias = UrlSource | Base64Source | BytesSource


class ImageSourcePayload(BaseModel):
    """JSON shape of an image source: at most one of url/base64/bytes."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    url: str | None = None
    base64: str | None = None
    raw: list[Annotated[int, Field(ge=0, le=255)]] | None = Field(default=None, alias="bytes")

    def to_source(self) -> ImageSource:
        """Return the single populated variant.

        Raises:
            SourceError: If no variant, or more than one, carries a value.
        """
        variants: list[ImageSource] = []
        if self.url:
            variants.append(UrlSource(self.url))
        if self.base64:
            variants.append(Base64Source(self.base64))
        if self.raw:
            variants.append(BytesSource(bytes(self.raw)))

        if len(variants) != 1:
            raise SourceError("Invalid image source")
        return variants[0]


def to_image_source(payload: Any) -> ImageSource:
    """Convert a decoded JSON payload (or an existing variant) to an ImageSource."""
    if isinstance(payload, (UrlSource, Base64Source, BytesSource)):
        return payload

    try:
        parsed = ImageSourcePayload.model_validate(payload)
    except ValidationError as e:
        logger.info(f"Rejected image source payload: {e.error_count()} validation error(s)")
        raise SourceError("Invalid image source") from e

    return parsed.to_source()
