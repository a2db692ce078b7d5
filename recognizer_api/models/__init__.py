"""Data models for image sources, recognition options and results."""

from recognizer_api.models.images import CanonicalImage
from recognizer_api.models.options import Mode, RecognitionOptions
from recognizer_api.models.results import (
    BatchEnvelope,
    FailureOutcome,
    OutcomeEnvelope,
    RecognitionResult,
    SuccessOutcome,
)
from recognizer_api.models.sources import (
    Base64Source,
    BytesSource,
    ImageSource,
    ImageSourcePayload,
    UrlSource,
    to_image_source,
)

__all__ = [
    "Base64Source",
    "BatchEnvelope",
    "BytesSource",
    "CanonicalImage",
    "FailureOutcome",
    "ImageSource",
    "ImageSourcePayload",
    "Mode",
    "OutcomeEnvelope",
    "RecognitionOptions",
    "RecognitionResult",
    "SuccessOutcome",
    "UrlSource",
    "to_image_source",
]
