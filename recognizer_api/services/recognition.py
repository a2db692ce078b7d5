"""Adapter between canonical images and the OCR backend."""

import asyncio
import logging
from typing import Any

from recognizer_api.models.images import CanonicalImage
from recognizer_api.models.options import RecognitionOptions
from recognizer_api.models.results import RecognitionResult
from recognizer_api.services.backends.base import OCRBackend
from recognizer_api.services.errors import RecognitionError

logger = logging.getLogger(__name__)


def log_progress(event: dict[str, Any]) -> None:
    """Forward an engine progress event to the operator log."""
    logger.info(f"OCR progress: {event}")


class RecognitionAdapter:
    """Runs the OCR backend on a canonical image and shapes its output."""

    def __init__(self, backend: OCRBackend, default_language: str = "eng"):
        self._backend = backend
        self._default_language = default_language

    async def recognize(self, image: CanonicalImage, options: RecognitionOptions) -> RecognitionResult:
        """
        Recognize text in a canonical image.

        Only the first requested language is used. In accurate mode engine
        progress is logged; in fast mode it is discarded. ``words``,
        ``autocorrect`` and ``detect_language`` have no effect here.

        Returns:
            RecognitionResult with dimensions taken from the canonical image
            and processingTimeMs left at 0 for the caller to fill in

        Raises:
            RecognitionError: If the backend fails
        """
        language = options.languages[0] if options.languages else self._default_language
        on_progress = log_progress if options.verbose else None

        try:
            output = await asyncio.to_thread(
                self._backend.process_single, image.buffer, language, on_progress
            )
        except Exception as e:
            logger.error(f"Text recognition error (language={language}): {e!r}")
            raise RecognitionError("Text recognition failed") from e

        return RecognitionResult(
            width=image.width,
            height=image.height,
            content=output.text,
            confidence=output.confidence,
        )
