"""Per-image recognition pipeline shared by the single and batch endpoints."""

import logging
import time
from typing import Any

from recognizer_api.models.options import RecognitionOptions
from recognizer_api.models.results import FailureOutcome, OutcomeEnvelope, SuccessOutcome
from recognizer_api.models.sources import ImageSource, to_image_source
from recognizer_api.services.errors import PipelineError
from recognizer_api.services.normalizer import ImageNormalizer
from recognizer_api.services.recognition import RecognitionAdapter
from recognizer_api.services.source_resolver import SourceResolver

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "An unknown error occurred"


def elapsed_ms(start: float) -> int:
    """Whole milliseconds since a perf_counter() reading."""
    return max(0, round((time.perf_counter() - start) * 1000))


class RequestPipeline:
    """Resolve, normalize and recognize one image source.

    ``run`` never raises: every failure becomes a FailureOutcome carrying the
    stage's message and the time spent up to the failure.
    """

    def __init__(
        self,
        resolver: SourceResolver,
        normalizer: ImageNormalizer,
        recognizer: RecognitionAdapter,
    ):
        self.resolver = resolver
        self.normalizer = normalizer
        self.recognizer = recognizer

    async def run(self, source: ImageSource | Any, options: RecognitionOptions) -> OutcomeEnvelope:
        """
        Run the full pipeline for one source.

        Args:
            source: An ImageSource, or a decoded JSON payload to be converted
            options: Recognition options for this request

        Returns:
            SuccessOutcome or FailureOutcome with processingTimeMs set
        """
        start = time.perf_counter()

        try:
            image_source = to_image_source(source)
            raw = await self.resolver.resolve(image_source)
            image = await self.normalizer.normalize(raw)
            result = await self.recognizer.recognize(image, options)
        except PipelineError as e:
            return FailureOutcome(error=str(e), processingTimeMs=elapsed_ms(start))
        except Exception:
            logger.exception("Unexpected error in recognition pipeline")
            return FailureOutcome(error=UNKNOWN_ERROR, processingTimeMs=elapsed_ms(start))

        return SuccessOutcome(data=result.model_copy(update={"processingTimeMs": elapsed_ms(start)}))
