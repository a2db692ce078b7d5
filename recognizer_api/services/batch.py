"""Concurrent fan-out of the recognition pipeline over a batch of sources."""

import asyncio
import logging
import time
from typing import Any

from recognizer_api.models.options import RecognitionOptions
from recognizer_api.models.results import BatchEnvelope, FailureOutcome
from recognizer_api.services.pipeline import RequestPipeline, elapsed_ms

logger = logging.getLogger(__name__)

NOT_A_SEQUENCE = "Batch body must be an array of image sources"


class BatchCoordinator:
    """Runs RequestPipeline over every source of a batch concurrently."""

    def __init__(self, pipeline: RequestPipeline):
        self.pipeline = pipeline

    async def run_batch(self, sources: Any, options: RecognitionOptions) -> BatchEnvelope | FailureOutcome:
        """
        Process all sources concurrently and join.

        Each item is an independent task whose failures are contained by
        RequestPipeline.run, so one item never cancels or delays another.
        Outcomes are returned in input order. totalProcessingTimeMs is the
        makespan of the whole fan-out.

        Returns:
            BatchEnvelope, or a single FailureOutcome if ``sources`` is not a list
        """
        start = time.perf_counter()

        if not isinstance(sources, list):
            logger.warning(f"Rejected batch body of type {type(sources).__name__}")
            return FailureOutcome(error=NOT_A_SEQUENCE, processingTimeMs=elapsed_ms(start))

        # gather preserves argument order regardless of completion order
        outcomes = await asyncio.gather(*(self.pipeline.run(source, options) for source in sources))

        failures = sum(1 for outcome in outcomes if not outcome.success)
        total_ms = elapsed_ms(start)
        logger.info(f"Batch of {len(outcomes)} image(s) finished in {total_ms}ms ({failures} failed)")

        return BatchEnvelope(data=list(outcomes), totalProcessingTimeMs=total_ms)
