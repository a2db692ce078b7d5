"""FastAPI dependencies for pipeline wiring and request options."""

from functools import lru_cache
from typing import Annotated

import httpx
from fastapi import Depends, Query

from recognizer_api.config import Settings, get_settings
from recognizer_api.models.options import Mode, RecognitionOptions
from recognizer_api.services.backends import OCRBackend, TesseractBackend
from recognizer_api.services.batch import BatchCoordinator
from recognizer_api.services.normalizer import ImageNormalizer
from recognizer_api.services.pipeline import RequestPipeline
from recognizer_api.services.recognition import RecognitionAdapter
from recognizer_api.services.source_resolver import SourceResolver


@lru_cache
def get_ocr_backend() -> OCRBackend:
    """Get the process-wide OCR backend."""
    settings = get_settings()
    return TesseractBackend(
        tesseract_cmd=settings.tesseract_cmd,
        timeout=settings.recognition_timeout_seconds,
    )


def get_http_transport() -> httpx.AsyncBaseTransport | None:
    """Transport for remote image fetches. None uses httpx's default."""
    return None


def get_request_pipeline(
    settings: Annotated[Settings, Depends(get_settings)],
    backend: Annotated[OCRBackend, Depends(get_ocr_backend)],
    transport: Annotated[httpx.AsyncBaseTransport | None, Depends(get_http_transport)],
) -> RequestPipeline:
    """Build the per-image pipeline for a request."""
    resolver = SourceResolver(
        allowed_domains=settings.allowed_domains,
        fetch_timeout=settings.fetch_timeout_seconds,
        max_image_bytes=settings.max_image_bytes,
        transport=transport,
    )
    recognizer = RecognitionAdapter(backend, default_language=settings.default_language)
    return RequestPipeline(resolver, ImageNormalizer(), recognizer)


Pipeline = Annotated[RequestPipeline, Depends(get_request_pipeline)]


def get_batch_coordinator(pipeline: Pipeline) -> BatchCoordinator:
    """Build the batch coordinator around the request pipeline."""
    return BatchCoordinator(pipeline)


Batch = Annotated[BatchCoordinator, Depends(get_batch_coordinator)]


def split_values(values: list[str] | None) -> tuple[str, ...]:
    """Flatten repeated and comma-separated query values, dropping blanks."""
    if not values:
        return ()
    return tuple(part.strip() for value in values for part in value.split(",") if part.strip())


def get_recognition_options(
    settings: Annotated[Settings, Depends(get_settings)],
    mode: Mode = Query(Mode.FAST, description="fast or accurate (accurate logs engine progress)"),
    languages: list[str] | None = Query(None, description="Language codes; only the first is used"),
    words: list[str] | None = Query(None, description="Hint words (currently unused)"),
    autocorrect: bool = Query(False, description="Currently unused"),
    detect_language: bool = Query(False, description="Currently unused"),
) -> RecognitionOptions:
    """Parse recognition options from the query string."""
    return RecognitionOptions(
        mode=mode,
        languages=split_values(languages) or (settings.default_language,),
        words=split_values(words),
        autocorrect=autocorrect,
        detect_language=detect_language,
    )


Options = Annotated[RecognitionOptions, Depends(get_recognition_options)]
