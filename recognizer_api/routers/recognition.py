"""Single-image and batch text recognition endpoints."""

from typing import Any

from fastapi import APIRouter, Body, status
from fastapi.responses import JSONResponse

from recognizer_api.dependencies import Batch, Options, Pipeline
from recognizer_api.models.results import BatchEnvelope, FailureOutcome, SuccessOutcome

router = APIRouter()


@router.post(
    "/recognize",
    response_model=SuccessOutcome,
    responses={status.HTTP_400_BAD_REQUEST: {"model": FailureOutcome}},
)
async def recognize(
    pipeline: Pipeline,
    options: Options,
    source: Any = Body(None, description="Image source with one of url, base64 or bytes"),
) -> JSONResponse:
    """
    Recognize text in a single image.

    Any failure (invalid source, disallowed domain, undecodable image, engine
    error) is returned as 400 with the failure message and elapsed time.
    """
    outcome = await pipeline.run(source, options)
    status_code = status.HTTP_200_OK if outcome.success else status.HTTP_400_BAD_REQUEST
    return JSONResponse(content=outcome.model_dump(), status_code=status_code)


@router.post(
    "/batch",
    response_model=BatchEnvelope,
    responses={status.HTTP_400_BAD_REQUEST: {"model": FailureOutcome}},
)
async def recognize_batch(
    batch: Batch,
    options: Options,
    sources: Any = Body(None, description="Array of image sources"),
) -> JSONResponse:
    """
    Recognize text in every image of a batch concurrently.

    Per-image failures are reported in place and do not fail the batch. Only
    a body that is not an array fails the whole request.
    """
    envelope = await batch.run_batch(sources, options)
    status_code = status.HTTP_200_OK if envelope.success else status.HTTP_400_BAD_REQUEST
    return JSONResponse(content=envelope.model_dump(), status_code=status_code)
