"""Outcome envelopes returned by the recognition endpoints.

Field names are camelCase to match the JSON contract of the API.
"""

from typing import Literal, TypeAlias

from pydantic import BaseModel, Field


class RecognitionResult(BaseModel):
    """Recognized text for a single image."""

    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    content: str
    confidence: float
    processingTimeMs: int = Field(0, ge=0)


class SuccessOutcome(BaseModel):
    """Successful recognition of one image."""

    success: Literal[True] = True
    data: RecognitionResult


class FailureOutcome(BaseModel):
    """Failed recognition of one image, or of a whole request."""

    success: Literal[False] = False
    error: str
    processingTimeMs: int = Field(..., ge=0)


OutcomeEnvelope: TypeAlias = SuccessOutcome | FailureOutcome


class BatchEnvelope(BaseModel):
    """Per-item outcomes of a batch, in input order."""

    success: Literal[True] = True
    data: list[OutcomeEnvelope]
    totalProcessingTimeMs: int = Field(..., ge=0)
