"""Errors raised by the recognition pipeline stages.

Messages are returned to callers verbatim, so they never carry internal
details; the original cause is logged where the error is raised.
"""


class PipelineError(Exception):
    """Base class for failures of a single pipeline stage."""

    pass


class SourceError(PipelineError):
    """Invalid or missing image source, disallowed domain, or fetch failure."""

    pass


class NormalizationError(PipelineError):
    """Image bytes could not be decoded or have no usable dimensions."""

    pass


class RecognitionError(PipelineError):
    """The OCR engine failed to process the image."""

    pass
