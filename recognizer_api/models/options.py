"""Caller-supplied recognition options."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Mode(str, Enum):
    """Recognition mode. Controls engine diagnostic verbosity only."""

    FAST = "fast"
    ACCURATE = "accurate"


class RecognitionOptions(BaseModel):
    """Options applied to every image of a request.

    Only the first entry of ``languages`` is passed to the engine. ``words``,
    ``autocorrect`` and ``detect_language`` are accepted for API compatibility
    but are not consumed by recognition yet.
    """

    model_config = ConfigDict(frozen=True)

    mode: Mode = Mode.FAST
    languages: tuple[str, ...] = ("eng",)
    words: tuple[str, ...] = ()
    autocorrect: bool = False
    detect_language: bool = False

    @property
    def verbose(self) -> bool:
        """Whether engine progress should reach the operator log."""
        return self.mode == Mode.ACCURATE
