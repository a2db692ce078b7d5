"""Abstract base class for OCR backends."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

ProgressCallback = Callable[[dict[str, Any]], None]


@dataclass(frozen=True)
class OCRText:
    """Engine output for one image."""

    text: str
    confidence: float


class OCRBackend(ABC):
    """Abstract base class for OCR backends. Backends process SINGLE images only.

    Implementations are synchronous and are called from a worker thread.
    """

    @abstractmethod
    def version(self) -> str | None:
        """Return the engine version string, if known."""
        ...

    @abstractmethod
    def process_single(
        self,
        image_bytes: bytes,
        language: str,
        on_progress: ProgressCallback | None = None,
    ) -> OCRText:
        """Recognize text in a single encoded image.

        Args:
            image_bytes: Encoded image (PNG)
            language: Engine language code (e.g., "eng", "deu")
            on_progress: Optional receiver for diagnostic progress events

        Returns:
            OCRText with the recognized text and confidence
        """
        ...
