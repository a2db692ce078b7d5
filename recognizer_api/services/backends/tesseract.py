"""Tesseract OCR backend using pytesseract."""

import logging
from io import BytesIO
from typing import Any

import pytesseract
from PIL import Image
from pytesseract import Output

from recognizer_api.services.backends.base import OCRBackend, OCRText, ProgressCallback

logger = logging.getLogger(__name__)


def assemble_text(data: dict[str, list[Any]]) -> tuple[str, float, int]:
    """
    Rebuild plain text and overall confidence from an image_to_data word table.

    Words on the same line are joined by spaces, lines by newlines and
    paragraphs by a blank line. Rows without text or with a negative
    confidence (structural rows) are skipped.

    Returns:
        (text, mean_word_confidence, word_count); confidence is 0.0 when no
        word was recognized
    """
    lines: dict[tuple[int, int, int, int], list[str]] = {}
    confidences: list[float] = []

    for i, raw_word in enumerate(data.get("text", [])):
        word = str(raw_word or "").strip()
        conf = float(data["conf"][i])
        if not word or conf < 0:
            continue

        key = (
            int(data["page_num"][i]),
            int(data["block_num"][i]),
            int(data["par_num"][i]),
            int(data["line_num"][i]),
        )
        lines.setdefault(key, []).append(word)
        confidences.append(conf)

    paragraphs: list[list[str]] = []
    current_paragraph = None
    for (page, block, par, _line), words in lines.items():
        if (page, block, par) != current_paragraph:
            paragraphs.append([])
            current_paragraph = (page, block, par)
        paragraphs[-1].append(" ".join(words))

    text = "\n\n".join("\n".join(paragraph) for paragraph in paragraphs)
    confidence = sum(confidences) / len(confidences) if confidences else 0.0
    return text, confidence, len(confidences)


class TesseractBackend(OCRBackend):
    """Tesseract backend. Each call spawns one tesseract process."""

    def __init__(self, tesseract_cmd: str = "", timeout: float = 30.0):
        """Initialize the backend.

        Args:
            tesseract_cmd: Path to the tesseract binary. Empty uses PATH.
            timeout: Seconds before a tesseract run is killed (0 = no limit)
        """
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.timeout = timeout

    def version(self) -> str | None:
        try:
            return str(pytesseract.get_tesseract_version())
        except (pytesseract.TesseractNotFoundError, OSError) as e:
            logger.debug(f"Tesseract not available: {e}")
            return None

    def process_single(
        self,
        image_bytes: bytes,
        language: str,
        on_progress: ProgressCallback | None = None,
    ) -> OCRText:
        """Run tesseract over one image and return text plus mean word confidence."""

        def emit(status: str, progress: float, **fields: Any) -> None:
            if on_progress is not None:
                on_progress({"status": status, "progress": progress, **fields})

        emit("loading image", 0.0, bytes=len(image_bytes))
        with Image.open(BytesIO(image_bytes)) as img:
            img.load()
            emit("recognizing text", 0.25, language=language, width=img.width, height=img.height)
            data = pytesseract.image_to_data(
                img,
                lang=language,
                output_type=Output.DICT,
                timeout=self.timeout,
            )

        text, confidence, word_count = assemble_text(data)
        emit("recognized text", 1.0, words=word_count, confidence=round(confidence, 2))

        return OCRText(text=text, confidence=confidence)
