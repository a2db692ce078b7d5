"""OCR engine backends."""

from recognizer_api.services.backends.base import OCRBackend, OCRText, ProgressCallback
from recognizer_api.services.backends.tesseract import TesseractBackend

__all__ = ["OCRBackend", "OCRText", "ProgressCallback", "TesseractBackend"]
