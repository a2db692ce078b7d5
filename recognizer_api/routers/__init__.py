"""API routers."""

from recognizer_api.routers import recognition

__all__ = ["recognition"]
