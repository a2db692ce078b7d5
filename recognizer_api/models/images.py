"""Canonical decoded image."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CanonicalImage:
    """PNG re-encoding of an uploaded image with its pixel dimensions."""

    buffer: bytes
    width: int
    height: int
