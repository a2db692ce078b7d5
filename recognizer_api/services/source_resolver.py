"""Resolve image sources to raw encoded bytes.

Remote sources are only fetched from hosts on the configured allow-list. The
allow-list is checked before any network activity.
"""

import base64
import logging
import re
from urllib.parse import urlsplit

import httpx

from recognizer_api.models.sources import Base64Source, BytesSource, ImageSource, UrlSource
from recognizer_api.services.errors import SourceError

logger = logging.getLogger(__name__)

_DATA_URI_PREFIX = re.compile(r"^\s*data:[^,]*;base64,", re.IGNORECASE)
_NON_BASE64 = re.compile(r"[^A-Za-z0-9+/]")
_URL_SAFE_ALPHABET = str.maketrans("-_", "+/")


def decode_base64_lenient(text: str) -> bytes:
    """Decode base64 without validating it.

    Accepts the standard and URL-safe alphabets and an optional ``data:`` URI
    prefix. Characters outside the alphabet are dropped and padding is
    optional, so malformed input decodes to whatever bytes it carries.
    """
    cleaned = _NON_BASE64.sub("", _DATA_URI_PREFIX.sub("", text).translate(_URL_SAFE_ALPHABET))

    remainder = len(cleaned) % 4
    if remainder == 1:
        # A single trailing character cannot complete a byte
        cleaned = cleaned[:-1]
    elif remainder:
        cleaned += "=" * (4 - remainder)

    return base64.b64decode(cleaned)


class SourceResolver:
    """Turns an ImageSource into raw encoded image bytes."""

    def __init__(
        self,
        allowed_domains: frozenset[str],
        fetch_timeout: float = 10.0,
        max_image_bytes: int = 24 * 1024 * 1024,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            allowed_domains: Hostnames permitted for URL sources (exact match)
            fetch_timeout: Timeout in seconds for each remote fetch
            max_image_bytes: Largest remote body accepted
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self._allowed_domains = frozenset(domain.lower() for domain in allowed_domains)
        self._fetch_timeout = fetch_timeout
        self._max_image_bytes = max_image_bytes
        self._transport = transport

    async def resolve(self, source: ImageSource) -> bytes:
        """
        Return the encoded image bytes for a source.

        Raises:
            SourceError: If the source is empty, the URL is invalid or not
                allowed, or the remote fetch fails
        """
        match source:
            case UrlSource(url=url) if url:
                return await self._fetch(url)
            case Base64Source(data=data) if data:
                return decode_base64_lenient(data)
            case BytesSource(data=data) if data:
                return data
            case _:
                raise SourceError("Invalid image source")

    def check_url(self, url: str) -> None:
        """Validate that a URL is absolute http(s) and its host is allowed."""
        try:
            parts = urlsplit(url)
            host = parts.hostname
        except ValueError as e:
            logger.info(f"Unparseable image URL {url!r}: {e}")
            raise SourceError("Invalid image URL") from e

        if parts.scheme not in ("http", "https") or not host:
            raise SourceError("Invalid image URL")

        if host not in self._allowed_domains:
            logger.warning(f"Rejected image URL with host not on allow-list: {host}")
            raise SourceError("Domain not allowed")

    async def _fetch(self, url: str) -> bytes:
        self.check_url(url)

        try:
            # Redirects are not followed: the target could be off the allow-list
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self._fetch_timeout,
                follow_redirects=False,
            ) as client:
                async with client.stream("GET", url) as response:
                    if not response.is_success:
                        logger.warning(f"Image fetch from {url} returned HTTP {response.status_code}")
                        raise SourceError(f"HTTP error! status: {response.status_code}")

                    declared = response.headers.get("content-length", "")
                    if declared.isdigit() and int(declared) > self._max_image_bytes:
                        raise SourceError("Image exceeds maximum size")

                    body = bytearray()
                    async for chunk in response.aiter_bytes():
                        body.extend(chunk)
                        if len(body) > self._max_image_bytes:
                            raise SourceError("Image exceeds maximum size")

                    return bytes(body)

        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Failed to fetch image from {url}: {e!r}")
            raise SourceError("Failed to fetch image") from e
