"""Pytest fixtures for API and service tests."""

import base64
import time
from collections.abc import AsyncGenerator, Callable
from io import BytesIO
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from PIL import Image

from recognizer_api.dependencies import get_http_transport, get_ocr_backend
from recognizer_api.main import create_app
from recognizer_api.services.backends.base import OCRBackend, OCRText, ProgressCallback
from recognizer_api.services.normalizer import ImageNormalizer
from recognizer_api.services.pipeline import RequestPipeline
from recognizer_api.services.recognition import RecognitionAdapter
from recognizer_api.services.source_resolver import SourceResolver

ALLOWED_HOST = "discord.mx"


class FakeBackend(OCRBackend):
    """OCR backend returning fixed output, recording every call.

    ``delays`` maps an image width to seconds slept before answering, which
    lets tests control completion order by image size.
    """

    def __init__(
        self,
        text: str = "Hello world",
        confidence: float = 91.5,
        delays: dict[int, float] | None = None,
        fail: bool = False,
    ):
        self.text = text
        self.confidence = confidence
        self.delays = delays or {}
        self.fail = fail
        self.calls: list[dict[str, Any]] = []

    def version(self) -> str | None:
        return "5.3.0-fake"

    def process_single(
        self,
        image_bytes: bytes,
        language: str,
        on_progress: ProgressCallback | None = None,
    ) -> OCRText:
        with Image.open(BytesIO(image_bytes)) as img:
            size = img.size
            image_format = img.format

        self.calls.append({"language": language, "size": size, "format": image_format})

        delay = self.delays.get(size[0], 0)
        if delay:
            time.sleep(delay)

        if on_progress is not None:
            on_progress({"status": "recognizing text", "progress": 0.5})

        if self.fail:
            raise RuntimeError("engine crashed")

        return OCRText(text=self.text, confidence=self.confidence)


def encode_image(width: int, height: int, color: Any = "white", mode: str = "RGB", fmt: str = "PNG") -> bytes:
    """Encode a solid-color image."""
    img = Image.new(mode, (width, height), color)
    buffer = BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """Factory for encoded test images."""
    return encode_image


@pytest.fixture
def png_10x10() -> bytes:
    """10x10 white PNG."""
    return encode_image(10, 10)


@pytest.fixture
def png_10x10_base64(png_10x10: bytes) -> str:
    """10x10 white PNG as base64 text."""
    return base64.b64encode(png_10x10).decode("ascii")


@pytest.fixture
def fake_backend() -> FakeBackend:
    """Fake OCR backend with default output."""
    return FakeBackend()


@pytest.fixture
def failing_backend() -> FakeBackend:
    """Fake OCR backend that always raises."""
    return FakeBackend(fail=True)


@pytest.fixture
def make_backend() -> Callable[..., FakeBackend]:
    """Factory for fake backends with custom output or delays."""
    return FakeBackend


@pytest.fixture
def remote_requests() -> list[httpx.Request]:
    """Requests seen by the mock remote image host."""
    return []


@pytest.fixture
def mock_transport(remote_requests: list[httpx.Request]) -> httpx.MockTransport:
    """Mock remote image host.

    Paths:
        /img.png       200 with a 32x16 PNG
        /missing.png   404
        /redirect.png  302 to an off-list host
        /broken        connection error
        /huge.png      200 with a body larger than 1 KiB
    """
    image = encode_image(32, 16)

    def handler(request: httpx.Request) -> httpx.Response:
        remote_requests.append(request)
        path = request.url.path
        if path == "/img.png":
            return httpx.Response(200, content=image, headers={"content-type": "image/png"})
        if path == "/missing.png":
            return httpx.Response(404)
        if path == "/redirect.png":
            return httpx.Response(302, headers={"location": "https://evil.example/img.png"})
        if path == "/broken":
            raise httpx.ConnectError("connection refused", request=request)
        if path == "/huge.png":
            return httpx.Response(200, content=b"\x00" * 2048)
        return httpx.Response(500)

    return httpx.MockTransport(handler)


@pytest.fixture
def make_resolver(mock_transport: httpx.MockTransport) -> Callable[..., SourceResolver]:
    """Factory for resolvers wired to the mock host."""

    def factory(
        allowed_domains: frozenset[str] = frozenset({ALLOWED_HOST}),
        max_image_bytes: int = 1024 * 1024,
    ) -> SourceResolver:
        return SourceResolver(
            allowed_domains=allowed_domains,
            fetch_timeout=5.0,
            max_image_bytes=max_image_bytes,
            transport=mock_transport,
        )

    return factory


@pytest.fixture
def make_pipeline(make_resolver: Callable[..., SourceResolver]) -> Callable[..., RequestPipeline]:
    """Factory for pipelines around a given backend."""

    def factory(backend: OCRBackend) -> RequestPipeline:
        return RequestPipeline(make_resolver(), ImageNormalizer(), RecognitionAdapter(backend))

    return factory


@pytest.fixture
def app(fake_backend: FakeBackend, mock_transport: httpx.MockTransport) -> FastAPI:
    """Create the FastAPI application with the fake backend and mock host."""
    app = create_app()
    app.dependency_overrides[get_ocr_backend] = lambda: fake_backend
    app.dependency_overrides[get_http_transport] = lambda: mock_transport
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
