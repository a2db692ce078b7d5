"""Image text recognition API service."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from recognizer_api import __version__
from recognizer_api.config import get_settings
from recognizer_api.dependencies import get_ocr_backend
from recognizer_api.middleware import BodySizeLimitMiddleware
from recognizer_api.routers import recognition

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()
    logger.info(f"Starting recognition API in {settings.environment} mode")
    logger.info(f"Allowed image domains: {sorted(settings.allowed_domains)}")

    backend = app.dependency_overrides.get(get_ocr_backend, get_ocr_backend)()
    engine_version = await asyncio.to_thread(backend.version)
    if engine_version is None:
        # Requests will fail with "Text recognition failed" until it is installed
        logger.error("OCR engine not available")
    else:
        logger.info(f"OCR engine version {engine_version}")

    yield

    logger.info("Shutting down recognition API")


def failure_response(error: str, status_code: int) -> JSONResponse:
    """Request-level failure in the same shape as a per-image failure."""
    return JSONResponse(
        content={"success": False, "error": error, "processingTimeMs": 0},
        status_code=status_code,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed JSON or query options as 400 instead of 422."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"Invalid request: {location}: {first.get('msg', 'invalid value')}"
    else:
        message = "Invalid request"
    logger.info(f"Rejected {request.method} {request.url.path}: {message}")
    return failure_response(message, status.HTTP_400_BAD_REQUEST)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors (404, 405, 413...) in the failure shape."""
    return failure_response(str(exc.detail), exc.status_code)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Image Recognition API",
        description="Text recognition for images from URLs, base64 or raw bytes",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_request_body_bytes)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.include_router(recognition.router, tags=["recognition"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        backend = app.dependency_overrides.get(get_ocr_backend, get_ocr_backend)()
        engine_version = await asyncio.to_thread(backend.version)
        return {
            "status": "healthy" if engine_version else "degraded",
            "environment": settings.environment,
            "ocr_engine": {"available": engine_version is not None, "version": engine_version},
            "allowed_domains": sorted(settings.allowed_domains),
        }

    return app


app = create_app()


def run() -> None:
    """Run the API with uvicorn using configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    run()
