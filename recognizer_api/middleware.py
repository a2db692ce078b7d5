"""ASGI middleware enforcing the request body cap."""

import logging

from fastapi import HTTPException, status
from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

BODY_TOO_LARGE = "Request body too large"


class BodySizeLimitMiddleware:
    """Reject request bodies larger than ``max_body_bytes`` with 413.

    Bodies with a declared Content-Length are rejected before the app runs.
    Chunked bodies are counted as they are received.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length", "")
        if declared.isdigit() and int(declared) > self.max_body_bytes:
            logger.warning(f"Rejected {scope.get('path')} body of {declared} bytes")
            response = JSONResponse(
                {"success": False, "error": BODY_TOO_LARGE, "processingTimeMs": 0},
                status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            )
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    logger.warning(f"Rejected {scope.get('path')} streamed body over {self.max_body_bytes} bytes")
                    raise HTTPException(status_code=status.HTTP_413_CONTENT_TOO_LARGE, detail=BODY_TOO_LARGE)
            return message

        await self.app(scope, limited_receive, send)
