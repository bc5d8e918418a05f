"""
Request body size limit
Rejects requests whose declared Content-Length is above the configured maximum.
Chunked requests carry no Content-Length and pass through; uploads are capped
again by UploadStorage while the file is read.
"""

import logging
from typing import Callable

from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware

from gamers_challenge.core.exceptions import create_error_response

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Answer 413 before the body is read when Content-Length exceeds ``max_body_size``"""

    def __init__(self, app, max_body_size: int):
        super().__init__(app)
        self.max_body_size = max_body_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        content_length = request.headers.get("content-length")
        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                return create_error_response(status.HTTP_400_BAD_REQUEST, "Invalid Content-Length")

            # Multipart framing adds a little on top of the file itself
            if declared > self.max_body_size + 64 * 1024:
                logger.warning(
                    "Request body too large",
                    extra={"path": request.url.path, "content_length": declared},
                )
                return create_error_response(
                    status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "Request entity too large"
                )

        return await call_next(request)
