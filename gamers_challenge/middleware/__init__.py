"""Middleware modules for the Gamers Challenge backend"""

from .body_limit import BodySizeLimitMiddleware
from .logging_middleware import LoggingMiddleware
from .request_id import RequestIDMiddleware

__all__ = [
    "BodySizeLimitMiddleware",
    "LoggingMiddleware",
    "RequestIDMiddleware",
]
