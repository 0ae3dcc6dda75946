"""HTTP middleware for the organizational structure API."""

from src.middleware.request_logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
