"""Middleware package for the SnapLink application."""

from snaplink.middleware.logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
