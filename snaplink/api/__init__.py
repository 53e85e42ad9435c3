"""API package for the SnapLink application."""

from snaplink.api.routes import api_router

__all__ = ["api_router"]
