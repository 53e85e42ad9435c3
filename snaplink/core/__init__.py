"""Core module for the SnapLink application."""

from snaplink.core.config import settings

__all__ = ["settings"]
