"""Routes package initialization.

This module exports the route collection for the application.
"""

from fastapi import APIRouter

from snaplink.api.routes import analytics, auth, health, redirect, shortener
from snaplink.core.config import settings

# Create root router
api_router = APIRouter()

for module in (auth, shortener, analytics, health):
    api_router.include_router(module.router, prefix=settings.API_PREFIX)

# Redirect routes sit at the root path so short URLs resolve as /{short_code}.
# Included last so the catch-all pattern never shadows an API route.
api_router.include_router(redirect.router)

__all__ = ["api_router"]
