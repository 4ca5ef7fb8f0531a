"""
API Routers package.

Each module contains a FastAPI router for a specific domain.
"""

from .catalog import router as catalog_router

__all__ = [
    "catalog_router",
]
