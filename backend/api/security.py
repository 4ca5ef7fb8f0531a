"""
API key check for the catalog reload endpoint.

Only POST /api/catalog/reload replaces server state, so it is the one route
that carries this dependency; read endpoints stay open.
"""
from typing import Optional

from fastapi import Header, HTTPException

from backend.core.config import settings


def require_api_key(x_api_key: Optional[str] = Header(None)) -> None:
    """Reject a reload whose X-API-Key does not match NATIVEDB_API_KEY; no-op when unset."""
    if not settings.API_KEY:
        return
    if x_api_key != settings.API_KEY:
        raise HTTPException(status_code=401, detail="Invalid API key")
