import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.api.routers import catalog_router
from backend.api.routers.catalog import get_catalog_config, get_session
from backend.core.config import settings

from nativedb.catalog import IngestError, UnknownSourceError
from nativedb.catalog.loader import load_configured_source

logger = logging.getLogger(__name__)


def load_default_source():
    """Load NATIVEDB_DEFAULT_SOURCE into the session, if one is configured."""
    if not settings.DEFAULT_SOURCE:
        return
    try:
        source, payload = load_configured_source(settings.DEFAULT_SOURCE, get_catalog_config())
        get_session().load(source.kind, payload, source=source.name)
    except (IngestError, UnknownSourceError, FileNotFoundError) as e:
        logger.warning(f"Failed to load default source {settings.DEFAULT_SOURCE}: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - load the default catalog on startup."""
    load_default_source()

    yield  # Application runs here


app = FastAPI(title="Native Catalog Browser", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(catalog_router)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "version": "1.0.0"}
