"""
Native / item catalog API router.
"""
import logging
import threading
from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from backend.api.models import GroupListing, RecordModel, ReloadRequest
from backend.api.security import require_api_key
from backend.core.config import settings

from nativedb.catalog import (
    CatalogConfig, CatalogSession, IngestError, Record, SourceKind,
    UnknownSourceError, export_csv, load_config, load_payload,
)
from nativedb.catalog.loader import load_configured_source
from nativedb.catalog.report import generate_report_filename

router = APIRouter(tags=["Catalog"])
logger = logging.getLogger(__name__)


@lru_cache
def get_catalog_config() -> CatalogConfig:
    """Source config, loaded once."""
    return load_config(settings.CONFIG_PATH)


_catalog_session: CatalogSession | None = None
_session_lock = threading.Lock()


def get_session() -> CatalogSession:
    """The process-wide session, created once on first use."""
    global _catalog_session
    if _catalog_session is None:
        with _session_lock:
            if _catalog_session is None:
                config = get_catalog_config()
                _catalog_session = CatalogSession(
                    hidden_groups=config.settings.hidden_groups,
                    fields=config.settings.search_fields,
                )
    return _catalog_session


def _loaded(session: CatalogSession) -> CatalogSession:
    if not session.is_loaded:
        raise HTTPException(status_code=503, detail="Catalog not loaded. POST /api/catalog/reload first.")
    return session


def _record_out(record: Record) -> RecordModel:
    return RecordModel(**record.to_dict(), signature=record.signature)


# ============== Status / Reload ==============

@router.get("/api/catalog/status")
def catalog_status(session: CatalogSession = Depends(get_session)):
    """What is loaded, from where, and how big it is."""
    status = session.status()
    status["sources"] = sorted(get_catalog_config().sources)
    return status


@router.post("/api/catalog/reload", dependencies=[Depends(require_api_key)])
def reload_catalog(
    request: ReloadRequest,
    session: CatalogSession = Depends(get_session),
    config: CatalogConfig = Depends(get_catalog_config),
):
    """
    Rebuild the catalog from a configured source, a path/URL, or an inline payload.

    The previous catalog stays active if the new one fails to load.
    """
    try:
        if request.source:
            source, payload = load_configured_source(request.source, config)
            kind, label = source.kind, source.name
        elif request.location or request.payload is not None:
            if not request.kind:
                raise HTTPException(status_code=400, detail="kind is required with location or payload")
            kind = SourceKind.parse(request.kind)
            if request.location:
                payload = load_payload(request.location, kind, config.settings.fetch_timeout_seconds)
                label = request.location
            else:
                payload, label = request.payload, "inline"
        else:
            raise HTTPException(status_code=400, detail="Provide source, location, or payload")

        session.load(kind, payload, source=label)
    except UnknownSourceError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except IngestError as e:
        raise HTTPException(status_code=422, detail=f"Could not load catalog: {e}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"success": True, "status": session.status()}


# ============== Browse / Search ==============

@router.get("/api/catalog/groups")
def list_catalog_groups(
    q: str = Query(""),
    session: CatalogSession = Depends(get_session),
):
    """Group picker: labels matching q by name or by any member key."""
    session = _loaded(session)
    groups = session.list_groups(q)
    counts = session.summarize()["by_group"]
    return {
        "groups": [{"group": g, "count": counts.get(g, 0)} for g in groups],
        "count": len(groups),
        "query": q,
    }


@router.get("/api/catalog/groups/{group}", response_model=GroupListing)
def list_group_records(
    group: str,
    q: str = Query(""),
    session: CatalogSession = Depends(get_session),
):
    """Records of one group, filtered by q, in source order."""
    session = _loaded(session)
    if group not in session.index.by_group:
        raise HTTPException(status_code=404, detail=f"Group not found: {group}")
    records = session.list_records_in_group(group, q)
    return GroupListing(group=group, records=[_record_out(r) for r in records], count=len(records))


@router.get("/api/catalog/records")
def search_records(
    q: str = Query(""),
    session: CatalogSession = Depends(get_session),
):
    """Global search across all groups, grouped by group label."""
    session = _loaded(session)
    grouped = session.list_all_records(q)
    return {
        "results": [
            GroupListing(group=g, records=[_record_out(r) for r in records], count=len(records))
            for g, records in grouped
        ],
        "count": sum(len(records) for _, records in grouped),
        "query": q,
    }


@router.get("/api/catalog/export.csv")
def export_records_csv(
    q: str = Query(""),
    session: CatalogSession = Depends(get_session),
):
    """Download the global search result as CSV."""
    session = _loaded(session)
    content = export_csv(session.list_all_records(q))
    filename = generate_report_filename()
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/api/catalog/records/{key}", response_model=RecordModel)
def get_record(key: str, session: CatalogSession = Depends(get_session)):
    """Detail view for one record."""
    session = _loaded(session)
    record = session.get_by_key(key)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Record not found: {key}")
    return _record_out(record)
