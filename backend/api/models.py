"""
Pydantic request/response models for the API.
"""
from pydantic import BaseModel
from typing import Any, Dict, List, Optional


# ============== Records ==============

class ParameterModel(BaseModel):
    type: str
    name: str


class RecordModel(BaseModel):
    key: str
    hash: str
    secondary_hash: str = ""
    comment: str = ""
    parameters: List[ParameterModel] = []
    return_type: str = ""
    groups: List[str]
    extra: Dict[str, Any] = {}
    signature: str = ""


class GroupListing(BaseModel):
    group: str
    records: List[RecordModel]
    count: int


# ============== Reload ==============

class ReloadRequest(BaseModel):
    """
    Request model for reloading the catalog.

    Exactly one of source, location or payload should be given:
    - source: a name from catalog_sources.json
    - location: a path or URL, read with the given kind
    - payload: the source content inline (JSON value, or header text)
    """
    source: Optional[str] = None
    location: Optional[str] = None
    kind: Optional[str] = None
    payload: Optional[Any] = None
