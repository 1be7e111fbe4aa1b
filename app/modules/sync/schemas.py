from pydantic import Field
from typing import Any, Dict, List, Literal
from app.core.schemas import CamelModel

SyncKind = Literal["grade", "attendance", "evaluation"]


class SyncItem(CamelModel):
    kind: SyncKind
    client_id: str = Field(min_length=1)
    payload: Dict[str, Any]


class SyncRequest(CamelModel):
    items: List[SyncItem]


class SyncError(CamelModel):
    client_id: str
    error: str


class SyncedItem(CamelModel):
    client_id: str
    id: str


class SyncResult(CamelModel):
    success: bool = True
    synced: int = 0
    failed: int = 0
    results: List[SyncedItem] = []  # server id saved for each synced clientId
    errors: List[SyncError] = []
