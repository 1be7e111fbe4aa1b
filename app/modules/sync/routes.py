from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.sync.schemas import SyncRequest, SyncResult
from app.modules.sync.service import SyncService
from app.core.dependencies import get_access_cache, get_current_user, get_user_permissions
from supabase import Client
from typing import Any, Dict

router = APIRouter(prefix="/sync", tags=["sync"])


def get_sync_service(supabase: Client = Depends(get_supabase)) -> SyncService:
    return SyncService(supabase)


@router.post("", response_model=SyncResult)
async def sync(
    request: SyncRequest,
    user_data: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
    cache: Dict[str, Any] = Depends(get_access_cache),
    service: SyncService = Depends(get_sync_service)
):
    """Apply queued offline writes in order. One failing item does not stop the rest."""
    permissions = get_user_permissions(user_data, supabase, cache)
    return service.replay(request.items, user_data, permissions)
