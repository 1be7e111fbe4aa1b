from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.permissions.schemas import (
    PermissionResponse, SetUserPermissionsRequest, AddUserPermissionRequest
)
from app.modules.permissions.service import PermissionService
from app.core.dependencies import get_current_user, require_permission, require_self_or_admin
from supabase import Client
from typing import Dict, List

router = APIRouter(prefix="/permissions", tags=["permissions"])


def get_permission_service(supabase: Client = Depends(get_supabase)) -> PermissionService:
    return PermissionService(supabase)


@router.get("", response_model=List[PermissionResponse])
async def list_permissions(
    user_data: Dict = Depends(require_permission("permissions:read")),
    service: PermissionService = Depends(get_permission_service)
):
    """Permission catalog ordered by category and name"""
    return service.list_permissions()


@router.get("/user/{user_id}", response_model=List[str])
async def get_user_permissions(
    user_id: str,
    user_data: Dict = Depends(get_current_user),
    service: PermissionService = Depends(get_permission_service)
):
    """Permission codes explicitly granted to a user (the user themself or an admin)"""
    require_self_or_admin(user_id, user_data)
    return service.get_user_permission_codes(user_id)


@router.patch("/user/{user_id}", response_model=List[str])
async def set_user_permissions(
    user_id: str,
    request: SetUserPermissionsRequest,
    user_data: Dict = Depends(require_permission("permissions:manage")),
    service: PermissionService = Depends(get_permission_service)
):
    """Replace a user's permissions; returns the codes that were granted"""
    return service.set_user_permissions(user_id, request.permission_codes)


@router.post("/user/{user_id}")
async def add_user_permission(
    user_id: str,
    request: AddUserPermissionRequest,
    user_data: Dict = Depends(require_permission("permissions:manage")),
    service: PermissionService = Depends(get_permission_service)
):
    service.add_user_permission(user_id, request.permission_code)
    return {"success": True}


@router.delete("/user/{user_id}/{permission_code}")
async def remove_user_permission(
    user_id: str,
    permission_code: str,
    user_data: Dict = Depends(require_permission("permissions:manage")),
    service: PermissionService = Depends(get_permission_service)
):
    service.remove_user_permission(user_id, permission_code)
    return {"success": True}
