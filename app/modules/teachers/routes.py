from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase, get_optional_supabase_admin
from app.modules.teachers.schemas import (
    TeacherCreate, TeacherUpdate, TeacherResponse, TeacherCreateResponse, TeacherPerformance
)
from app.modules.teachers.service import TeacherService
from app.core.dependencies import get_current_user, require_admin, require_permission, require_self_or_admin
from supabase import Client
from typing import Dict, List, Optional

router = APIRouter(prefix="/teachers", tags=["teachers"])


def get_teacher_service(
    supabase: Client = Depends(get_supabase),
    admin_client: Optional[Client] = Depends(get_optional_supabase_admin),
) -> TeacherService:
    return TeacherService(supabase, admin_client)


@router.get("", response_model=List[TeacherResponse])
async def list_teachers(
    user_data: Dict = Depends(get_current_user),
    service: TeacherService = Depends(get_teacher_service)
):
    """List all teachers ordered by name"""
    return service.list_teachers()


@router.post("/create", response_model=TeacherCreateResponse, status_code=201)
async def create_teacher(
    teacher_data: TeacherCreate,
    user_data: Dict = Depends(require_admin),
    service: TeacherService = Depends(get_teacher_service)
):
    """Create a teacher account (admin only). The teacher must change the password on first login."""
    return {"success": True, "user": service.create_teacher(teacher_data)}


@router.get("/performance/{teacher_id}", response_model=TeacherPerformance)
async def get_teacher_performance(
    teacher_id: str,
    user_data: Dict = Depends(get_current_user),
    service: TeacherService = Depends(get_teacher_service)
):
    """Completion of evaluations, attendance and grading for a teacher"""
    require_self_or_admin(teacher_id, user_data)
    return service.get_performance(teacher_id)


@router.get("/{teacher_id}", response_model=TeacherResponse)
async def get_teacher(
    teacher_id: str,
    user_data: Dict = Depends(get_current_user),
    service: TeacherService = Depends(get_teacher_service)
):
    return service.get_teacher(teacher_id)


@router.patch("/{teacher_id}", response_model=TeacherResponse)
async def update_teacher(
    teacher_id: str,
    teacher_data: TeacherUpdate,
    user_data: Dict = Depends(require_permission("teachers:update")),
    service: TeacherService = Depends(get_teacher_service)
):
    return service.update_teacher(teacher_id, teacher_data)


@router.delete("/{teacher_id}")
async def delete_teacher(
    teacher_id: str,
    user_data: Dict = Depends(require_admin),
    service: TeacherService = Depends(get_teacher_service)
):
    """Delete a teacher account and profile (admin only)"""
    service.delete_teacher(teacher_id, user_data["id"])
    return {"success": True}
