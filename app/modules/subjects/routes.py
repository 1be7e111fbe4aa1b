from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.subjects.schemas import SubjectCreate, SubjectUpdate, SubjectResponse, LevelCategory
from app.modules.subjects.service import SubjectService
from app.core.dependencies import require_permission
from supabase import Client
from typing import Dict, List, Optional

router = APIRouter(prefix="/subjects", tags=["subjects"])


def get_subject_service(supabase: Client = Depends(get_supabase)) -> SubjectService:
    return SubjectService(supabase)


@router.get("", response_model=List[SubjectResponse])
async def list_subjects(
    level_category: Optional[LevelCategory] = Query(None, alias="levelCategory"),
    user_data: Dict = Depends(require_permission("subjects:read")),
    service: SubjectService = Depends(get_subject_service)
):
    return service.list_subjects(level_category)


@router.post("", response_model=SubjectResponse, status_code=201)
async def create_subject(
    data: SubjectCreate,
    user_data: Dict = Depends(require_permission("subjects:create")),
    service: SubjectService = Depends(get_subject_service)
):
    return service.create_subject(data)


@router.get("/{subject_id}", response_model=SubjectResponse)
async def get_subject(
    subject_id: str,
    user_data: Dict = Depends(require_permission("subjects:read")),
    service: SubjectService = Depends(get_subject_service)
):
    return service.get_subject(subject_id)


@router.patch("/{subject_id}", response_model=SubjectResponse)
async def update_subject(
    subject_id: str,
    data: SubjectUpdate,
    user_data: Dict = Depends(require_permission("subjects:update")),
    service: SubjectService = Depends(get_subject_service)
):
    return service.update_subject(subject_id, data)


@router.delete("/{subject_id}")
async def delete_subject(
    subject_id: str,
    user_data: Dict = Depends(require_permission("subjects:delete")),
    service: SubjectService = Depends(get_subject_service)
):
    service.delete_subject(subject_id)
    return {"success": True}
