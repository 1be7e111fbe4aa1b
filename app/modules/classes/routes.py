from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.classes.schemas import (
    ClassCreate, ClassUpdate, ClassResponse, PromotionStatus, PromoteRequest, PromoteResponse,
    GraduateRequest, GraduateResponse, ClassRanking
)
from app.modules.classes.service import ClassService
from app.core.dependencies import require_permission
from app.core.schemas import ACADEMIC_YEAR_REGEX
from supabase import Client
from typing import Dict, List

router = APIRouter(prefix="/classes", tags=["classes"])


def get_class_service(supabase: Client = Depends(get_supabase)) -> ClassService:
    return ClassService(supabase)


@router.get("", response_model=List[ClassResponse])
async def list_classes(
    user_data: Dict = Depends(require_permission("classes:read")),
    service: ClassService = Depends(get_class_service)
):
    """List classes ordered by level, then name"""
    return service.list_classes()


@router.post("", response_model=ClassResponse, status_code=201)
async def create_class(
    data: ClassCreate,
    user_data: Dict = Depends(require_permission("classes:create")),
    service: ClassService = Depends(get_class_service)
):
    return service.create_class(data)


@router.get("/promotions", response_model=List[PromotionStatus])
async def get_promotion_eligibility(
    user_data: Dict = Depends(require_permission("classes:promote")),
    service: ClassService = Depends(get_class_service)
):
    """Which classes may promote now; promotion runs from Basic 8 down to KG 1"""
    return service.get_promotion_eligibility()


@router.get("/teacher/{teacher_id}", response_model=List[ClassResponse])
async def list_classes_by_teacher(
    teacher_id: str,
    user_data: Dict = Depends(require_permission("classes:read")),
    service: ClassService = Depends(get_class_service)
):
    return service.list_by_teacher(teacher_id)


@router.get("/{class_id}", response_model=ClassResponse)
async def get_class(
    class_id: str,
    user_data: Dict = Depends(require_permission("classes:read")),
    service: ClassService = Depends(get_class_service)
):
    return service.get_class(class_id)


@router.patch("/{class_id}", response_model=ClassResponse)
async def update_class(
    class_id: str,
    data: ClassUpdate,
    user_data: Dict = Depends(require_permission("classes:update")),
    service: ClassService = Depends(get_class_service)
):
    return service.update_class(class_id, data)


@router.delete("/{class_id}")
async def delete_class(
    class_id: str,
    user_data: Dict = Depends(require_permission("classes:delete")),
    service: ClassService = Depends(get_class_service)
):
    service.delete_class(class_id)
    return {"success": True}


@router.post("/{class_id}/promote", response_model=PromoteResponse)
async def promote_students(
    class_id: str,
    request: PromoteRequest,
    user_data: Dict = Depends(require_permission("classes:promote")),
    service: ClassService = Depends(get_class_service)
):
    return service.promote_students(class_id, request)


@router.post("/{class_id}/graduate", response_model=GraduateResponse)
async def graduate_class(
    class_id: str,
    request: GraduateRequest,
    user_data: Dict = Depends(require_permission("classes:graduate")),
    service: ClassService = Depends(get_class_service)
):
    """Save BECE results and graduate the active students of a Basic 9 class"""
    return service.graduate_class(class_id, request)


@router.get("/{class_id}/ranking", response_model=ClassRanking)
async def get_class_ranking(
    class_id: str,
    term: int = Query(..., ge=1, le=3),
    academic_year: str = Query(..., alias="academicYear", pattern=ACADEMIC_YEAR_REGEX),
    user_data: Dict = Depends(require_permission("reports:view")),
    service: ClassService = Depends(get_class_service)
):
    return service.get_ranking(class_id, term, academic_year)
