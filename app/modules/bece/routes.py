from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.bece.schemas import (
    BeceResultCreate, BeceResultUpdate, BeceResultResponse, StudentBeceResults
)
from app.modules.bece.service import BeceService
from app.core.dependencies import require_permission
from supabase import Client
from typing import Dict, List, Optional, Union

router = APIRouter(prefix="/bece-results", tags=["bece"])


def get_bece_service(supabase: Client = Depends(get_supabase)) -> BeceService:
    return BeceService(supabase)


@router.get("", response_model=List[BeceResultResponse])
async def list_bece_results(
    academic_year: Optional[str] = Query(None, alias="academicYear"),
    user_data: Dict = Depends(require_permission("bece:read")),
    service: BeceService = Depends(get_bece_service)
):
    return service.list_results(academic_year)


@router.get("/grouped", response_model=List[StudentBeceResults])
async def list_bece_results_grouped(
    academic_year: Optional[str] = Query(None, alias="academicYear"),
    user_data: Dict = Depends(require_permission("bece:read")),
    service: BeceService = Depends(get_bece_service)
):
    """Results grouped by student, with each student's aggregate"""
    return service.list_grouped(academic_year)


@router.post("", response_model=Union[List[BeceResultResponse], BeceResultResponse], status_code=201)
async def create_bece_results(
    body: Union[List[BeceResultCreate], BeceResultCreate],
    user_data: Dict = Depends(require_permission("bece:enter")),
    service: BeceService = Depends(get_bece_service)
):
    """Create a single result, or several when the body is a list"""
    if isinstance(body, list):
        return service.create_results(body)
    return service.create_result(body)


@router.get("/student/{student_id}", response_model=StudentBeceResults)
async def get_student_bece_results(
    student_id: str,
    academic_year: Optional[str] = Query(None, alias="academicYear"),
    user_data: Dict = Depends(require_permission("bece:read")),
    service: BeceService = Depends(get_bece_service)
):
    return service.list_for_student(student_id, academic_year)


@router.delete("/student/{student_id}")
async def delete_student_bece_results(
    student_id: str,
    academic_year: Optional[str] = Query(None, alias="academicYear"),
    user_data: Dict = Depends(require_permission("bece:delete")),
    service: BeceService = Depends(get_bece_service)
):
    service.delete_for_student(student_id, academic_year)
    return {"success": True}


@router.patch("/{result_id}", response_model=BeceResultResponse)
async def update_bece_result(
    result_id: str,
    data: BeceResultUpdate,
    user_data: Dict = Depends(require_permission("bece:enter")),
    service: BeceService = Depends(get_bece_service)
):
    return service.update_result(result_id, data)


@router.delete("/{result_id}")
async def delete_bece_result(
    result_id: str,
    user_data: Dict = Depends(require_permission("bece:delete")),
    service: BeceService = Depends(get_bece_service)
):
    service.delete_result(result_id)
    return {"success": True}
