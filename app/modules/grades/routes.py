from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.grades.schemas import GradeUpsert, GradeResponse, GradeWithDetails
from app.modules.grades.service import GradeService
from app.core.dependencies import require_permission
from supabase import Client
from typing import Dict, List, Optional, Union

router = APIRouter(prefix="/grades", tags=["grades"])


def get_grade_service(supabase: Client = Depends(get_supabase)) -> GradeService:
    return GradeService(supabase)


@router.get("", response_model=Union[List[GradeWithDetails], List[GradeResponse]])
async def list_grades(
    student_id: Optional[str] = Query(None, alias="studentId"),
    subject_id: Optional[str] = Query(None, alias="subjectId"),
    class_id: Optional[str] = Query(None, alias="classId"),
    teacher_id: Optional[str] = Query(None, alias="teacherId"),
    term: Optional[int] = Query(None, ge=1, le=3),
    academic_year: Optional[str] = Query(None, alias="academicYear"),
    with_details: bool = Query(False, alias="withDetails"),
    user_data: Dict = Depends(require_permission("grades:read")),
    service: GradeService = Depends(get_grade_service)
):
    """List grades. withDetails=true adds names, class score, exam score, total and grade code."""
    filters = dict(
        student_id=student_id, subject_id=subject_id, class_id=class_id,
        teacher_id=teacher_id, term=term, academic_year=academic_year,
    )
    if with_details:
        return service.list_grades_with_details(**filters)
    return service.list_grades(**filters)


@router.post("", response_model=GradeResponse)
async def upsert_grade(
    data: GradeUpsert,
    user_data: Dict = Depends(require_permission("grades:enter")),
    service: GradeService = Depends(get_grade_service)
):
    """Create or update a grade (unique per student, subject, term and academic year)"""
    return service.upsert_grade(data, user_data["id"])


@router.delete("/{grade_id}")
async def delete_grade(
    grade_id: str,
    user_data: Dict = Depends(require_permission("grades:delete")),
    service: GradeService = Depends(get_grade_service)
):
    service.delete_grade(grade_id)
    return {"success": True}
