from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.analytics.schemas import (
    AnalyticsOverview, StudentPerformance, SubjectPerformance, ClassPerformance, BeceAnalytics
)
from app.modules.analytics.service import AnalyticsService
from app.core.dependencies import require_permission
from app.core.schemas import ACADEMIC_YEAR_REGEX
from supabase import Client
from typing import Dict, List, Optional

router = APIRouter(prefix="/analytics", tags=["analytics"])


def get_analytics_service(supabase: Client = Depends(get_supabase)) -> AnalyticsService:
    return AnalyticsService(supabase)


@router.get("/overview", response_model=AnalyticsOverview)
async def get_overview(
    academic_year: Optional[str] = Query(None, alias="academicYear", pattern=ACADEMIC_YEAR_REGEX),
    term: Optional[int] = Query(None, ge=1, le=3),
    teacher_id: Optional[str] = Query(None, alias="teacherId"),
    class_id: Optional[str] = Query(None, alias="classId"),
    user_data: Dict = Depends(require_permission("reports:analytics")),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """Dashboard totals, pass rate, grade distribution, term trend and top subjects"""
    return service.get_overview(academic_year, term, teacher_id, class_id)


@router.get("/students", response_model=List[StudentPerformance])
async def get_student_performance(
    academic_year: Optional[str] = Query(None, alias="academicYear", pattern=ACADEMIC_YEAR_REGEX),
    term: Optional[int] = Query(None, ge=1, le=3),
    class_id: Optional[str] = Query(None, alias="classId"),
    student_id: Optional[str] = Query(None, alias="studentId"),
    user_data: Dict = Depends(require_permission("reports:analytics")),
    service: AnalyticsService = Depends(get_analytics_service)
):
    return service.get_student_performance(academic_year, term, class_id, student_id)


@router.get("/subjects", response_model=List[SubjectPerformance])
async def get_subject_performance(
    academic_year: Optional[str] = Query(None, alias="academicYear", pattern=ACADEMIC_YEAR_REGEX),
    term: Optional[int] = Query(None, ge=1, le=3),
    class_id: Optional[str] = Query(None, alias="classId"),
    subject_id: Optional[str] = Query(None, alias="subjectId"),
    user_data: Dict = Depends(require_permission("reports:analytics")),
    service: AnalyticsService = Depends(get_analytics_service)
):
    return service.get_subject_performance(academic_year, term, class_id, subject_id)


@router.get("/classes/{class_id}", response_model=ClassPerformance)
async def get_class_performance(
    class_id: str,
    academic_year: Optional[str] = Query(None, alias="academicYear", pattern=ACADEMIC_YEAR_REGEX),
    term: Optional[int] = Query(None, ge=1, le=3),
    user_data: Dict = Depends(require_permission("reports:analytics")),
    service: AnalyticsService = Depends(get_analytics_service)
):
    return service.get_class_performance(class_id, academic_year, term)


@router.get("/bece", response_model=BeceAnalytics)
async def get_bece_analytics(
    academic_year: str = Query(..., alias="academicYear", pattern=ACADEMIC_YEAR_REGEX),
    user_data: Dict = Depends(require_permission("reports:analytics")),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """BECE aggregates (lower is better), aggregate bands and the ten best students"""
    return service.get_bece_analytics(academic_year)
