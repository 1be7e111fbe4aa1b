from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.reports.schemas import ReportCard
from app.modules.reports.service import ReportService
from app.core.dependencies import require_permission
from app.core.schemas import ACADEMIC_YEAR_REGEX
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/reports", tags=["reports"])


def get_report_service(supabase: Client = Depends(get_supabase)) -> ReportService:
    return ReportService(supabase)


@router.get("/students/{student_id}", response_model=ReportCard)
async def get_report_card(
    student_id: str,
    term: int = Query(..., ge=1, le=3),
    academic_year: str = Query(..., alias="academicYear", pattern=ACADEMIC_YEAR_REGEX),
    user_data: Dict = Depends(require_permission("reports:view")),
    service: ReportService = Depends(get_report_service)
):
    """Term report card: subject scores and positions, class position, roll number, attendance and evaluation"""
    return service.get_report_card(student_id, term, academic_year)
