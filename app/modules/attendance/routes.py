from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.attendance.schemas import AttendanceUpsert, AttendanceResponse
from app.modules.attendance.service import AttendanceService
from app.core.dependencies import require_permission
from supabase import Client
from typing import Dict, List, Optional

router = APIRouter(prefix="/attendance", tags=["attendance"])


def get_attendance_service(supabase: Client = Depends(get_supabase)) -> AttendanceService:
    return AttendanceService(supabase)


@router.get("", response_model=List[AttendanceResponse])
async def list_attendance(
    student_id: Optional[str] = Query(None, alias="studentId"),
    term: Optional[int] = Query(None, ge=1, le=3),
    academic_year: Optional[str] = Query(None, alias="academicYear"),
    class_id: Optional[str] = Query(None, alias="classId"),
    user_data: Dict = Depends(require_permission("attendance:read")),
    service: AttendanceService = Depends(get_attendance_service)
):
    return service.list_attendance(
        student_id=student_id, term=term, academic_year=academic_year, class_id=class_id
    )


@router.post("", response_model=AttendanceResponse)
async def upsert_attendance(
    data: AttendanceUpsert,
    user_data: Dict = Depends(require_permission("attendance:enter")),
    service: AttendanceService = Depends(get_attendance_service)
):
    """Create or update a term attendance summary"""
    return service.upsert_attendance(data, user_data["id"])


@router.delete("/{attendance_id}")
async def delete_attendance(
    attendance_id: str,
    user_data: Dict = Depends(require_permission("attendance:delete")),
    service: AttendanceService = Depends(get_attendance_service)
):
    service.delete_attendance(attendance_id)
    return {"success": True}
