import logging
from datetime import datetime, timezone
from supabase import Client
from app.modules.attendance.schemas import AttendanceUpsert, AttendanceResponse
from app.core.errors import is_not_found, to_http_exception
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


def attendance_percentage(present_days: int, total_days: int) -> float:
    if not total_days:
        return 0.0
    return round(present_days / total_days * 100, 2)


class AttendanceService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_attendance(
        self,
        student_id: Optional[str] = None,
        term: Optional[int] = None,
        academic_year: Optional[str] = None,
        class_id: Optional[str] = None,
    ) -> List[AttendanceResponse]:
        """Attendance summaries; class_id filters through the class's current roster"""
        try:
            query = self.supabase.table("attendance").select("*")
            if student_id:
                query = query.eq("student_id", student_id)
            if term is not None:
                query = query.eq("term", term)
            if academic_year:
                query = query.eq("academic_year", academic_year)
            if class_id:
                roster = self.supabase.table("students")\
                    .select("id")\
                    .eq("class_id", class_id)\
                    .execute()
                student_ids = [s["id"] for s in roster.data or []]
                if not student_ids:
                    return []
                query = query.in_("student_id", student_ids)
            result = query.order("created_at", desc=True).execute()
            return [AttendanceResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching attendance: {e}")
            if is_not_found(e):
                return []
            raise to_http_exception(e)

    def upsert_attendance(self, data: AttendanceUpsert, current_user_id: str) -> AttendanceResponse:
        """Create or update the term summary of a student (unique per student, term and academic year)"""
        row = data.model_dump(mode="json")
        row["teacher_id"] = current_user_id
        row["attendance_percentage"] = attendance_percentage(data.present_days, data.total_days)
        try:
            existing = self.supabase.table("attendance")\
                .select("id")\
                .eq("student_id", data.student_id)\
                .eq("term", data.term)\
                .eq("academic_year", data.academic_year)\
                .limit(1)\
                .execute()
            if existing.data:
                row["updated_at"] = datetime.now(timezone.utc).isoformat()
                result = self.supabase.table("attendance")\
                    .update(row)\
                    .eq("id", existing.data[0]["id"])\
                    .execute()
            else:
                result = self.supabase.table("attendance").insert(row).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save attendance")
            return AttendanceResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error saving attendance: {e}")
            raise to_http_exception(e)

    def delete_attendance(self, attendance_id: str) -> None:
        try:
            self.supabase.table("attendance").delete().eq("id", attendance_id).execute()
        except Exception as e:
            logger.error(f"Error deleting attendance: {e}")
            raise to_http_exception(e)
