import logging
from datetime import datetime, timezone
from supabase import Client
from app.modules.teachers.schemas import (
    TeacherCreate, TeacherUpdate, TeacherResponse, TeacherPerformance
)
from app.config.settings import settings
from app.core.errors import format_error, is_not_found, to_http_exception
from typing import Any, Dict, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

TEACHER_ROLES = ["class_teacher", "subject_teacher"]


def primary_role(is_class_teacher: bool, is_subject_teacher: bool) -> str:
    """Primary role used for routing; class teacher wins when both flags are set"""
    return "class_teacher" if is_class_teacher else "subject_teacher"


def performance_score(performance: Dict[str, Any]) -> int:
    """Completion score in percent: evaluations and attendance weigh 50 each, grading weighs 100."""
    score = 0.0
    total_tasks = 0
    if performance.get("is_class_teacher"):
        if performance.get("evaluations_total"):
            score += performance["evaluations_done"] / performance["evaluations_total"] * 50
            total_tasks += 50
        if performance.get("attendance_total"):
            score += performance["attendance_entered"] / performance["attendance_total"] * 50
            total_tasks += 50
    if performance.get("is_subject_teacher"):
        if performance.get("subjects_total"):
            score += performance["subjects_graded"] / performance["subjects_total"] * 100
            total_tasks += 100
    return round(score / total_tasks * 100) if total_tasks > 0 else 0


class TeacherService:
    def __init__(self, supabase: Client, admin_client: Optional[Client] = None):
        self.supabase = supabase
        self.admin_client = admin_client

    def list_teachers(self) -> List[TeacherResponse]:
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .in_("role", TEACHER_ROLES)\
                .order("name")\
                .execute()
            return [TeacherResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching teachers: {e}")
            if is_not_found(e):
                return []
            raise to_http_exception(e)

    def _get_row(self, teacher_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("id", teacher_id)\
                .single()\
                .execute()
        except Exception as e:
            if is_not_found(e):
                raise HTTPException(status_code=404, detail="Teacher not found")
            logger.error(f"Error fetching teacher: {e}")
            raise to_http_exception(e)
        if not result.data:
            raise HTTPException(status_code=404, detail="Teacher not found")
        return result.data

    def get_teacher(self, teacher_id: str) -> TeacherResponse:
        return TeacherResponse(**self._get_row(teacher_id))

    def create_teacher(self, data: TeacherCreate) -> TeacherResponse:
        """Create the Supabase Auth account and the users profile; the profile is rolled back with the account"""
        if not data.is_class_teacher and not data.is_subject_teacher:
            raise HTTPException(
                status_code=400,
                detail="Teacher must have at least one role (Class Teacher or Subject Teacher)"
            )
        if self.admin_client is None:
            raise HTTPException(status_code=500, detail="Server configuration error")

        role = primary_role(data.is_class_teacher, data.is_subject_teacher)

        try:
            auth_response = self.admin_client.auth.admin.create_user({
                "email": data.email,
                "password": data.password,
                "email_confirm": False,
            })
        except Exception as e:
            logger.error(f"Error creating auth user for teacher: {e}")
            raise HTTPException(status_code=400, detail=format_error(e) or "Failed to create user account")
        if not auth_response or not auth_response.user:
            raise HTTPException(status_code=500, detail="Failed to create user account")
        auth_user_id = auth_response.user.id

        try:
            result = self.admin_client.table("users").insert({
                "auth_user_id": auth_user_id,
                "email": data.email,
                "name": data.name,
                "role": role,
                "is_class_teacher": data.is_class_teacher,
                "is_subject_teacher": data.is_subject_teacher,
                "phone": data.phone or None,
                "is_active": True,
                "email_verified": False,
                "password_change_required": True,
            }).execute()
            if not result.data:
                raise Exception("Failed to create user profile")
        except Exception as e:
            logger.error(f"Error creating teacher profile, removing auth user {auth_user_id}: {e}")
            try:
                self.admin_client.auth.admin.delete_user(auth_user_id)
            except Exception as cleanup_error:
                logger.error(f"Failed to remove auth user {auth_user_id}: {cleanup_error}")
            raise HTTPException(status_code=500, detail=format_error(e))

        try:
            self.admin_client.auth.admin.invite_user_by_email(
                data.email,
                {
                    "redirect_to": f"{settings.app_url.rstrip('/')}/auth/callback",
                    "data": {"name": data.name, "role": role},
                }
            )
        except Exception as e:
            # Account is usable; the admin can resend verification later
            logger.warning(f"Failed to send invite email to {data.email}: {e}")

        return TeacherResponse(**result.data[0])

    def update_teacher(self, teacher_id: str, data: TeacherUpdate) -> TeacherResponse:
        try:
            update_data = data.model_dump(mode="json", exclude_unset=True)
            if "phone" in update_data:
                update_data["phone"] = update_data["phone"] or None

            if "is_class_teacher" in update_data or "is_subject_teacher" in update_data:
                current = self._get_row(teacher_id)
                is_class_teacher = update_data.get("is_class_teacher", current.get("is_class_teacher") or False)
                is_subject_teacher = update_data.get("is_subject_teacher", current.get("is_subject_teacher") or False)
                update_data["role"] = primary_role(is_class_teacher, is_subject_teacher)

            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

            result = self.supabase.table("users")\
                .update(update_data)\
                .eq("id", teacher_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Teacher not found")
            return TeacherResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating teacher: {e}")
            raise to_http_exception(e)

    def delete_teacher(self, teacher_id: str, current_user_id: str) -> None:
        """Delete the auth account (best effort) and the users row"""
        if teacher_id == current_user_id:
            raise HTTPException(status_code=400, detail="You cannot delete your own account")
        if self.admin_client is None:
            raise HTTPException(status_code=500, detail="Server configuration error")

        teacher = self._get_row(teacher_id)
        auth_user_id = teacher.get("auth_user_id")
        if auth_user_id:
            try:
                self.admin_client.auth.admin.delete_user(auth_user_id)
            except Exception as e:
                # users.auth_user_id cascades when the row is gone; continue with the profile
                logger.error(f"Failed to delete user from auth: {e}")

        try:
            self.supabase.table("users").delete().eq("id", teacher_id).execute()
        except Exception as e:
            logger.error(f"Error deleting teacher: {e}")
            raise to_http_exception(e)

    def _count(self, table: str, **filters) -> int:
        query = self.supabase.table(table).select("id", count="exact")
        for column, value in filters.items():
            query = query.eq(column, value)
        result = query.execute()
        return result.count or 0

    def get_performance(self, teacher_id: str) -> TeacherPerformance:
        teacher = self._get_row(teacher_id)
        is_class_teacher = bool(teacher.get("is_class_teacher"))
        is_subject_teacher = bool(teacher.get("is_subject_teacher"))
        performance: Dict[str, Any] = {
            "teacher_id": teacher_id,
            "is_class_teacher": is_class_teacher,
            "is_subject_teacher": is_subject_teacher,
        }
        try:
            if is_class_teacher:
                classes = self.supabase.table("classes")\
                    .select("id, name, student_count")\
                    .eq("class_teacher_id", teacher_id)\
                    .execute()
                if classes.data:
                    assigned_class = classes.data[0]
                    performance["assigned_class"] = assigned_class["name"]
                    performance["total_students"] = assigned_class.get("student_count") or 0
                    students_count = self._count("students", class_id=assigned_class["id"], status="active")
                    performance["evaluations_done"] = self._count("class_teacher_evaluations", teacher_id=teacher_id)
                    performance["evaluations_total"] = students_count
                    performance["attendance_entered"] = self._count("attendance", teacher_id=teacher_id)
                    performance["attendance_total"] = students_count

            if is_subject_teacher:
                assignments = self.supabase.table("subject_assignments")\
                    .select("subject_id")\
                    .eq("teacher_id", teacher_id)\
                    .execute()
                subject_ids = {a["subject_id"] for a in assignments.data or []}
                graded = self.supabase.table("grades")\
                    .select("subject_id")\
                    .eq("teacher_id", teacher_id)\
                    .execute()
                graded_ids = {g["subject_id"] for g in graded.data or []} & subject_ids
                performance["assigned_subjects"] = len(subject_ids)
                performance["subjects_graded"] = len(graded_ids)
                performance["subjects_total"] = len(subject_ids)
        except Exception as e:
            logger.error(f"Error fetching teacher performance: {e}")
            raise to_http_exception(e)

        performance["performance_score"] = performance_score(performance)
        return TeacherPerformance(**performance)
