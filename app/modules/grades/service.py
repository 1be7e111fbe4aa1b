import logging
from datetime import datetime, timezone
from supabase import Client
from app.modules.grades.schemas import GradeUpsert, GradeResponse, GradeWithDetails
from app.modules.settings.service import load_grading_system
from app.modules.students.service import student_full_name
from app.core.errors import is_not_found, to_http_exception
from app.core.grading import calculate_grade_details
from typing import Any, Dict, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

SCORE_COLUMNS = ("project", "test1", "test2", "group_work", "exam")


def rows_by_id(supabase: Client, table: str, columns: str, ids: List[str]) -> Dict[str, Dict[str, Any]]:
    if not ids:
        return {}
    result = supabase.table(table).select(columns).in_("id", ids).execute()
    return {row["id"]: row for row in result.data or []}


class GradeService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def query_rows(
        self,
        student_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        class_id: Optional[str] = None,
        teacher_id: Optional[str] = None,
        term: Optional[int] = None,
        academic_year: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Raw grade rows, newest first"""
        query = self.supabase.table("grades").select("*")
        filters = {
            "student_id": student_id,
            "subject_id": subject_id,
            "class_id": class_id,
            "teacher_id": teacher_id,
            "term": term,
            "academic_year": academic_year,
        }
        for column, value in filters.items():
            if value is not None and value != "":
                query = query.eq(column, value)
        result = query.order("created_at", desc=True).execute()
        return result.data or []

    def list_grades(self, **filters) -> List[GradeResponse]:
        try:
            return [GradeResponse(**row) for row in self.query_rows(**filters)]
        except Exception as e:
            logger.error(f"Error fetching grades: {e}")
            if is_not_found(e):
                return []
            raise to_http_exception(e)

    def list_grades_with_details(self, **filters) -> List[GradeWithDetails]:
        """Grades joined with student, subject and class names plus computed scores and grade code"""
        try:
            rows = self.query_rows(**filters)
            if not rows:
                return []
            students = rows_by_id(
                self.supabase, "students", "id, first_name, middle_name, last_name",
                sorted({r["student_id"] for r in rows})
            )
            subjects = rows_by_id(self.supabase, "subjects", "id, name", sorted({r["subject_id"] for r in rows}))
            classes = rows_by_id(
                self.supabase, "classes", "id, name", sorted({r["class_id"] for r in rows if r.get("class_id")})
            )
            grading_system = load_grading_system(self.supabase)
        except Exception as e:
            logger.error(f"Error fetching grades with details: {e}")
            raise to_http_exception(e)

        detailed = []
        for row in rows:
            student = students.get(row["student_id"])
            subject = subjects.get(row["subject_id"])
            class_row = classes.get(row.get("class_id"))
            detailed.append(GradeWithDetails(
                **row,
                **calculate_grade_details(row, grading_system),
                student_name=student_full_name(student) if student else None,
                subject_name=subject["name"] if subject else None,
                class_name=class_row["name"] if class_row else None,
            ))
        return detailed

    def upsert_grade(self, data: GradeUpsert, current_user_id: str) -> GradeResponse:
        """Create or update the grade for a student, subject, term and academic year"""
        row = data.model_dump(mode="json")
        row["teacher_id"] = row.get("teacher_id") or current_user_id
        for column in SCORE_COLUMNS:
            row[column] = row.get(column) or 0
        try:
            existing = self.supabase.table("grades")\
                .select("id")\
                .eq("student_id", data.student_id)\
                .eq("subject_id", data.subject_id)\
                .eq("term", data.term)\
                .eq("academic_year", data.academic_year)\
                .limit(1)\
                .execute()
            if existing.data:
                row["updated_at"] = datetime.now(timezone.utc).isoformat()
                result = self.supabase.table("grades")\
                    .update(row)\
                    .eq("id", existing.data[0]["id"])\
                    .execute()
            else:
                result = self.supabase.table("grades").insert(row).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save grade")
            return GradeResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error saving grade: {e}")
            raise to_http_exception(e)

    def delete_grade(self, grade_id: str) -> None:
        try:
            self.supabase.table("grades").delete().eq("id", grade_id).execute()
        except Exception as e:
            logger.error(f"Error deleting grade: {e}")
            raise to_http_exception(e)
