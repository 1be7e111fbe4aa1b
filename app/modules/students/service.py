import logging
import re
from datetime import date, datetime, timezone
from supabase import Client
from pydantic import ValidationError
from app.modules.students.schemas import (
    StudentCreate, StudentUpdate, StudentResponse, StudentImportRow,
    StudentImportResponse, StudentImportError
)
from app.config.settings import settings
from app.core.errors import format_error, format_supabase_error, is_not_found, to_http_exception
from typing import Any, Dict, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


def student_full_name(row: Dict[str, Any]) -> str:
    parts = [row.get("first_name"), row.get("middle_name"), row.get("last_name")]
    return " ".join(p for p in parts if p)


def format_student_id(number: int, prefix: Optional[str] = None) -> str:
    return f"{prefix or settings.student_id_prefix}{number:03d}"


def next_student_id(last_student_id: Optional[str], student_count: int, prefix: Optional[str] = None) -> str:
    """Next school code after the most recent one (STU007 -> STU008); count + 1 when it has no number."""
    prefix = prefix or settings.student_id_prefix
    if last_student_id:
        match = re.search(rf"{re.escape(prefix)}(\d+)", last_student_id)
        if match:
            return format_student_id(int(match.group(1)) + 1, prefix)
    return format_student_id(student_count + 1, prefix)


def recount_class_students(supabase: Client, class_id: Optional[str]) -> None:
    """Store the number of active students on classes.student_count. Failures are logged, not raised."""
    if not class_id:
        return
    try:
        result = supabase.table("students")\
            .select("id", count="exact")\
            .eq("class_id", class_id)\
            .eq("status", "active")\
            .execute()
        supabase.table("classes")\
            .update({"student_count": result.count or 0})\
            .eq("id", class_id)\
            .execute()
    except Exception as e:
        logger.error(f"Error updating student count for class {class_id}: {e}")


class StudentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_students(
        self,
        class_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[StudentResponse]:
        """List students, newest first"""
        try:
            query = self.supabase.table("students").select("*")
            if class_id:
                query = query.eq("class_id", class_id)
            if status:
                query = query.eq("status", status)
            result = query.order("created_at", desc=True).execute()
            return [StudentResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching students: {e}")
            if is_not_found(e):
                return []
            raise to_http_exception(e)

    def list_graduated(self) -> List[StudentResponse]:
        return self.list_students(status="graduated")

    def _get_row(self, student_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("students")\
                .select("*")\
                .eq("id", student_id)\
                .single()\
                .execute()
        except Exception as e:
            if is_not_found(e):
                raise HTTPException(status_code=404, detail="Student not found")
            logger.error(f"Error fetching student: {e}")
            raise to_http_exception(e)
        if not result.data:
            raise HTTPException(status_code=404, detail="Student not found")
        return result.data

    def get_student(self, student_id: str) -> StudentResponse:
        return StudentResponse(**self._get_row(student_id))

    def _class_teacher_for(self, class_id: str) -> Optional[str]:
        result = self.supabase.table("classes")\
            .select("class_teacher_id")\
            .eq("id", class_id)\
            .limit(1)\
            .execute()
        if result.data:
            return result.data[0].get("class_teacher_id")
        return None

    def _insert(self, student_data: StudentCreate) -> Dict[str, Any]:
        row = student_data.model_dump(mode="json")
        if not row.get("class_teacher_id") and row.get("class_id"):
            row["class_teacher_id"] = self._class_teacher_for(row["class_id"])
        row["enrollment_date"] = row.get("enrollment_date") or date.today().isoformat()
        for column in ("middle_name", "class_teacher_id", "parent_name", "parent_phone", "address", "photo_url"):
            row[column] = row.get(column) or None
        result = self.supabase.table("students").insert(row).execute()
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create student")
        return result.data[0]

    def create_student(self, student_data: StudentCreate) -> StudentResponse:
        """Create a student; the class teacher defaults to the class's teacher"""
        try:
            created = self._insert(student_data)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating student: {e}")
            raise to_http_exception(e)
        recount_class_students(self.supabase, created.get("class_id"))
        return StudentResponse(**created)

    def update_student(self, student_id: str, student_data: StudentUpdate) -> StudentResponse:
        """Partial update; recounts the old and the new class when the class or status changes"""
        current = self._get_row(student_id)
        try:
            update_data = student_data.model_dump(mode="json", exclude_unset=True)
            for column in ("middle_name", "class_teacher_id", "parent_name", "parent_phone", "address", "photo_url"):
                if column in update_data:
                    update_data[column] = update_data[column] or None
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

            result = self.supabase.table("students")\
                .update(update_data)\
                .eq("id", student_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Student not found")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating student: {e}")
            raise to_http_exception(e)

        updated = result.data[0]
        affected = {current.get("class_id"), updated.get("class_id")}
        for class_id in affected:
            recount_class_students(self.supabase, class_id)
        return StudentResponse(**updated)

    def delete_student(self, student_id: str) -> None:
        student = self._get_row(student_id)
        try:
            self.supabase.table("students").delete().eq("id", student_id).execute()
        except Exception as e:
            logger.error(f"Error deleting student: {e}")
            raise to_http_exception(e)
        recount_class_students(self.supabase, student.get("class_id"))

    def generate_student_id(self) -> str:
        """Next STU### code after the most recently created student"""
        try:
            result = self.supabase.table("students")\
                .select("student_id")\
                .order("created_at", desc=True)\
                .limit(1)\
                .execute()
            if not result.data:
                return format_student_id(1)
            last_id = result.data[0].get("student_id")
            count = 0
            if not re.search(rf"{re.escape(settings.student_id_prefix)}\d+", last_id or ""):
                count_result = self.supabase.table("students").select("id", count="exact").execute()
                count = count_result.count or 0
            return next_student_id(last_id, count)
        except Exception as e:
            logger.error(f"Error generating student ID: {e}")
            raise to_http_exception(e)

    def import_students(self, rows: List[StudentImportRow]) -> StudentImportResponse:
        """Create students one by one; a failed row is reported and the rest continue.
        Rows without a student code get consecutive generated codes."""
        created = 0
        errors: List[StudentImportError] = []
        generated_id: Optional[str] = None
        touched_classes = set()

        for index, row in enumerate(rows, start=1):
            student_code = row.student_id
            if not student_code:
                generated_id = next_student_id(generated_id, 0) if generated_id else self.generate_student_id()
                student_code = generated_id
            try:
                student = StudentCreate(**{**row.model_dump(), "student_id": student_code})
                inserted = self._insert(student)
                touched_classes.add(inserted.get("class_id"))
                created += 1
            except ValidationError as e:
                errors.append(StudentImportError(row=index, student_id=student_code, error=str(e.errors()[0]["msg"])))
            except HTTPException as e:
                errors.append(StudentImportError(row=index, student_id=student_code, error=format_error(e.detail)))
            except Exception as e:
                logger.error(f"Error importing student row {index}: {e}")
                errors.append(StudentImportError(row=index, student_id=student_code, error=format_supabase_error(e)))

        for class_id in touched_classes:
            recount_class_students(self.supabase, class_id)

        return StudentImportResponse(created=created, failed=len(errors), errors=errors)
