import logging
from supabase import Client
from app.modules.subject_assignments.schemas import SubjectAssignmentCreate, SubjectAssignmentResponse
from app.core.errors import is_not_found, is_unique_violation, to_http_exception
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

DUPLICATE_ASSIGNMENT_MESSAGE = "This subject is already assigned to this teacher for this class"


class SubjectAssignmentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_assignments(
        self,
        teacher_id: Optional[str] = None,
        class_id: Optional[str] = None,
        subject_id: Optional[str] = None,
    ) -> List[SubjectAssignmentResponse]:
        try:
            query = self.supabase.table("subject_assignments").select("*")
            if teacher_id:
                query = query.eq("teacher_id", teacher_id)
            if class_id:
                query = query.eq("class_id", class_id)
            if subject_id:
                query = query.eq("subject_id", subject_id)
            result = query.order("created_at", desc=True).execute()
            return [SubjectAssignmentResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching subject assignments: {e}")
            if is_not_found(e):
                return []
            raise to_http_exception(e)

    def create_assignment(self, data: SubjectAssignmentCreate) -> SubjectAssignmentResponse:
        try:
            existing = self.supabase.table("subject_assignments")\
                .select("id")\
                .eq("subject_id", data.subject_id)\
                .eq("teacher_id", data.teacher_id)\
                .eq("class_id", data.class_id)\
                .execute()
            if existing.data:
                raise HTTPException(status_code=409, detail=DUPLICATE_ASSIGNMENT_MESSAGE)

            result = self.supabase.table("subject_assignments").insert(data.model_dump()).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create subject assignment")
            return SubjectAssignmentResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating subject assignment: {e}")
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail=DUPLICATE_ASSIGNMENT_MESSAGE)
            raise to_http_exception(e)

    def create_assignments(self, data: List[SubjectAssignmentCreate]) -> List[SubjectAssignmentResponse]:
        if not data:
            return []
        try:
            result = self.supabase.table("subject_assignments")\
                .insert([a.model_dump() for a in data])\
                .execute()
            return [SubjectAssignmentResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error creating subject assignments: {e}")
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="One or more assignments already exist")
            raise to_http_exception(e)

    def delete_assignment(self, assignment_id: str) -> None:
        try:
            self.supabase.table("subject_assignments").delete().eq("id", assignment_id).execute()
        except Exception as e:
            logger.error(f"Error deleting subject assignment: {e}")
            raise to_http_exception(e)

    def delete_assignment_by_keys(self, teacher_id: str, subject_id: str, class_id: str) -> None:
        try:
            self.supabase.table("subject_assignments")\
                .delete()\
                .eq("teacher_id", teacher_id)\
                .eq("subject_id", subject_id)\
                .eq("class_id", class_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting subject assignment: {e}")
            raise to_http_exception(e)
