import logging
from datetime import datetime, timezone
from supabase import Client
from app.modules.subjects.schemas import SubjectCreate, SubjectUpdate, SubjectResponse
from app.core.errors import is_foreign_key_violation, is_not_found, is_unique_violation, to_http_exception
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

DUPLICATE_CODE_MESSAGE = "A subject with this code already exists. Please use a different code."
SUBJECT_IN_USE_MESSAGE = (
    "Cannot delete subject. It is being used in grades or assignments. "
    "Please remove all references first."
)


class SubjectService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_subjects(self, level_category: Optional[str] = None) -> List[SubjectResponse]:
        """List subjects by name; level_category keeps subjects taught at that level"""
        try:
            query = self.supabase.table("subjects").select("*")
            if level_category:
                query = query.contains("level_categories", [level_category])
            result = query.order("name").execute()
            return [SubjectResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching subjects: {e}")
            if is_not_found(e):
                return []
            raise to_http_exception(e)

    def get_subject(self, subject_id: str) -> SubjectResponse:
        try:
            result = self.supabase.table("subjects")\
                .select("*")\
                .eq("id", subject_id)\
                .single()\
                .execute()
        except Exception as e:
            if is_not_found(e):
                raise HTTPException(status_code=404, detail="Subject not found")
            logger.error(f"Error fetching subject: {e}")
            raise to_http_exception(e)
        if not result.data:
            raise HTTPException(status_code=404, detail="Subject not found")
        return SubjectResponse(**result.data)

    def create_subject(self, data: SubjectCreate) -> SubjectResponse:
        try:
            row = data.model_dump(mode="json")
            row["description"] = row.get("description") or None
            result = self.supabase.table("subjects").insert(row).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create subject")
            return SubjectResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating subject: {e}")
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail=DUPLICATE_CODE_MESSAGE)
            raise to_http_exception(e)

    def update_subject(self, subject_id: str, data: SubjectUpdate) -> SubjectResponse:
        try:
            update_data = data.model_dump(mode="json", exclude_unset=True)
            if "description" in update_data:
                update_data["description"] = update_data["description"] or None
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("subjects")\
                .update(update_data)\
                .eq("id", subject_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Subject not found")
            return SubjectResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating subject: {e}")
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail=DUPLICATE_CODE_MESSAGE)
            raise to_http_exception(e)

    def delete_subject(self, subject_id: str) -> None:
        try:
            self.supabase.table("subjects").delete().eq("id", subject_id).execute()
        except Exception as e:
            logger.error(f"Error deleting subject: {e}")
            if is_foreign_key_violation(e):
                raise HTTPException(status_code=409, detail=SUBJECT_IN_USE_MESSAGE)
            raise to_http_exception(e)
