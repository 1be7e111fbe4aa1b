import logging
from datetime import datetime, timezone
from supabase import Client
from app.modules.bece.schemas import (
    BeceResultCreate, BeceResultUpdate, BeceResultResponse, StudentBeceResults
)
from app.core.errors import is_not_found, to_http_exception
from typing import Dict, Iterable, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

BECE_GRADE_VALUES = {
    "A1": 1, "B2": 2, "B3": 3, "C4": 4, "C5": 5, "C6": 6, "D7": 7, "E8": 8, "F9": 9,
}


def bece_aggregate(grades: Iterable[str]) -> Optional[int]:
    """Sum of grade values over recognised grades (lower is better); None when there are none."""
    values = [BECE_GRADE_VALUES[g] for g in grades if g in BECE_GRADE_VALUES]
    return sum(values) if values else None


def _row(result: BeceResultCreate) -> Dict:
    row = result.model_dump(mode="json")
    row["remark"] = row.get("remark") or None
    return row


class BeceService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_results(self, academic_year: Optional[str] = None) -> List[BeceResultResponse]:
        try:
            query = self.supabase.table("bece_results").select("*")
            if academic_year:
                query = query.eq("academic_year", academic_year)
            result = query.order("academic_year", desc=True)\
                .order("student_id")\
                .order("subject")\
                .execute()
            return [BeceResultResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching BECE results: {e}")
            if is_not_found(e):
                return []
            raise to_http_exception(e)

    def list_grouped(self, academic_year: Optional[str] = None) -> List[StudentBeceResults]:
        grouped: Dict[str, List[BeceResultResponse]] = {}
        for result in self.list_results(academic_year):
            grouped.setdefault(result.student_id, []).append(result)
        return [
            StudentBeceResults(
                student_id=student_id,
                results=results,
                aggregate=bece_aggregate(r.grade for r in results),
            )
            for student_id, results in grouped.items()
        ]

    def list_for_student(self, student_id: str, academic_year: Optional[str] = None) -> StudentBeceResults:
        try:
            query = self.supabase.table("bece_results")\
                .select("*")\
                .eq("student_id", student_id)
            if academic_year:
                query = query.eq("academic_year", academic_year)
            result = query.order("subject").execute()
            results = [BeceResultResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching BECE results for student {student_id}: {e}")
            raise to_http_exception(e)
        return StudentBeceResults(
            student_id=student_id,
            results=results,
            aggregate=bece_aggregate(r.grade for r in results),
        )

    def create_result(self, data: BeceResultCreate) -> BeceResultResponse:
        try:
            result = self.supabase.table("bece_results").insert(_row(data)).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create BECE result")
            return BeceResultResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating BECE result: {e}")
            raise to_http_exception(e)

    def create_results(self, data: List[BeceResultCreate]) -> List[BeceResultResponse]:
        """Insert several results in one statement"""
        if not data:
            return []
        try:
            result = self.supabase.table("bece_results").insert([_row(r) for r in data]).execute()
            return [BeceResultResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error creating BECE results: {e}")
            raise to_http_exception(e)

    def update_result(self, result_id: str, data: BeceResultUpdate) -> BeceResultResponse:
        try:
            update_data = data.model_dump(mode="json", exclude_unset=True)
            if "remark" in update_data:
                update_data["remark"] = update_data["remark"] or None
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("bece_results")\
                .update(update_data)\
                .eq("id", result_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="BECE result not found")
            return BeceResultResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating BECE result: {e}")
            raise to_http_exception(e)

    def delete_result(self, result_id: str) -> None:
        try:
            self.supabase.table("bece_results").delete().eq("id", result_id).execute()
        except Exception as e:
            logger.error(f"Error deleting BECE result: {e}")
            raise to_http_exception(e)

    def delete_for_student(self, student_id: str, academic_year: Optional[str] = None) -> None:
        try:
            query = self.supabase.table("bece_results").delete().eq("student_id", student_id)
            if academic_year:
                query = query.eq("academic_year", academic_year)
            query.execute()
        except Exception as e:
            logger.error(f"Error deleting BECE results for student {student_id}: {e}")
            raise to_http_exception(e)
