import logging
from datetime import date, datetime, timezone
from supabase import Client
from app.modules.evaluations.schemas import (
    EvaluationUpsert, EvaluationResponse, RewardCreate, RewardResponse
)
from app.core.errors import is_not_found, to_http_exception
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

REMARK_COLUMNS = ("conduct_remarks", "interest_remarks")


class EvaluationService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_evaluation(self, student_id: str, term: int, academic_year: str) -> Optional[EvaluationResponse]:
        try:
            result = self.supabase.table("class_teacher_evaluations")\
                .select("*")\
                .eq("student_id", student_id)\
                .eq("term", term)\
                .eq("academic_year", academic_year)\
                .limit(1)\
                .execute()
            return EvaluationResponse(**result.data[0]) if result.data else None
        except Exception as e:
            logger.error(f"Error fetching evaluation: {e}")
            raise to_http_exception(e)

    def list_by_class(
        self,
        class_id: str,
        term: Optional[int] = None,
        academic_year: Optional[str] = None,
    ) -> List[EvaluationResponse]:
        try:
            roster = self.supabase.table("students")\
                .select("id")\
                .eq("class_id", class_id)\
                .execute()
            student_ids = [s["id"] for s in roster.data or []]
            if not student_ids:
                return []
            query = self.supabase.table("class_teacher_evaluations")\
                .select("*")\
                .in_("student_id", student_ids)
            if term is not None:
                query = query.eq("term", term)
            if academic_year:
                query = query.eq("academic_year", academic_year)
            result = query.execute()
            return [EvaluationResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching class evaluations: {e}")
            if is_not_found(e):
                return []
            raise to_http_exception(e)

    def upsert_evaluation(self, data: EvaluationUpsert, current_user_id: str) -> EvaluationResponse:
        """Create or update the evaluation of a student for a term"""
        row = data.model_dump(mode="json")
        row["teacher_id"] = current_user_id
        for column in REMARK_COLUMNS:
            row[column] = row.get(column) or None
        try:
            existing = self.supabase.table("class_teacher_evaluations")\
                .select("id")\
                .eq("student_id", data.student_id)\
                .eq("term", data.term)\
                .eq("academic_year", data.academic_year)\
                .limit(1)\
                .execute()
            if existing.data:
                row["updated_at"] = datetime.now(timezone.utc).isoformat()
                result = self.supabase.table("class_teacher_evaluations")\
                    .update(row)\
                    .eq("id", existing.data[0]["id"])\
                    .execute()
            else:
                result = self.supabase.table("class_teacher_evaluations").insert(row).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save evaluation")
            return EvaluationResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error saving evaluation: {e}")
            raise to_http_exception(e)

    # Rewards

    def list_rewards(self, student_id: str) -> List[RewardResponse]:
        try:
            result = self.supabase.table("class_teacher_rewards")\
                .select("*")\
                .eq("student_id", student_id)\
                .order("date_awarded", desc=True)\
                .execute()
            return [RewardResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching rewards: {e}")
            if is_not_found(e):
                return []
            raise to_http_exception(e)

    def create_reward(self, data: RewardCreate, current_user_id: str) -> RewardResponse:
        row = data.model_dump(mode="json")
        row["teacher_id"] = current_user_id
        row["date_awarded"] = row.get("date_awarded") or date.today().isoformat()
        try:
            result = self.supabase.table("class_teacher_rewards").insert(row).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create reward")
            return RewardResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating reward: {e}")
            raise to_http_exception(e)

    def delete_reward(self, reward_id: str) -> None:
        try:
            self.supabase.table("class_teacher_rewards").delete().eq("id", reward_id).execute()
        except Exception as e:
            logger.error(f"Error deleting reward: {e}")
            raise to_http_exception(e)
