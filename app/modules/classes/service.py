import logging
from datetime import datetime, timezone
from supabase import Client
from app.modules.classes.schemas import (
    ClassCreate, ClassUpdate, ClassResponse, PromotionStatus, PromoteRequest, PromoteResponse,
    GraduateRequest, GraduateResponse, ClassRanking
)
from app.modules.classes.promotion import active_counts, evaluate_promotions, promotion_status
from app.modules.classes.ranking import rank_students, subjects_for_level
from app.modules.bece.schemas import BeceResultCreate
from app.modules.bece.service import BeceService
from app.modules.settings.service import load_grading_system
from app.modules.students.service import recount_class_students
from app.core.class_levels import is_highest_level, level_category, level_name, next_level, next_level_name
from app.core.errors import is_not_found, to_http_exception
from typing import Any, Dict, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


def _class_response(row: Dict[str, Any]) -> ClassResponse:
    return ClassResponse(
        **row,
        level_name=level_name(row["level"]),
        level_category=level_category(row["level"]),
    )


class ClassService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _all_rows(self) -> List[Dict[str, Any]]:
        result = self.supabase.table("classes")\
            .select("*")\
            .order("level")\
            .order("name")\
            .execute()
        return result.data or []

    def list_classes(self) -> List[ClassResponse]:
        try:
            return [_class_response(row) for row in self._all_rows()]
        except Exception as e:
            logger.error(f"Error fetching classes: {e}")
            if is_not_found(e):
                return []
            raise to_http_exception(e)

    def list_by_teacher(self, teacher_id: str) -> List[ClassResponse]:
        """Classes whose class teacher is teacher_id"""
        try:
            result = self.supabase.table("classes")\
                .select("*")\
                .eq("class_teacher_id", teacher_id)\
                .order("level")\
                .order("name")\
                .execute()
            return [_class_response(row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching classes for teacher {teacher_id}: {e}")
            if is_not_found(e):
                return []
            raise to_http_exception(e)

    def _get_row(self, class_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("classes")\
                .select("*")\
                .eq("id", class_id)\
                .single()\
                .execute()
        except Exception as e:
            if is_not_found(e):
                raise HTTPException(status_code=404, detail="Class not found")
            logger.error(f"Error fetching class: {e}")
            raise to_http_exception(e)
        if not result.data:
            raise HTTPException(status_code=404, detail="Class not found")
        return result.data

    def get_class(self, class_id: str) -> ClassResponse:
        return _class_response(self._get_row(class_id))

    def create_class(self, data: ClassCreate) -> ClassResponse:
        try:
            row = data.model_dump(mode="json")
            row["stream"] = row.get("stream") or None
            row["class_teacher_id"] = row.get("class_teacher_id") or None
            row["student_count"] = 0
            result = self.supabase.table("classes").insert(row).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create class")
            return _class_response(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating class: {e}")
            raise to_http_exception(e)

    def update_class(self, class_id: str, data: ClassUpdate) -> ClassResponse:
        try:
            update_data = data.model_dump(mode="json", exclude_unset=True)
            for column in ("stream", "class_teacher_id"):
                if column in update_data:
                    update_data[column] = update_data[column] or None
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("classes")\
                .update(update_data)\
                .eq("id", class_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Class not found")
            return _class_response(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating class: {e}")
            raise to_http_exception(e)

    def delete_class(self, class_id: str) -> None:
        try:
            self.supabase.table("classes").delete().eq("id", class_id).execute()
        except Exception as e:
            logger.error(f"Error deleting class: {e}")
            raise to_http_exception(e)

    def _student_rows(self, class_ids: Optional[List[str]] = None) -> List[Dict[str, Any]]:
        query = self.supabase.table("students").select("id, class_id, status")
        if class_ids is not None:
            query = query.in_("class_id", class_ids)
        result = query.execute()
        return result.data or []

    def get_promotion_eligibility(self) -> List[PromotionStatus]:
        """Promotion status of every class below Basic 9, highest level first"""
        try:
            classes = self._all_rows()
            students = self._student_rows()
        except Exception as e:
            logger.error(f"Error checking promotion eligibility: {e}")
            raise to_http_exception(e)
        return [PromotionStatus(**status) for status in evaluate_promotions(classes, students)]

    def promote_students(self, class_id: str, request: PromoteRequest) -> PromoteResponse:
        """Move selected active students of a class into a class at the next level"""
        source = self._get_row(class_id)
        if is_highest_level(source["level"]):
            raise HTTPException(
                status_code=400,
                detail="Basic 9 students cannot be promoted. Graduate them instead."
            )
        target = self._get_row(request.target_class_id)
        if target["level"] != next_level(source["level"]):
            raise HTTPException(
                status_code=400,
                detail=f"Students in {level_name(source['level'])} can only be promoted to a "
                       f"{next_level_name(source['level'])} class"
            )

        try:
            classes = self._all_rows()
            students = self._student_rows()
        except Exception as e:
            logger.error(f"Error checking promotion eligibility: {e}")
            raise to_http_exception(e)
        status = promotion_status(source, classes, active_counts(students))
        if not status["can_promote"]:
            raise HTTPException(status_code=400, detail=status["reason"])

        active_ids = {
            s["id"] for s in students
            if s.get("class_id") == class_id and s.get("status") == "active"
        }
        student_ids = list(dict.fromkeys(request.student_ids))
        if any(student_id not in active_ids for student_id in student_ids):
            raise HTTPException(
                status_code=400,
                detail="Only active students of this class can be promoted"
            )

        try:
            self.supabase.table("students")\
                .update({
                    "class_id": target["id"],
                    "class_teacher_id": target.get("class_teacher_id"),
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                })\
                .in_("id", student_ids)\
                .execute()
        except Exception as e:
            logger.error(f"Error promoting students from class {class_id}: {e}")
            raise to_http_exception(e)

        recount_class_students(self.supabase, class_id)
        recount_class_students(self.supabase, target["id"])
        return PromoteResponse(promoted=len(student_ids), source_class_id=class_id, target_class_id=target["id"])

    def graduate_class(self, class_id: str, request: GraduateRequest) -> GraduateResponse:
        """Save BECE results and mark the Basic 9 students graduated"""
        class_row = self._get_row(class_id)
        if not is_highest_level(class_row["level"]):
            raise HTTPException(status_code=400, detail="Only Basic 9 classes can be graduated")

        try:
            students = self._student_rows([class_id])
        except Exception as e:
            logger.error(f"Error fetching students of class {class_id}: {e}")
            raise to_http_exception(e)
        active_ids = [s["id"] for s in students if s.get("status") == "active"]

        student_ids = list(dict.fromkeys(request.student_ids)) if request.student_ids is not None else active_ids
        if not student_ids:
            raise HTTPException(status_code=400, detail="There are no active students to graduate")
        if any(student_id not in active_ids for student_id in student_ids):
            raise HTTPException(status_code=400, detail="Only active students of this class can be graduated")
        if any(result.student_id not in student_ids for result in request.results):
            raise HTTPException(status_code=400, detail="BECE results must belong to the graduating students")

        saved = BeceService(self.supabase).create_results([
            BeceResultCreate(
                student_id=result.student_id,
                academic_year=request.academic_year,
                subject=result.subject,
                grade=result.grade,
                remark=result.remark,
            )
            for result in request.results
        ])

        try:
            self.supabase.table("students")\
                .update({"status": "graduated", "updated_at": datetime.now(timezone.utc).isoformat()})\
                .in_("id", student_ids)\
                .execute()
        except Exception as e:
            logger.error(f"Error graduating students of class {class_id}: {e}")
            # students stay active, so their results must not stay saved
            if saved:
                try:
                    self.supabase.table("bece_results")\
                        .delete()\
                        .in_("id", [r.id for r in saved])\
                        .execute()
                except Exception as cleanup_error:
                    logger.error(f"Failed to remove BECE results of class {class_id}: {cleanup_error}")
            raise to_http_exception(e)

        recount_class_students(self.supabase, class_id)
        return GraduateResponse(graduated=len(student_ids), results_saved=len(saved))

    def get_ranking(self, class_id: str, term: int, academic_year: str) -> ClassRanking:
        """Positions of the class's active students by overall total for a term"""
        class_row = self._get_row(class_id)
        try:
            students = self.supabase.table("students")\
                .select("id, student_id, first_name, middle_name, last_name")\
                .eq("class_id", class_id)\
                .eq("status", "active")\
                .execute()
            subjects = self.supabase.table("subjects").select("id, name, level_categories").execute()
            taught = subjects_for_level(subjects.data or [], class_row["level"])
            grades = []
            student_ids = [s["id"] for s in students.data or []]
            if student_ids:
                grades = self.supabase.table("grades")\
                    .select("*")\
                    .in_("student_id", student_ids)\
                    .eq("term", term)\
                    .eq("academic_year", academic_year)\
                    .execute().data or []
            grading_system = load_grading_system(self.supabase)
        except Exception as e:
            logger.error(f"Error computing ranking for class {class_id}: {e}")
            raise to_http_exception(e)

        return ClassRanking(
            class_id=class_id,
            class_name=class_row["name"],
            term=term,
            academic_year=academic_year,
            subjects=[{"id": s["id"], "name": s["name"]} for s in taught],
            rankings=rank_students(students.data or [], taught, grades, grading_system),
        )
