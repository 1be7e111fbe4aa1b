import logging
from supabase import Client
from app.modules.reports.schemas import ReportCard, AttendanceSummary
from app.modules.classes.ranking import rank_students, subjects_for_level
from app.modules.evaluations.service import EvaluationService
from app.modules.settings.service import load_grading_system
from app.core.class_levels import level_name
from app.core.errors import is_not_found, to_http_exception
from typing import Any, Dict, List, Mapping, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


def subject_positions(rankings: List[Mapping[str, Any]]) -> Dict[tuple, int]:
    """(student id, subject id) -> position by subject total, 1 being best.
    Ties keep sequential positions in class ranking order."""
    positions: Dict[tuple, int] = {}
    subject_ids = [s["subject_id"] for s in rankings[0]["subject_scores"]] if rankings else []
    for index, subject_id in enumerate(subject_ids):
        ordered = sorted(rankings, key=lambda r: -r["subject_scores"][index]["total"])
        for position, ranking in enumerate(ordered, start=1):
            positions[(ranking["student_id"], subject_id)] = position
    return positions


def roll_numbers(students: List[Mapping[str, Any]]) -> Dict[str, int]:
    """Place on the class roll: enrollment date, then school student code"""
    ordered = sorted(
        students,
        key=lambda s: (str(s.get("enrollment_date") or ""), s.get("student_id") or ""),
    )
    return {s["id"]: number for number, s in enumerate(ordered, start=1)}


class ReportService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _student(self, student_id: str) -> Dict[str, Any]:
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

    def _first(self, table: str, student_id: str, term: int, academic_year: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table(table)\
            .select("*")\
            .eq("student_id", student_id)\
            .eq("term", term)\
            .eq("academic_year", academic_year)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def get_report_card(self, student_id: str, term: int, academic_year: str) -> ReportCard:
        """Term report of an active student, ranked against the active students of their class"""
        student = self._student(student_id)
        if not student.get("class_id") or student.get("status") != "active":
            raise HTTPException(
                status_code=400,
                detail="Report cards are only available for active students assigned to a class"
            )
        try:
            class_result = self.supabase.table("classes")\
                .select("id, name, level")\
                .eq("id", student["class_id"])\
                .limit(1)\
                .execute()
            if not class_result.data:
                raise HTTPException(status_code=404, detail="Class not found")
            class_row = class_result.data[0]
            classmates = self.supabase.table("students")\
                .select("id, student_id, first_name, middle_name, last_name, enrollment_date")\
                .eq("class_id", class_row["id"])\
                .eq("status", "active")\
                .execute().data or []
            subjects = self.supabase.table("subjects").select("id, name, level_categories").execute().data or []
            taught = subjects_for_level(subjects, class_row["level"])
            grades = self.supabase.table("grades")\
                .select("*")\
                .in_("student_id", [s["id"] for s in classmates])\
                .eq("term", term)\
                .eq("academic_year", academic_year)\
                .execute().data or []
            grading_system = load_grading_system(self.supabase)
            attendance = self._first("attendance", student_id, term, academic_year)
            evaluation = EvaluationService(self.supabase).get_evaluation(student_id, term, academic_year)
            term_settings = self.supabase.table("term_settings")\
                .select("closing_date, reopening_date")\
                .eq("academic_year", academic_year)\
                .eq("term", term)\
                .limit(1)\
                .execute().data or []
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error building report card for student {student_id}: {e}")
            raise to_http_exception(e)

        rankings = rank_students(classmates, taught, grades, grading_system)
        own = next(r for r in rankings if r["student_id"] == student_id)
        positions = subject_positions(rankings)
        grade_names = {level["code"]: level.get("name") for level in grading_system.get("grade_levels") or []}
        dates = term_settings[0] if term_settings else {}

        return ReportCard(
            student_id=student_id,
            student_code=student["student_id"],
            student_name=own["student_name"],
            class_id=class_row["id"],
            class_name=class_row["name"],
            level_name=level_name(class_row["level"]),
            term=term,
            academic_year=academic_year,
            subjects=[
                {
                    **score,
                    "grade_name": grade_names.get(score["grade"]),
                    "position": positions[(student_id, score["subject_id"])],
                }
                for score in own["subject_scores"]
                if score["grade"] is not None
            ],
            overall_total=own["overall_total"],
            average=own["average"],
            class_position=own["position"],
            roll_number=roll_numbers(classmates)[student_id],
            class_size=len(classmates),
            attendance=AttendanceSummary(**attendance) if attendance else None,
            evaluation=evaluation,
            closing_date=dates.get("closing_date"),
            reopening_date=dates.get("reopening_date"),
        )
