import logging
from supabase import Client
from app.modules.analytics import metrics
from app.modules.analytics.schemas import (
    AnalyticsOverview, StudentPerformance, SubjectPerformance, ClassPerformance, BeceAnalytics
)
from app.modules.grades.service import rows_by_id
from app.modules.settings.service import load_grading_system
from app.modules.students.service import student_full_name
from app.core.errors import to_http_exception
from app.core.grading import PASS_MARK, grade_from_percentage, round1
from typing import Any, Dict, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

GRADE_COLUMNS = "id, student_id, subject_id, term, academic_year, project, test1, test2, group_work, exam"
TOP_SUBJECTS = 5
TOP_BECE_PERFORMERS = 10


class AnalyticsService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _grade_rows(
        self,
        academic_year: Optional[str] = None,
        term: Optional[int] = None,
        student_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        student_ids: Optional[List[str]] = None,
        subject_ids: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        query = self.supabase.table("grades").select(GRADE_COLUMNS)
        if academic_year:
            query = query.eq("academic_year", academic_year)
        if term is not None:
            query = query.eq("term", term)
        if student_id:
            query = query.eq("student_id", student_id)
        if subject_id:
            query = query.eq("subject_id", subject_id)
        if student_ids is not None:
            query = query.in_("student_id", student_ids)
        if subject_ids is not None:
            query = query.in_("subject_id", subject_ids)
        return query.execute().data or []

    def _attendance_rows(
        self,
        academic_year: Optional[str] = None,
        term: Optional[int] = None,
        student_ids: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        query = self.supabase.table("attendance").select("student_id, attendance_percentage")
        if academic_year:
            query = query.eq("academic_year", academic_year)
        if term is not None:
            query = query.eq("term", term)
        if student_ids is not None:
            query = query.in_("student_id", student_ids)
        return query.execute().data or []

    def _active_student_ids(self, class_ids: Optional[List[str]] = None) -> List[str]:
        query = self.supabase.table("students").select("id").eq("status", "active")
        if class_ids is not None:
            query = query.in_("class_id", class_ids)
        return [row["id"] for row in query.execute().data or []]

    def _teacher_scope(self, teacher_id: str) -> Dict[str, List[str]]:
        """Classes a teacher leads or teaches in, and the subjects assigned to them"""
        led = self.supabase.table("classes")\
            .select("id")\
            .eq("class_teacher_id", teacher_id)\
            .execute()
        assignments = self.supabase.table("subject_assignments")\
            .select("class_id, subject_id")\
            .eq("teacher_id", teacher_id)\
            .execute()
        class_ids = {row["id"] for row in led.data or []}
        class_ids.update(row["class_id"] for row in assignments.data or [])
        subject_ids = {row["subject_id"] for row in assignments.data or []}
        return {"class_ids": sorted(class_ids), "subject_ids": sorted(subject_ids)}

    def _student_rows(self, student_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        return rows_by_id(
            self.supabase, "students",
            "id, first_name, middle_name, last_name, student_id, class_id", student_ids
        )

    def get_overview(
        self,
        academic_year: Optional[str] = None,
        term: Optional[int] = None,
        teacher_id: Optional[str] = None,
        class_id: Optional[str] = None,
    ) -> AnalyticsOverview:
        """Dashboard figures, scoped to a class, or to a teacher's classes and subjects"""
        try:
            subject_ids = None
            if class_id:
                student_ids = self._active_student_ids([class_id])
            elif teacher_id:
                scope = self._teacher_scope(teacher_id)
                if not scope["class_ids"]:
                    return AnalyticsOverview()
                student_ids = self._active_student_ids(scope["class_ids"])
                subject_ids = scope["subject_ids"] or None
            else:
                student_ids = self._active_student_ids()

            scoped = bool(class_id or teacher_id)
            if scoped and not student_ids:
                return AnalyticsOverview()
            grades = self._grade_rows(
                academic_year, term,
                student_ids=student_ids if scoped else None,
                subject_ids=subject_ids,
            )
            grading_system = load_grading_system(self.supabase)

            by_subject = metrics.group_by(grades, "subject_id")
            subjects = rows_by_id(self.supabase, "subjects", "id, name", sorted(by_subject))
            subject_performance = sorted(
                (
                    {
                        "subject": subjects.get(subject_id, {}).get("name", "Unknown"),
                        "average": round1(metrics.average_total(rows)),
                    }
                    for subject_id, rows in by_subject.items()
                ),
                key=lambda s: -s["average"],
            )[:TOP_SUBJECTS]

            total_students = len(student_ids)
            graded_students = {g["student_id"] for g in grades} & set(student_ids)
            return AnalyticsOverview(
                total_students=total_students,
                average_score=round1(metrics.average_total(grades)),
                pass_rate=metrics.pass_rate(grades),
                completed_grades=round(len(graded_students) / total_students * 100) if total_students else 0,
                grade_distribution=metrics.grade_distribution(grades, grading_system),
                performance_trend=[
                    {"term": f"Term {s['term']}", "average": s["score"]}
                    for s in metrics.term_scores(grades)
                ],
                subject_performance=subject_performance,
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error building analytics overview: {e}")
            raise to_http_exception(e)

    def get_student_performance(
        self,
        academic_year: Optional[str] = None,
        term: Optional[int] = None,
        class_id: Optional[str] = None,
        student_id: Optional[str] = None,
    ) -> List[StudentPerformance]:
        """Per-student averages, grade and trend; students without grades are left out"""
        try:
            grades = self._grade_rows(academic_year, term, student_id=student_id)
            students = self._student_rows(sorted({g["student_id"] for g in grades}))
            if class_id:
                students = {sid: s for sid, s in students.items() if s.get("class_id") == class_id}
            classes = rows_by_id(
                self.supabase, "classes", "id, name",
                sorted({s["class_id"] for s in students.values() if s.get("class_id")})
            )
            attendance = {
                row["student_id"]: row.get("attendance_percentage") or 0
                for row in self._attendance_rows(academic_year, term, sorted(students))
            }
            total_subjects = self.supabase.table("subjects").select("id", count="exact").execute().count or 0
            grading_system = load_grading_system(self.supabase)
        except Exception as e:
            logger.error(f"Error fetching student performance: {e}")
            raise to_http_exception(e)

        performance = []
        by_student = metrics.group_by(grades, "student_id")
        for sid, student in students.items():
            rows = by_student.get(sid, [])
            if not rows:
                continue
            average = metrics.average_total(rows)
            scores = metrics.term_scores(rows)
            class_row = classes.get(student.get("class_id"))
            performance.append(StudentPerformance(
                student_id=sid,
                student_name=student_full_name(student),
                student_code=student.get("student_id"),
                class_id=student.get("class_id"),
                class_name=class_row["name"] if class_row else "Unknown",
                average_score=round1(average),
                grade=grade_from_percentage(average, grading_system),
                trend=metrics.trend(scores),
                subjects_completed=len({r["subject_id"] for r in rows}),
                total_subjects=total_subjects,
                attendance_rate=attendance.get(sid, 0),
                term_scores=scores,
            ))
        return performance

    def get_subject_performance(
        self,
        academic_year: Optional[str] = None,
        term: Optional[int] = None,
        class_id: Optional[str] = None,
        subject_id: Optional[str] = None,
    ) -> List[SubjectPerformance]:
        try:
            grades = self._grade_rows(academic_year, term, subject_id=subject_id)
            students = self._student_rows(sorted({g["student_id"] for g in grades}))
            if class_id:
                grades = [g for g in grades if students.get(g["student_id"], {}).get("class_id") == class_id]
            classes = rows_by_id(
                self.supabase, "classes", "id, name",
                sorted({s["class_id"] for s in students.values() if s.get("class_id")})
            )
            subjects = rows_by_id(
                self.supabase, "subjects", "id, name", sorted({g["subject_id"] for g in grades})
            )
            grading_system = load_grading_system(self.supabase)
        except Exception as e:
            logger.error(f"Error fetching subject performance: {e}")
            raise to_http_exception(e)

        performance = []
        for subj_id, rows in metrics.group_by(grades, "subject_id").items():
            subject = subjects.get(subj_id)
            if not subject:
                continue
            by_class: Dict[str, List[Dict[str, Any]]] = {}
            for row in rows:
                class_row = classes.get(students.get(row["student_id"], {}).get("class_id"))
                if class_row:
                    by_class.setdefault(class_row["name"], []).append(row)
            scores = metrics.term_scores(rows)
            student_count = len({r["student_id"] for r in rows})
            performance.append(SubjectPerformance(
                subject_id=subj_id,
                subject_name=subject["name"],
                average_score=round1(metrics.average_total(rows)),
                pass_rate=metrics.pass_rate(rows),
                total_students=student_count,
                students_completed=student_count,
                grade_distribution=metrics.grade_counts(rows, grading_system),
                trend=metrics.trend(scores),
                term_scores=scores,
                class_performance=[
                    {"class_name": name, "average": round1(metrics.average_total(class_rows))}
                    for name, class_rows in by_class.items()
                ],
            ))
        return performance

    def get_class_performance(
        self,
        class_id: str,
        academic_year: Optional[str] = None,
        term: Optional[int] = None,
    ) -> ClassPerformance:
        try:
            result = self.supabase.table("classes")\
                .select("id, name, level")\
                .eq("id", class_id)\
                .limit(1)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Class not found")
            class_row = result.data[0]
            student_ids = self._active_student_ids([class_id])
            grades = self._grade_rows(academic_year, term, student_ids=student_ids) if student_ids else []
            attendance = self._attendance_rows(academic_year, term, student_ids) if student_ids else []
            subjects = rows_by_id(
                self.supabase, "subjects", "id, name", sorted({g["subject_id"] for g in grades})
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching class performance: {e}")
            raise to_http_exception(e)

        student_averages = [
            metrics.average_total(rows) for rows in metrics.group_by(grades, "student_id").values()
        ]
        passing = sum(1 for avg in student_averages if avg >= PASS_MARK)
        by_subject: Dict[str, List[Dict[str, Any]]] = {}
        for row in grades:
            name = subjects.get(row["subject_id"], {}).get("name", "Unknown")
            by_subject.setdefault(name, []).append(row)

        return ClassPerformance(
            class_id=class_row["id"],
            class_name=class_row["name"],
            level=class_row["level"],
            total_students=len(student_ids),
            average_score=round1(metrics.mean(student_averages)),
            pass_rate=round(passing / len(student_averages) * 100) if student_averages else 0,
            **metrics.performance_bands(student_averages),
            subject_breakdown=[
                {"subject_name": name, "average": round1(metrics.average_total(rows))}
                for name, rows in by_subject.items()
            ],
            attendance_rate=round(metrics.mean(a.get("attendance_percentage") or 0 for a in attendance)),
        )

    def get_bece_analytics(self, academic_year: str) -> BeceAnalytics:
        """Aggregates, bands, per-subject average grade and the ten best aggregates for a year"""
        try:
            results = self.supabase.table("bece_results")\
                .select("student_id, subject, grade")\
                .eq("academic_year", academic_year)\
                .execute().data or []
            by_student = metrics.group_by(results, "student_id")
            students = self._student_rows(sorted(by_student))
        except Exception as e:
            logger.error(f"Error fetching BECE analytics: {e}")
            raise to_http_exception(e)

        aggregates = [
            {
                "student_name": student_full_name(students[sid]),
                "aggregate": sum(metrics.bece_value(r["grade"]) for r in rows),
            }
            for sid, rows in by_student.items()
            if sid in students
        ]
        by_subject = metrics.group_by(results, "subject")
        return BeceAnalytics(
            academic_year=academic_year,
            total_students=len(aggregates),
            average_aggregate=round1(metrics.mean(a["aggregate"] for a in aggregates)),
            grade_distribution=metrics.bece_band_counts(a["aggregate"] for a in aggregates),
            subject_performance=[
                {"subject": subject, "average_grade": metrics.bece_average_grade([r["grade"] for r in rows])}
                for subject, rows in by_subject.items()
            ],
            top_performers=sorted(aggregates, key=lambda a: a["aggregate"])[:TOP_BECE_PERFORMERS],
        )
