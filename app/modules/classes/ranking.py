"""
Class ranking
Per-subject totals and overall positions of the active students of a class for a term.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from app.core.class_levels import level_category
from app.core.grading import calculate_grade_details, round1
from app.modules.students.service import student_full_name


def subjects_for_level(subjects: Iterable[Mapping[str, Any]], level: int) -> List[Mapping[str, Any]]:
    """Subjects taught at the class's level category, alphabetical"""
    category = level_category(level)
    taught = [s for s in subjects if category in (s.get("level_categories") or [])]
    return sorted(taught, key=lambda s: s["name"].lower())


def rank_students(
    students: List[Mapping[str, Any]],
    subjects: List[Mapping[str, Any]],
    grades: Iterable[Mapping[str, Any]],
    grading_system: Optional[Mapping[str, Any]] = None,
) -> List[Dict[str, Any]]:
    """Rank students by overall total, highest first, with positions 1..n.
    Missing grades count as 0. Ties keep sequential positions, ordered by name."""
    by_key = {(g["student_id"], g["subject_id"]): g for g in grades}
    rankings = []
    for student in students:
        scores = []
        for subject in subjects:
            grade = by_key.get((student["id"], subject["id"]))
            details = calculate_grade_details(grade or {}, grading_system)
            scores.append({
                "subject_id": subject["id"],
                "subject_name": subject["name"],
                "class_score": details["class_score"],
                "exam_score": details["exam_score"],
                "total": details["total"] if grade else 0,
                "grade": details["grade"] if grade else None,
            })
        overall_total = sum(s["total"] for s in scores)
        average = overall_total / len(scores) if scores else 0
        rankings.append({
            "student_id": student["id"],
            "student_code": student.get("student_id"),
            "student_name": student_full_name(student),
            "subject_scores": scores,
            "overall_total": round1(overall_total),
            "average": round1(average),
            "position": 0,
        })

    rankings.sort(key=lambda r: (-r["overall_total"], r["student_name"].lower()))
    for position, ranking in enumerate(rankings, start=1):
        ranking["position"] = position
    return rankings
