"""
Promotion rules
Pure functions over class and student rows; no database access.
"""

from typing import Any, Dict, Iterable, List, Mapping

from app.core.class_levels import HIGHEST_LEVEL, is_highest_level, level_name, next_level, next_level_name

BASIC_9_NOT_GRADUATED = "Students in Basic 9 must be graduated first"


def active_counts(students: Iterable[Mapping[str, Any]]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for student in students:
        if student.get("status") == "active" and student.get("class_id"):
            counts[student["class_id"]] = counts.get(student["class_id"], 0) + 1
    return counts


def promotion_status(
    class_row: Mapping[str, Any],
    classes: List[Mapping[str, Any]],
    counts: Mapping[str, int],
) -> Dict[str, Any]:
    """Whether a class below Basic 9 may promote its students.
    Promotion into Basic 9 waits until every Basic 9 class has graduated its students;
    any other level is always open, and several classes may promote into one."""
    level = class_row["level"]
    target = next_level(level)
    can_promote = True
    reason = None
    if target == HIGHEST_LEVEL:
        if any(counts.get(c["id"], 0) > 0 for c in classes if c["level"] == HIGHEST_LEVEL):
            can_promote = False
            reason = BASIC_9_NOT_GRADUATED
    return {
        "class_id": class_row["id"],
        "class_name": class_row["name"],
        "level": level,
        "level_name": level_name(level),
        "next_level": target,
        "next_level_name": next_level_name(level),
        "can_promote": can_promote,
        "reason": reason,
        "students_to_promote": counts.get(class_row["id"], 0),
    }


def evaluate_promotions(
    classes: List[Mapping[str, Any]],
    students: Iterable[Mapping[str, Any]],
) -> List[Dict[str, Any]]:
    """Promotion status of every class below Basic 9, highest level first"""
    counts = active_counts(students)
    statuses = [
        promotion_status(c, classes, counts)
        for c in classes
        if not is_highest_level(c["level"])
    ]
    return sorted(statuses, key=lambda s: s["level"], reverse=True)
