"""
Grading utilities
Weighted score computation and grade-code lookup against a grading system.

Assessment structure (shared by class teachers and subject teachers):
    project 40, test 1 20, test 2 20, group work 20  -> class score, 50%
    exam 100                                         -> exam score, 50%
"""

from typing import Any, Dict, List, Mapping, Optional

MAX_SCORES = {
    "project": 40,
    "test1": 20,
    "test2": 20,
    "group_work": 20,
    "exam": 100,
}

CLASS_WORK_MAX = MAX_SCORES["project"] + MAX_SCORES["test1"] + MAX_SCORES["test2"] + MAX_SCORES["group_work"]
PASS_MARK = 40

GRADE_CODES = ["HP", "P", "AP", "D", "E"]
FALLBACK_GRADE = "E"

GRADE_COLORS = {
    "HP": "#10B981",
    "P": "#3B82F6",
    "AP": "#FBBF24",
    "D": "#F97316",
    "E": "#EF4444",
}

DEFAULT_GRADING_SYSTEM: Dict[str, Any] = {
    "id": "default",
    "name": "Universal Grading System",
    "description": "Standard grading system",
    "is_active": True,
    "grade_levels": [
        {"id": "hp", "code": "HP", "name": "High Proficient", "min_percentage": 80, "max_percentage": 100, "order": 5},
        {"id": "p", "code": "P", "name": "Proficient", "min_percentage": 68, "max_percentage": 79, "order": 4},
        {"id": "ap", "code": "AP", "name": "Approaching Proficiency", "min_percentage": 54, "max_percentage": 67, "order": 3},
        {"id": "d", "code": "D", "name": "Developing", "min_percentage": 40, "max_percentage": 53, "order": 2},
        {"id": "e", "code": "E", "name": "Emerging", "min_percentage": 0, "max_percentage": 39, "order": 1},
    ],
}


def _levels(system: Optional[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    if not system:
        system = DEFAULT_GRADING_SYSTEM
    return system.get("grade_levels") or []


def grade_level_from_percentage(percentage: float, system: Optional[Mapping[str, Any]] = None) -> Optional[Mapping[str, Any]]:
    for level in _levels(system):
        if level["min_percentage"] <= percentage <= level["max_percentage"]:
            return level
    return None


def grade_from_percentage(percentage: float, system: Optional[Mapping[str, Any]] = None) -> str:
    """Grade code for a percentage. Bands are inclusive; a score between bands falls back to E."""
    level = grade_level_from_percentage(percentage, system)
    return level["code"] if level else FALLBACK_GRADE


def _score(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    return float(value)


def calculate_total_score(project: Any = 0, test1: Any = 0, test2: Any = 0, group_work: Any = 0, exam: Any = 0) -> float:
    class_total = _score(project) + _score(test1) + _score(test2) + _score(group_work)
    class_score = (class_total / CLASS_WORK_MAX) * 50 if CLASS_WORK_MAX > 0 else 0
    exam_score = (_score(exam) / MAX_SCORES["exam"]) * 50
    return class_score + exam_score


def total_score_for_row(row: Mapping[str, Any]) -> float:
    """Total score for a grades table row (snake_case columns)."""
    return calculate_total_score(
        row.get("project"), row.get("test1"), row.get("test2"), row.get("group_work"), row.get("exam")
    )


def round1(value: float) -> float:
    return round(value * 10) / 10


def calculate_grade_details(row: Mapping[str, Any], system: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    class_total = _score(row.get("project")) + _score(row.get("test1")) + _score(row.get("test2")) + _score(row.get("group_work"))
    class_score = (class_total / CLASS_WORK_MAX) * 50
    exam_score = (_score(row.get("exam")) / MAX_SCORES["exam"]) * 50
    total = class_score + exam_score
    return {
        "class_score": round1(class_score),
        "exam_score": round1(exam_score),
        "total": round1(total),
        "grade": grade_from_percentage(total, system),
    }


def validate_grade_levels(levels: List[Mapping[str, Any]]) -> Optional[str]:
    """Return an error message when bands are malformed or overlap, else None."""
    if not levels:
        return "A grading system needs at least one grade level"
    codes = set()
    for level in levels:
        if level["min_percentage"] > level["max_percentage"]:
            return f"Grade level {level['code']} has a minimum above its maximum"
        if level["min_percentage"] < 0 or level["max_percentage"] > 100:
            return f"Grade level {level['code']} must lie between 0 and 100"
        if level["code"] in codes:
            return f"Grade level code {level['code']} is used more than once"
        codes.add(level["code"])
    ordered = sorted(levels, key=lambda lv: lv["min_percentage"])
    for lower, upper in zip(ordered, ordered[1:]):
        if upper["min_percentage"] <= lower["max_percentage"]:
            return f"Grade levels {lower['code']} and {upper['code']} overlap"
    return None
