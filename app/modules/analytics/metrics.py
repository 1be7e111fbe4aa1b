"""
Performance metrics over grade rows
Every function works on raw grades rows; totals come from total_score_for_row.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from app.core.grading import GRADE_CODES, GRADE_COLORS, PASS_MARK, grade_from_percentage, round1, total_score_for_row
from app.modules.bece.service import BECE_GRADE_VALUES

TERMS = (1, 2, 3)
TREND_THRESHOLD = 2
TOP_PERFORMER_MARK = 80
AVERAGE_PERFORMER_MARK = 60
UNKNOWN_BECE_VALUE = 9

BECE_BANDS = (
    ("excellent", 6, 12),
    ("very_good", 13, 18),
    ("good", 19, 24),
    ("fair", 25, 30),
)

# Upper bound of the mean grade value for each BECE grade
BECE_AVERAGE_THRESHOLDS = (
    (1.5, "A1"), (2.5, "B2"), (3.5, "B3"), (4.5, "C4"),
    (5.5, "C5"), (6.5, "C6"), (7.5, "D7"), (8.5, "E8"),
)


def mean(values: Iterable[float]) -> float:
    values = list(values)
    return sum(values) / len(values) if values else 0.0


def average_total(rows: Iterable[Mapping[str, Any]]) -> float:
    return mean(total_score_for_row(r) for r in rows)


def pass_rate(rows: List[Mapping[str, Any]]) -> int:
    """Whole-number percentage of rows with a total at or above the pass mark"""
    if not rows:
        return 0
    passing = sum(1 for r in rows if total_score_for_row(r) >= PASS_MARK)
    return round(passing / len(rows) * 100)


def grade_counts(rows: Iterable[Mapping[str, Any]], grading_system: Optional[Mapping[str, Any]] = None) -> Dict[str, int]:
    counts = {code: 0 for code in GRADE_CODES}
    for row in rows:
        code = grade_from_percentage(total_score_for_row(row), grading_system)
        counts[code] = counts.get(code, 0) + 1
    return counts


def grade_distribution(rows: Iterable[Mapping[str, Any]], grading_system: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """Chart slices: one entry per grade code with its count and colour"""
    counts = grade_counts(rows, grading_system)
    return [
        {"name": code, "value": value, "color": GRADE_COLORS.get(code, GRADE_COLORS["E"])}
        for code, value in counts.items()
    ]


def term_scores(rows: List[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Average total per term (one decimal), only for terms that have grades"""
    scores = []
    for term in TERMS:
        term_rows = [r for r in rows if r.get("term") == term]
        if term_rows:
            scores.append({"term": term, "score": round1(average_total(term_rows))})
    return scores


def trend(scores: List[Mapping[str, Any]]) -> str:
    """improving or declining when the last term moved by more than two points; stable otherwise"""
    if len(scores) < 2:
        return "stable"
    latest, previous = scores[-1]["score"], scores[-2]["score"]
    if latest > previous + TREND_THRESHOLD:
        return "improving"
    if latest < previous - TREND_THRESHOLD:
        return "declining"
    return "stable"


def group_by(rows: Iterable[Mapping[str, Any]], key: str) -> Dict[Any, List[Mapping[str, Any]]]:
    grouped: Dict[Any, List[Mapping[str, Any]]] = {}
    for row in rows:
        if row.get(key):
            grouped.setdefault(row[key], []).append(row)
    return grouped


def performance_bands(student_averages: Iterable[float]) -> Dict[str, int]:
    bands = {"top_performers": 0, "average_performers": 0, "needs_support": 0}
    for average in student_averages:
        if average >= TOP_PERFORMER_MARK:
            bands["top_performers"] += 1
        elif average >= AVERAGE_PERFORMER_MARK:
            bands["average_performers"] += 1
        else:
            bands["needs_support"] += 1
    return bands


def bece_value(grade: Optional[str]) -> int:
    return BECE_GRADE_VALUES.get(grade, UNKNOWN_BECE_VALUE)


def bece_band_counts(aggregates: Iterable[int]) -> Dict[str, int]:
    """Aggregates outside 6..30 fall in no band"""
    counts = {name: 0 for name, _, _ in BECE_BANDS}
    for aggregate in aggregates:
        for name, low, high in BECE_BANDS:
            if low <= aggregate <= high:
                counts[name] += 1
                break
    return counts


def bece_average_grade(grades: List[Optional[str]]) -> str:
    value = mean(bece_value(g) for g in grades)
    for threshold, grade in BECE_AVERAGE_THRESHOLDS:
        if value <= threshold:
            return grade
    return "F9"
