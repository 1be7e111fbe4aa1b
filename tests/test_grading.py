import pytest

from app.core.grading import (
    DEFAULT_GRADING_SYSTEM,
    calculate_grade_details,
    calculate_total_score,
    grade_from_percentage,
    total_score_for_row,
    validate_grade_levels,
)


def test_total_score_weights_class_work_and_exam_equally():
    # 40+20+20+20 of class work is 50, exam 100 is 50
    assert calculate_total_score(40, 20, 20, 20, 100) == pytest.approx(100)
    assert calculate_total_score(20, 10, 10, 10, 50) == pytest.approx(50)
    assert calculate_total_score() == 0


def test_total_score_treats_missing_columns_as_zero():
    assert total_score_for_row({"exam": 80, "project": None}) == pytest.approx(40)


@pytest.mark.parametrize("percentage,code", [
    (100, "HP"), (80, "HP"), (79, "P"), (68, "P"), (67, "AP"), (54, "AP"), (53, "D"), (40, "D"), (39, "E"), (0, "E"),
])
def test_default_bands(percentage, code):
    assert grade_from_percentage(percentage) == code


def test_score_between_bands_falls_back_to_e():
    assert grade_from_percentage(79.5) == "E"


def test_grade_details_round_to_one_decimal():
    details = calculate_grade_details(
        {"project": 33, "test1": 17, "test2": 15, "group_work": 18, "exam": 71}, DEFAULT_GRADING_SYSTEM
    )
    assert details == {"class_score": 41.5, "exam_score": 35.5, "total": 77.0, "grade": "P"}


def test_custom_grading_system_is_used():
    system = {"grade_levels": [
        {"code": "PASS", "min_percentage": 50, "max_percentage": 100},
        {"code": "FAIL", "min_percentage": 0, "max_percentage": 49.99},
    ]}
    assert grade_from_percentage(50, system) == "PASS"
    assert grade_from_percentage(49.99, system) == "FAIL"


def test_validate_grade_levels_rejects_overlap_and_inverted_bands():
    assert validate_grade_levels(DEFAULT_GRADING_SYSTEM["grade_levels"]) is None
    assert validate_grade_levels([]) is not None
    overlapping = [
        {"code": "A", "min_percentage": 50, "max_percentage": 100},
        {"code": "B", "min_percentage": 0, "max_percentage": 50},
    ]
    assert "overlap" in validate_grade_levels(overlapping)
    inverted = [{"code": "A", "min_percentage": 60, "max_percentage": 40}]
    assert "minimum above its maximum" in validate_grade_levels(inverted)
