from app.modules.attendance.service import attendance_percentage
from app.modules.bece.service import bece_aggregate
from app.modules.classes.promotion import BASIC_9_NOT_GRADUATED, evaluate_promotions
from app.modules.classes.ranking import rank_students, subjects_for_level
from app.modules.reports.service import roll_numbers, subject_positions
from app.modules.students.service import next_student_id, student_full_name
from app.modules.teachers.service import performance_score, primary_role


def test_next_student_id_follows_the_latest_code():
    assert next_student_id("STU007", 3) == "STU008"
    assert next_student_id("STU999", 3) == "STU1000"
    assert next_student_id(None, 0) == "STU001"
    assert next_student_id("LEGACY", 12) == "STU013"


def test_full_name_skips_missing_middle_name():
    assert student_full_name({"first_name": "Kofi", "middle_name": None, "last_name": "Boateng"}) == "Kofi Boateng"
    assert student_full_name({"first_name": "Efua", "middle_name": "Ama", "last_name": "Owusu"}) == "Efua Ama Owusu"


def test_attendance_percentage():
    assert attendance_percentage(57, 60) == 95.0
    assert attendance_percentage(2, 3) == 66.67
    assert attendance_percentage(0, 0) == 0


def test_bece_aggregate_ignores_unknown_grades():
    assert bece_aggregate(["A1", "B2", "C6", "F9"]) == 18
    assert bece_aggregate(["A1", "Z0"]) == 1
    assert bece_aggregate([]) is None


def test_primary_role_prefers_class_teacher():
    assert primary_role(True, True) == "class_teacher"
    assert primary_role(False, True) == "subject_teacher"


def test_performance_score_weights_tasks():
    assert performance_score({
        "is_class_teacher": True,
        "evaluations_done": 10, "evaluations_total": 20,
        "attendance_entered": 20, "attendance_total": 20,
    }) == 75
    assert performance_score({
        "is_subject_teacher": True, "subjects_graded": 1, "subjects_total": 4,
    }) == 25
    assert performance_score({"is_class_teacher": True}) == 0


CLASSES = [
    {"id": "b7", "name": "Basic 6A", "level": 7},
    {"id": "b8", "name": "Basic 7A", "level": 8},
    {"id": "b9", "name": "Basic 8A", "level": 9},
    {"id": "b10", "name": "Basic 9A", "level": 10},
]


def test_promotion_into_basic_9_waits_for_graduation():
    students = [
        {"class_id": "b9", "status": "active"},
        {"class_id": "b10", "status": "active"},
        {"class_id": "b10", "status": "graduated"},
        {"class_id": "b7", "status": "inactive"},
    ]
    statuses = evaluate_promotions(CLASSES, students)
    assert [s["class_id"] for s in statuses] == ["b9", "b8", "b7"]
    basic_8 = statuses[0]
    assert basic_8["can_promote"] is False
    assert basic_8["reason"] == BASIC_9_NOT_GRADUATED
    assert basic_8["students_to_promote"] == 1
    assert statuses[2]["can_promote"] is True
    assert statuses[2]["students_to_promote"] == 0


def test_promotion_into_basic_9_opens_once_it_is_empty():
    statuses = evaluate_promotions(CLASSES, [{"class_id": "b10", "status": "graduated"}])
    assert statuses[0]["can_promote"] is True
    assert statuses[0]["next_level_name"] == "Basic 9"


SUBJECTS = [
    {"id": "sci", "name": "Science", "level_categories": ["Upper Primary", "JHS"]},
    {"id": "eng", "name": "English", "level_categories": ["KG", "Lower Primary", "Upper Primary", "JHS"]},
    {"id": "bdt", "name": "BDT", "level_categories": ["JHS"]},
]


def test_subjects_for_level_filters_by_category():
    assert [s["id"] for s in subjects_for_level(SUBJECTS, 5)] == ["eng", "sci"]
    assert [s["id"] for s in subjects_for_level(SUBJECTS, 10)] == ["bdt", "eng", "sci"]


def _ranking_fixture():
    students = [
        {"id": "s1", "student_id": "STU001", "first_name": "Yaw", "last_name": "Asante"},
        {"id": "s2", "student_id": "STU002", "first_name": "Abena", "last_name": "Darko"},
        {"id": "s3", "student_id": "STU003", "first_name": "Kojo", "last_name": "Mensah"},
    ]
    subjects = [{"id": "eng", "name": "English"}, {"id": "sci", "name": "Science"}]
    grades = [
        {"student_id": "s1", "subject_id": "eng", "project": 40, "test1": 20, "test2": 20, "group_work": 20, "exam": 100},
        {"student_id": "s1", "subject_id": "sci", "project": 20, "test1": 10, "test2": 10, "group_work": 10, "exam": 50},
        {"student_id": "s2", "subject_id": "eng", "project": 20, "test1": 10, "test2": 10, "group_work": 10, "exam": 50},
        {"student_id": "s2", "subject_id": "sci", "project": 40, "test1": 20, "test2": 20, "group_work": 20, "exam": 100},
    ]
    return students, subjects, grades


def test_rank_students_orders_by_total_then_name():
    rankings = rank_students(*_ranking_fixture())
    # Abena and Yaw tie on 150; Kojo has no grades
    assert [(r["student_name"], r["overall_total"], r["position"]) for r in rankings] == [
        ("Abena Darko", 150.0, 1),
        ("Yaw Asante", 150.0, 2),
        ("Kojo Mensah", 0, 3),
    ]
    kojo = rankings[2]
    assert kojo["average"] == 0
    assert [s["grade"] for s in kojo["subject_scores"]] == [None, None]
    assert rankings[0]["subject_scores"][1]["grade"] == "HP"


def test_subject_positions_rank_each_subject_separately():
    positions = subject_positions(rank_students(*_ranking_fixture()))
    assert positions[("s1", "eng")] == 1
    assert positions[("s2", "eng")] == 2
    assert positions[("s2", "sci")] == 1
    assert positions[("s3", "sci")] == 3


def test_roll_numbers_follow_enrollment_then_code():
    students = [
        {"id": "a", "student_id": "STU003", "enrollment_date": "2023-09-04"},
        {"id": "b", "student_id": "STU002", "enrollment_date": "2024-09-02"},
        {"id": "c", "student_id": "STU001", "enrollment_date": "2024-09-02"},
    ]
    assert roll_numbers(students) == {"a": 1, "c": 2, "b": 3}
