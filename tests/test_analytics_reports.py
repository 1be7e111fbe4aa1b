import pytest

from tests.factories import make_class, make_grade, make_student


def scored(db, student_id, subject_id, total, term=1, academic_year="2024/2025"):
    """Grade row whose class work and exam both sit at `total` percent"""
    return make_grade(
        db, student_id, subject_id, term=term, academic_year=academic_year,
        project=total * 0.4, test1=total * 0.2, test2=total * 0.2, group_work=total * 0.2, exam=total,
    )


@pytest.fixture
def school(db):
    make_class(db, "b7", "Basic 7A", 8)
    make_class(db, "b8", "Basic 8A", 9, class_teacher_id="user-teacher")
    make_student(db, "s-001", "b7", "Kwame", "Owusu")
    make_student(db, "s-002", "b7", "Esi", "Quaye", enrollment_date="2023-09-04")
    make_student(db, "s-003", "b8", "Yaw", "Boateng")
    make_student(db, "s-004", "b7", "Akua", "Asante", status="withdrawn")
    db.tables["subjects"] = [
        {"id": "math", "name": "Mathematics", "code": "MATH", "level_categories": ["JHS"]},
        {"id": "eng", "name": "English Language", "code": "ENG", "level_categories": ["JHS"]},
    ]
    db.tables["subject_assignments"] = [
        {"id": "sa-1", "teacher_id": "user-teacher", "subject_id": "math", "class_id": "b7"},
    ]
    scored(db, "s-001", "math", 70)
    scored(db, "s-001", "math", 90, term=2)
    scored(db, "s-001", "eng", 85)
    scored(db, "s-002", "math", 30)
    scored(db, "s-002", "eng", 55)
    scored(db, "s-003", "math", 60)
    db.tables["attendance"] = [
        {"id": "a-1", "student_id": "s-001", "term": 1, "academic_year": "2024/2025",
         "total_days": 60, "present_days": 57, "absent_days": 3, "attendance_percentage": 95.0},
        {"id": "a-2", "student_id": "s-002", "term": 1, "academic_year": "2024/2025",
         "total_days": 60, "present_days": 48, "absent_days": 12, "attendance_percentage": 80.0},
    ]
    return db


def test_overview_for_the_whole_school(client, school):
    overview = client.get("/api/v1/analytics/overview?academicYear=2024/2025").json()
    assert overview["totalStudents"] == 3
    assert overview["averageScore"] == 65.0
    assert overview["passRate"] == 83
    assert overview["completedGrades"] == 100
    assert {s["name"]: s["value"] for s in overview["gradeDistribution"]} == {"HP": 2, "P": 1, "AP": 2, "D": 0, "E": 1}
    assert overview["performanceTrend"] == [{"term": "Term 1", "average": 60.0}, {"term": "Term 2", "average": 90.0}]
    assert overview["subjectPerformance"] == [
        {"subject": "English Language", "average": 70.0},
        {"subject": "Mathematics", "average": 62.5},
    ]


def test_overview_for_a_class_uses_active_students(client, school):
    overview = client.get("/api/v1/analytics/overview?classId=b7").json()
    assert overview["totalStudents"] == 2
    assert overview["averageScore"] == 66.0


def test_overview_for_a_teacher_covers_assigned_subjects(client, school):
    overview = client.get("/api/v1/analytics/overview?teacherId=user-teacher").json()
    assert overview["totalStudents"] == 3
    assert overview["averageScore"] == 62.5
    assert [s["subject"] for s in overview["subjectPerformance"]] == ["Mathematics"]


def test_overview_for_a_teacher_without_classes_is_empty(client, school):
    overview = client.get("/api/v1/analytics/overview?teacherId=user-nobody").json()
    assert overview["totalStudents"] == 0
    assert overview["gradeDistribution"] == []


def test_student_performance(client, school):
    response = client.get("/api/v1/analytics/students?classId=b7&academicYear=2024/2025")
    performance = {p["studentId"]: p for p in response.json()}
    assert set(performance) == {"s-001", "s-002"}

    kwame = performance["s-001"]
    assert kwame["studentName"] == "Kwame Owusu"
    assert kwame["className"] == "Basic 7A"
    assert kwame["averageScore"] == 81.7
    assert kwame["grade"] == "HP"
    assert kwame["trend"] == "improving"
    assert (kwame["subjectsCompleted"], kwame["totalSubjects"]) == (2, 2)
    assert kwame["termScores"] == [{"term": 1, "score": 77.5}, {"term": 2, "score": 90.0}]

    esi = performance["s-002"]
    assert (esi["averageScore"], esi["grade"], esi["trend"]) == (42.5, "D", "stable")


def test_student_attendance_is_term_scoped(client, school):
    response = client.get("/api/v1/analytics/students?studentId=s-001&term=1")
    assert response.json()[0]["attendanceRate"] == 95.0


def test_subject_performance(client, school):
    subject = client.get("/api/v1/analytics/subjects?subjectId=math").json()[0]
    assert subject["subjectName"] == "Mathematics"
    assert subject["averageScore"] == 62.5
    assert subject["passRate"] == 75
    assert (subject["totalStudents"], subject["studentsCompleted"]) == (3, 3)
    assert subject["gradeDistribution"] == {"HP": 1, "P": 1, "AP": 1, "D": 0, "E": 1}
    assert subject["trend"] == "improving"
    assert {c["className"]: c["average"] for c in subject["classPerformance"]} == {"Basic 7A": 63.3, "Basic 8A": 60.0}


def test_class_performance(client, school):
    response = client.get("/api/v1/analytics/classes/b7")
    assert response.status_code == 200
    performance = response.json()
    assert performance["totalStudents"] == 2
    assert performance["averageScore"] == 62.1
    assert performance["passRate"] == 100
    assert (performance["topPerformers"], performance["averagePerformers"], performance["needsSupport"]) == (1, 0, 1)
    assert {s["subjectName"]: s["average"] for s in performance["subjectBreakdown"]} == {
        "Mathematics": 63.3, "English Language": 70.0,
    }
    assert performance["attendanceRate"] == 88


def test_class_performance_for_unknown_class(client, school):
    response = client.get("/api/v1/analytics/classes/nope")
    assert response.status_code == 404
    assert response.json()["error"] == "Class not found"


def test_bece_analytics(client, school):
    results = [
        ("s-001", "English", "A1"), ("s-001", "Mathematics", "B2"), ("s-001", "Science", "B3"),
        ("s-001", "Social Studies", "C4"), ("s-001", "RME", "A1"), ("s-001", "ICT", "B2"),
        ("s-002", "English", "C6"), ("s-002", "Mathematics", "F9"), ("s-002", "Science", "D7"),
        ("s-999", "English", "A1"),
    ]
    school.tables["bece_results"] = [
        {"id": f"r-{i}", "student_id": sid, "academic_year": "2024/2025", "subject": subject, "grade": grade}
        for i, (sid, subject, grade) in enumerate(results)
    ]
    school.tables["bece_results"].append(
        {"id": "r-old", "student_id": "s-003", "academic_year": "2023/2024", "subject": "English", "grade": "A1"}
    )
    analytics = client.get("/api/v1/analytics/bece?academicYear=2024/2025").json()
    assert analytics["totalStudents"] == 2
    assert analytics["averageAggregate"] == 17.5
    assert analytics["gradeDistribution"] == {"excellent": 0, "veryGood": 1, "good": 1, "fair": 0}
    assert analytics["topPerformers"] == [
        {"studentName": "Kwame Owusu", "aggregate": 13},
        {"studentName": "Esi Quaye", "aggregate": 22},
    ]
    averages = {s["subject"]: s["averageGrade"] for s in analytics["subjectPerformance"]}
    assert averages["Mathematics"] == "C5"


def test_bece_analytics_needs_academic_year(client):
    assert client.get("/api/v1/analytics/bece").status_code == 422


def test_report_card(client, school):
    school.tables["term_settings"] = [
        {"id": "ts-1", "academic_year": "2024/2025", "term": 1, "closing_date": "2024-12-13", "reopening_date": "2025-01-07"},
    ]
    response = client.get("/api/v1/reports/students/s-002?term=1&academicYear=2024/2025")
    assert response.status_code == 200
    card = response.json()
    assert card["studentName"] == "Esi Quaye"
    assert (card["className"], card["levelName"]) == ("Basic 7A", "Basic 7")
    assert [(s["subjectName"], s["total"], s["grade"], s["position"]) for s in card["subjects"]] == [
        ("English Language", 55.0, "AP", 2),
        ("Mathematics", 30.0, "E", 2),
    ]
    assert card["subjects"][0]["gradeName"] == "Approaching Proficiency"
    assert (card["overallTotal"], card["average"]) == (85.0, 42.5)
    assert (card["classPosition"], card["classSize"]) == (2, 2)
    assert card["rollNumber"] == 1
    assert card["attendance"]["attendancePercentage"] == 80.0
    assert card["evaluation"] is None
    assert (card["closingDate"], card["reopeningDate"]) == ("2024-12-13", "2025-01-07")


def test_report_card_for_inactive_or_unknown_students(client, school):
    withdrawn = client.get("/api/v1/reports/students/s-004?term=1&academicYear=2024/2025")
    assert withdrawn.status_code == 400
    missing = client.get("/api/v1/reports/students/s-404?term=1&academicYear=2024/2025")
    assert missing.status_code == 404
