from tests.factories import make_class, make_student

GRADE = {
    "studentId": "s-001",
    "subjectId": "math",
    "classId": "b7",
    "term": 1,
    "academicYear": "2024/2025",
    "project": 33,
    "test1": 17,
    "test2": 15,
    "groupWork": 18,
    "exam": 71,
}


def test_subject_code_is_uppercased_and_unique(client):
    response = client.post("/api/v1/subjects", json={"name": "Mathematics", "code": " math ", "levelCategories": ["JHS"]})
    assert response.status_code == 201
    assert response.json()["code"] == "MATH"
    duplicate = client.post("/api/v1/subjects", json={"name": "Maths", "code": "MATH"})
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "A subject with this code already exists. Please use a different code."


def test_subjects_filter_by_level_category(client, db):
    db.tables["subjects"] = [
        {"id": "math", "name": "Mathematics", "code": "MATH", "level_categories": ["JHS", "Upper Primary"]},
        {"id": "owop", "name": "Our World Our People", "code": "OWOP", "level_categories": ["Lower Primary"]},
    ]
    response = client.get("/api/v1/subjects?levelCategory=JHS")
    assert [s["id"] for s in response.json()] == ["math"]


def test_subject_in_use_cannot_be_deleted(client, db):
    db.tables["subjects"] = [{"id": "math", "name": "Mathematics", "code": "MATH", "level_categories": []}]
    db.fk_blocked["subjects"] = ["math"]
    response = client.delete("/api/v1/subjects/math")
    assert response.status_code == 409
    assert response.json()["error"].startswith("Cannot delete subject.")


def test_assignments_are_unique_per_teacher_subject_and_class(client, db):
    assignment = {"teacherId": "user-teacher", "subjectId": "math", "classId": "b7"}
    assert client.post("/api/v1/subject-assignments", json=assignment).status_code == 201
    assert client.post("/api/v1/subject-assignments", json=assignment).status_code == 409
    bulk = client.post("/api/v1/subject-assignments", json=[assignment, {**assignment, "classId": "b8"}])
    assert bulk.status_code == 409
    assert bulk.json()["error"] == "One or more assignments already exist"


def test_delete_assignment_by_keys_needs_all_three(client, db):
    response = client.delete("/api/v1/subject-assignments/delete?teacherId=user-teacher&subjectId=math")
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required parameters: teacherId, subjectId, classId"
    client.post("/api/v1/subject-assignments", json={"teacherId": "t", "subjectId": "s", "classId": "c"})
    response = client.delete("/api/v1/subject-assignments/delete?teacherId=t&subjectId=s&classId=c")
    assert response.status_code == 200
    assert db.rows("subject_assignments") == []


def test_grade_upsert_updates_the_existing_row(client, db, current_user):
    first = client.post("/api/v1/grades", json=GRADE)
    assert first.status_code == 200
    assert first.json()["teacherId"] == current_user["id"]
    second = client.post("/api/v1/grades", json={**GRADE, "exam": 90})
    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    assert len(db.rows("grades")) == 1
    assert db.rows("grades")[0]["exam"] == 90


def test_grade_scores_above_maximum_are_rejected(client):
    response = client.post("/api/v1/grades", json={**GRADE, "project": 41})
    assert response.status_code == 422
    assert response.json()["error"].startswith("project")


def test_grades_with_details(client, db):
    make_class(db, "b7", "Basic 7A", 8)
    make_student(db, "s-001", "b7", "Kwame", "Owusu")
    db.tables["subjects"] = [{"id": "math", "name": "Mathematics", "code": "MATH", "level_categories": ["JHS"]}]
    client.post("/api/v1/grades", json=GRADE)
    response = client.get("/api/v1/grades?studentId=s-001&withDetails=true")
    assert response.status_code == 200
    detail = response.json()[0]
    assert detail["studentName"] == "Kwame Owusu"
    assert detail["subjectName"] == "Mathematics"
    assert detail["className"] == "Basic 7A"
    assert (detail["classScore"], detail["examScore"], detail["total"], detail["grade"]) == (41.5, 35.5, 77.0, "P")


def test_grades_with_details_use_the_active_grading_system(client, db):
    db.tables["grading_system"] = [{"id": "gs", "name": "Pass/Fail", "is_active": True}]
    db.tables["grade_levels"] = [
        {"id": "l1", "grading_system_id": "gs", "code": "PASS", "name": "Pass",
         "min_percentage": 50, "max_percentage": 100, "order_index": 2},
        {"id": "l2", "grading_system_id": "gs", "code": "FAIL", "name": "Fail",
         "min_percentage": 0, "max_percentage": 49.99, "order_index": 1},
    ]
    client.post("/api/v1/grades", json=GRADE)
    detail = client.get("/api/v1/grades?withDetails=true").json()[0]
    assert detail["grade"] == "PASS"


def test_attendance_percentage_is_computed(client, db):
    payload = {"studentId": "s-001", "term": 1, "academicYear": "2024/2025", "totalDays": 60, "presentDays": 57, "absentDays": 3}
    response = client.post("/api/v1/attendance", json=payload)
    assert response.status_code == 200
    assert response.json()["attendancePercentage"] == 95.0


def test_attendance_days_cannot_exceed_total(client):
    payload = {"studentId": "s-001", "term": 1, "academicYear": "2024/2025", "totalDays": 60, "presentDays": 58, "absentDays": 3}
    response = client.post("/api/v1/attendance", json=payload)
    assert response.status_code == 422


def test_attendance_filters_by_class_roster(client, db):
    make_student(db, "s-001", "b7", "Kwame", "Owusu")
    make_student(db, "s-002", "b8", "Esi", "Quaye")
    for student_id in ("s-001", "s-002"):
        client.post("/api/v1/attendance", json={
            "studentId": student_id, "term": 1, "academicYear": "2024/2025", "totalDays": 60, "presentDays": 50,
        })
    response = client.get("/api/v1/attendance?classId=b7")
    assert [a["studentId"] for a in response.json()] == ["s-001"]


def test_evaluation_lookup_needs_student_term_and_year_or_class(client, db):
    payload = {
        "studentId": "s-001", "term": 2, "academicYear": "2024/2025",
        "conductRating": "Respectful", "interestLevel": "Reading",
        "classTeacherRemarks": "Keep it up",
    }
    assert client.post("/api/v1/evaluations", json=payload).status_code == 200
    found = client.get("/api/v1/evaluations?studentId=s-001&term=2&academicYear=2024/2025")
    assert found.json()["conductRating"] == "Respectful"
    missing = client.get("/api/v1/evaluations?studentId=s-001")
    assert missing.status_code == 400


def test_evaluation_rejects_unknown_vocabulary(client):
    payload = {"studentId": "s-001", "term": 2, "academicYear": "2024/2025", "conductRating": "Brilliant"}
    assert client.post("/api/v1/evaluations", json=payload).status_code == 422


def test_rewards_default_to_today(client, db):
    response = client.post("/api/v1/rewards", json={
        "studentId": "s-001", "rewardType": "Merit", "description": "Best in class",
    })
    assert response.status_code == 201
    assert response.json()["dateAwarded"]
    assert response.json()["rewardType"] == "Merit"
    listed = client.get("/api/v1/rewards?studentId=s-001").json()
    assert [r["description"] for r in listed] == ["Best in class"]


def test_lowercase_reward_types_are_stored_capitalized(client, db):
    response = client.post("/api/v1/rewards", json={
        "studentId": "s-001", "rewardType": "leadership", "description": "Class prefect",
    })
    assert response.status_code == 201
    assert db.rows("class_teacher_rewards")[0]["reward_type"] == "Leadership"
    bad = client.post("/api/v1/rewards", json={"studentId": "s-001", "rewardType": "Bravery", "description": "x"})
    assert bad.status_code == 422
