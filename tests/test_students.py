from tests.factories import make_class, make_student

NEW_STUDENT = {
    "studentId": "STU010",
    "firstName": "Akosua",
    "lastName": "Frimpong",
    "dateOfBirth": "2013-02-14",
    "gender": "female",
    "classId": "c1",
}


def test_create_student_defaults_class_teacher_and_recounts(client, db):
    make_class(db, "c1", "Basic 4A", 5, class_teacher_id="user-teacher")
    response = client.post("/api/v1/students", json=NEW_STUDENT)
    assert response.status_code == 201
    body = response.json()
    assert body["classTeacherId"] == "user-teacher"
    assert body["status"] == "active"
    assert body["enrollmentDate"]
    assert db.rows("classes")[0]["student_count"] == 1


def test_duplicate_student_code_is_a_conflict(client, db):
    make_class(db, "c1", "Basic 4A", 5)
    assert client.post("/api/v1/students", json=NEW_STUDENT).status_code == 201
    response = client.post("/api/v1/students", json=NEW_STUDENT)
    assert response.status_code == 409
    assert response.json()["error"] == "This record already exists. Please use a different value."


def test_missing_required_field_is_rejected(client, db):
    payload = {k: v for k, v in NEW_STUDENT.items() if k != "firstName"}
    response = client.post("/api/v1/students", json=payload)
    assert response.status_code == 422
    assert "firstName" in response.json()["error"]


def test_get_unknown_student_is_404(client):
    response = client.get("/api/v1/students/nope")
    assert response.status_code == 404
    assert response.json() == {"error": "Student not found"}


def test_moving_a_student_recounts_both_classes(client, db):
    make_class(db, "c1", "Basic 4A", 5)
    make_class(db, "c2", "Basic 4B", 5)
    make_student(db, "s-001", "c1", "Kwame", "Owusu")
    make_student(db, "s-002", "c1", "Esi", "Quaye")
    response = client.patch("/api/v1/students/s-001", json={"classId": "c2"})
    assert response.status_code == 200
    counts = {c["id"]: c["student_count"] for c in db.rows("classes")}
    assert counts == {"c1": 1, "c2": 1}


def test_generate_id_continues_the_latest_code(client, db):
    assert client.get("/api/v1/students/generate-id").json() == {"studentId": "STU001"}
    make_student(db, "s-007", "c1", "Kwame", "Owusu", code="STU007")
    assert client.get("/api/v1/students/generate-id").json() == {"studentId": "STU008"}


def test_list_filters_by_class_and_status(client, db):
    make_student(db, "s-001", "c1", "Kwame", "Owusu")
    make_student(db, "s-002", "c2", "Esi", "Quaye")
    make_student(db, "s-003", "c1", "Yaw", "Boadu", status="graduated")
    assert [s["id"] for s in client.get("/api/v1/students?classId=c1&status=active").json()] == ["s-001"]
    assert [s["id"] for s in client.get("/api/v1/students/graduated").json()] == ["s-003"]


def test_import_reports_failed_rows_and_generates_codes(client, db):
    make_class(db, "c1", "Basic 4A", 5)
    make_student(db, "s-004", "c1", "Kwame", "Owusu", code="STU004")
    rows = [
        {**NEW_STUDENT, "studentId": None, "firstName": "Adjoa"},
        {**NEW_STUDENT, "studentId": "STU004", "firstName": "Duplicate"},
        {**NEW_STUDENT, "studentId": None, "firstName": "Kobby"},
    ]
    response = client.post("/api/v1/students/import", json={"students": rows})
    assert response.status_code == 200
    body = response.json()
    assert body["created"] == 2
    assert body["failed"] == 1
    assert body["errors"][0]["row"] == 2
    codes = sorted(s["student_id"] for s in db.rows("students"))
    assert codes == ["STU004", "STU005", "STU006"]
    assert db.rows("classes")[0]["student_count"] == 3


def test_teacher_without_permission_cannot_delete(teacher_client, db):
    make_student(db, "s-001", "c1", "Kwame", "Owusu")
    response = teacher_client.delete("/api/v1/students/s-001")
    assert response.status_code == 403
    assert response.json()["error"] == "Insufficient permissions. Required: students:delete"
