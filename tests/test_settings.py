from app.core.academic_years import current_academic_year

LEVELS = [
    {"code": "A", "name": "Excellent", "minPercentage": 70, "maxPercentage": 100, "order": 3},
    {"code": "B", "name": "Good", "minPercentage": 50, "maxPercentage": 69.99, "order": 2},
    {"code": "F", "name": "Fail", "minPercentage": 0, "maxPercentage": 49.99, "order": 1},
]


def test_settings_fall_back_to_defaults(client):
    assert client.get("/api/v1/settings/school").json() is None
    academic = client.get("/api/v1/settings/academic").json()
    assert academic["currentAcademicYear"] == current_academic_year()
    assert academic["currentTerm"] == 1
    assessment = client.get("/api/v1/settings/assessment").json()
    assert (assessment["project"], assessment["groupWork"], assessment["exam"]) == (40, 20, 100)
    preferences = client.get("/api/v1/settings/preferences").json()
    assert preferences["userId"] == "user-admin"
    assert preferences["theme"] == "light"
    grading = client.get("/api/v1/settings/grading-system").json()
    assert [level["code"] for level in grading["gradeLevels"]] == ["HP", "P", "AP", "D", "E"]


def test_school_settings_are_saved_once(client, db):
    client.put("/api/v1/settings/school", json={"name": "Asante Basic School"})
    response = client.put("/api/v1/settings/school", json={"phone": "0244000000"})
    assert response.status_code == 200
    assert response.json()["name"] == "Asante Basic School"
    assert len(db.rows("school_settings")) == 1


def test_term_settings_upsert_by_year_and_term(client, db):
    payload = {"academicYear": "2024/2025", "term": 1, "closingDate": "2024-12-13", "reopeningDate": "2025-01-07"}
    client.post("/api/v1/settings/term", json=payload)
    client.post("/api/v1/settings/term", json={**payload, "closingDate": "2024-12-20"})
    terms = client.get("/api/v1/settings/term?academicYear=2024/2025").json()
    assert len(terms) == 1
    assert terms[0]["closingDate"] == "2024-12-20"


def test_term_settings_need_a_valid_academic_year(client):
    assert client.get("/api/v1/settings/term?academicYear=2024-2025").status_code == 422


def test_grading_system_replaces_levels(client, db):
    response = client.put("/api/v1/settings/grading-system", json={"name": "Letters", "gradeLevels": LEVELS})
    assert response.status_code == 200
    assert [level["code"] for level in response.json()["gradeLevels"]] == ["A", "B", "F"]

    response = client.put("/api/v1/settings/grading-system", json={"name": "Letters", "gradeLevels": LEVELS[:2]})
    assert [level["code"] for level in response.json()["gradeLevels"]] == ["A", "B"]
    assert len(db.rows("grading_system")) == 1


def test_overlapping_grade_levels_are_rejected(client):
    levels = [dict(LEVELS[0]), {**LEVELS[1], "maxPercentage": 75}]
    response = client.put("/api/v1/settings/grading-system", json={"name": "Letters", "gradeLevels": levels})
    assert response.status_code == 400
    assert response.json()["error"] == "Grade levels B and A overlap"


def test_teacher_cannot_change_settings(teacher_client):
    response = teacher_client.put("/api/v1/settings/academic", json={"currentTerm": 2})
    assert response.status_code == 403
