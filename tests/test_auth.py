import pytest
from fastapi.testclient import TestClient

from app.database.supabase_client import get_optional_supabase_admin, get_session_client_factory, get_supabase
from app.main import app
from app.modules.auth.service import clear_auth_cache


@pytest.fixture(autouse=True)
def fresh_token_cache():
    clear_auth_cache()
    yield
    clear_auth_cache()


@pytest.fixture
def anon_client(db):
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_optional_supabase_admin] = lambda: db
    app.dependency_overrides[get_session_client_factory] = lambda: db.new_session_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def teacher_account(db):
    db.auth.users["auth-ama"] = {"id": "auth-ama", "email": "ama@school.test", "password": "s3cret-pass"}
    profile = {
        "id": "user-ama",
        "auth_user_id": "auth-ama",
        "email": "ama@school.test",
        "name": "Ama Mensah",
        "role": "subject_teacher",
        "is_active": True,
        "is_subject_teacher": True,
    }
    db.tables["users"] = [profile]
    return profile


def test_login_returns_session_and_profile(anon_client, teacher_account):
    response = anon_client.post("/api/v1/auth/login", json={"email": "ama@school.test", "password": "s3cret-pass"})
    assert response.status_code == 200
    body = response.json()
    assert body["accessToken"] == "token-auth-ama"
    assert body["user"]["id"] == "user-ama"
    assert body["user"]["role"] == "subject_teacher"
    assert body["passwordChangeRequired"] is False


def test_login_with_wrong_password(anon_client, teacher_account):
    response = anon_client.post("/api/v1/auth/login", json={"email": "ama@school.test", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["error"].startswith("Invalid email or password")


def test_login_of_deactivated_account(anon_client, teacher_account, db):
    db.tables["users"][0]["is_active"] = False
    response = anon_client.post("/api/v1/auth/login", json={"email": "ama@school.test", "password": "s3cret-pass"})
    assert response.status_code == 403
    assert response.json()["error"] == "Your account has been deactivated. Please contact your administrator."


def test_me_lists_role_permissions(anon_client, teacher_account):
    token = anon_client.post(
        "/api/v1/auth/login", json={"email": "ama@school.test", "password": "s3cret-pass"}
    ).json()["accessToken"]
    response = anon_client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "user-ama"
    assert "grades:enter" in body["permissions"]
    assert "students:delete" not in body["permissions"]


def test_requests_without_a_token_are_unauthorized(anon_client):
    response = anon_client.get("/api/v1/students")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_health_endpoints(anon_client):
    response = anon_client.get("/health")
    assert response.json() == {"status": "healthy"}
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert anon_client.get("/ready").json() == {"status": "ready"}


def test_query_validation_errors_name_the_parameter(client):
    response = client.get("/api/v1/analytics/bece?academicYear=2024")
    assert response.status_code == 422
    assert response.json()["error"].startswith("academicYear:")


def _login(anon_client, password="s3cret-pass"):
    return anon_client.post("/api/v1/auth/login", json={"email": "ama@school.test", "password": password})


def _bearer(anon_client):
    return {"Authorization": f"Bearer {_login(anon_client).json()['accessToken']}"}


def test_login_session_stays_off_the_shared_client(anon_client, teacher_account, db):
    assert _login(anon_client).status_code == 200
    assert db.auth.session is None
    assert db.session_clients[-1].auth.session.access_token == "token-auth-ama"


def test_unverified_email_cannot_log_in(anon_client, teacher_account, db):
    db.auth.users["auth-ama"]["email_confirmed_at"] = None
    response = _login(anon_client)
    assert response.status_code == 403
    assert response.json()["error"] == "Please verify your email address before logging in."
    assert db.session_clients[-1].auth.session is None


def test_logout_revokes_the_session(anon_client, teacher_account, db):
    headers = _bearer(anon_client)
    assert anon_client.post("/api/v1/auth/logout", headers=headers).status_code == 200
    assert db.auth.revoked == ["token-auth-ama"]


def test_change_password_clears_the_first_login_flag(anon_client, teacher_account, db):
    db.tables["users"][0]["password_change_required"] = True
    headers = _bearer(anon_client)
    response = anon_client.post("/api/v1/auth/change-password", headers=headers, json={
        "newPassword": "n3w-password", "confirmPassword": "n3w-password",
    })
    assert response.status_code == 200
    assert db.tables["users"][0]["password_change_required"] is False
    assert _login(anon_client, "n3w-password").status_code == 200


def test_change_password_checks_the_current_password(anon_client, teacher_account, db):
    headers = _bearer(anon_client)
    wrong = anon_client.post("/api/v1/auth/change-password", headers=headers, json={
        "currentPassword": "guess", "newPassword": "n3w-password", "confirmPassword": "n3w-password",
    })
    assert wrong.status_code == 400
    assert wrong.json()["error"] == "Your current password is incorrect."

    response = anon_client.post("/api/v1/auth/change-password", headers=headers, json={
        "currentPassword": "s3cret-pass", "newPassword": "n3w-password", "confirmPassword": "n3w-password",
    })
    assert response.status_code == 200
    assert db.auth.session is None
    assert db.session_clients[-1].auth.session is None


def test_change_password_validation(anon_client, teacher_account):
    headers = _bearer(anon_client)
    mismatch = anon_client.post("/api/v1/auth/change-password", headers=headers, json={
        "currentPassword": "s3cret-pass", "newPassword": "n3w-password", "confirmPassword": "other-password",
    })
    assert mismatch.status_code == 422
    assert "do not match" in mismatch.json()["error"]
    short = anon_client.post("/api/v1/auth/change-password", headers=headers, json={
        "currentPassword": "s3cret-pass", "newPassword": "short", "confirmPassword": "short",
    })
    assert short.status_code == 422
    assert short.json()["error"].startswith("newPassword:")


def test_forgot_password_redirects_to_reset_page(anon_client, teacher_account, db):
    response = anon_client.post("/api/v1/auth/forgot-password", json={"email": "ama@school.test"})
    assert response.status_code == 200
    assert db.auth.reset_requests == [
        ("ama@school.test", {"redirect_to": "http://localhost:3000/reset-password"})
    ]


def test_reset_password_with_recovery_token(anon_client, teacher_account, db):
    db.auth.otp_tokens["recovery-hash"] = ("auth-ama", "recovery")
    response = anon_client.post("/api/v1/auth/reset-password", json={
        "token": "recovery-hash", "newPassword": "n3w-password",
    })
    assert response.status_code == 200
    assert db.auth.users["auth-ama"]["password"] == "n3w-password"
    assert db.auth.session is None


def test_reset_password_with_invalid_token(anon_client, teacher_account):
    response = anon_client.post("/api/v1/auth/reset-password", json={"token": "bogus", "newPassword": "n3w-password"})
    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid or expired reset token.")


def test_verify_email_marks_profile_verified(anon_client, teacher_account, db):
    db.auth.otp_tokens["email-hash"] = ("auth-ama", "email")
    response = anon_client.post("/api/v1/auth/verify-email", json={"token": "email-hash"})
    assert response.status_code == 200
    assert db.tables["users"][0]["email_verified"] is True
    # tokens are single use
    again = anon_client.post("/api/v1/auth/verify-email", json={"token": "email-hash"})
    assert again.status_code == 400
