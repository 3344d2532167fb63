"""Tests for account endpoints."""
from fastapi.testclient import TestClient

from shiftdesk.models.user import User, UserRole
from tests.conftest import PASSWORD, auth_header, make_user


def test_signup_creates_member_and_session(client: TestClient, api_db):
    response = client.post(
        "/api/auth/signup",
        json={"name": "Jane Smith", "email": "Jane@Company.com", "password": "secret1", "department": "Design"}
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Account created"
    assert body["token"]
    assert body["user"]["email"] == "jane@company.com"
    assert body["user"]["role"] == "member"
    assert body["user"]["department"] == "Design"
    assert body["user"]["employee_code"] == "EMP0001"
    assert "password_hash" not in body["user"]

    # The issued session works immediately
    shifts = client.get("/api/shifts", headers={"Authorization": f"Bearer {body['token']}"})
    assert shifts.status_code == 200
    assert shifts.json() == {"shifts": []}


def test_signup_with_existing_email_conflicts(client: TestClient, api_db):
    make_user(api_db, email="jane@company.com")

    response = client.post(
        "/api/auth/signup",
        json={"name": "Jane Smith", "email": "jane@company.com", "password": "secret1"}
    )

    assert response.status_code == 409


def test_signup_validation_error(client: TestClient, api_db):
    response = client.post("/api/auth/signup", json={"name": "Jane Smith", "email": "jane@company.com"})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Password must be at least 6 characters"
    assert api_db.query(User).count() == 0


def test_login_with_valid_credentials(client: TestClient, api_db):
    member = make_user(api_db, email="john@company.com")

    response = client.post("/api/auth/login", json={"email": "john@company.com", "password": PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    assert body["user"]["id"] == member.id
    assert body["token"]


def test_login_with_invalid_credentials(client: TestClient, api_db):
    make_user(api_db, email="john@company.com")

    wrong_password = client.post("/api/auth/login", json={"email": "john@company.com", "password": "nope123"})
    unknown_email = client.post("/api/auth/login", json={"email": "ghost@company.com", "password": PASSWORD})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()


def test_login_requires_fields(client: TestClient, api_db):
    response = client.post("/api/auth/login", json={})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Email and password are required"


def test_employees_listed_for_admin(client: TestClient, api_db):
    admin = make_user(api_db, name="Admin User", role=UserRole.ADMIN)
    make_user(api_db, name="Zoe")
    make_user(api_db, name="Adam")

    response = client.get("/api/auth/employees", headers=auth_header(admin))

    assert response.status_code == 200
    assert [e["name"] for e in response.json()["employees"]] == ["Adam", "Zoe"]


def test_employees_forbidden_for_member(client: TestClient, api_db):
    member = make_user(api_db)

    response = client.get("/api/auth/employees", headers=auth_header(member))

    assert response.status_code == 403
    assert response.json()["error"]["message"] == "Admin privileges required"


def test_health(client: TestClient):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_unknown_endpoint_uses_error_body(client: TestClient):
    response = client.get("/api/nope")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "NOT_FOUND"
    assert body["error"]["message"] == "Endpoint not found"
    assert body["error"]["details"] == {"path": "/api/nope"}


def test_wrong_method_uses_error_body(client: TestClient):
    response = client.put("/api/health")

    assert response.status_code == 405
    assert response.json()["success"] is False


def test_responses_carry_security_headers(client: TestClient):
    response = client.get("/api/health")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["Referrer-Policy"] == "no-referrer"
