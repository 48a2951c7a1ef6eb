"""
Tests for login, registration and token handling
"""
from datetime import timedelta

from app.core.security import create_access_token, decode_access_token
from app.models import Company, User

from tests.conftest import register


class TestRegister:
    def test_register_creates_company_and_admin(self, client):
        data = register(client, "owner@newco.com", "NewCo")
        user = data["user"]
        assert user["email"] == "owner@newco.com"
        assert user["role"] == "ADMIN"
        assert user["company"]["name"] == "NewCo"
        assert user["company"]["currency"] == "INR"
        assert "hashedPassword" not in user and "password" not in user

        claims = decode_access_token(data["token"])
        assert claims["id"] == user["id"]
        assert claims["email"] == "owner@newco.com"
        assert claims["role"] == "ADMIN"
        assert claims["companyId"] == user["companyId"]

    def test_register_with_explicit_role(self, client):
        data = register(client, "clerk@newco.com", "NewCo", role="USER")
        assert data["user"]["role"] == "USER"

    def test_register_super_admin_rejected(self, client):
        response = client.post("/api/auth/register", json={
            "email": "root@newco.com",
            "password": "secret123",
            "firstName": "Root",
            "lastName": "User",
            "companyName": "NewCo",
            "role": "SUPER_ADMIN",
        })
        assert response.status_code == 400
        assert "role" in response.json()["error"]

    def test_duplicate_email_is_conflict_and_creates_nothing(self, client, company_a, db_session):
        companies_before = db_session.query(Company).count()
        response = client.post("/api/auth/register", json={
            "email": "alice@acme.com",
            "password": "another1",
            "firstName": "Alice",
            "lastName": "Again",
            "companyName": "Shadow Co",
        })
        assert response.status_code == 409
        assert response.json() == {"error": "User already exists"}
        assert db_session.query(Company).count() == companies_before
        assert db_session.query(Company).filter(Company.name == "Shadow Co").first() is None

    def test_invalid_body_is_bad_request(self, client):
        response = client.post("/api/auth/register", json={
            "email": "not-an-email",
            "password": "secret123",
            "firstName": "A1",
            "lastName": "B1",
            "companyName": "Co",
        })
        assert response.status_code == 400
        assert response.json()["error"].startswith("email")

    def test_short_password_is_bad_request(self, client):
        response = client.post("/api/auth/register", json={
            "email": "short@newco.com",
            "password": "123",
            "firstName": "Shorty",
            "lastName": "Pass",
            "companyName": "NewCo",
        })
        assert response.status_code == 400


class TestLogin:
    def test_login_returns_token_and_user(self, client, company_a):
        response = client.post("/api/auth/login", json={"email": "alice@acme.com", "password": "secret123"})
        assert response.status_code == 200
        body = response.json()
        assert body["user"]["email"] == "alice@acme.com"
        assert body["user"]["company"]["name"] == "Acme Corp"
        assert decode_access_token(body["token"])["companyId"] == company_a["user"]["companyId"]

    def test_wrong_password(self, client, company_a):
        response = client.post("/api/auth/login", json={"email": "alice@acme.com", "password": "wrong"})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    def test_unknown_email_gives_same_error(self, client):
        response = client.post("/api/auth/login", json={"email": "ghost@acme.com", "password": "secret123"})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    def test_inactive_user_cannot_login(self, client, company_a, db_session):
        user = db_session.query(User).filter(User.email == "alice@acme.com").one()
        user.is_active = False
        db_session.commit()

        response = client.post("/api/auth/login", json={"email": "alice@acme.com", "password": "secret123"})
        assert response.status_code == 401


class TestMe:
    def test_me(self, client, auth_headers):
        response = client.get("/api/auth/me", headers=auth_headers)
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["email"] == "alice@acme.com"
        assert user["company"]["name"] == "Acme Corp"

    def test_missing_token_is_unauthorized(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json() == {"error": "Access token required"}

    def test_garbage_token_is_forbidden(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.token"})
        assert response.status_code == 403

    def test_expired_token_is_forbidden(self, client, company_a):
        token = create_access_token({"id": company_a["user"]["id"]}, expires_delta=timedelta(minutes=-5))
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403

    def test_token_for_deleted_user_is_unauthorized(self, client):
        token = create_access_token({"id": 9999, "companyId": 1})
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_deactivated_user_loses_access(self, client, company_a, db_session):
        user = db_session.query(User).filter(User.email == "alice@acme.com").one()
        user.is_active = False
        db_session.commit()

        response = client.get("/api/auth/me", headers=company_a["headers"])
        assert response.status_code == 401


class TestChangePassword:
    def test_change_password(self, client, auth_headers):
        response = client.post(
            "/api/auth/change-password",
            json={"currentPassword": "secret123", "newPassword": "brandnew1"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Password updated successfully"}

        old = client.post("/api/auth/login", json={"email": "alice@acme.com", "password": "secret123"})
        assert old.status_code == 401
        new = client.post("/api/auth/login", json={"email": "alice@acme.com", "password": "brandnew1"})
        assert new.status_code == 200

    def test_wrong_current_password(self, client, auth_headers):
        response = client.post(
            "/api/auth/change-password",
            json={"currentPassword": "nope", "newPassword": "brandnew1"},
            headers=auth_headers,
        )
        assert response.status_code == 400
