"""
Tests for user management and the company profile
"""
from tests.conftest import register


def new_user(**overrides):
    payload = {
        "email": "staff@acme.com",
        "password": "staffpass",
        "firstName": "Staff",
        "lastName": "Member",
        "role": "USER",
    }
    payload.update(overrides)
    return payload


class TestUsers:
    def test_admin_creates_and_lists_users(self, client, auth_headers):
        response = client.post("/api/users", json=new_user(), headers=auth_headers)
        assert response.status_code == 201
        created = response.json()
        assert created["role"] == "USER"
        assert created["isActive"] is True

        listing = client.get("/api/users", headers=auth_headers).json()
        assert listing["total"] == 2
        assert {user["email"] for user in listing["items"]} == {"alice@acme.com", "staff@acme.com"}

        found = client.get("/api/users", params={"q": "STAFF"}, headers=auth_headers).json()
        assert found["total"] == 1

    def test_created_user_can_login(self, client, auth_headers):
        client.post("/api/users", json=new_user(), headers=auth_headers)
        response = client.post("/api/auth/login", json={"email": "staff@acme.com", "password": "staffpass"})
        assert response.status_code == 200

    def test_non_admin_is_forbidden(self, client, auth_headers):
        client.post("/api/users", json=new_user(), headers=auth_headers)
        login = client.post("/api/auth/login", json={"email": "staff@acme.com", "password": "staffpass"}).json()
        headers = {"Authorization": f"Bearer {login['token']}"}

        response = client.get("/api/users", headers=headers)
        assert response.status_code == 403
        assert response.json() == {"error": "Insufficient permissions"}

    def test_duplicate_email_conflict(self, client, auth_headers):
        response = client.post("/api/users", json=new_user(email="alice@acme.com"), headers=auth_headers)
        assert response.status_code == 409

    def test_admin_cannot_grant_super_admin(self, client, auth_headers):
        response = client.post("/api/users", json=new_user(role="SUPER_ADMIN"), headers=auth_headers)
        assert response.status_code == 403

    def test_update_user(self, client, auth_headers):
        user_id = client.post("/api/users", json=new_user(), headers=auth_headers).json()["id"]
        response = client.put(
            f"/api/users/{user_id}",
            json={"role": "MANAGER", "firstName": "Renamed"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["role"] == "MANAGER"
        assert response.json()["firstName"] == "Renamed"

    def test_delete_user_returns_no_content(self, client, auth_headers):
        user_id = client.post("/api/users", json=new_user(), headers=auth_headers).json()["id"]
        response = client.delete(f"/api/users/{user_id}", headers=auth_headers)
        assert response.status_code == 204
        assert client.get(f"/api/users/{user_id}", headers=auth_headers).status_code == 404

    def test_cannot_delete_self(self, client, company_a):
        response = client.delete(f"/api/users/{company_a['user']['id']}", headers=company_a["headers"])
        assert response.status_code == 400

    def test_other_company_user_is_not_found(self, client, company_a, company_b):
        other_id = company_b["user"]["id"]
        assert client.get(f"/api/users/{other_id}", headers=company_a["headers"]).status_code == 404
        assert client.delete(f"/api/users/{other_id}", headers=company_a["headers"]).status_code == 404


class TestCompanyProfile:
    def test_get_profile(self, client, auth_headers):
        response = client.get("/api/companies/profile", headers=auth_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Acme Corp"
        assert body["timezone"] == "Asia/Kolkata"

    def test_admin_updates_profile(self, client, auth_headers):
        response = client.put(
            "/api/companies/profile",
            json={"legalName": "Acme Corporation Pvt Ltd", "taxId": "27ABCDE1234F1Z5"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["legalName"] == "Acme Corporation Pvt Ltd"
        assert response.json()["name"] == "Acme Corp"

    def test_currency_cannot_be_cleared(self, client, auth_headers):
        response = client.put("/api/companies/profile", json={"currency": None}, headers=auth_headers)
        assert response.status_code == 400
        assert client.get("/api/companies/profile", headers=auth_headers).json()["currency"] == "INR"

    def test_non_admin_cannot_update_profile(self, client):
        clerk = register(client, "clerk@acme.com", "Clerk Co", role="USER")
        assert client.get("/api/companies/profile", headers=clerk["headers"]).status_code == 200
        response = client.put("/api/companies/profile", json={"name": "Hijacked"}, headers=clerk["headers"])
        assert response.status_code == 403
