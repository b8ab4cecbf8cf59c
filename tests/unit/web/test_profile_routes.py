"""Tests for the profile endpoint and service wiring."""


class TestProfileEndpoint:
    def test_profile_of_logged_in_student(self, client):
        token = client.post("/auth/login", json={"email": "s@s.com", "password": "study42"}).json()["token"]
        client.cookies.clear()

        response = client.get("/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["email"] == "s@s.com"
        assert response.json()["isAdmin"] is False

    def test_profile_requires_token(self, client):
        assert client.get("/profile").status_code == 401

    def test_profile_of_deleted_principal(self, client, database):
        token = client.post("/auth/login", json={"email": "t@s.com", "password": "pw123"}).json()["token"]
        database.get_collection("teachers").docs.clear()

        response = client.get("/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 404


class TestServer:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_openapi_marks_auth_endpoints_public(self, client):
        schema = client.get("/openapi.json").json()
        assert schema["paths"]["/auth/login"]["post"]["security"] == []
        assert schema["paths"]["/auth/verify-otp"]["post"]["security"] == []
        assert {"BearerAuth": []} in schema["paths"]["/profile"]["get"]["security"]
        assert {"BearerAuth": []} in schema["security"]

    def test_startup_creates_indexes(self, client, database):
        assert ([("email", 1)], {"unique": True}) in database.get_collection("teachers").indexes
        assert ([("email", 1)], {"unique": True}) in database.get_collection("students").indexes
