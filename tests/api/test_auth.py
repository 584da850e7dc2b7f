"""
Tests for registration, login and bearer-token handling.
"""

from conftest import auth_headers, create_user


class TestRegister:

    def test_register_returns_201(self, client):
        response = client.post("/auth/register", json={
            "email": "new@test.com",
            "password": "password123",
            "first_name": "New",
            "last_name": "User",
        })

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "new@test.com"
        assert "password" not in data
        assert "password_hash" not in data

    def test_duplicate_email_returns_409(self, client, db_session):
        create_user(db_session, email="new@test.com")

        response = client.post("/auth/register", json={
            "email": "new@test.com",
            "password": "password123",
            "first_name": "New",
            "last_name": "User",
        })

        assert response.status_code == 409
        assert response.json()["code"] == "DUPLICATE_KEY"

    def test_short_password_returns_422(self, client):
        response = client.post("/auth/register", json={
            "email": "new@test.com",
            "password": "123",
            "first_name": "New",
            "last_name": "User",
        })

        assert response.status_code == 422


class TestLogin:

    def test_login_returns_token(self, client, db_session):
        user = create_user(db_session)

        response = client.post("/auth/login", json={
            "email": "test@test.com", "password": "password123",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["token"]
        assert data["user"]["id"] == str(user.id)

    def test_wrong_password_returns_401(self, client, db_session):
        create_user(db_session)

        response = client.post("/auth/login", json={
            "email": "test@test.com", "password": "not-the-password",
        })

        assert response.status_code == 401
        assert response.json() == {
            "detail": "invalid email or password",
            "code": "AUTHENTICATION_FAILED",
        }


class TestBearerToken:

    def test_me_with_token(self, client, db_session):
        create_user(db_session)
        headers = auth_headers(client)

        response = client.get("/users/me", headers=headers)

        assert response.status_code == 200
        assert response.json()["email"] == "test@test.com"

    def test_missing_token_rejected(self, client):
        response = client.get("/users/me")
        assert response.status_code in (401, 403)

    def test_invalid_token_returns_401(self, client):
        response = client.get(
            "/users/me", headers={"Authorization": "Bearer garbage"}
        )
        assert response.status_code == 401

    def test_token_of_deleted_user_returns_401(self, client, db_session):
        user = create_user(db_session)
        headers = auth_headers(client)
        client.delete(f"/users/{user.id}", headers=headers)

        response = client.get("/users/me", headers=headers)

        assert response.status_code == 401
