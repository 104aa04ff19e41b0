"""
Tests for authentication endpoints.
"""


def test_signup(client):
    """Test user signup."""
    response = client.post(
        "/api/auth/signup",
        json={
            "email": "Test@Example.com",
            "full_name": "Test User",
            "password": "testpassword123"
        }
    )
    assert response.status_code == 201
    assert response.json()["email"] == "test@example.com"
    assert "hashed_password" not in response.json()


def test_signup_duplicate_email(client, register):
    register("Alice")
    response = client.post(
        "/api/auth/signup",
        json={"email": "alice@example.com", "full_name": "Other", "password": "testpassword123"}
    )
    assert response.status_code == 409


def test_signup_short_password(client):
    response = client.post(
        "/api/auth/signup",
        json={"email": "short@example.com", "full_name": "Short", "password": "abc"}
    )
    assert response.status_code == 400
    assert "at least" in response.json()["detail"]


def test_login_and_me(client, register):
    """Test user login and token use."""
    user_id, headers = register("Bob")
    response = client.get("/api/users/me", headers=headers)
    assert response.status_code == 200
    assert response.json()["id"] == user_id


def test_login_invalid_credentials(client):
    """Test login with invalid credentials."""
    response = client.post(
        "/api/auth/login",
        json={"email": "nonexistent@example.com", "password": "wrongpassword"}
    )
    assert response.status_code == 401


def test_missing_and_bad_token(client):
    assert client.get("/api/trips").status_code == 401
    response = client.get("/api/trips", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_policy(client):
    response = client.get("/api/auth/policy")
    assert response.status_code == 200
    assert response.json()["min_password_len"] >= 1
