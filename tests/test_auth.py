import inspect
from datetime import timedelta
from types import SimpleNamespace

from clinic_booking.core.config import settings
from clinic_booking.core.security import SessionIssuer

# Test data
test_user_data = {
    "name": "Test User",
    "email": "test@example.com",
    "password": "TestPassword123",
    "role": "patient",
}

test_login_data = {
    "email": "test@example.com",
    "password": "TestPassword123"
}

class TestAuthentication:

    def test_register_user(self, client):
        """Test user registration."""
        response = client.post("/api/v1/auth/register", json=test_user_data)
        assert response.status_code == 201

        data = response.json()
        assert data["user"]["email"] == test_user_data["email"]
        assert data["user"]["role"] == test_user_data["role"]
        assert "password_hash" not in data["user"]
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == settings.SESSION_TTL_HOURS * 3600

    def test_register_duplicate_email(self, client):
        """Test registration with duplicate email."""
        client.post("/api/v1/auth/register", json=test_user_data)

        response = client.post("/api/v1/auth/register", json=test_user_data)
        assert response.status_code == 400
        assert response.json()["error"] == "duplicate_email"
        assert "already registered" in response.json()["message"]

    def test_register_duplicate_email_with_empty_name(self, client):
        """A registered email is reported as duplicate before empty fields."""
        client.post("/api/v1/auth/register", json=test_user_data)

        response = client.post("/api/v1/auth/register", json={**test_user_data, "name": ""})
        assert response.status_code == 400
        assert response.json()["error"] == "duplicate_email"

    def test_register_missing_field(self, client):
        """Test registration with an empty name."""
        invalid_data = test_user_data.copy()
        invalid_data["name"] = ""

        response = client.post("/api/v1/auth/register", json=invalid_data)
        assert response.status_code == 400
        assert response.json()["error"] == "missing_field"

    def test_register_invalid_role(self, client):
        """Test registration with a role outside patient/admin."""
        invalid_data = test_user_data.copy()
        invalid_data["role"] = "doctor"

        response = client.post("/api/v1/auth/register", json=invalid_data)
        assert response.status_code == 422

    def test_login_success(self, client):
        """Test successful login."""
        client.post("/api/v1/auth/register", json=test_user_data)

        response = client.post("/api/v1/auth/login", json=test_login_data)
        assert response.status_code == 200

        data = response.json()
        assert "access_token" in data
        assert data["token_type"] == "bearer"
        assert data["user"]["email"] == test_login_data["email"]

    def test_login_seeded_admin(self, client):
        """The default administrator exists after startup."""
        response = client.post(
            "/api/v1/auth/login",
            json={"email": settings.DEFAULT_ADMIN_EMAIL, "password": settings.DEFAULT_ADMIN_PASSWORD},
        )
        assert response.status_code == 200
        assert response.json()["user"]["role"] == "admin"
        assert response.json()["user"]["id"] == "admin-1"

    def test_login_invalid_credentials(self, client):
        """Test login with invalid credentials."""
        invalid_login = {
            "email": "nonexistent@example.com",
            "password": "wrongpassword"
        }

        response = client.post("/api/v1/auth/login", json=invalid_login)
        assert response.status_code == 401
        assert response.json() == {"error": "not_found", "message": "Invalid email or password"}

    def test_login_wrong_password(self, client):
        """Test login with wrong password."""
        client.post("/api/v1/auth/register", json=test_user_data)

        wrong_login = test_login_data.copy()
        wrong_login["password"] = "wrongpassword"

        response = client.post("/api/v1/auth/login", json=wrong_login)
        assert response.status_code == 401

    def test_get_current_user(self, client):
        """Test getting current session identity."""
        register_response = client.post("/api/v1/auth/register", json=test_user_data)

        token = register_response.json()["access_token"]
        headers = {"Authorization": f"Bearer {token}"}

        response = client.get("/api/v1/auth/me", headers=headers)
        assert response.status_code == 200

        data = response.json()
        assert data["email"] == test_user_data["email"]
        assert data["name"] == test_user_data["name"]

    def test_get_current_user_invalid_token(self, client):
        """Test get current user with invalid token."""
        headers = {"Authorization": "Bearer invalid_token"}

        response = client.get("/api/v1/auth/me", headers=headers)
        assert response.status_code == 401
        assert response.json() == {"error": "malformed", "message": "Invalid session token"}
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_get_current_user_expired_token(self, client):
        """Test get current user with an expired token."""
        register_response = client.post("/api/v1/auth/register", json=test_user_data)
        user = register_response.json()["user"]

        issuer = SessionIssuer(secret_key=settings.SECRET_KEY, algorithm=settings.ALGORITHM)
        token = issuer.issue(
            SimpleNamespace(id=user["id"], email=user["email"], name=user["name"], role=user["role"]),
            expires_delta=timedelta(minutes=-1),
        )

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json() == {"error": "expired", "message": "Session has expired"}

    def test_get_current_user_without_token(self, client):
        """Test get current user without credentials."""
        response = client.get("/api/v1/auth/me")
        assert response.status_code in (401, 403)

    def test_logout(self, client):
        """Logout is acknowledged; the token itself stays valid until expiry."""
        register_response = client.post("/api/v1/auth/register", json=test_user_data)
        headers = {"Authorization": f"Bearer {register_response.json()['access_token']}"}

        response = client.post("/api/v1/auth/logout", headers=headers)
        assert response.status_code == 200

        response = client.get("/api/v1/auth/me", headers=headers)
        assert response.status_code == 200

    def test_verify_token(self, client):
        """Test token verification."""
        register_response = client.post("/api/v1/auth/register", json=test_user_data)

        token = register_response.json()["access_token"]
        headers = {"Authorization": f"Bearer {token}"}

        response = client.post("/api/v1/auth/verify-token", headers=headers)
        assert response.status_code == 200

        data = response.json()
        assert data["valid"] == True
        assert data["user_id"] == register_response.json()["user"]["id"]
        assert data["role"] == "patient"

class TestApplication:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Process-Time" in response.headers

    def test_unknown_route(self, client):
        response = client.get("/api/v1/nowhere")
        assert response.status_code == 404
        assert response.json()["path"] == "/api/v1/nowhere"

    def test_hashing_routes_run_in_threadpool(self):
        """Register and login hash passwords, so they must not be coroutines."""
        from clinic_booking.api.v1 import auth

        assert not inspect.iscoroutinefunction(auth.register)
        assert not inspect.iscoroutinefunction(auth.login)

    def test_import_builds_no_application(self):
        """The application and its store only exist once create_app is called."""
        from clinic_booking import main

        assert not hasattr(main, "app")
