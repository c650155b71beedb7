from datetime import timedelta

from app.core.security import UserRole, create_access_token
from app.models.user import RefreshToken, User

# Test data
test_user_data = {
    "nome": "Test User",
    "email": "test@example.com",
    "senha": "TestPassword123",
}

test_login_data = {
    "email": "test@example.com",
    "senha": "TestPassword123"
}

def register_and_login(client):
    client.post("/auth/register", json=test_user_data)
    return client.post("/auth/login", json=test_login_data).json()

class TestRegistration:

    def test_register_user(self, client):
        """Registration creates a patient account."""
        response = client.post("/auth/register", json=test_user_data)
        assert response.status_code == 201

        data = response.json()
        assert data["usuario"]["email"] == test_user_data["email"]
        assert data["usuario"]["nome"] == test_user_data["nome"]
        assert data["usuario"]["perfil"] == "PACIENTE"
        assert "senha" not in data["usuario"]
        assert "password_hash" not in data["usuario"]

    def test_register_duplicate_email(self, client):
        client.post("/auth/register", json=test_user_data)

        response = client.post("/auth/register", json=test_user_data)
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "RESOURCE_CONFLICT"

    def test_register_short_password(self, client, db_session):
        """Passwords shorter than 8 characters are rejected and nothing is stored."""
        invalid_data = dict(test_user_data, senha="1234567")

        response = client.post("/auth/register", json=invalid_data)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert db_session.query(User).count() == 0

    def test_register_missing_fields(self, client):
        response = client.post("/auth/register", json={"email": "test@example.com"})
        assert response.status_code == 400

        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        fields = {detail["field"] for detail in error["details"]}
        assert "body.nome" in fields
        assert "body.senha" in fields

    def test_register_ignores_role(self, client):
        """Self-registration can never create privileged accounts."""
        response = client.post("/auth/register", json=dict(test_user_data, perfil="ADMIN"))
        assert response.status_code == 201
        assert response.json()["usuario"]["perfil"] == "PACIENTE"

class TestLogin:

    def test_login_success(self, client):
        client.post("/auth/register", json=test_user_data)

        response = client.post("/auth/login", json=test_login_data)
        assert response.status_code == 200

        data = response.json()
        assert "accessToken" in data
        assert "refreshToken" in data
        assert data["tokenType"] == "bearer"
        assert data["expiresIn"] == 15 * 60
        assert data["usuario"]["email"] == test_user_data["email"]

    def test_login_unknown_email(self, client):
        response = client.post("/auth/login", json={
            "email": "nonexistent@example.com",
            "senha": "wrongpassword"
        })
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_INVALID_CREDENTIALS"

    def test_login_wrong_password(self, client):
        client.post("/auth/register", json=test_user_data)

        response = client.post("/auth/login", json=dict(test_login_data, senha="wrongpassword"))
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_INVALID_CREDENTIALS"

    def test_login_inactive_user(self, client, db_session):
        client.post("/auth/register", json=test_user_data)
        user = db_session.query(User).filter(User.email == test_user_data["email"]).first()
        user.is_active = False
        db_session.commit()

        response = client.post("/auth/login", json=test_login_data)
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_FORBIDDEN"

    def test_login_rate_limited(self, client, monkeypatch):
        from app.core.config import settings
        monkeypatch.setattr(settings, "RATE_LIMIT_REQUESTS", 2)

        for _ in range(2):
            client.post("/auth/login", json=test_login_data)

        response = client.post("/auth/login", json=test_login_data)
        assert response.status_code == 429
        assert response.json()["error"]["code"] == "RATE_LIMITED"

class TestTokens:

    def test_get_current_user(self, client):
        tokens = register_and_login(client)
        headers = {"Authorization": f"Bearer {tokens['accessToken']}"}

        response = client.get("/auth/me", headers=headers)
        assert response.status_code == 200
        assert response.json()["usuario"]["email"] == test_user_data["email"]

    def test_missing_token(self, client):
        response = client.get("/auth/me")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_MISSING_TOKEN"

    def test_invalid_token(self, client):
        response = client.get("/auth/me", headers={"Authorization": "Bearer invalid_token"})
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_INVALID_TOKEN"

    def test_malformed_header(self, client):
        tokens = register_and_login(client)

        for header in (tokens["accessToken"], f"Token {tokens['accessToken']}", "Bearer a b"):
            response = client.get("/auth/me", headers={"Authorization": header})
            assert response.status_code == 401
            assert response.json()["error"]["code"] == "AUTH_INVALID_TOKEN"

    def test_scheme_is_case_insensitive(self, client):
        tokens = register_and_login(client)

        response = client.get("/auth/me", headers={"Authorization": f"bearer {tokens['accessToken']}"})
        assert response.status_code == 200

    def test_expired_token(self, client, make_user):
        user, _ = make_user()
        token = create_access_token(
            {"sub": str(user.id), "role": UserRole.PATIENT.value},
            expires_delta=timedelta(minutes=-1)
        )

        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_INVALID_TOKEN"

    def test_refresh_token_rejected_as_access_token(self, client):
        tokens = register_and_login(client)

        response = client.get("/auth/me", headers={"Authorization": f"Bearer {tokens['refreshToken']}"})
        assert response.status_code == 401

    def test_refresh_token(self, client):
        tokens = register_and_login(client)

        response = client.post("/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
        assert response.status_code == 200

        data = response.json()
        assert "accessToken" in data
        assert data["refreshToken"] != tokens["refreshToken"]

        me = client.get("/auth/me", headers={"Authorization": f"Bearer {data['accessToken']}"})
        assert me.status_code == 200

    def test_refresh_token_is_single_use(self, client):
        tokens = register_and_login(client)
        client.post("/auth/refresh", json={"refreshToken": tokens["refreshToken"]})

        response = client.post("/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_INVALID_TOKEN"

    def test_refresh_invalid_token(self, client):
        response = client.post("/auth/refresh", json={"refreshToken": "invalid_token"})
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_INVALID_TOKEN"

    def test_refresh_missing_token(self, client):
        response = client.post("/auth/refresh", json={})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_logout(self, client):
        tokens = register_and_login(client)

        response = client.post("/auth/logout", json={"refreshToken": tokens["refreshToken"]})
        assert response.status_code == 200

        response = client.post("/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
        assert response.status_code == 401

class TestRefreshTokenStorage:

    def test_rows_do_not_accumulate(self, client, db_session):
        for _ in range(4):
            tokens = register_and_login(client)
        client.post("/auth/refresh", json={"refreshToken": tokens["refreshToken"]})

        user = db_session.query(User).filter(User.email == test_user_data["email"]).first()
        stored = db_session.query(RefreshToken).filter(RefreshToken.user_id == user.id).all()

        # The live token plus the one it replaced
        assert len(stored) == 2
        assert [t.is_revoked for t in stored].count(False) == 1

    def test_logged_out_token_is_purged_on_next_login(self, client, db_session):
        tokens = register_and_login(client)
        client.post("/auth/logout", json={"refreshToken": tokens["refreshToken"]})
        client.post("/auth/login", json=test_login_data)

        stored = db_session.query(RefreshToken).all()
        assert len(stored) == 1
        assert stored[0].is_revoked is False

class TestAccountRecovery:

    def test_no_unbacked_recovery_routes(self, client):
        """Recovery needs a delivery channel for the token, which the API does not have."""
        for path in ("/auth/forgot-password", "/auth/reset-password"):
            response = client.post(path, json={"email": test_user_data["email"]})
            assert response.status_code == 404
            assert response.json()["error"]["code"] == "ROUTE_NOT_FOUND"
