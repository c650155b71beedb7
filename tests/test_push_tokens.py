from types import SimpleNamespace

from app.core.security import UserRole
from app.models.push_token import Platform, PushToken
from app.schemas.push_token import PushTokenRegister
from app.services.push_token_service import PushTokenService

device = {"token": "ExponentPushToken[abc123]", "plataforma": "android"}

def test_register_token(client, make_user):
    user, headers = make_user()

    response = client.post("/push-tokens", json=device, headers=headers)
    assert response.status_code == 201

    push_token = response.json()["pushToken"]
    assert push_token["usuarioId"] == user.id
    assert push_token["plataforma"] == "android"
    assert push_token["ativo"] is True

def test_any_role_can_register(client, make_user):
    for n, role in enumerate(UserRole):
        _, headers = make_user(role)
        response = client.post(
            "/push-tokens",
            json={"token": f"device-{n}", "plataforma": "ios"},
            headers=headers,
        )
        assert response.status_code == 201

def test_reregister_moves_ownership(client, make_user, db_session):
    first_owner, first_headers = make_user()
    second_owner, second_headers = make_user(UserRole.DOCTOR)

    created = client.post("/push-tokens", json=device, headers=first_headers).json()["pushToken"]

    response = client.post("/push-tokens", json=dict(device, plataforma="ios"), headers=second_headers)
    assert response.status_code == 200

    push_token = response.json()["pushToken"]
    assert push_token["id"] == created["id"]
    assert push_token["usuarioId"] == second_owner.id
    assert push_token["plataforma"] == "ios"
    assert db_session.query(PushToken).count() == 1

    # The previous owner lost control of the token
    response = client.delete(f"/push-tokens/{created['id']}", headers=first_headers)
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "AUTH_FORBIDDEN"

def test_invalid_platform(client, make_user):
    _, headers = make_user()

    response = client.post("/push-tokens", json=dict(device, plataforma="windows"), headers=headers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"

def test_requires_authentication(client):
    response = client.post("/push-tokens", json=device)
    assert response.status_code == 401

def test_delete_token(client, make_user, db_session):
    _, headers = make_user()
    created = client.post("/push-tokens", json=device, headers=headers).json()["pushToken"]

    response = client.delete(f"/push-tokens/{created['id']}", headers=headers)
    assert response.status_code == 200
    assert db_session.query(PushToken).count() == 0

    response = client.delete(f"/push-tokens/{created['id']}", headers=headers)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "RESOURCE_NOT_FOUND"

def test_admin_cannot_delete_others_token(client, make_user):
    _, headers = make_user()
    _, admin_headers = make_user(UserRole.ADMIN)
    created = client.post("/push-tokens", json=device, headers=headers).json()["pushToken"]

    response = client.delete(f"/push-tokens/{created['id']}", headers=admin_headers)
    assert response.status_code == 403

def test_concurrent_registration_reassigns(db_session, make_user, monkeypatch):
    """A token inserted by another request between lookup and insert is taken over."""
    first_owner, _ = make_user()
    second_owner, _ = make_user(UserRole.DOCTOR)
    db_session.add(PushToken(user_id=first_owner.id, token=device["token"], platform=Platform.ANDROID))
    db_session.commit()

    lookups = []
    find = PushTokenService._find

    def find_after_race(self, token):
        lookups.append(token)
        # The first lookup runs before the other request's insert is visible
        return None if len(lookups) == 1 else find(self, token)

    monkeypatch.setattr(PushTokenService, "_find", find_after_race)

    identity = SimpleNamespace(user_id=second_owner.id, role=UserRole.DOCTOR)
    data = PushTokenRegister(token=device["token"], platform=Platform.IOS)
    push_token, created = PushTokenService(db_session).register(identity, data)

    assert created is False
    assert push_token.user_id == second_owner.id
    assert push_token.platform == Platform.IOS
    assert db_session.query(PushToken).count() == 1
