import re

from registry_api.github import ProviderUser
from registry_api.services.auth_service import issue_state, validate_state

from conftest import create_user, error_details


def _state(client) -> str:
    response = client.get("/api/v1/authorize_url")
    assert response.status_code == 200
    body = response.json()
    assert body["url"] == f"https://provider.test/authorize?state={body['state']}"
    return body["state"]


def test_state_round_trip():
    state = issue_state("secret", 60)

    assert validate_state(state, "secret") is not None
    assert validate_state(state, "other-secret") is None
    assert validate_state(issue_state("secret", -5), "secret") is None
    assert validate_state("garbage", "secret") is None


def test_login_creates_user_with_token(client, identity):
    identity.codes["code-1"] = ProviderUser(login="alice", name="Alice", email="alice@example.com")

    response = client.get("/api/v1/authorize", params={"code": "code-1", "state": _state(client)})

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["login"] == "alice"
    assert body["user"]["email"] == "alice@example.com"
    assert re.fullmatch(r"[0-9a-f]{32}", body["api_token"])

    again = client.get("/api/v1/authorize", params={"code": "code-1", "state": _state(client)})
    assert again.json()["api_token"] == body["api_token"]


def test_login_with_forged_state(client, identity):
    identity.codes["code-1"] = ProviderUser(login="alice")

    response = client.get("/api/v1/authorize", params={"code": "code-1", "state": "forged.state"})

    assert response.status_code == 403
    assert error_details(response) == ["invalid state parameter"]


def test_login_without_code(client):
    response = client.get("/api/v1/authorize", params={"state": _state(client)})

    assert response.status_code == 400


def test_login_with_rejected_code(client):
    response = client.get("/api/v1/authorize", params={"code": "unknown", "state": _state(client)})

    assert response.status_code == 502


def test_me(client):
    headers = create_user("alice")

    response = client.get("/api/v1/me", headers=headers)

    assert response.status_code == 200
    assert response.json()["user"]["login"] == "alice"
    assert response.json()["api_token"] == "token-alice"


def test_me_requires_login(client):
    response = client.get("/api/v1/me")

    assert response.status_code == 403
    assert error_details(response) == ["must be logged in to perform that action"]


def test_reset_token(client):
    headers = create_user("alice")

    response = client.put("/api/v1/me/token", headers=headers)

    assert response.status_code == 200
    token = response.json()["api_token"]
    assert token != "token-alice"
    assert client.get("/api/v1/me", headers=headers).status_code == 403
    assert client.get("/api/v1/me", headers={"Authorization": token}).status_code == 200
