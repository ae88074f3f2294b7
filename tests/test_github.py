import json
from urllib.parse import urlsplit

import pytest
import requests

from registry_api import github
from registry_api.errors import ProviderError
from registry_api.github import PERMISSION_MESSAGE, GitHubIdentityProvider


def _response(status: int, payload=None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = json.dumps(payload).encode("utf-8") if payload is not None else b""
    return response


def _provider(monkeypatch, handler) -> GitHubIdentityProvider:
    calls = []

    def fake_request(method, url, **kwargs):
        calls.append((method, url, kwargs))
        return handler(method, urlsplit(url).path, kwargs)

    monkeypatch.setattr(github.requests, "request", fake_request)
    provider = GitHubIdentityProvider(
        client_id="client",
        client_secret="secret",
        api_url="https://api.github.test",
        oauth_url="https://github.test/login/oauth",
    )
    provider.calls = calls
    return provider


def test_authorize_url(monkeypatch):
    provider = _provider(monkeypatch, lambda method, path, kwargs: _response(500))

    url = provider.authorize_url("abc")

    assert url == "https://github.test/login/oauth/authorize?client_id=client&state=abc&scope=read%3Aorg"
    assert provider.calls == []


def test_exchange_code_and_fetch_user(monkeypatch):
    def handler(method, path, kwargs):
        if path == "/login/oauth/access_token":
            assert method == "POST"
            assert kwargs["data"]["code"] == "the-code"
            return _response(200, {"access_token": "tok", "scope": "read:org,user"})
        assert kwargs["headers"]["Authorization"] == "token tok"
        return _response(200, {"login": "alice", "name": "Alice", "avatar_url": "https://a/1.png"})

    provider = _provider(monkeypatch, handler)

    token = provider.exchange_code("the-code")
    user = provider.fetch_user(token.access_token)

    assert token.scopes == ["read:org", "user"]
    assert user.login == "alice"
    assert user.avatar_url == "https://a/1.png"
    assert all(call[2]["timeout"] == 10.0 for call in provider.calls)


def test_rejected_code(monkeypatch):
    provider = _provider(monkeypatch, lambda method, path, kwargs: _response(200, {"error_description": "bad code"}))

    with pytest.raises(ProviderError) as excinfo:
        provider.exchange_code("nope")

    assert excinfo.value.details == ["bad code"]


def test_team_lookup_and_membership(monkeypatch):
    def handler(method, path, kwargs):
        if path == "/orgs/acme/teams/devs":
            return _response(200, {"id": 42, "slug": "devs", "name": "Devs"})
        if path == "/orgs/acme":
            return _response(200, {"avatar_url": "https://a/acme.png"})
        if path == "/teams/42/memberships/alice":
            return _response(200, {"state": "active"})
        if path == "/teams/42/memberships/bob":
            return _response(200, {"state": "pending"})
        return _response(404)

    provider = _provider(monkeypatch, handler)

    team = provider.find_team("acme", "devs", "tok")
    assert (team.id, team.name, team.avatar_url) == (42, "Devs", "https://a/acme.png")
    assert provider.find_team("acme", "ghosts", "tok") is None
    assert provider.team_has_member(42, "alice", "tok") is True
    assert provider.team_has_member(42, "bob", "tok") is False
    assert provider.team_has_member(42, "carol", "tok") is False


def test_forbidden_becomes_permission_message(monkeypatch):
    provider = _provider(monkeypatch, lambda method, path, kwargs: _response(403))

    with pytest.raises(ProviderError) as excinfo:
        provider.find_team("acme", "devs", "tok")

    assert excinfo.value.status_code == 403
    assert excinfo.value.details == [PERMISSION_MESSAGE]


def test_network_failure(monkeypatch):
    def handler(method, path, kwargs):
        raise requests.ConnectionError("connection refused")

    provider = _provider(monkeypatch, handler)

    with pytest.raises(ProviderError) as excinfo:
        provider.fetch_user("tok")

    assert excinfo.value.status_code == 502
