"""Identity provider client (GitHub OAuth + REST API)."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import urlencode

import requests
from requests import Response

from registry_api.errors import ProviderError

LOGGER = logging.getLogger(__name__)

PERMISSION_MESSAGE = (
    "It looks like you don't have permission to query a necessary property from GitHub "
    "to complete this request. You may need to re-authenticate on the registry to grant "
    "permission to read GitHub org memberships. Just go to /login"
)


@dataclass
class AccessToken:
    access_token: str
    scopes: list[str] = field(default_factory=list)


@dataclass
class ProviderUser:
    login: str
    name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None


@dataclass
class ProviderTeam:
    id: int
    org: str
    slug: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None


class IdentityProvider(ABC):
    @abstractmethod
    def authorize_url(self, state: str) -> str:
        ...

    @abstractmethod
    def exchange_code(self, code: str) -> AccessToken:
        ...

    @abstractmethod
    def fetch_user(self, access_token: str) -> ProviderUser:
        ...

    @abstractmethod
    def find_team(self, org: str, team: str, access_token: str) -> Optional[ProviderTeam]:
        ...

    @abstractmethod
    def team_has_member(self, team_id: int, login: str, access_token: str) -> bool:
        ...


class GitHubIdentityProvider(IdentityProvider):
    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        api_url: str = "https://api.github.com",
        oauth_url: str = "https://github.com/login/oauth",
        timeout: float = 10.0,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.api_url = api_url.rstrip("/")
        self.oauth_url = oauth_url.rstrip("/")
        self.timeout = timeout

    def _request(self, method: str, url: str, **kwargs: Any) -> Response:
        try:
            return requests.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            LOGGER.warning("GitHub request %s %s failed: %s", method, url, exc)
            raise ProviderError(f"failed to reach GitHub: {exc}") from exc

    def _api_get(self, path: str, access_token: str) -> Optional[Any]:
        response = self._request(
            "GET",
            f"{self.api_url}{path}",
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"token {access_token}",
                "User-Agent": "crate-registry",
            },
        )
        if response.status_code == 404:
            return None
        if response.status_code == 403:
            raise ProviderError(PERMISSION_MESSAGE, status_code=403)
        if response.status_code >= 400:
            LOGGER.warning("GitHub API %s returned %s", path, response.status_code)
            raise ProviderError(f"failed to query GitHub: {path} ({response.status_code})")
        return response.json()

    def authorize_url(self, state: str) -> str:
        query = urlencode({"client_id": self.client_id, "state": state, "scope": "read:org"})
        return f"{self.oauth_url}/authorize?{query}"

    def exchange_code(self, code: str) -> AccessToken:
        response = self._request(
            "POST",
            f"{self.oauth_url}/access_token",
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": code,
            },
            headers={"Accept": "application/json"},
        )
        if response.status_code >= 400:
            raise ProviderError(f"failed to exchange the authorization code ({response.status_code})")
        payload = response.json()
        token = payload.get("access_token")
        if not token:
            raise ProviderError(payload.get("error_description") or "authorization code was rejected")
        scopes = [scope for scope in (payload.get("scope") or "").split(",") if scope]
        return AccessToken(access_token=token, scopes=scopes)

    def fetch_user(self, access_token: str) -> ProviderUser:
        payload = self._api_get("/user", access_token)
        if not payload:
            raise ProviderError("failed to fetch the GitHub profile")
        return ProviderUser(
            login=payload["login"],
            name=payload.get("name"),
            email=payload.get("email"),
            avatar_url=payload.get("avatar_url"),
        )

    def find_team(self, org: str, team: str, access_token: str) -> Optional[ProviderTeam]:
        payload = self._api_get(f"/orgs/{org}/teams/{team}", access_token)
        if not payload:
            return None
        org_payload = self._api_get(f"/orgs/{org}", access_token) or {}
        return ProviderTeam(
            id=int(payload["id"]),
            org=org,
            slug=payload.get("slug", team),
            name=payload.get("name"),
            avatar_url=org_payload.get("avatar_url"),
        )

    def team_has_member(self, team_id: int, login: str, access_token: str) -> bool:
        payload = self._api_get(f"/teams/{team_id}/memberships/{login}", access_token)
        return bool(payload) and payload.get("state") == "active"
