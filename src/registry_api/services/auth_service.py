"""Login through the identity provider and API token management."""

from __future__ import annotations

import asyncio
import base64
import hashlib
import hmac
import json
import logging
import secrets
import time
from typing import Any, Dict, Optional

from registry_api.db.session import SessionLocal
from registry_api.errors import Forbidden, Unauthorized, ValidationFailed
from registry_api.models.api_token_response import ApiTokenResponse
from registry_api.models.authorize_url import AuthorizeUrl
from registry_api.models.me_response import MeResponse
from registry_api.repo.users import get_user, reconcile_user, reset_api_token
from registry_api.runtime import get_runtime
from registry_api.security_api import require_user_id
from registry_api.services.encoders import encode_user

LOGGER = logging.getLogger(__name__)


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def issue_state(secret: str, ttl_seconds: int) -> str:
    now = int(time.time())
    payload = {"nonce": secrets.token_hex(8), "iat": now, "exp": now + ttl_seconds}
    payload_bytes = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
    sig = hmac.new(secret.encode("utf-8"), payload_bytes, hashlib.sha256).digest()
    return f"{_b64encode(payload_bytes)}.{_b64encode(sig)}"


def validate_state(state: str, secret: str) -> Optional[Dict[str, Any]]:
    try:
        payload_b64, sig_b64 = state.split(".", 1)
        payload_bytes = _b64decode(payload_b64)
        sig = _b64decode(sig_b64)
    except ValueError:
        return None

    expected_sig = hmac.new(secret.encode("utf-8"), payload_bytes, hashlib.sha256).digest()
    if not hmac.compare_digest(sig, expected_sig):
        return None

    try:
        payload = json.loads(payload_bytes.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None

    exp = payload.get("exp")
    if not isinstance(exp, int) or exp < int(time.time()):
        return None
    return payload


class AuthService:
    async def authorize_url(self) -> AuthorizeUrl:
        runtime = get_runtime()
        state = issue_state(runtime.settings.session_secret, runtime.settings.state_ttl_seconds)
        return AuthorizeUrl(url=runtime.identity.authorize_url(state), state=state)

    async def authorize(self, code: str | None, state: str | None) -> MeResponse:
        if not code or not state:
            raise ValidationFailed("missing code or state parameter")
        runtime = get_runtime()
        if validate_state(state, runtime.settings.session_secret) is None:
            raise Forbidden("invalid state parameter")
        return await asyncio.to_thread(self.login_with_code, code)

    def login_with_code(self, code: str) -> MeResponse:
        identity = get_runtime().identity
        token = identity.exchange_code(code)
        profile = identity.fetch_user(token.access_token)
        with SessionLocal() as session, session.begin():
            reconciled = reconcile_user(
                session,
                login=profile.login,
                access_token=token.access_token,
                name=profile.name,
                email=profile.email,
                avatar=profile.avatar_url,
            )
            user = reconciled.row
            response = MeResponse(user=encode_user(user), api_token=user.api_token)
        LOGGER.info("User %s logged in%s", profile.login, " (new account)" if reconciled.inserted else "")
        return response

    async def me(self) -> MeResponse:
        user_id = require_user_id()
        with SessionLocal() as session:
            user = get_user(session, user_id)
            if user is None:
                raise Unauthorized()
            return MeResponse(user=encode_user(user), api_token=user.api_token)

    async def reset_token(self) -> ApiTokenResponse:
        user_id = require_user_id()
        with SessionLocal() as session, session.begin():
            user = get_user(session, user_id)
            if user is None:
                raise Unauthorized()
            token = reset_api_token(session, user)
        LOGGER.info("Issued a new API token for user %s", user_id)
        return ApiTokenResponse(api_token=token)
