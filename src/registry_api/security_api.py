# coding: utf-8

from contextvars import ContextVar
from typing import Optional

from fastapi import Depends, Security  # noqa: F401
from fastapi.security import SecurityScopes
from fastapi.security.api_key import APIKeyHeader

from registry_api.models.extra_models import TokenModel


api_token_header = APIKeyHeader(
    name="Authorization",
    description="API token issued by the registry, optionally prefixed with `Bearer `.",
    auto_error=False,
)
_current_user_id: ContextVar[Optional[int]] = ContextVar("registry_current_user_id", default=None)


def _strip_scheme(value: str) -> str:
    value = value.strip()
    if value.lower().startswith("bearer "):
        return value[len("bearer "):].strip()
    return value


async def get_token_apiAuth(
    security_scopes: SecurityScopes, token: Optional[str] = Depends(api_token_header)
) -> TokenModel:
    """
    Resolve the API token of the request to a registry user.

    Anonymous requests are let through; handlers that need a user call
    ``require_user_id``.
    """

    from registry_api.db.session import SessionLocal
    from registry_api.errors import Unauthorized
    from registry_api.repo.users import find_user_by_api_token

    _current_user_id.set(None)
    value = _strip_scheme(token or "")
    if not value:
        return TokenModel(sub="")

    with SessionLocal() as session:
        user = find_user_by_api_token(session, value)
        if user is None:
            raise Unauthorized()
        user_id, login = user.id, user.gh_login

    _current_user_id.set(user_id)
    return TokenModel(sub=login, user_id=user_id)


def get_current_user_id() -> Optional[int]:
    return _current_user_id.get()


def require_user_id() -> int:
    user_id = get_current_user_id()
    if user_id is None:
        from registry_api.errors import Unauthorized

        raise Unauthorized()
    return user_id
