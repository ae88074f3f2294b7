# coding: utf-8

from typing import Dict, List, Any  # noqa: F401
import importlib
import pkgutil

from registry_api.apis.users_api_base import BaseUsersApi
import registry_api.impl

from fastapi import (  # noqa: F401
    APIRouter,
    HTTPException,
    Query,
    Security,
)

from registry_api.models.extra_models import TokenModel  # noqa: F401
from pydantic import StrictStr
from typing import Optional
from registry_api.models.api_token_response import ApiTokenResponse
from registry_api.models.authorize_url import AuthorizeUrl
from registry_api.models.error import Error
from registry_api.models.me_response import MeResponse
from registry_api.security_api import get_token_apiAuth

router = APIRouter()

ns_pkg = registry_api.impl
for _, name, _ in pkgutil.iter_modules(ns_pkg.__path__, ns_pkg.__name__ + "."):
    importlib.import_module(name)


@router.get(
    "/api/v1/authorize_url",
    responses={
        200: {"model": AuthorizeUrl, "description": "OK"},
    },
    tags=["Users"],
    summary="Start a login through the identity provider",
)
async def authorize_url() -> AuthorizeUrl:
    if not BaseUsersApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BaseUsersApi.subclasses[0]().authorize_url()


@router.get(
    "/api/v1/authorize",
    responses={
        200: {"model": MeResponse, "description": "OK"},
        400: {"model": Error, "description": "Missing parameters"},
        403: {"model": Error, "description": "Invalid state"},
        502: {"model": Error, "description": "Identity provider failure"},
    },
    tags=["Users"],
    summary="Finish a login with the provider's authorization code",
)
async def authorize(
    code: Optional[StrictStr] = Query(None, description="Authorization code", alias="code"),
    state: Optional[StrictStr] = Query(None, description="State returned by authorize_url", alias="state"),
) -> MeResponse:
    if not BaseUsersApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BaseUsersApi.subclasses[0]().authorize(code, state)


@router.get(
    "/api/v1/me",
    responses={
        200: {"model": MeResponse, "description": "OK"},
        403: {"model": Error, "description": "Not logged in"},
    },
    tags=["Users"],
    summary="Current user and API token",
)
async def get_me(
    token_apiAuth: TokenModel = Security(
        get_token_apiAuth, scopes=["read"]
    ),
) -> MeResponse:
    if not BaseUsersApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BaseUsersApi.subclasses[0]().get_me()


@router.put(
    "/api/v1/me/token",
    responses={
        200: {"model": ApiTokenResponse, "description": "OK"},
        403: {"model": Error, "description": "Not logged in"},
    },
    tags=["Users"],
    summary="Replace the API token of the current user",
)
async def reset_token(
    token_apiAuth: TokenModel = Security(
        get_token_apiAuth, scopes=["read"]
    ),
) -> ApiTokenResponse:
    if not BaseUsersApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BaseUsersApi.subclasses[0]().reset_token()
