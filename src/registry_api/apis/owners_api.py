# coding: utf-8

from typing import Dict, List, Any  # noqa: F401
import importlib
import pkgutil

from registry_api.apis.owners_api_base import BaseOwnersApi
import registry_api.impl

from fastapi import (  # noqa: F401
    APIRouter,
    Body,
    HTTPException,
    Path,
    Request,
    Security,
)

from registry_api.models.extra_models import TokenModel  # noqa: F401
from pydantic import StrictStr
from registry_api.models.error import Error
from registry_api.models.ok_response import OkResponse
from registry_api.models.owner_list_response import OwnerListResponse
from registry_api.security_api import get_token_apiAuth

router = APIRouter()

ns_pkg = registry_api.impl
for _, name, _ in pkgutil.iter_modules(ns_pkg.__path__, ns_pkg.__name__ + "."):
    importlib.import_module(name)

_OWNERS_BODY = {
    "content": {
        "application/json": {
            "schema": {
                "type": "object",
                "properties": {
                    "owners": {"type": "array", "items": {"type": "string"}},
                    "users": {"type": "array", "items": {"type": "string"}, "deprecated": True},
                },
            }
        }
    },
    "required": True,
}


@router.get(
    "/api/v1/crates/{name}/owners",
    responses={
        200: {"model": OwnerListResponse, "description": "OK"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["Owners"],
    summary="List the owners of a crate",
)
async def list_owners(
    name: StrictStr = Path(..., description="Crate name"),
) -> OwnerListResponse:
    if not BaseOwnersApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BaseOwnersApi.subclasses[0]().list_owners(name)


@router.put(
    "/api/v1/crates/{name}/owners",
    responses={
        200: {"model": OkResponse, "description": "OK"},
        400: {"model": Error, "description": "Invalid request"},
        403: {"model": Error, "description": "Forbidden"},
        404: {"model": Error, "description": "Not Found"},
        409: {"model": Error, "description": "Already an owner"},
    },
    tags=["Owners"],
    summary="Add owners to a crate",
    openapi_extra={"requestBody": _OWNERS_BODY},
)
async def add_owners(
    request: Request,
    name: StrictStr = Path(..., description="Crate name"),
    token_apiAuth: TokenModel = Security(
        get_token_apiAuth, scopes=["owners"]
    ),
) -> OkResponse:
    if not BaseOwnersApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BaseOwnersApi.subclasses[0]().add_owners(name, request)


@router.delete(
    "/api/v1/crates/{name}/owners",
    responses={
        200: {"model": OkResponse, "description": "OK"},
        400: {"model": Error, "description": "Invalid request"},
        403: {"model": Error, "description": "Forbidden"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["Owners"],
    summary="Remove owners from a crate",
    openapi_extra={"requestBody": _OWNERS_BODY},
)
async def remove_owners(
    request: Request,
    name: StrictStr = Path(..., description="Crate name"),
    token_apiAuth: TokenModel = Security(
        get_token_apiAuth, scopes=["owners"]
    ),
) -> OkResponse:
    if not BaseOwnersApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BaseOwnersApi.subclasses[0]().remove_owners(name, request)
