# coding: utf-8

from typing import Dict, List, Any  # noqa: F401
import importlib
import pkgutil

from registry_api.apis.crates_api_base import BaseCratesApi
import registry_api.impl

from fastapi import (  # noqa: F401
    APIRouter,
    Header,
    HTTPException,
    Path,
    Request,
    Response,
    Security,
)

from registry_api.models.extra_models import TokenModel  # noqa: F401
from pydantic import StrictStr
from typing import Optional
from registry_api.models.crate_response import CrateResponse
from registry_api.models.download_url import DownloadUrl
from registry_api.models.downloads_response import DownloadsResponse
from registry_api.models.error import Error
from registry_api.models.ok_response import OkResponse
from registry_api.models.publish_response import PublishResponse
from registry_api.models.version_list_response import VersionListResponse
from registry_api.models.version_response import VersionResponse
from registry_api.security_api import get_token_apiAuth

router = APIRouter()

ns_pkg = registry_api.impl
for _, name, _ in pkgutil.iter_modules(ns_pkg.__path__, ns_pkg.__name__ + "."):
    importlib.import_module(name)


@router.put(
    "/api/v1/crates/new",
    responses={
        200: {"model": PublishResponse, "description": "OK"},
        400: {"model": Error, "description": "Invalid upload"},
        403: {"model": Error, "description": "Forbidden"},
        409: {"model": Error, "description": "Conflict"},
        500: {"model": Error, "description": "Storage or index failure"},
    },
    tags=["Crates"],
    summary="Publish a crate version",
)
async def publish_crate(
    request: Request,
    token_apiAuth: TokenModel = Security(
        get_token_apiAuth, scopes=["publish"]
    ),
) -> PublishResponse:
    if not BaseCratesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BaseCratesApi.subclasses[0]().publish_crate(request)


@router.get(
    "/api/v1/crates/{name}",
    responses={
        200: {"model": CrateResponse, "description": "OK"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["Crates"],
    summary="Get a crate with its versions",
)
async def get_crate(
    name: StrictStr = Path(..., description="Crate name"),
) -> CrateResponse:
    if not BaseCratesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BaseCratesApi.subclasses[0]().get_crate(name)


@router.get(
    "/api/v1/crates/{name}/versions",
    responses={
        200: {"model": VersionListResponse, "description": "OK"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["Crates"],
    summary="List the versions of a crate",
)
async def list_versions(
    name: StrictStr = Path(..., description="Crate name"),
) -> VersionListResponse:
    if not BaseCratesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BaseCratesApi.subclasses[0]().list_versions(name)


@router.get(
    "/api/v1/crates/{name}/downloads",
    responses={
        200: {"model": DownloadsResponse, "description": "OK"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["Downloads"],
    summary="Daily download counters of the last 90 days",
)
async def get_downloads(
    name: StrictStr = Path(..., description="Crate name"),
) -> DownloadsResponse:
    if not BaseCratesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BaseCratesApi.subclasses[0]().get_downloads(name)


@router.get(
    "/api/v1/crates/{name}/{version}",
    responses={
        200: {"model": VersionResponse, "description": "OK"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["Crates"],
    summary="Get one version of a crate",
)
async def get_version(
    name: StrictStr = Path(..., description="Crate name"),
    version: StrictStr = Path(..., description="Semantic version"),
) -> VersionResponse:
    if not BaseCratesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BaseCratesApi.subclasses[0]().get_version(name, version)


@router.get(
    "/api/v1/crates/{name}/{version}/download",
    responses={
        200: {"model": DownloadUrl, "description": "Archive location (JSON clients)"},
        302: {"description": "Redirect to the archive"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["Downloads"],
    summary="Count a download and point at the archive",
)
async def download_version(
    name: StrictStr = Path(..., description="Crate name"),
    version: StrictStr = Path(..., description="Semantic version"),
    accept: Optional[StrictStr] = Header(None, description="Send application/json to get the URL instead of a redirect"),
) -> Response:
    if not BaseCratesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BaseCratesApi.subclasses[0]().download_version(name, version, accept)


@router.delete(
    "/api/v1/crates/{name}/{version}/yank",
    responses={
        200: {"model": OkResponse, "description": "OK"},
        403: {"model": Error, "description": "Forbidden"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["Crates"],
    summary="Yank a version",
)
async def yank_version(
    name: StrictStr = Path(..., description="Crate name"),
    version: StrictStr = Path(..., description="Semantic version"),
    token_apiAuth: TokenModel = Security(
        get_token_apiAuth, scopes=["publish"]
    ),
) -> OkResponse:
    if not BaseCratesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BaseCratesApi.subclasses[0]().yank_version(name, version)


@router.put(
    "/api/v1/crates/{name}/{version}/unyank",
    responses={
        200: {"model": OkResponse, "description": "OK"},
        403: {"model": Error, "description": "Forbidden"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["Crates"],
    summary="Unyank a version",
)
async def unyank_version(
    name: StrictStr = Path(..., description="Crate name"),
    version: StrictStr = Path(..., description="Semantic version"),
    token_apiAuth: TokenModel = Security(
        get_token_apiAuth, scopes=["publish"]
    ),
) -> OkResponse:
    if not BaseCratesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BaseCratesApi.subclasses[0]().unyank_version(name, version)


@router.get(
    "/crates/{name}/{filename}",
    responses={
        200: {"content": {"application/x-tar": {}}, "description": "Crate archive"},
        404: {"model": Error, "description": "Not Found"},
    },
    tags=["Downloads"],
    summary="Serve an archive from the local artifact store",
)
async def get_artifact(
    name: StrictStr = Path(..., description="Crate name"),
    filename: StrictStr = Path(..., description="Archive file name"),
) -> Response:
    if not BaseCratesApi.subclasses:
        raise HTTPException(status_code=500, detail="Not implemented")
    return await BaseCratesApi.subclasses[0]().get_artifact(name, filename)
