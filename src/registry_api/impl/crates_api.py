from __future__ import annotations

from fastapi import Request
from fastapi.responses import Response

from registry_api.apis.crates_api_base import BaseCratesApi
from registry_api.models.crate_response import CrateResponse
from registry_api.models.downloads_response import DownloadsResponse
from registry_api.models.ok_response import OkResponse
from registry_api.models.publish_response import PublishResponse
from registry_api.models.version_list_response import VersionListResponse
from registry_api.models.version_response import VersionResponse
from registry_api.services.crates_service import CratesService
from registry_api.services.publish_service import PublishService

_publish_service = PublishService()
_service = CratesService()


class CratesApiImpl(BaseCratesApi):
    async def publish_crate(
        self,
        request: Request,
    ) -> PublishResponse:
        return await _publish_service.publish_crate(request)

    async def get_crate(
        self,
        name: str,
    ) -> CrateResponse:
        return await _service.get_crate(name)

    async def list_versions(
        self,
        name: str,
    ) -> VersionListResponse:
        return await _service.list_versions(name)

    async def get_downloads(
        self,
        name: str,
    ) -> DownloadsResponse:
        return await _service.get_downloads(name)

    async def get_version(
        self,
        name: str,
        version: str,
    ) -> VersionResponse:
        return await _service.get_version(name, version)

    async def download_version(
        self,
        name: str,
        version: str,
        accept: str | None,
    ) -> Response:
        return await _service.download(name, version, accept)

    async def yank_version(
        self,
        name: str,
        version: str,
    ) -> OkResponse:
        return await _service.yank_version(name, version)

    async def unyank_version(
        self,
        name: str,
        version: str,
    ) -> OkResponse:
        return await _service.unyank_version(name, version)

    async def get_artifact(
        self,
        name: str,
        filename: str,
    ) -> Response:
        return await _service.get_artifact(name, filename)
