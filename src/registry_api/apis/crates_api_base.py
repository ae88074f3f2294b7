# coding: utf-8

from typing import ClassVar, Dict, List, Tuple, Any  # noqa: F401

from fastapi import Request
from fastapi.responses import Response
from pydantic import StrictStr
from typing import Optional

from registry_api.models.crate_response import CrateResponse
from registry_api.models.downloads_response import DownloadsResponse
from registry_api.models.ok_response import OkResponse
from registry_api.models.publish_response import PublishResponse
from registry_api.models.version_list_response import VersionListResponse
from registry_api.models.version_response import VersionResponse


class BaseCratesApi:
    subclasses: ClassVar[Tuple] = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        BaseCratesApi.subclasses = BaseCratesApi.subclasses + (cls,)

    async def publish_crate(
        self,
        request: Request,
    ) -> PublishResponse:
        ...


    async def get_crate(
        self,
        name: StrictStr,
    ) -> CrateResponse:
        ...


    async def list_versions(
        self,
        name: StrictStr,
    ) -> VersionListResponse:
        ...


    async def get_downloads(
        self,
        name: StrictStr,
    ) -> DownloadsResponse:
        ...


    async def get_version(
        self,
        name: StrictStr,
        version: StrictStr,
    ) -> VersionResponse:
        ...


    async def download_version(
        self,
        name: StrictStr,
        version: StrictStr,
        accept: Optional[StrictStr],
    ) -> Response:
        ...


    async def yank_version(
        self,
        name: StrictStr,
        version: StrictStr,
    ) -> OkResponse:
        ...


    async def unyank_version(
        self,
        name: StrictStr,
        version: StrictStr,
    ) -> OkResponse:
        ...


    async def get_artifact(
        self,
        name: StrictStr,
        filename: StrictStr,
    ) -> Response:
        ...
