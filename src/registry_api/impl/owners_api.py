from __future__ import annotations

from fastapi import Request

from registry_api.apis.owners_api_base import BaseOwnersApi
from registry_api.models.ok_response import OkResponse
from registry_api.models.owner_list_response import OwnerListResponse
from registry_api.services.owners_service import OwnersService

_service = OwnersService()


class OwnersApiImpl(BaseOwnersApi):
    async def list_owners(
        self,
        name: str,
    ) -> OwnerListResponse:
        return await _service.list_owners(name)

    async def add_owners(
        self,
        name: str,
        request: Request,
    ) -> OkResponse:
        return await _service.add_owners(name, request)

    async def remove_owners(
        self,
        name: str,
        request: Request,
    ) -> OkResponse:
        return await _service.remove_owners(name, request)
