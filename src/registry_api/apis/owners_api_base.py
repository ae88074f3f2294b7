# coding: utf-8

from typing import ClassVar, Dict, List, Tuple, Any  # noqa: F401

from fastapi import Request
from pydantic import StrictStr

from registry_api.models.ok_response import OkResponse
from registry_api.models.owner_list_response import OwnerListResponse


class BaseOwnersApi:
    subclasses: ClassVar[Tuple] = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        BaseOwnersApi.subclasses = BaseOwnersApi.subclasses + (cls,)

    async def list_owners(
        self,
        name: StrictStr,
    ) -> OwnerListResponse:
        ...


    async def add_owners(
        self,
        name: StrictStr,
        request: Request,
    ) -> OkResponse:
        ...


    async def remove_owners(
        self,
        name: StrictStr,
        request: Request,
    ) -> OkResponse:
        ...
