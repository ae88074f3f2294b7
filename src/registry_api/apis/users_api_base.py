# coding: utf-8

from typing import ClassVar, Dict, List, Tuple, Any  # noqa: F401

from pydantic import StrictStr
from typing import Optional

from registry_api.models.api_token_response import ApiTokenResponse
from registry_api.models.authorize_url import AuthorizeUrl
from registry_api.models.me_response import MeResponse


class BaseUsersApi:
    subclasses: ClassVar[Tuple] = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        BaseUsersApi.subclasses = BaseUsersApi.subclasses + (cls,)

    async def authorize_url(
        self,
    ) -> AuthorizeUrl:
        ...


    async def authorize(
        self,
        code: Optional[StrictStr],
        state: Optional[StrictStr],
    ) -> MeResponse:
        ...


    async def get_me(
        self,
    ) -> MeResponse:
        ...


    async def reset_token(
        self,
    ) -> ApiTokenResponse:
        ...
