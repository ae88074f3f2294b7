from __future__ import annotations

from registry_api.apis.users_api_base import BaseUsersApi
from registry_api.models.api_token_response import ApiTokenResponse
from registry_api.models.authorize_url import AuthorizeUrl
from registry_api.models.me_response import MeResponse
from registry_api.services.auth_service import AuthService

_service = AuthService()


class UsersApiImpl(BaseUsersApi):
    async def authorize_url(self) -> AuthorizeUrl:
        return await _service.authorize_url()

    async def authorize(
        self,
        code: str | None,
        state: str | None,
    ) -> MeResponse:
        return await _service.authorize(code, state)

    async def get_me(self) -> MeResponse:
        return await _service.me()

    async def reset_token(self) -> ApiTokenResponse:
        return await _service.reset_token()
