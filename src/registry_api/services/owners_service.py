from __future__ import annotations

import asyncio
import json
import logging
import re

from fastapi import Request
from sqlalchemy.orm import Session

from registry_api.db.models import User
from registry_api.db.session import SessionLocal
from registry_api.errors import Conflict, Forbidden, NotFound, Unauthorized, ValidationFailed
from registry_api.github import IdentityProvider
from registry_api.models.ok_response import OkResponse
from registry_api.models.owner_list_response import OwnerListResponse
from registry_api.repo.crates import find_crate
from registry_api.repo.owners import (
    Owner,
    add_owner_row,
    list_owners,
    remove_owner_row,
    team_owner,
    user_owner,
)
from registry_api.repo.teams import find_team_by_login, reconcile_team
from registry_api.repo.users import find_user_by_login, get_user
from registry_api.runtime import get_runtime
from registry_api.security_api import require_user_id
from registry_api.services.encoders import encode_owner
from registry_api.services.permissions import Rights, rights_for

LOGGER = logging.getLogger(__name__)

TEAM_PROVIDER = "github"
_TEAM_PART = re.compile(r"^[A-Za-z0-9_-]+$")


def parse_owner_logins(raw: bytes) -> list[str]:
    """Accept ``{"owners": [...]}`` and the older ``{"users": [...]}`` spelling."""
    try:
        payload = json.loads(raw or b"null")
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationFailed("invalid json request") from None
    if not isinstance(payload, dict):
        raise ValidationFailed("invalid json request")
    logins = payload.get("owners")
    if logins is None:
        logins = payload.get("users")
    if not isinstance(logins, list) or not all(isinstance(item, str) and item for item in logins):
        raise ValidationFailed("invalid json request")
    return logins


def _create_team(session: Session, identity: IdentityProvider, login: str, user: User) -> Owner:
    """Register a ``github:org:team`` owner; only its members may add it."""
    parts = login.split(":")
    if parts[0] != TEAM_PROVIDER:
        raise ValidationFailed("unknown organization handler, only 'github:org:team' is supported")
    if len(parts) != 3 or not parts[2]:
        raise ValidationFailed("missing github team argument; format is github:org_name:team_name")
    org, team = parts[1], parts[2]
    if not _TEAM_PART.match(org) or not _TEAM_PART.match(team):
        raise ValidationFailed("organization and team names may only contain letters, digits, `-` and `_`")

    found = identity.find_team(org, team, user.gh_access_token)
    if found is None:
        raise NotFound(f"could not find the github team {org}/{team}")
    if not identity.team_has_member(found.id, user.gh_login, user.gh_access_token):
        raise Forbidden("only members of a team can add it as an owner")
    row = reconcile_team(
        session,
        login=login.lower(),
        github_id=found.id,
        name=found.name,
        avatar=found.avatar_url,
    ).row
    return team_owner(row)


def _owner_to_add(session: Session, identity: IdentityProvider, login: str, user: User) -> Owner:
    if ":" in login:
        team = find_team_by_login(session, login.lower())
        if team is None:
            return _create_team(session, identity, login, user)
        if not identity.team_has_member(team.github_id, user.gh_login, user.gh_access_token):
            raise Forbidden(f"only members of {login} can add it as an owner")
        return team_owner(team)
    found = find_user_by_login(session, login)
    if found is None:
        raise NotFound(f"could not find user with login `{login}`")
    return user_owner(found)


def _existing_owner(session: Session, login: str) -> Owner:
    if ":" in login:
        team = find_team_by_login(session, login.lower())
        if team is not None:
            return team_owner(team)
    else:
        found = find_user_by_login(session, login)
        if found is not None:
            return user_owner(found)
    raise NotFound(f"could not find owner with login `{login}`")


def _same_login(owner: Owner, login: str) -> bool:
    return owner.login.lower() == login.lower()


class OwnersService:
    async def list_owners(self, name: str) -> OwnerListResponse:
        with SessionLocal() as session:
            crate = find_crate(session, name)
            if crate is None:
                raise NotFound(f"crate `{name}` does not exist")
            return OwnerListResponse(users=[encode_owner(owner) for owner in list_owners(session, crate.id)])

    async def add_owners(self, name: str, request: Request) -> OkResponse:
        user_id = require_user_id()
        body = await request.body()
        return await asyncio.to_thread(self.modify_owners, name, body, True, user_id)

    async def remove_owners(self, name: str, request: Request) -> OkResponse:
        user_id = require_user_id()
        body = await request.body()
        return await asyncio.to_thread(self.modify_owners, name, body, False, user_id)

    def modify_owners(self, name: str, body: bytes, adding: bool, user_id: int) -> OkResponse:
        identity = get_runtime().identity
        with SessionLocal() as session, session.begin():
            crate = find_crate(session, name)
            if crate is None:
                raise NotFound(f"crate `{name}` does not exist")
            user = get_user(session, user_id)
            if user is None:
                raise Unauthorized()
            owners = list_owners(session, crate.id)
            rights = rights_for(identity, owners, user)
            if rights == Rights.PUBLISH:
                raise Forbidden("team members don't have permission to modify owners")
            if rights != Rights.FULL:
                raise Forbidden("only owners have permission to modify owners")
            logins = parse_owner_logins(body)

            for login in logins:
                if adding:
                    if any(_same_login(owner, login) for owner in owners):
                        raise Conflict(f"`{login}` is already an owner")
                    owner = _owner_to_add(session, identity, login, user)
                    add_owner_row(
                        session,
                        crate_id=crate.id,
                        owner_id=owner.id,
                        owner_kind=owner.owner_kind,
                        created_by=user.id,
                    )
                    owners.append(owner)
                else:
                    if login.lower() == user.gh_login.lower():
                        raise ValidationFailed("cannot remove yourself as an owner")
                    owner = _existing_owner(session, login)
                    remove_owner_row(
                        session,
                        crate_id=crate.id,
                        owner_id=owner.id,
                        owner_kind=owner.owner_kind,
                    )
        LOGGER.info(
            "%s owners of %s: %s",
            "Added" if adding else "Removed",
            name,
            ", ".join(logins),
        )
        return OkResponse(ok=True)
