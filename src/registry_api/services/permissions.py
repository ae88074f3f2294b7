"""Owner rights of a user over a crate."""

from __future__ import annotations

import enum
import logging
from typing import Iterable

from registry_api.db.models import User
from registry_api.github import IdentityProvider
from registry_api.repo.owners import Owner, TeamOwner, UserOwner

LOGGER = logging.getLogger(__name__)


class Rights(enum.IntEnum):
    NONE = 0
    PUBLISH = 1
    FULL = 2


def team_contains_user(identity: IdentityProvider, team: TeamOwner, user: User) -> bool:
    """Membership is asked of the provider each time, using the user's own token."""
    return identity.team_has_member(team.github_id, user.gh_login, user.gh_access_token)


def rights_for(identity: IdentityProvider, owners: Iterable[Owner], user: User) -> Rights:
    best = Rights.NONE
    for owner in owners:
        if isinstance(owner, UserOwner):
            if owner.id == user.id:
                return Rights.FULL
        elif best < Rights.PUBLISH and team_contains_user(identity, owner, user):
            LOGGER.debug("User %s may publish through team %s", user.gh_login, owner.login)
            best = Rights.PUBLISH
    return best
