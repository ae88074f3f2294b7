from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy import and_, select, update
from sqlalchemy.orm import Session

from registry_api.db.models import OWNER_KIND_TEAM, OWNER_KIND_USER, CrateOwner, Team, User
from registry_api.repo.common import _now
from registry_api.repo.reconcile import Reconciled, update_or_insert


@dataclass(frozen=True)
class UserOwner:
    id: int
    login: str
    name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None

    kind = "user"
    owner_kind = OWNER_KIND_USER


@dataclass(frozen=True)
class TeamOwner:
    id: int
    login: str
    github_id: int
    name: Optional[str] = None
    avatar: Optional[str] = None

    kind = "team"
    owner_kind = OWNER_KIND_TEAM


Owner = Union[UserOwner, TeamOwner]


def user_owner(user: User) -> UserOwner:
    return UserOwner(
        id=user.id,
        login=user.gh_login,
        name=user.name,
        email=user.email,
        avatar=user.gh_avatar,
    )


def team_owner(team: Team) -> TeamOwner:
    return TeamOwner(
        id=team.id,
        login=team.login,
        github_id=team.github_id,
        name=team.name,
        avatar=team.avatar,
    )


def list_owners(session: Session, crate_id: int) -> list[Owner]:
    """Current (not soft-deleted) owners, users first."""
    users = session.scalars(
        select(User)
        .join(
            CrateOwner,
            and_(CrateOwner.owner_id == User.id, CrateOwner.owner_kind == OWNER_KIND_USER),
        )
        .where(CrateOwner.crate_id == crate_id, CrateOwner.deleted.is_(False))
        .order_by(User.id)
    ).all()
    teams = session.scalars(
        select(Team)
        .join(
            CrateOwner,
            and_(CrateOwner.owner_id == Team.id, CrateOwner.owner_kind == OWNER_KIND_TEAM),
        )
        .where(CrateOwner.crate_id == crate_id, CrateOwner.deleted.is_(False))
        .order_by(Team.id)
    ).all()
    return [user_owner(user) for user in users] + [team_owner(team) for team in teams]


def add_owner_row(
    session: Session,
    *,
    crate_id: int,
    owner_id: int,
    owner_kind: int,
    created_by: int,
) -> Reconciled[CrateOwner]:
    """Revive a soft-deleted owner row, inserting only if none ever existed."""
    now = _now()
    return update_or_insert(
        session,
        CrateOwner,
        and_(
            CrateOwner.crate_id == crate_id,
            CrateOwner.owner_id == owner_id,
            CrateOwner.owner_kind == owner_kind,
        ),
        {"deleted": False, "updated_at": now},
        {
            "crate_id": crate_id,
            "owner_id": owner_id,
            "owner_kind": owner_kind,
            "created_by": created_by,
            "created_at": now,
            "updated_at": now,
            "deleted": False,
        },
    )


def remove_owner_row(session: Session, *, crate_id: int, owner_id: int, owner_kind: int) -> bool:
    result = session.execute(
        update(CrateOwner)
        .where(
            CrateOwner.crate_id == crate_id,
            CrateOwner.owner_id == owner_id,
            CrateOwner.owner_kind == owner_kind,
            CrateOwner.deleted.is_(False),
        )
        .values(deleted=True, updated_at=_now())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0
