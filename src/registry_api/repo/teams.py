from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from registry_api.db.models import Team
from registry_api.repo.reconcile import Reconciled, update_or_insert


def find_team_by_login(session: Session, login: str) -> Optional[Team]:
    return session.scalars(select(Team).where(Team.login == login)).first()


def reconcile_team(
    session: Session,
    *,
    login: str,
    github_id: int,
    name: Optional[str],
    avatar: Optional[str],
) -> Reconciled[Team]:
    return update_or_insert(
        session,
        Team,
        Team.github_id == github_id,
        {"login": login, "name": name, "avatar": avatar},
        {"login": login, "github_id": github_id, "name": name, "avatar": avatar},
    )
