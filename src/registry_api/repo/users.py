from __future__ import annotations

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from registry_api.db.models import User
from registry_api.repo.common import _generate_api_token, _now
from registry_api.repo.reconcile import Reconciled, update_or_insert


def get_user(session: Session, user_id: int) -> Optional[User]:
    return session.get(User, user_id)


def find_user_by_login(session: Session, login: str) -> Optional[User]:
    return session.scalars(select(User).where(User.gh_login == login)).first()


def find_user_by_api_token(session: Session, token: str) -> Optional[User]:
    if not token:
        return None
    return session.scalars(select(User).where(User.api_token == token)).first()


def reconcile_user(
    session: Session,
    *,
    login: str,
    access_token: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
    avatar: Optional[str] = None,
    api_token: Optional[str] = None,
) -> Reconciled[User]:
    """Upsert a user by provider login; the API token is only issued on insert."""
    profile = {
        "gh_access_token": access_token,
        "name": name,
        "email": email,
        "gh_avatar": avatar,
    }
    return update_or_insert(
        session,
        User,
        User.gh_login == login,
        profile,
        {
            **profile,
            "gh_login": login,
            "api_token": api_token or _generate_api_token(),
            "created_at": _now(),
        },
    )


def reset_api_token(session: Session, user: User) -> str:
    token = _generate_api_token()
    session.execute(
        update(User)
        .where(User.id == user.id)
        .values(api_token=token)
        .execution_options(synchronize_session=False)
    )
    user.api_token = token
    return token
