from __future__ import annotations

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from registry_api.db.models import Crate, CrateVersion
from registry_api.repo.common import _now
from registry_api.repo.reconcile import insert_row
from registry_api.validation import parse_version


class VersionAlreadyExists(ValueError):
    pass


def find_version(session: Session, crate_id: int, num: str) -> Optional[CrateVersion]:
    return session.scalars(
        select(CrateVersion).where(CrateVersion.crate_id == crate_id, CrateVersion.num == num)
    ).first()


def list_versions(session: Session, crate_id: int) -> list[CrateVersion]:
    """All versions of a crate, highest semver first."""
    rows = session.scalars(select(CrateVersion).where(CrateVersion.crate_id == crate_id)).all()
    return sorted(rows, key=lambda row: parse_version(row.num), reverse=True)


def insert_version(
    session: Session,
    crate: Crate,
    *,
    num: str,
    features: dict[str, list[str]],
    authors: list[str],
    checksum: str,
) -> CrateVersion:
    if find_version(session, crate.id, num) is not None:
        raise VersionAlreadyExists(num)
    now = _now()
    return insert_row(
        session,
        CrateVersion,
        {
            "crate_id": crate.id,
            "num": num,
            "created_at": now,
            "updated_at": now,
            "downloads": 0,
            "features": dict(features),
            "authors": [author for author in authors if author.strip()],
            "checksum": checksum,
            "yanked": False,
        },
    )


def set_version_yanked(session: Session, version: CrateVersion, yanked: bool) -> None:
    session.execute(
        update(CrateVersion)
        .where(CrateVersion.id == version.id)
        .values(yanked=yanked, updated_at=_now())
        .execution_options(synchronize_session=False)
    )
    version.yanked = yanked
