from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from registry_api.db.models import DEPENDENCY_KINDS, Crate, Dependency
from registry_api.repo.reconcile import insert_row

_KIND_NAMES = {value: key for key, value in DEPENDENCY_KINDS.items()}


def kind_name(kind: int) -> str:
    return _KIND_NAMES.get(kind, "normal")


def insert_dependency(
    session: Session,
    *,
    version_id: int,
    crate_id: int,
    req: str,
    optional: bool,
    default_features: bool,
    features: list[str],
    target: Optional[str],
    kind: Optional[str],
) -> Dependency:
    return insert_row(
        session,
        Dependency,
        {
            "version_id": version_id,
            "crate_id": crate_id,
            "req": req,
            "optional": optional,
            "default_features": default_features,
            "features": list(features),
            "target": target,
            "kind": DEPENDENCY_KINDS[kind or "normal"],
        },
    )


def list_dependencies(session: Session, version_id: int) -> list[tuple[Dependency, str]]:
    """Dependencies of a version paired with the target crate's name."""
    rows = session.execute(
        select(Dependency, Crate.name)
        .join(Crate, Crate.id == Dependency.crate_id)
        .where(Dependency.version_id == version_id)
        .order_by(Dependency.id)
    ).all()
    return [(dependency, name) for dependency, name in rows]
