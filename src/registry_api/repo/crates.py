from __future__ import annotations

from typing import Any, Iterable, Mapping

from sqlalchemy import select, update
from sqlalchemy.orm import Session
from sqlalchemy.sql import ColumnElement

from registry_api.db.models import OWNER_KIND_USER, Crate, canonical_name_expression
from registry_api.repo.common import _now
from registry_api.repo.owners import add_owner_row
from registry_api.repo.reconcile import Reconciled, insert_row, update_existing
from registry_api.validation import ZERO_VERSION, canonical_crate_name, is_newer_version

MUTABLE_FIELDS = (
    "description",
    "homepage",
    "documentation",
    "readme",
    "license",
    "repository",
    "keywords",
)


class ReservedCrateName(ValueError):
    pass


def crate_name_matches(name: str) -> ColumnElement[bool]:
    return canonical_name_expression(Crate.name) == canonical_crate_name(name)


def find_crate(session: Session, name: str) -> Crate | None:
    return session.scalars(select(Crate).where(crate_name_matches(name))).first()


def find_crates(session: Session, names: Iterable[str]) -> dict[str, Crate]:
    """Map each requested name (by canonical form) to its crate row, where one exists."""
    wanted = {canonical_crate_name(name) for name in names}
    if not wanted:
        return {}
    rows = session.scalars(
        select(Crate).where(canonical_name_expression(Crate.name).in_(sorted(wanted)))
    ).all()
    return {canonical_crate_name(row.name): row for row in rows}


def reconcile_crate(
    session: Session,
    *,
    name: str,
    user_id: int,
    fields: Mapping[str, Any],
    reserved_names: Iterable[str] = (),
) -> Reconciled[Crate]:
    """Refresh the metadata of ``name`` or create it, owned by ``user_id``.

    A newly created crate gets its uploader as the first owner.
    """
    values = {field: fields.get(field) for field in MUTABLE_FIELDS}
    values["keywords"] = list(values["keywords"] or [])
    crate = update_existing(session, Crate, crate_name_matches(name), values)
    if crate is not None:
        return Reconciled(row=crate, inserted=False)

    canonical = canonical_crate_name(name)
    if canonical in {canonical_crate_name(item) for item in reserved_names}:
        raise ReservedCrateName(name)

    now = _now()
    crate = insert_row(
        session,
        Crate,
        {
            **values,
            "name": name,
            "user_id": user_id,
            "created_at": now,
            "updated_at": now,
            "downloads": 0,
            "max_version": ZERO_VERSION,
        },
    )
    add_owner_row(
        session,
        crate_id=crate.id,
        owner_id=user_id,
        owner_kind=OWNER_KIND_USER,
        created_by=user_id,
    )
    return Reconciled(row=crate, inserted=True)


def record_new_version(session: Session, crate: Crate, version: str) -> Crate:
    """Bump updated_at and, when ``version`` is the highest so far, max_version."""
    values: dict[str, Any] = {"updated_at": _now()}
    if is_newer_version(version, crate.max_version):
        values["max_version"] = version
    session.execute(
        update(Crate)
        .where(Crate.id == crate.id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    for key, value in values.items():
        setattr(crate, key, value)
    return crate
