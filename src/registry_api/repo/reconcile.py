"""Update-or-insert of keyed rows.

The UPDATE runs first and the INSERT only when it matched nothing. Two callers
racing on a brand-new key can both reach the INSERT; the loser fails on the
unique index with ``IntegrityError``, which callers turn into a conflict.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Mapping, TypeVar

from sqlalchemy import insert, update
from sqlalchemy.orm import Session
from sqlalchemy.sql import ColumnElement

ModelT = TypeVar("ModelT")


@dataclass
class Reconciled(Generic[ModelT]):
    row: ModelT
    inserted: bool


def update_existing(
    session: Session,
    model: type[ModelT],
    key: ColumnElement[bool],
    values: Mapping[str, Any],
) -> ModelT | None:
    if not values:
        raise ValueError("update_existing requires at least one column to set")
    stmt = (
        update(model)
        .where(key)
        .values(**values)
        .returning(model)
        .execution_options(synchronize_session=False)
    )
    return session.scalars(stmt).first()


def insert_row(session: Session, model: type[ModelT], values: Mapping[str, Any]) -> ModelT:
    return session.scalars(insert(model).returning(model), [dict(values)]).one()


def update_or_insert(
    session: Session,
    model: type[ModelT],
    key: ColumnElement[bool],
    update_values: Mapping[str, Any],
    insert_values: Mapping[str, Any],
) -> Reconciled[ModelT]:
    row = update_existing(session, model, key, update_values)
    if row is not None:
        return Reconciled(row=row, inserted=False)
    return Reconciled(row=insert_row(session, model, insert_values), inserted=True)
