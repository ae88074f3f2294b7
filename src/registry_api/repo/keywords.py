from __future__ import annotations

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from registry_api.db.models import CrateKeyword, Keyword
from registry_api.repo.common import _now
from registry_api.repo.reconcile import insert_row


def find_or_insert_keyword(session: Session, keyword: str) -> Keyword:
    keyword = keyword.lower()
    row = session.scalars(select(Keyword).where(Keyword.keyword == keyword)).first()
    if row is not None:
        return row
    return insert_row(
        session,
        Keyword,
        {"keyword": keyword, "crates_cnt": 0, "created_at": _now()},
    )


def keywords_for_crate(session: Session, crate_id: int) -> list[Keyword]:
    return list(
        session.scalars(
            select(Keyword)
            .join(CrateKeyword, CrateKeyword.keyword_id == Keyword.id)
            .where(CrateKeyword.crate_id == crate_id)
            .order_by(Keyword.keyword)
        ).all()
    )


def update_crate_keywords(session: Session, crate_id: int, keywords: list[str]) -> None:
    """Make the crate's keyword associations equal ``keywords``, keeping counts in step."""
    current = {row.keyword: row for row in keywords_for_crate(session, crate_id)}
    wanted = {keyword.lower() for keyword in keywords}

    removed = [current[name].id for name in current if name not in wanted]
    if removed:
        session.execute(
            update(Keyword)
            .where(Keyword.id.in_(removed))
            .values(crates_cnt=Keyword.crates_cnt - 1)
            .execution_options(synchronize_session=False)
        )
        session.execute(
            delete(CrateKeyword).where(
                CrateKeyword.crate_id == crate_id,
                CrateKeyword.keyword_id.in_(removed),
            )
        )

    added = [find_or_insert_keyword(session, name).id for name in sorted(wanted) if name not in current]
    if added:
        session.execute(
            update(Keyword)
            .where(Keyword.id.in_(added))
            .values(crates_cnt=Keyword.crates_cnt + 1)
            .execution_options(synchronize_session=False)
        )
        session.add_all(CrateKeyword(crate_id=crate_id, keyword_id=keyword_id) for keyword_id in added)
        session.flush()
