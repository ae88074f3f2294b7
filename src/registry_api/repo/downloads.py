"""Per-version, per-day download counters."""

from __future__ import annotations

from datetime import date, timedelta

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from registry_api.db.models import CrateVersion, VersionDownload
from registry_api.repo.common import _today
from registry_api.repo.reconcile import insert_row

DOWNLOAD_HISTORY_DAYS = 90


def record_download(session: Session, version_id: int, day: date | None = None) -> bool:
    """Count one download; returns True when a new counter row was created.

    Increment and insert are separate statements. Racing first downloads of a
    day may each insert a row; the periodic aggregation folds them together.
    """
    day = day or _today()
    result = session.execute(
        update(VersionDownload)
        .where(VersionDownload.version_id == version_id, VersionDownload.date == day)
        .values(downloads=VersionDownload.downloads + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount:
        return False
    insert_row(
        session,
        VersionDownload,
        {
            "version_id": version_id,
            "downloads": 1,
            "counted": 0,
            "date": day,
            "processed": False,
        },
    )
    return True


def version_downloads_for_crate(
    session: Session,
    crate_id: int,
    *,
    days: int = DOWNLOAD_HISTORY_DAYS,
    today: date | None = None,
) -> list[VersionDownload]:
    since = (today or _today()) - timedelta(days=days)
    return list(
        session.scalars(
            select(VersionDownload)
            .join(CrateVersion, CrateVersion.id == VersionDownload.version_id)
            .where(CrateVersion.crate_id == crate_id, VersionDownload.date > since)
            .order_by(VersionDownload.date, VersionDownload.version_id)
        ).all()
    )


def total_downloads(session: Session, version_id: int) -> int:
    rows = session.scalars(
        select(VersionDownload.downloads).where(VersionDownload.version_id == version_id)
    ).all()
    return sum(rows)
