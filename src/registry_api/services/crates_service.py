from __future__ import annotations

import asyncio
import logging

from fastapi import status
from fastapi.responses import JSONResponse, RedirectResponse, Response
from git import GitCommandError
from sqlalchemy import select

from registry_api.db.models import Crate, CrateVersion
from registry_api.db.session import SessionLocal
from registry_api.errors import Forbidden, InternalError, NotFound, Unauthorized
from registry_api.index import IndexUpdateError
from registry_api.models.crate_response import CrateResponse
from registry_api.models.downloads_response import DownloadsResponse
from registry_api.models.ok_response import OkResponse
from registry_api.models.version_list_response import VersionListResponse
from registry_api.models.version_response import VersionResponse
from registry_api.repo.crates import crate_name_matches, find_crate
from registry_api.repo.dependencies import list_dependencies
from registry_api.repo.downloads import record_download, version_downloads_for_crate
from registry_api.repo.keywords import keywords_for_crate
from registry_api.repo.owners import list_owners
from registry_api.repo.users import get_user
from registry_api.repo.versions import find_version, list_versions, set_version_yanked
from registry_api.runtime import get_runtime
from registry_api.security_api import require_user_id
from registry_api.services.encoders import (
    encode_crate,
    encode_dependency,
    encode_keyword,
    encode_version,
    encode_version_download,
)
from registry_api.services.permissions import Rights, rights_for
from registry_api.storage import CRATE_CONTENT_TYPE, crate_key

LOGGER = logging.getLogger(__name__)


def _require_crate(session, name: str) -> Crate:
    crate = find_crate(session, name)
    if crate is None:
        raise NotFound(f"crate `{name}` does not exist")
    return crate


def _wants_json(accept: str | None) -> bool:
    return bool(accept) and "json" in accept.lower()


class CratesService:
    async def get_crate(self, name: str) -> CrateResponse:
        with SessionLocal() as session:
            crate = _require_crate(session, name)
            versions = list_versions(session, crate.id)
            keywords = keywords_for_crate(session, crate.id)
            return CrateResponse(
                crate=encode_crate(crate, [version.id for version in versions]),
                versions=[encode_version(version, crate.name) for version in versions],
                keywords=[encode_keyword(keyword) for keyword in keywords],
            )

    async def list_versions(self, name: str) -> VersionListResponse:
        with SessionLocal() as session:
            crate = _require_crate(session, name)
            return VersionListResponse(
                versions=[encode_version(version, crate.name) for version in list_versions(session, crate.id)]
            )

    async def get_version(self, name: str, version: str) -> VersionResponse:
        with SessionLocal() as session:
            crate = _require_crate(session, name)
            row = find_version(session, crate.id, version)
            if row is None:
                raise NotFound(f"crate `{crate.name}` does not have a version `{version}`")
            return VersionResponse(
                version=encode_version(row, crate.name),
                dependencies=[
                    encode_dependency(dependency, target)
                    for dependency, target in list_dependencies(session, row.id)
                ],
            )

    async def yank_version(self, name: str, version: str) -> OkResponse:
        user_id = require_user_id()
        return await asyncio.to_thread(self.set_yanked, name, version, True, user_id)

    async def unyank_version(self, name: str, version: str) -> OkResponse:
        user_id = require_user_id()
        return await asyncio.to_thread(self.set_yanked, name, version, False, user_id)

    def set_yanked(self, name: str, version: str, yanked: bool, user_id: int) -> OkResponse:
        """Flip the yanked flag; the index rewrite runs before the flag is committed."""
        runtime = get_runtime()
        with SessionLocal() as session, session.begin():
            crate = _require_crate(session, name)
            row = find_version(session, crate.id, version)
            if row is None:
                raise NotFound(f"crate `{crate.name}` does not have a version `{version}`")
            user = get_user(session, user_id)
            if user is None:
                raise Unauthorized()
            owners = list_owners(session, crate.id)
            if rights_for(runtime.identity, owners, user) < Rights.PUBLISH:
                raise Forbidden("must already be an owner to yank or unyank")
            if row.yanked == yanked:
                return OkResponse(ok=True)
            set_version_yanked(session, row, yanked)
            try:
                runtime.index.set_yanked(crate.name, row.num, yanked)
            except (IndexUpdateError, GitCommandError, OSError) as exc:
                LOGGER.exception("Index update failed while yanking %s#%s", crate.name, row.num)
                raise InternalError(f"could not update crate `{crate.name}` in the git repo") from exc
        LOGGER.info("%s %s#%s", "Yanked" if yanked else "Unyanked", crate.name, version)
        return OkResponse(ok=True)

    async def download(self, name: str, version: str, accept: str | None) -> Response:
        url = await asyncio.to_thread(self.record_download, name, version)
        if _wants_json(accept):
            return JSONResponse({"url": url})
        return RedirectResponse(url, status_code=status.HTTP_302_FOUND)

    def record_download(self, name: str, version: str) -> str:
        runtime = get_runtime()
        with SessionLocal() as session, session.begin():
            row = session.execute(
                select(CrateVersion.id, Crate.name, CrateVersion.num)
                .join(Crate, Crate.id == CrateVersion.crate_id)
                .where(crate_name_matches(name), CrateVersion.num == version)
            ).first()
            if row is None:
                raise NotFound("crate or version not found")
            record_download(session, row.id)
        return runtime.store.url_for(crate_key(row.name, row.num))

    async def get_downloads(self, name: str) -> DownloadsResponse:
        with SessionLocal() as session:
            crate = _require_crate(session, name)
            rows = version_downloads_for_crate(session, crate.id)
            return DownloadsResponse(version_downloads=[encode_version_download(row) for row in rows])

    async def get_artifact(self, name: str, filename: str) -> Response:
        data = get_runtime().store.get(f"/crates/{name}/{filename}")
        if data is None:
            raise NotFound()
        return Response(
            content=data,
            media_type=CRATE_CONTENT_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )
