"""Crate publication.

Database writes (crate, version, dependencies, keywords, owners) share one
transaction. The archive upload and the index append follow the commit; if
the index cannot be updated the archive is deleted again, while the committed
rows stay behind and a retry is refused as "already uploaded".
"""

from __future__ import annotations

import asyncio
import io
import logging
from typing import Any

from fastapi import Request
from git import GitCommandError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from registry_api.db.models import CrateVersion
from registry_api.db.session import SessionLocal
from registry_api.errors import (
    Conflict,
    DependencyError,
    Forbidden,
    InternalError,
    Unauthorized,
    ValidationFailed,
)
from registry_api.index import IndexUpdateError, index_dependency, index_entry
from registry_api.models.new_crate_dependency import NewCrateDependency
from registry_api.models.publish_response import PublishResponse
from registry_api.repo.crates import (
    ReservedCrateName,
    find_crates,
    reconcile_crate,
    record_new_version,
)
from registry_api.repo.dependencies import insert_dependency
from registry_api.repo.keywords import update_crate_keywords
from registry_api.repo.owners import list_owners
from registry_api.repo.users import get_user
from registry_api.repo.versions import VersionAlreadyExists, insert_version, list_versions
from registry_api.runtime import RegistryRuntime, get_runtime
from registry_api.security_api import require_user_id
from registry_api.services.encoders import encode_crate
from registry_api.services.permissions import Rights, rights_for
from registry_api.storage import (
    CRATE_CONTENT_TYPE,
    STATUS_LENGTH_MISMATCH,
    STATUS_OK,
    ArtifactRollbackGuard,
    HashingReader,
    crate_key,
)
from registry_api.upload import CrateUpload, parse_upload, read_limited_body, too_big_message
from registry_api.validation import canonical_crate_name

LOGGER = logging.getLogger(__name__)


def _declared_body_length(request: Request) -> int | None:
    raw = request.headers.get("content-length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationFailed("invalid Content-Length header") from None


def _resolve_dependencies(
    session: Session,
    version: CrateVersion,
    deps: list[NewCrateDependency],
) -> list[dict[str, Any]]:
    """Insert dependency rows; every target must already be a known crate."""
    targets = find_crates(session, [dep.name for dep in deps])
    summaries: list[dict[str, Any]] = []
    for dep in deps:
        target = targets.get(canonical_crate_name(dep.name))
        if target is None:
            raise DependencyError(f"no known crate named `{dep.name}`")
        kind = dep.kind or "normal"
        insert_dependency(
            session,
            version_id=version.id,
            crate_id=target.id,
            req=dep.version_req,
            optional=dep.optional,
            default_features=dep.default_features,
            features=dep.features,
            target=dep.target,
            kind=kind,
        )
        summaries.append(
            index_dependency(
                name=target.name,
                req=dep.version_req,
                features=dep.features,
                optional=dep.optional,
                default_features=dep.default_features,
                target=dep.target,
                kind=kind,
            )
        )
    return summaries


class PublishService:
    async def publish_crate(self, request: Request) -> PublishResponse:
        runtime = get_runtime()
        max_size = runtime.settings.max_upload_size
        declared = _declared_body_length(request)
        if declared is not None and declared > max_size:
            raise ValidationFailed(too_big_message(max_size))
        body = await read_limited_body(request.stream(), max_size)
        upload = parse_upload(body, max_size=max_size)
        user_id = require_user_id()
        return await asyncio.to_thread(self.publish, upload, user_id, runtime)

    def publish(
        self,
        upload: CrateUpload,
        user_id: int,
        runtime: RegistryRuntime | None = None,
    ) -> PublishResponse:
        runtime = runtime or get_runtime()
        metadata = upload.metadata
        name = metadata.name
        vers = upload.version
        checksum = upload.content_digest()

        with SessionLocal() as session:
            with session.begin():
                user = get_user(session, user_id)
                if user is None:
                    raise Unauthorized()

                try:
                    reconciled = reconcile_crate(
                        session,
                        name=name,
                        user_id=user.id,
                        fields={
                            "description": metadata.description,
                            "homepage": metadata.homepage,
                            "documentation": metadata.documentation,
                            "readme": metadata.readme,
                            "license": upload.license,
                            "repository": metadata.repository,
                            "keywords": upload.keywords,
                        },
                        reserved_names=runtime.settings.reserved_names,
                    )
                except ReservedCrateName:
                    raise ValidationFailed("cannot upload a crate with a reserved name") from None
                except IntegrityError as exc:
                    raise Conflict(
                        f"crate `{name}` was claimed by a concurrent upload, please retry"
                    ) from exc
                crate = reconciled.row
                if crate.name != name:
                    raise Conflict(f"crate was previously named `{crate.name}`")

                owners = list_owners(session, crate.id)
                if rights_for(runtime.identity, owners, user) < Rights.PUBLISH:
                    raise Forbidden("crate name has already been claimed by another user")

                try:
                    version = insert_version(
                        session,
                        crate,
                        num=vers,
                        features=metadata.features,
                        authors=metadata.authors,
                        checksum=checksum,
                    )
                except (VersionAlreadyExists, IntegrityError) as exc:
                    raise Conflict(f"crate version `{vers}` is already uploaded") from exc
                record_new_version(session, crate, vers)

                deps = _resolve_dependencies(session, version, metadata.deps)
                update_crate_keywords(session, crate.id, upload.keywords)

                version_ids = [row.id for row in list_versions(session, crate.id)]
                encoded = encode_crate(crate, version_ids)

        LOGGER.info("Committed %s#%s for user %s", name, vers, user_id)
        entry = index_entry(
            name=name,
            vers=vers,
            deps=deps,
            cksum=checksum,
            features=metadata.features,
        )
        self._upload_and_index(runtime, upload, entry)
        LOGGER.info("Published %s#%s", name, vers)
        return PublishResponse(crate=encoded)

    def _upload_and_index(
        self,
        runtime: RegistryRuntime,
        upload: CrateUpload,
        entry: dict[str, Any],
    ) -> None:
        name, vers = entry["name"], entry["vers"]
        key = crate_key(name, vers)
        reader = HashingReader(io.BytesIO(upload.archive))
        status = runtime.store.put(key, reader, CRATE_CONTENT_TYPE, upload.declared_length)
        if status == STATUS_LENGTH_MISMATCH:
            raise ValidationFailed(
                f"archive length does not match the declared length of {upload.declared_length} bytes"
            )
        if status != STATUS_OK:
            raise InternalError(f"failed to get a 200 response from the artifact store: {status}")

        with ArtifactRollbackGuard(runtime.store, key) as guard:
            cksum = reader.hexdigest()
            if cksum != entry["cksum"]:
                raise InternalError(f"failed to upload `{key}`: content digest mismatch")
            try:
                runtime.index.add_version(entry)
            except (IndexUpdateError, GitCommandError, OSError) as exc:
                LOGGER.exception("Index update failed for %s#%s", name, vers)
                raise InternalError(f"could not add crate `{name}` to the git repo") from exc
            guard.disarm()
