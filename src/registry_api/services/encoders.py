"""Conversion of database rows into API models."""

from __future__ import annotations

from typing import Iterable

from registry_api.db.models import Crate, CrateVersion, Dependency, Keyword, User, VersionDownload
from registry_api.models.crate_links import CrateLinks
from registry_api.models.encodable_crate import EncodableCrate
from registry_api.models.encodable_dependency import EncodableDependency
from registry_api.models.encodable_keyword import EncodableKeyword
from registry_api.models.encodable_owner import EncodableOwner
from registry_api.models.encodable_user import EncodableUser
from registry_api.models.encodable_version import EncodableVersion
from registry_api.models.version_download_record import VersionDownloadRecord
from registry_api.models.version_links import VersionLinks
from registry_api.repo.dependencies import kind_name
from registry_api.repo.owners import Owner, UserOwner

API_PREFIX = "/api/v1"


def encode_crate(crate: Crate, version_ids: Iterable[int] | None = None) -> EncodableCrate:
    prefix = f"{API_PREFIX}/crates/{crate.name}"
    return EncodableCrate(
        id=crate.name,
        name=crate.name,
        updated_at=crate.updated_at,
        versions=list(version_ids) if version_ids is not None else None,
        created_at=crate.created_at,
        downloads=crate.downloads,
        max_version=crate.max_version,
        description=crate.description,
        homepage=crate.homepage,
        documentation=crate.documentation,
        keywords=list(crate.keywords or []),
        license=crate.license,
        repository=crate.repository,
        links=CrateLinks(
            version_downloads=f"{prefix}/downloads",
            versions=None if version_ids is not None else f"{prefix}/versions",
            owners=f"{prefix}/owners",
            reverse_dependencies=f"{prefix}/reverse_dependencies",
        ),
    )


def encode_version(version: CrateVersion, crate_name: str) -> EncodableVersion:
    prefix = f"{API_PREFIX}/crates/{crate_name}/{version.num}"
    return EncodableVersion(
        id=version.id,
        crate=crate_name,
        num=version.num,
        dl_path=f"{prefix}/download",
        updated_at=version.updated_at,
        created_at=version.created_at,
        downloads=version.downloads,
        features=dict(version.features or {}),
        yanked=version.yanked,
        checksum=version.checksum,
        authors=list(version.authors or []),
        links=VersionLinks(
            dependencies=f"{prefix}/dependencies",
            version_downloads=f"{prefix}/downloads",
            authors=f"{prefix}/authors",
        ),
    )


def encode_dependency(dependency: Dependency, crate_name: str) -> EncodableDependency:
    return EncodableDependency(
        id=dependency.id,
        version_id=dependency.version_id,
        crate_id=crate_name,
        req=dependency.req,
        optional=dependency.optional,
        default_features=dependency.default_features,
        features=list(dependency.features or []),
        target=dependency.target,
        kind=kind_name(dependency.kind),
    )


def encode_keyword(keyword: Keyword) -> EncodableKeyword:
    return EncodableKeyword(
        id=keyword.keyword,
        keyword=keyword.keyword,
        created_at=keyword.created_at,
        crates_cnt=keyword.crates_cnt,
    )


def encode_owner(owner: Owner) -> EncodableOwner:
    if isinstance(owner, UserOwner):
        return EncodableOwner(
            id=owner.id,
            login=owner.login,
            kind=owner.kind,
            name=owner.name,
            email=owner.email,
            avatar=owner.avatar,
            url=f"https://github.com/{owner.login}",
        )
    _, org, _ = (owner.login.split(":") + ["", ""])[:3]
    return EncodableOwner(
        id=owner.id,
        login=owner.login,
        kind=owner.kind,
        name=owner.name,
        avatar=owner.avatar,
        url=f"https://github.com/{org}" if org else None,
    )


def encode_user(user: User) -> EncodableUser:
    return EncodableUser(
        id=user.id,
        login=user.gh_login,
        name=user.name,
        email=user.email,
        avatar=user.gh_avatar,
    )


def encode_version_download(row: VersionDownload) -> VersionDownloadRecord:
    return VersionDownloadRecord(
        id=row.id,
        version=row.version_id,
        downloads=row.downloads,
        date=row.date,
    )
