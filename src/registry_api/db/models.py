"""SQLAlchemy models for registry persistence."""

from __future__ import annotations

import datetime as dt
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

OWNER_KIND_USER = 0
OWNER_KIND_TEAM = 1

DEPENDENCY_KINDS = {"normal": 0, "build": 1, "dev": 2}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def canonical_name_expression(column):
    """SQL form of the canonical crate name: lower-cased, `-` folded onto `_`."""
    return func.replace(func.lower(column), "-", "_")


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    gh_login: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    gh_avatar: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    gh_access_token: Mapped[str] = mapped_column(String(255), default="")
    api_token: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)


class Team(Base):
    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    login: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    github_id: Mapped[int] = mapped_column(Integer, unique=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    avatar: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)


class Crate(Base):
    __tablename__ = "crates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255))
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
    downloads: Mapped[int] = mapped_column(Integer, default=0)
    max_version: Mapped[str] = mapped_column(String(255), default="0.0.0")
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    homepage: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    documentation: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    readme: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    license: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    repository: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    keywords: Mapped[list[str]] = mapped_column(JSON, default=list)


class CrateVersion(Base):
    __tablename__ = "versions"
    __table_args__ = (UniqueConstraint("crate_id", "num", name="uq_versions_crate_num"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    crate_id: Mapped[int] = mapped_column(Integer, ForeignKey("crates.id"), index=True)
    num: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
    downloads: Mapped[int] = mapped_column(Integer, default=0)
    features: Mapped[dict[str, list[str]]] = mapped_column(JSON, default=dict)
    authors: Mapped[list[str]] = mapped_column(JSON, default=list)
    checksum: Mapped[str] = mapped_column(String(64))
    yanked: Mapped[bool] = mapped_column(Boolean, default=False)


class Dependency(Base):
    __tablename__ = "dependencies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    version_id: Mapped[int] = mapped_column(Integer, ForeignKey("versions.id"), index=True)
    crate_id: Mapped[int] = mapped_column(Integer, ForeignKey("crates.id"), index=True)
    req: Mapped[str] = mapped_column(String(255))
    optional: Mapped[bool] = mapped_column(Boolean, default=False)
    default_features: Mapped[bool] = mapped_column(Boolean, default=True)
    features: Mapped[list[str]] = mapped_column(JSON, default=list)
    target: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    kind: Mapped[int] = mapped_column(Integer, default=0)


class CrateOwner(Base):
    __tablename__ = "crate_owners"
    __table_args__ = (
        UniqueConstraint("crate_id", "owner_id", "owner_kind", name="uq_crate_owners_owner"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    crate_id: Mapped[int] = mapped_column(Integer, ForeignKey("crates.id"), index=True)
    owner_id: Mapped[int] = mapped_column(Integer)
    owner_kind: Mapped[int] = mapped_column(Integer, default=OWNER_KIND_USER)
    created_by: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
    deleted: Mapped[bool] = mapped_column(Boolean, default=False)


class Keyword(Base):
    __tablename__ = "keywords"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    keyword: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    crates_cnt: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)


class CrateKeyword(Base):
    __tablename__ = "crates_keywords"

    crate_id: Mapped[int] = mapped_column(Integer, ForeignKey("crates.id"), primary_key=True)
    keyword_id: Mapped[int] = mapped_column(Integer, ForeignKey("keywords.id"), primary_key=True)


class Follow(Base):
    __tablename__ = "follows"

    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), primary_key=True)
    crate_id: Mapped[int] = mapped_column(Integer, ForeignKey("crates.id"), primary_key=True)


class VersionDownload(Base):
    __tablename__ = "version_downloads"
    __table_args__ = (Index("ix_version_downloads_version_date", "version_id", "date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    version_id: Mapped[int] = mapped_column(Integer, ForeignKey("versions.id"))
    downloads: Mapped[int] = mapped_column(Integer, default=1)
    counted: Mapped[int] = mapped_column(Integer, default=0)
    date: Mapped[dt.date] = mapped_column(Date)
    processed: Mapped[bool] = mapped_column(Boolean, default=False)


class CrateDownload(Base):
    __tablename__ = "crate_downloads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    crate_id: Mapped[int] = mapped_column(Integer, ForeignKey("crates.id"), index=True)
    downloads: Mapped[int] = mapped_column(Integer, default=0)
    date: Mapped[dt.date] = mapped_column(Date)


Index("ix_crates_canonical_name", canonical_name_expression(Crate.name), unique=True)
