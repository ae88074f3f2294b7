"""Registry configuration using pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import Field, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[3]

DEFAULT_RESERVED_NAMES = [
    "alloc",
    "build",
    "core",
    "proc_macro",
    "rustc",
    "std",
    "test",
]


class RegistryApiSettings(BaseSettings):
    """Process/runtime settings for the registry API server."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_prefix="REGISTRY_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="127.0.0.1", description="Bind address for the registry API.")
    port: PositiveInt = Field(default=8310, description="Port for the registry API.")
    reload: bool = Field(default=False, description="Enable uvicorn auto-reload (dev only).")
    log_level: Literal["critical", "error", "warning", "info", "debug", "trace"] = Field(
        default="info",
        description="Log level for registry API / uvicorn.",
    )


class RegistrySettings(BaseSettings):
    """Validated settings for crate storage, the index and the identity provider."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_prefix="REGISTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str | None = Field(
        default=None,
        description="SQLAlchemy database URL; defaults to a SQLite file under var/data.",
    )
    storage_root: Path = Field(
        default=PROJECT_ROOT / "var" / "registry" / "storage",
        description="Directory holding uploaded crate archives.",
    )
    artifact_base_url: str = Field(
        default="http://127.0.0.1:8310",
        description="Public base URL that download redirects point at.",
    )
    index_checkout: Path = Field(
        default=PROJECT_ROOT / "var" / "registry" / "index",
        description="Working tree of the git-backed crate index.",
    )
    index_branch: str = Field(default="master", description="Remote branch the index is pushed to.")
    index_push_attempts: PositiveInt = Field(
        default=20,
        description="How many times a rejected index push is replayed on top of the remote.",
    )
    index_author_name: str = Field(default="crate-registry", description="Author of index commits.")
    index_author_email: str = Field(
        default="registry@localhost",
        description="Author email of index commits.",
    )
    max_upload_size: PositiveInt = Field(
        default=10 * 1024 * 1024,
        description="Maximum accepted size of a publish request body (bytes).",
    )
    reserved_names: list[str] = Field(
        default_factory=lambda: list(DEFAULT_RESERVED_NAMES),
        description="Crate names that may never be claimed by an upload.",
    )
    github_client_id: str = Field(default="", description="OAuth client id of the GitHub app.")
    github_client_secret: str = Field(default="", description="OAuth client secret of the GitHub app.")
    github_api_url: str = Field(default="https://api.github.com", description="GitHub REST API base URL.")
    github_oauth_url: str = Field(
        default="https://github.com/login/oauth",
        description="GitHub OAuth base URL (authorize / access_token).",
    )
    github_timeout_seconds: float = Field(default=10.0, description="Timeout for GitHub API calls.")
    session_secret: str = Field(
        default="dev-session-secret",
        description="Secret used to sign OAuth state values.",
    )
    state_ttl_seconds: PositiveInt = Field(
        default=600,
        description="Lifetime of an issued OAuth state value (seconds).",
    )
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:4200", "http://127.0.0.1:4200"],
        description="Origins allowed to call the API from a browser.",
    )


@lru_cache()
def get_settings() -> RegistrySettings:
    """Return memoized registry settings."""

    return RegistrySettings()


@lru_cache()
def get_api_settings() -> RegistryApiSettings:
    return RegistryApiSettings()
