"""Process-wide wiring of the external collaborators used by the services."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

from registry_api.config.settings import RegistrySettings, get_settings
from registry_api.github import GitHubIdentityProvider, IdentityProvider
from registry_api.index import CrateIndex, GitIndex
from registry_api.storage import ArtifactStore, LocalArtifactStore


@dataclass
class RegistryRuntime:
    settings: RegistrySettings
    store: ArtifactStore
    index: CrateIndex
    identity: IdentityProvider


_runtime: Optional[RegistryRuntime] = None
_runtime_lock = threading.Lock()


def build_runtime(settings: RegistrySettings | None = None) -> RegistryRuntime:
    settings = settings or get_settings()
    return RegistryRuntime(
        settings=settings,
        store=LocalArtifactStore(settings.storage_root, settings.artifact_base_url),
        index=GitIndex(
            settings.index_checkout,
            branch=settings.index_branch,
            attempts=settings.index_push_attempts,
            author_name=settings.index_author_name,
            author_email=settings.index_author_email,
        ),
        identity=GitHubIdentityProvider(
            client_id=settings.github_client_id,
            client_secret=settings.github_client_secret,
            api_url=settings.github_api_url,
            oauth_url=settings.github_oauth_url,
            timeout=settings.github_timeout_seconds,
        ),
    )


def get_runtime() -> RegistryRuntime:
    global _runtime
    with _runtime_lock:
        if _runtime is None:
            _runtime = build_runtime()
        return _runtime


def configure(runtime: RegistryRuntime | None) -> None:
    """Install the collaborators to use; ``None`` rebuilds them from settings on demand."""
    global _runtime
    with _runtime_lock:
        _runtime = runtime
