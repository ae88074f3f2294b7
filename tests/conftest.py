import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Optional

import pytest

_TMP_ROOT = Path(tempfile.mkdtemp(prefix="registry-tests-"))
os.environ["REGISTRY_DATABASE_URL"] = f"sqlite:///{(_TMP_ROOT / 'registry.db').as_posix()}"
os.environ["REGISTRY_STORAGE_ROOT"] = str(_TMP_ROOT / "storage")
os.environ["REGISTRY_INDEX_CHECKOUT"] = str(_TMP_ROOT / "index")

from fastapi.testclient import TestClient  # noqa: E402

from registry_api import runtime  # noqa: E402
from registry_api.app import app  # noqa: E402
from registry_api.config.settings import RegistrySettings  # noqa: E402
from registry_api.db.base import Base  # noqa: E402
from registry_api.db.session import SessionLocal, engine  # noqa: E402
from registry_api.github import AccessToken, IdentityProvider, ProviderTeam, ProviderUser  # noqa: E402
from registry_api.index import CrateIndex, IndexUpdateError, append_entry, set_yanked  # noqa: E402
from registry_api.repo.users import reconcile_user  # noqa: E402
from registry_api.storage import LocalArtifactStore  # noqa: E402
from registry_api.upload import encode_upload  # noqa: E402


class FakeIdentity(IdentityProvider):
    """In-memory provider: teams keyed by ``org/slug`` with a member list."""

    def __init__(self) -> None:
        self.teams: dict[str, ProviderTeam] = {}
        self.members: dict[int, set[str]] = {}
        self.codes: dict[str, ProviderUser] = {}

    def add_team(self, org: str, slug: str, team_id: int, members: list[str]) -> ProviderTeam:
        team = ProviderTeam(id=team_id, org=org, slug=slug, name=slug.title())
        self.teams[f"{org}/{slug}"] = team
        self.members[team_id] = set(members)
        return team

    def authorize_url(self, state: str) -> str:
        return f"https://provider.test/authorize?state={state}"

    def exchange_code(self, code: str) -> AccessToken:
        if code not in self.codes:
            from registry_api.errors import ProviderError

            raise ProviderError("authorization code was rejected")
        return AccessToken(access_token=f"gh-{code}")

    def fetch_user(self, access_token: str) -> ProviderUser:
        return self.codes[access_token[len("gh-"):]]

    def find_team(self, org: str, team: str, access_token: str) -> Optional[ProviderTeam]:
        return self.teams.get(f"{org}/{team}")

    def team_has_member(self, team_id: int, login: str, access_token: str) -> bool:
        return login in self.members.get(team_id, set())


class MemoryIndex(CrateIndex):
    """Index kept in a dict; ``fail`` makes every mutation raise."""

    def __init__(self) -> None:
        self.files: dict[str, str] = {}
        self.fail = False

    def add_version(self, entry: dict[str, Any]) -> None:
        if self.fail:
            raise IndexUpdateError("push rejected")
        name = entry["name"].lower()
        self.files[name] = append_entry(self.files.get(name, ""), entry)

    def set_yanked(self, name: str, version: str, yanked: bool) -> None:
        if self.fail:
            raise IndexUpdateError("push rejected")
        self.files[name.lower()] = set_yanked(self.files.get(name.lower(), ""), version, yanked)

    def read(self, name: str) -> str:
        return self.files.get(name.lower(), "")


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(engine)
    try:
        yield
    finally:
        Base.metadata.drop_all(engine)


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity()


@pytest.fixture
def index() -> MemoryIndex:
    return MemoryIndex()


@pytest.fixture
def store(tmp_path) -> LocalArtifactStore:
    return LocalArtifactStore(tmp_path / "storage", "http://testserver")


@pytest.fixture
def settings() -> RegistrySettings:
    return RegistrySettings(
        max_upload_size=4096,
        reserved_names=["std", "core"],
        session_secret="test-secret",
        artifact_base_url="http://testserver",
    )


@pytest.fixture
def registry(settings, store, index, identity):
    configured = runtime.RegistryRuntime(settings=settings, store=store, index=index, identity=identity)
    runtime.configure(configured)
    try:
        yield configured
    finally:
        runtime.configure(None)


@pytest.fixture
def client(registry) -> TestClient:
    return TestClient(app)


def create_user(login: str, token: Optional[str] = None) -> dict[str, str]:
    """Insert a user and return request headers authenticating as them."""
    token = token or f"token-{login}"
    with SessionLocal() as session, session.begin():
        reconcile_user(session, login=login, access_token=f"gh-{login}", name=login.title(), api_token=token)
    return {"Authorization": token}


def crate_body(
    name: str = "foo",
    vers: str = "1.0.0",
    archive: bytes = b"crate archive bytes",
    **overrides: Any,
) -> bytes:
    metadata: dict[str, Any] = {
        "name": name,
        "vers": vers,
        "deps": [],
        "features": {},
        "authors": ["Alice <alice@example.com>"],
        "description": "A crate used in tests",
        "license": "MIT",
    }
    metadata.update(overrides)
    return encode_upload(metadata, archive)


def publish(client: TestClient, headers: dict[str, str], **kwargs: Any):
    return client.put("/api/v1/crates/new", content=crate_body(**kwargs), headers=headers)


def error_details(response) -> list[str]:
    return [error["detail"] for error in response.json()["errors"]]


requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")
