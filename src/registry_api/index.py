"""Git-backed crate index: one JSON line per published version."""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Optional

from git import Actor, GitCommandError, Repo

LOGGER = logging.getLogger(__name__)


class IndexUpdateError(RuntimeError):
    """Raised when the index could not be committed and pushed."""


def index_file_path(name: str) -> str:
    """Relative location of a crate's index file inside the checkout."""
    name = name.lower()
    if len(name) == 1:
        return f"1/{name}"
    if len(name) == 2:
        return f"2/{name}"
    if len(name) == 3:
        return f"3/{name[0]}/{name}"
    return f"{name[0:2]}/{name[2:4]}/{name}"


def index_dependency(
    *,
    name: str,
    req: str,
    features: list[str],
    optional: bool,
    default_features: bool,
    target: Optional[str],
    kind: Optional[str],
) -> dict[str, Any]:
    return {
        "name": name,
        "req": req,
        "features": list(features),
        "optional": optional,
        "default_features": default_features,
        "target": target,
        "kind": kind,
    }


def index_entry(
    *,
    name: str,
    vers: str,
    deps: list[dict[str, Any]],
    cksum: str,
    features: dict[str, list[str]],
    yanked: bool = False,
) -> dict[str, Any]:
    return {
        "name": name,
        "vers": vers,
        "deps": deps,
        "cksum": cksum,
        "features": features,
        "yanked": yanked,
    }


def encode_entry(entry: dict[str, Any]) -> str:
    return json.dumps(entry, separators=(",", ":"))


def append_entry(content: str, entry: dict[str, Any]) -> str:
    if content and not content.endswith("\n"):
        content += "\n"
    return content + encode_entry(entry) + "\n"


def set_yanked(content: str, version: str, yanked: bool) -> str:
    """Rewrite the line of ``version``; every other line is kept byte for byte."""
    lines = content.splitlines()
    found = False
    for position, line in enumerate(lines):
        if not line.strip():
            continue
        entry = json.loads(line)
        if entry.get("vers") == version:
            entry["yanked"] = yanked
            lines[position] = encode_entry(entry)
            found = True
    if not found:
        raise IndexUpdateError(f"version {version} not present in the index")
    return "\n".join(lines) + "\n"


class CrateIndex(ABC):
    @abstractmethod
    def add_version(self, entry: dict[str, Any]) -> None:
        ...

    @abstractmethod
    def set_yanked(self, name: str, version: str, yanked: bool) -> None:
        ...

    @abstractmethod
    def read(self, name: str) -> str:
        ...


class GitIndex(CrateIndex):
    """Index kept in a git checkout whose ``origin`` is the published remote.

    All mutations run under one process-wide lock. A rejected push fetches the
    remote, hard-resets onto it and replays the mutation. When the remote cannot
    be fetched the checkout goes back to the commit it started from, so a failed
    mutation never rides along with a later push.
    """

    _lock = threading.Lock()

    def __init__(
        self,
        checkout: Path,
        *,
        branch: str = "master",
        attempts: int = 20,
        author_name: str = "crate-registry",
        author_email: str = "registry@localhost",
    ) -> None:
        self.checkout = Path(checkout)
        self.branch = branch
        self.attempts = attempts
        self.actor = Actor(author_name, author_email)
        self._repo: Repo | None = None

    @property
    def repo(self) -> Repo:
        if self._repo is None:
            self._repo = Repo(self.checkout)
        return self._repo

    def read(self, name: str) -> str:
        path = self.checkout / index_file_path(name)
        if not path.exists():
            return ""
        return path.read_text(encoding="utf-8")

    def add_version(self, entry: dict[str, Any]) -> None:
        name = entry["name"]
        self._commit_and_push(
            f"Updating crate `{name}#{entry['vers']}`",
            index_file_path(name),
            lambda content: append_entry(content, entry),
        )

    def set_yanked(self, name: str, version: str, yanked: bool) -> None:
        action = "Yanking" if yanked else "Unyanking"
        self._commit_and_push(
            f"{action} crate `{name}#{version}`",
            index_file_path(name),
            lambda content: set_yanked(content, version, yanked),
        )

    def _restore(self, commit: str) -> None:
        """Drop local commits and stray files, leaving the checkout at ``commit``."""
        self.repo.git.reset("--hard", commit)
        self.repo.git.clean("-fdq")

    def _resync(self, fallback: str) -> str:
        """Move onto the remote branch, or back to ``fallback`` when it cannot be fetched."""
        try:
            self.repo.git.fetch("origin", self.branch)
        except GitCommandError as exc:
            LOGGER.warning("Failed to fetch index remote: %s", exc)
            self._restore(fallback)
            return fallback
        self._restore(f"origin/{self.branch}")
        return self.repo.head.commit.hexsha

    def _commit_and_push(self, message: str, relative: str, modify: Callable[[str], str]) -> None:
        with self._lock:
            repo = self.repo
            path = self.checkout / relative
            base = repo.head.commit.hexsha
            last_error: Exception | None = None
            for attempt in range(1, self.attempts + 1):
                try:
                    current = path.read_text(encoding="utf-8") if path.exists() else ""
                    path.parent.mkdir(parents=True, exist_ok=True)
                    path.write_text(modify(current), encoding="utf-8")
                    repo.index.add([relative])
                    repo.index.commit(message, author=self.actor, committer=self.actor)
                    repo.git.push("origin", f"HEAD:refs/heads/{self.branch}")
                    LOGGER.info("%s (attempt %d)", message, attempt)
                    return
                except GitCommandError as exc:
                    last_error = exc
                    LOGGER.warning("Index push rejected on attempt %d: %s", attempt, exc)
                    base = self._resync(base)
                except Exception:
                    self._restore(base)
                    raise
            raise IndexUpdateError(f"could not update index: {message}") from last_error
