"""Storage for uploaded crate archives."""

from __future__ import annotations

import hashlib
import logging
import os
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO

LOGGER = logging.getLogger(__name__)

CRATE_CONTENT_TYPE = "application/x-tar"
CHUNK_SIZE = 64 * 1024

STATUS_OK = 200
STATUS_NO_CONTENT = 204
STATUS_NOT_FOUND = 404
STATUS_LENGTH_MISMATCH = 400
STATUS_SERVER_ERROR = 500

_SAFE_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")


def crate_key(name: str, version: str) -> str:
    return f"/crates/{name}/{name}-{version}.crate"


class HashingReader:
    """File-like wrapper that digests every byte handed to the reader."""

    def __init__(self, inner: BinaryIO) -> None:
        self._inner = inner
        self._digest = hashlib.sha256()
        self.bytes_read = 0

    def read(self, size: int = -1) -> bytes:
        data = self._inner.read(size)
        self._digest.update(data)
        self.bytes_read += len(data)
        return data

    def hexdigest(self) -> str:
        return self._digest.hexdigest()


class ArtifactStore(ABC):
    """Durable object storage keyed by ``crate_key``."""

    @abstractmethod
    def put(self, key: str, content: BinaryIO, content_type: str, length: int) -> int:
        """Store exactly ``length`` bytes of ``content``; returns an HTTP-like status."""

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        ...

    @abstractmethod
    def delete(self, key: str) -> int:
        ...

    @abstractmethod
    def url_for(self, key: str) -> str:
        ...


class LocalArtifactStore(ArtifactStore):
    """Archives kept on the local filesystem below ``root``."""

    def __init__(self, root: Path, base_url: str) -> None:
        self.root = Path(root).expanduser().resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        self.base_url = base_url.rstrip("/")

    def _path(self, key: str) -> Path:
        parts = [part for part in key.split("/") if part]
        if not parts or any(not _SAFE_PATTERN.match(part) or part in {".", ".."} for part in parts):
            raise ValueError(f"invalid artifact key: {key}")
        return self.root.joinpath(*parts)

    def put(self, key: str, content: BinaryIO, content_type: str, length: int) -> int:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        partial = path.with_name(path.name + ".partial")
        written = 0
        try:
            with partial.open("wb") as handle:
                while written < length:
                    chunk = content.read(min(CHUNK_SIZE, length - written))
                    if not chunk:
                        break
                    handle.write(chunk)
                    written += len(chunk)
                trailing = content.read(1)
        except OSError:
            LOGGER.exception("Failed to write artifact %s", key)
            partial.unlink(missing_ok=True)
            return STATUS_SERVER_ERROR
        if written != length or trailing:
            partial.unlink(missing_ok=True)
            return STATUS_LENGTH_MISMATCH
        os.replace(partial, path)
        LOGGER.debug("Stored %s (%d bytes, %s)", key, written, content_type)
        return STATUS_OK

    def get(self, key: str) -> bytes | None:
        try:
            path = self._path(key)
        except ValueError:
            return None
        if not path.is_file():
            return None
        return path.read_bytes()

    def delete(self, key: str) -> int:
        path = self._path(key)
        if not path.exists():
            return STATUS_NOT_FOUND
        path.unlink()
        return STATUS_NO_CONTENT

    def url_for(self, key: str) -> str:
        return f"{self.base_url}{key}"


class ArtifactRollbackGuard:
    """Deletes an uploaded artifact on exit unless ``disarm`` was called."""

    def __init__(self, store: ArtifactStore, key: str) -> None:
        self._store = store
        self._key: str | None = key

    def disarm(self) -> None:
        self._key = None

    def __enter__(self) -> "ArtifactRollbackGuard":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._key is not None:
            try:
                status = self._store.delete(self._key)
            except (OSError, ValueError):
                LOGGER.exception("Failed to roll back artifact %s", self._key)
            else:
                LOGGER.warning("Rolled back artifact %s (status %s)", self._key, status)
        return False
